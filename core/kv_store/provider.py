"""
POS Key-Value Store - Protocol, In-Memory and DB-backed Stores
==============================================================
Values are JSON-compatible documents (dict / list / str / number / None).
Both stores hand out copies so callers can never mutate stored state
by holding on to a returned object.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Protocol

from django.db import transaction

logger = logging.getLogger("pos.kv_store")


def _clean_key(key: Any) -> str:
    if not isinstance(key, str) or not key.strip():
        raise ValueError("key must be a non-empty string.")
    return key.strip()


class KeyValueStore(Protocol):
    def load(self, key: str) -> Any | None:
        """Return the stored value, or None when the key is absent."""
        ...  # pragma: no cover

    def save(self, key: str, value: Any) -> None:
        """Store `value` under `key`, replacing any previous value."""
        ...  # pragma: no cover


class InMemoryKeyValueStore:
    """
    Deterministic in-memory store used for bootstrap/tests.
    """

    def __init__(self, initial: dict[str, Any] | None = None):
        self._entries: dict[str, Any] = {}
        for key, value in (initial or {}).items():
            self.save(key, value)

    def load(self, key: str) -> Any | None:
        return copy.deepcopy(self._entries.get(_clean_key(key)))

    def save(self, key: str, value: Any) -> None:
        self._entries[_clean_key(key)] = copy.deepcopy(value)

    def keys(self) -> tuple[str, ...]:
        return tuple(sorted(self._entries))


class DbKeyValueStore:
    """
    Django ORM store backed by KeyValueEntry rows.
    """

    def load(self, key: str) -> Any | None:
        from core.kv_store.models import KeyValueEntry

        entry = KeyValueEntry.objects.filter(key=_clean_key(key)).first()
        if entry is None:
            return None
        return entry.value

    @transaction.atomic
    def save(self, key: str, value: Any) -> None:
        from core.kv_store.models import KeyValueEntry

        cleaned = _clean_key(key)
        KeyValueEntry.objects.update_or_create(
            key=cleaned,
            defaults={"value": value},
        )
        logger.debug("Saved key '%s'.", cleaned)
