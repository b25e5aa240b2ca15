"""
POS Key-Value Store - Persistence Port
======================================
The engine reads and writes its durable state (catalog, settings)
through load(key) / save(key, value). A missing key means
"use defaults".
"""

from core.kv_store.provider import (
    DbKeyValueStore,
    InMemoryKeyValueStore,
    KeyValueStore,
)

__all__ = [
    "KeyValueStore",
    "InMemoryKeyValueStore",
    "DbKeyValueStore",
]
