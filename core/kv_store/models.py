"""
POS Key-Value Store - Relational Entries
========================================
One row per persisted key. Values are JSON documents.
"""

from __future__ import annotations

from django.db import models


class KeyValueEntry(models.Model):
    key = models.CharField(primary_key=True, max_length=128)
    value = models.JSONField(null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "pos_kv_entries"
        ordering = ["key"]

    def __str__(self) -> str:
        return self.key
