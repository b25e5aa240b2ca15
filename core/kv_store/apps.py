"""
POS Key-Value Store - App Configuration
=======================================
Durable JSON key-value entries for catalog and settings.
"""

from django.apps import AppConfig


class CoreKeyValueStoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "core.kv_store"
    label = "core_kv_store"
    verbose_name = "POS Key-Value Store"
