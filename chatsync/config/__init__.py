"""
chatsync config: frozen dataclasses loaded from env.

load_postgres_config(), load_yclients_config(), load_firebase_config(), load_sync_config().
"""
from chatsync.config.firebase import FirebaseConfig, load_firebase_config
from chatsync.config.postgres import PostgresConfig, load_postgres_config
from chatsync.config.sync import SyncConfig, load_sync_config
from chatsync.config.yclients import YClientsConfig, load_yclients_config

__all__ = [
    "PostgresConfig",
    "load_postgres_config",
    "YClientsConfig",
    "load_yclients_config",
    "FirebaseConfig",
    "load_firebase_config",
    "SyncConfig",
    "load_sync_config",
]
