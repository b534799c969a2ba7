"""
Config helpers for rank synchronization.
"""

from rank_sync.config.loader import get_sync_settings, load_env_files
from rank_sync.config.models import SyncSettings

__all__ = [
    "SyncSettings",
    "get_sync_settings",
    "load_env_files",
]
