"""
Storage layer exports.
"""

from rank_sync.storage.ledger import HistoryLedger
from rank_sync.storage.shard_writer import ShardedSnapshotWriter, dated_path, latest_path, shard_paths

__all__ = ["HistoryLedger", "ShardedSnapshotWriter", "dated_path", "latest_path", "shard_paths"]
