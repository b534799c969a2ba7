"""
Filesystem writer for aggregate and per-dataset shards.

Every slice is written under three paths:

    {root}/{parts}.json                 canonical
    {root}/dated/{date}/{parts}.json    dated archive
    {root}/latest/{parts}.json          latest

Files are overwritten wholesale; nothing is merged with earlier runs.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from rank_sync.logging_utils import log_event
from rank_sync.schemas import DatasetSchema, SnapshotSchema
from rank_sync.types import Aggregate, Dataset

logger = logging.getLogger(__name__)


def _relative(path_parts: Sequence[str]) -> Path:
    *parents, stem = path_parts
    return Path(*parents, f"{stem}.json")


def canonical_path(root: Path, path_parts: Sequence[str]) -> Path:
    return root / _relative(path_parts)


def dated_path(root: Path, path_parts: Sequence[str], date: str) -> Path:
    return root / "dated" / date / _relative(path_parts)


def latest_path(root: Path, path_parts: Sequence[str]) -> Path:
    return root / "latest" / _relative(path_parts)


def shard_paths(root: Path, path_parts: Sequence[str], date: str) -> list[Path]:
    return [
        canonical_path(root, path_parts),
        dated_path(root, path_parts, date),
        latest_path(root, path_parts),
    ]


def dataset_path_parts(dataset: Dataset) -> tuple[str, ...]:
    return ("datasets", dataset.region, dataset.category, dataset.feed_type)


class ShardedSnapshotWriter:
    """
    Persist a run's aggregates and datasets as JSON shards.
    """

    def __init__(self, *, data_dir: str | Path) -> None:
        self._root = Path(data_dir)

    @property
    def root(self) -> Path:
        return self._root

    def write(self, aggregates: Sequence[Aggregate], datasets: Sequence[Dataset]) -> list[Path]:
        """
        Write every aggregate and every dataset; return the paths written.
        """

        written: list[Path] = []
        for aggregate in aggregates:
            document = SnapshotSchema.from_aggregate(aggregate).model_dump(by_alias=True)
            written.extend(self._write_triple(aggregate.path_parts, aggregate.date, document))

        for dataset in datasets:
            document = DatasetSchema.from_dataset(dataset).model_dump(by_alias=True)
            written.extend(self._write_triple(dataset_path_parts(dataset), dataset.date, document))

        log_event(
            logger,
            logging.INFO,
            "shard_written",
            root=str(self._root),
            aggregates=len(aggregates),
            datasets=len(datasets),
            files=len(written),
        )
        return written

    def _write_triple(
        self,
        path_parts: Sequence[str],
        date: str,
        document: dict[str, Any],
    ) -> list[Path]:
        text = json.dumps(document, ensure_ascii=False, indent=2) + "\n"
        paths = shard_paths(self._root, path_parts, date)
        for path in paths:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
        return paths
