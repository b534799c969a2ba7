"""
Append-only NDJSON history ledger.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Iterable, Sequence
from pathlib import Path

from rank_sync.logging_utils import log_event
from rank_sync.schemas import LedgerRecordSchema
from rank_sync.types import Dataset, DatasetKey

logger = logging.getLogger(__name__)

LEDGER_FILENAME = "history.ndjson"


class HistoryLedger:
    """
    One compact JSON record per (date, region, category, feedType).

    Existing lines are never rewritten or removed. Lines that fail to parse
    are kept verbatim and simply never match a key. Assumes a single writer;
    there is no file locking across overlapping runs.

    Records are split on ``"\\n"`` only. Rows are written with
    ``ensure_ascii=False``, so names may carry U+2028 and friends, which
    ``str.splitlines`` would treat as line breaks.
    """

    def __init__(self, *, path: str | Path) -> None:
        self._path = Path(path)

    @classmethod
    def in_data_dir(cls, data_dir: str | Path) -> "HistoryLedger":
        return cls(path=Path(data_dir) / LEDGER_FILENAME)

    @property
    def path(self) -> Path:
        return self._path

    def read_keys(self) -> set[DatasetKey]:
        return set(self._keys_from_lines(self._read_text().split("\n")))

    def append(self, datasets: Sequence[Dataset]) -> int:
        """
        Append records for datasets whose key is not yet present.

        Returns the number of lines appended.
        """

        existing = self._read_text()
        seen = set(self._keys_from_lines(existing.split("\n")))

        new_lines: list[str] = []
        for dataset in datasets:
            if dataset.key in seen:
                continue
            seen.add(dataset.key)
            record = LedgerRecordSchema.from_dataset(dataset).model_dump(by_alias=True)
            new_lines.append(json.dumps(record, ensure_ascii=False, separators=(",", ":")))

        if not new_lines:
            return 0

        prefix = existing
        if prefix and not prefix.endswith("\n"):
            prefix += "\n"
        self._replace(prefix + "\n".join(new_lines) + "\n")

        log_event(
            logger,
            logging.INFO,
            "ledger_appended",
            path=str(self._path),
            appended=len(new_lines),
            skipped=len(datasets) - len(new_lines),
        )
        return len(new_lines)

    def _read_text(self) -> str:
        if not self._path.exists():
            return ""
        return self._path.read_text(encoding="utf-8")

    def _replace(self, text: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_name(f"{self._path.name}.tmp")
        tmp_path.write_text(text, encoding="utf-8")
        os.replace(tmp_path, self._path)

    @staticmethod
    def _keys_from_lines(lines: Iterable[str]) -> Iterable[DatasetKey]:
        for line in lines:
            if not line.strip():
                continue
            try:
                row = json.loads(line)
            except ValueError:
                continue
            if not isinstance(row, dict):
                continue
            values = [row.get(field) for field in ("date", "region", "category", "feedType")]
            if not all(isinstance(value, str) for value in values):
                continue
            yield DatasetKey(
                date=values[0],
                region=values[1],
                category=values[2],
                feed_type=values[3],
            )
