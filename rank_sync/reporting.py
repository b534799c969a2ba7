"""
Daily markdown report rendered from the latest global snapshot.

Reads only the persisted JSON surface; it never talks to the network.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from rank_sync.logging_utils import log_event
from rank_sync.schemas import DatasetSchema, SnapshotSchema
from rank_sync.storage.shard_writer import dated_path, latest_path

logger = logging.getLogger(__name__)

GLOBAL_PARTS = ("all",)
MAX_MOVERS = 5


@dataclass(frozen=True)
class Mover:
    name: str
    rank: int
    previous_rank: int | None

    @property
    def is_new(self) -> bool:
        return self.previous_rank is None

    @property
    def delta(self) -> int:
        return 0 if self.previous_rank is None else self.previous_rank - self.rank


def _dataset_key(dataset: DatasetSchema) -> tuple[str, str, str]:
    return (dataset.region.lower(), dataset.category.lower(), dataset.feed_type.lower())


def load_snapshot(path: Path) -> SnapshotSchema | None:
    if not path.is_file():
        return None
    return SnapshotSchema.model_validate(json.loads(path.read_text(encoding="utf-8")))


def find_previous_snapshot(data_dir: Path, current_date: str) -> SnapshotSchema | None:
    """
    Latest dated global snapshot strictly older than ``current_date``.
    """

    dated_root = data_dir / "dated"
    if not dated_root.is_dir():
        return None
    earlier = sorted(
        child.name
        for child in dated_root.iterdir()
        if child.is_dir() and child.name < current_date
    )
    for candidate in reversed(earlier):
        snapshot = load_snapshot(dated_path(data_dir, GLOBAL_PARTS, candidate))
        if snapshot is not None:
            return snapshot
    return None


def compute_movers(
    dataset: DatasetSchema,
    previous: DatasetSchema | None,
    *,
    limit: int = MAX_MOVERS,
) -> list[Mover]:
    """
    New entries first, then the largest absolute rank changes.
    """

    if previous is None:
        return []

    previous_ranks = {item.id: item.rank for item in previous.items if item.id}
    movers: list[Mover] = []
    for item in dataset.items:
        if not item.id:
            continue
        previous_rank = previous_ranks.get(item.id)
        mover = Mover(name=item.name, rank=item.rank, previous_rank=previous_rank)
        if mover.is_new or mover.delta != 0:
            movers.append(mover)

    movers.sort(key=lambda m: (not m.is_new, -abs(m.delta), m.rank))
    return movers[:limit]


def _escape(value: str) -> str:
    """Make an upstream string safe for a single markdown table cell."""

    text = " ".join((value or "").splitlines()).strip()
    return (text or "-").replace("|", "\\|")


def render_daily_report(
    snapshot: SnapshotSchema,
    *,
    top_n: int = 20,
    previous: SnapshotSchema | None = None,
) -> str:
    datasets = sorted(snapshot.datasets, key=_dataset_key)
    previous_by_key = {_dataset_key(d): d for d in previous.datasets} if previous else {}

    lines = [
        f"# iOS Rank Daily Report ({snapshot.date})",
        "",
        f"- Regions: {', '.join(sorted({d.region.upper() for d in datasets}))}",
        f"- Media Types: {', '.join(sorted({d.category for d in datasets}))}",
        f"- Feeds: {', '.join(sorted({d.feed_type for d in datasets}))}",
        f"- Total datasets: {len(datasets)}",
    ]
    if snapshot.warnings:
        lines.append(f"- Skipped: {len(snapshot.warnings)}")
    lines.append("")

    for dataset in datasets:
        shown = dataset.items[:top_n]
        lines.extend(
            [
                f"## {dataset.region.upper()} {dataset.category} {dataset.feed_type} Top {len(shown)}",
                "",
                f"- Total: {dataset.total}",
                f"- Source: {dataset.source or 'fallback'}",
                "",
                "| Rank | Name | Artist | App ID |",
                "| --- | --- | --- | --- |",
            ]
        )
        for item in shown:
            lines.append(
                f"| {item.rank} | {_escape(item.name)} | {_escape(item.artist_name)} | {_escape(item.id)} |"
            )
        lines.append("")

        if previous is not None:
            movers = compute_movers(dataset, previous_by_key.get(_dataset_key(dataset)))
            lines.extend(_render_movers(movers, previous.date))

    return "\n".join(lines) + "\n"


def _render_movers(movers: list[Mover], previous_date: str) -> list[str]:
    lines = [f"Top movers vs {previous_date}:", ""]
    if not movers:
        return lines + ["- No rank movement detected.", ""]

    lines += ["| App | Current | Previous | Delta |", "| --- | --- | --- | --- |"]
    for mover in movers:
        if mover.is_new:
            delta_text = "new"
        else:
            delta_text = f"+{mover.delta}" if mover.delta > 0 else str(mover.delta)
        previous_text = "-" if mover.previous_rank is None else str(mover.previous_rank)
        lines.append(f"| {_escape(mover.name)} | {mover.rank} | {previous_text} | {delta_text} |")
    return lines + [""]


def write_daily_report(*, data_dir: str | Path, report_dir: str | Path, top_n: int = 20) -> Path:
    """
    Render ``latest/all.json`` into ``{report_dir}/daily-{date}.md``.
    """

    data_root = Path(data_dir)
    snapshot_path = latest_path(data_root, GLOBAL_PARTS)
    snapshot = load_snapshot(snapshot_path)
    if snapshot is None:
        raise FileNotFoundError(f"Latest snapshot not found: {snapshot_path}")

    previous = find_previous_snapshot(data_root, snapshot.date)
    report_path = Path(report_dir) / f"daily-{snapshot.date}.md"
    report_path.parent.mkdir(parents=True, exist_ok=True)
    report_path.write_text(
        render_daily_report(snapshot, top_n=top_n, previous=previous),
        encoding="utf-8",
    )
    log_event(
        logger,
        logging.INFO,
        "report_written",
        path=str(report_path),
        datasets=len(snapshot.datasets),
        previous_date=previous.date if previous else None,
    )
    return report_path
