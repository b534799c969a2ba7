from __future__ import annotations

from rank_sync.aggregation import build_aggregates, partition_outcomes
from rank_sync.types import Dataset, FetchTask, Item, TaskOutcome


def _dataset(region: str, category: str, feed: str) -> Dataset:
    return Dataset(
        date="2026-10-17",
        region=region,
        category=category,
        feed_type=feed,
        limit=10,
        genre="",
        source=f"https://feeds.example/{region}/{category}/{feed}",
        items=(Item(date="2026-10-17", rank=1, id="1", name=f"{region}-{category}-{feed}"),),
    )


def test_partition_keeps_order_and_describes_failures() -> None:
    tasks = [FetchTask("us", "apps", "top-free"), FetchTask("gb", "apps", "top-free")]
    outcomes = [
        TaskOutcome(index=0, value=_dataset("us", "apps", "top-free")),
        TaskOutcome(index=1, error=RuntimeError("boom")),
    ]

    datasets, failures = partition_outcomes(tasks, outcomes)

    assert [d.region for d in datasets] == ["us"]
    assert failures == ["gb/apps/top-free: boom"]


def test_build_aggregates_slices() -> None:
    datasets = [
        _dataset("us", "apps", "top-free"),
        _dataset("us", "games", "top-free"),
        _dataset("jp", "apps", "top-paid"),
    ]

    aggregates = build_aggregates(datasets, date="2026-10-17", limit=10, warnings=["x"])
    by_scope = {aggregate.scope: aggregate for aggregate in aggregates}

    assert list(by_scope) == [
        "all",
        "category:apps",
        "category:games",
        "region:us",
        "region:us/apps",
        "region:us/games",
        "region:jp",
        "region:jp/apps",
    ]
    assert len(by_scope["all"].datasets) == 3
    assert [d.region for d in by_scope["category:apps"].datasets] == ["us", "jp"]
    assert by_scope["region:us"].categories == ["apps", "games"]
    assert by_scope["region:jp/apps"].feed_types == ["top-paid"]
    assert by_scope["region:us/games"].path_parts == ("regions", "us", "games")
    assert all(aggregate.warnings == ("x",) for aggregate in aggregates)
