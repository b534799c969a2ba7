"""
Partition task outcomes and derive the hierarchical slices of one run.
"""

from __future__ import annotations

from collections.abc import Sequence

from rank_sync.types import Aggregate, Dataset, FetchTask, TaskOutcome, unique_in_order


def partition_outcomes(
    tasks: Sequence[FetchTask],
    outcomes: Sequence[TaskOutcome[Dataset]],
) -> tuple[list[Dataset], list[str]]:
    """
    Split outcomes into datasets (input order) and failure descriptions.
    """

    datasets: list[Dataset] = []
    failures: list[str] = []
    for outcome in outcomes:
        if outcome.ok and outcome.value is not None:
            datasets.append(outcome.value)
        else:
            failures.append(f"{tasks[outcome.index].describe()}: {outcome.error}")
    return datasets, failures


def build_aggregates(
    datasets: Sequence[Dataset],
    *,
    date: str,
    limit: int,
    warnings: Sequence[str] = (),
) -> list[Aggregate]:
    """
    Build the global slice, then per-category, per-region and per
    region+category slices, each by filtering the run's dataset list.

    Single datasets are not aggregates; the writer persists them directly.
    """

    ordered = tuple(datasets)
    warning_list = tuple(warnings)

    def make(scope: str, path_parts: tuple[str, ...], members) -> Aggregate:
        return Aggregate(
            scope=scope,
            path_parts=path_parts,
            date=date,
            limit=limit,
            datasets=tuple(members),
            warnings=warning_list,
        )

    aggregates = [make("all", ("all",), ordered)]

    for category in unique_in_order(d.category for d in ordered):
        aggregates.append(
            make(
                f"category:{category}",
                ("categories", category),
                (d for d in ordered if d.category == category),
            )
        )

    for region in unique_in_order(d.region for d in ordered):
        in_region = [d for d in ordered if d.region == region]
        aggregates.append(make(f"region:{region}", ("regions", region), in_region))
        for category in unique_in_order(d.category for d in in_region):
            aggregates.append(
                make(
                    f"region:{region}/{category}",
                    ("regions", region, category),
                    (d for d in in_region if d.category == category),
                )
            )

    return aggregates
