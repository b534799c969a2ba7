"""
Shared synchronization runtime data models.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Item:
    """
    One ranked entry of a chart. `rank` is 1-based.
    """

    date: str
    rank: int
    id: str = ""
    name: str = ""
    artist_name: str = ""
    kind: str = ""
    release_date: str = ""
    artwork_url: str = ""
    url: str = ""


@dataclass(frozen=True)
class DatasetKey:
    """
    Structural identity of one observation within a day.
    """

    date: str
    region: str
    category: str
    feed_type: str


@dataclass(frozen=True)
class Dataset:
    """
    One (region, category, feed) observation for a single day.
    """

    date: str
    region: str
    category: str
    feed_type: str
    limit: int
    genre: str
    source: str
    items: tuple[Item, ...] = ()

    @property
    def total(self) -> int:
        return len(self.items)

    @property
    def key(self) -> DatasetKey:
        return DatasetKey(
            date=self.date,
            region=self.region,
            category=self.category,
            feed_type=self.feed_type,
        )


@dataclass(frozen=True)
class FetchedPayload:
    """
    Decoded upstream payload and where it came from.
    """

    payload: Any
    url: str
    from_fallback: bool = False

    @property
    def source(self) -> str:
        return "" if self.from_fallback else self.url


@dataclass(frozen=True)
class FetchTask:
    """
    One cell of the region x category x feed cross-product.
    """

    region: str
    category: str
    feed: str

    def describe(self) -> str:
        return f"{self.region}/{self.category}/{self.feed}"


@dataclass(frozen=True)
class TaskOutcome(Generic[T]):
    """
    Result slot for one scheduled task, captured instead of raised.
    """

    index: int
    value: T | None = None
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class Aggregate:
    """
    Named slice over a set of datasets.
    """

    scope: str
    path_parts: tuple[str, ...]
    date: str
    limit: int
    datasets: tuple[Dataset, ...]
    warnings: tuple[str, ...] = ()

    @property
    def regions(self) -> list[str]:
        return unique_in_order(dataset.region for dataset in self.datasets)

    @property
    def categories(self) -> list[str]:
        return unique_in_order(dataset.category for dataset in self.datasets)

    @property
    def feed_types(self) -> list[str]:
        return unique_in_order(dataset.feed_type for dataset in self.datasets)


@dataclass(frozen=True)
class SyncRunSummary:
    """
    Outcome of one synchronization run.
    """

    date: str
    succeeded: int
    skipped: int
    warnings: list[str] = field(default_factory=list)
    files_written: int = 0
    ledger_appended: int = 0


def unique_in_order(values: Iterable[str]) -> list[str]:
    seen: list[str] = []
    for value in values:
        if value not in seen:
            seen.append(value)
    return seen
