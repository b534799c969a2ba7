"""
Wire schemas for the persisted JSON / NDJSON surface.

Field names on disk are camelCase; report and wiki builders read these files
back, so this module is the contract between the pipeline and its consumers.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from rank_sync.types import Aggregate, Dataset, Item

LEDGER_TOP_N = 10


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


class ItemSchema(_WireModel):
    date: str
    rank: int = Field(..., ge=1)
    id: str = ""
    name: str = ""
    artist_name: str = Field("", alias="artistName")
    kind: str = ""
    release_date: str = Field("", alias="releaseDate")
    artwork_url: str = Field("", alias="artworkUrl")
    url: str = ""

    @classmethod
    def from_item(cls, item: Item) -> "ItemSchema":
        return cls(
            date=item.date,
            rank=item.rank,
            id=item.id,
            name=item.name,
            artist_name=item.artist_name,
            kind=item.kind,
            release_date=item.release_date,
            artwork_url=item.artwork_url,
            url=item.url,
        )


class DatasetSchema(_WireModel):
    date: str
    region: str
    category: str
    feed_type: str = Field(..., alias="feedType")
    limit: int = Field(..., ge=1)
    genre: str = ""
    source: str = ""
    total: int = Field(..., ge=0)
    items: list[ItemSchema] = Field(default_factory=list)

    @classmethod
    def from_dataset(cls, dataset: Dataset) -> "DatasetSchema":
        return cls(
            date=dataset.date,
            region=dataset.region,
            category=dataset.category,
            feed_type=dataset.feed_type,
            limit=dataset.limit,
            genre=dataset.genre,
            source=dataset.source,
            total=dataset.total,
            items=[ItemSchema.from_item(item) for item in dataset.items],
        )


class SnapshotSchema(_WireModel):
    """
    Aggregate document: one named slice of a run's datasets.
    """

    date: str
    scope: str = "all"
    regions: list[str] = Field(default_factory=list)
    media_types: list[str] = Field(default_factory=list, alias="mediaTypes")
    feed_types: list[str] = Field(default_factory=list, alias="feedTypes")
    limit: int = Field(..., ge=1)
    total_datasets: int = Field(..., ge=0, alias="totalDatasets")
    warnings: list[str] = Field(default_factory=list)
    datasets: list[DatasetSchema] = Field(default_factory=list)

    @classmethod
    def from_aggregate(cls, aggregate: Aggregate) -> "SnapshotSchema":
        return cls(
            date=aggregate.date,
            scope=aggregate.scope,
            regions=aggregate.regions,
            media_types=aggregate.categories,
            feed_types=aggregate.feed_types,
            limit=aggregate.limit,
            total_datasets=len(aggregate.datasets),
            warnings=list(aggregate.warnings),
            datasets=[DatasetSchema.from_dataset(dataset) for dataset in aggregate.datasets],
        )


class LedgerRecordSchema(_WireModel):
    """
    Compact journal row; only the first ten items are kept.
    """

    date: str
    region: str
    category: str
    feed_type: str = Field(..., alias="feedType")
    limit: int
    total: int
    source: str = ""
    top10: list[ItemSchema] = Field(default_factory=list)

    @classmethod
    def from_dataset(cls, dataset: Dataset) -> "LedgerRecordSchema":
        return cls(
            date=dataset.date,
            region=dataset.region,
            category=dataset.category,
            feed_type=dataset.feed_type,
            limit=dataset.limit,
            total=dataset.total,
            source=dataset.source,
            top10=[ItemSchema.from_item(item) for item in dataset.items[:LEDGER_TOP_N]],
        )
