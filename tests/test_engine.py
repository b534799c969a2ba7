"""
End-to-end runs of the engine against a scripted upstream.
"""

from __future__ import annotations

import json
from datetime import date

import pytest
from fakes import FakeResponse, FakeSession, results_payload

from rank_sync.client import RetryingFetchClient
from rank_sync.engine import RankSyncEngine, build_tasks
from rank_sync.errors import NoDatasetsSucceededError
from rank_sync.feeds import build_feed_url
from rank_sync.retry import RetryPolicy

RUN_DATE = date(2026, 10, 17)


def _engine(settings, session: FakeSession) -> RankSyncEngine:
    client = RetryingFetchClient(
        policy=RetryPolicy(max_attempts=settings.max_retries, delay_seconds=0),
        session=session,
        fallback_file_path=settings.fallback_file_path,
    )
    return RankSyncEngine(settings=settings, client=client, today=lambda: RUN_DATE)


def _url(settings, region: str) -> str:
    return build_feed_url(settings=settings, region=region, category="apps", feed="top-free")


def _ledger_rows(settings) -> list[dict]:
    path = f"{settings.data_dir}/history.ndjson"
    with open(path, encoding="utf-8") as handle:
        return [json.loads(line) for line in handle if line.strip()]


def _read(path) -> dict:
    with open(path, encoding="utf-8") as handle:
        return json.load(handle)


def test_build_tasks_is_region_major_cross_product(make_settings) -> None:
    settings = make_settings(regions=("us", "jp"), categories=("apps", "games"), feeds=("top-free",))

    assert [task.describe() for task in build_tasks(settings)] == [
        "us/apps/top-free",
        "us/games/top-free",
        "jp/apps/top-free",
        "jp/games/top-free",
    ]


def test_build_tasks_collapses_feed_aliases_to_one_task(make_settings) -> None:
    settings = make_settings(feeds=("topfreeapplications", "top-free", "top-paid"))

    assert [task.describe() for task in build_tasks(settings)] == [
        "us/apps/top-free",
        "us/apps/top-paid",
    ]


def test_feed_alias_duplicates_fetch_and_persist_one_dataset(make_settings) -> None:
    settings = make_settings(feeds=("topfreeapplications", "top-free"))
    url = _url(settings, "us")
    session = FakeSession({url: [FakeResponse(200, results_payload("A"))]})

    summary = _engine(settings, session).run()

    assert (summary.succeeded, summary.ledger_appended) == (1, 1)
    assert session.calls_to(url) == 1
    snapshot = _read(f"{settings.data_dir}/latest/all.json")
    assert snapshot["totalDatasets"] == 1
    assert [dataset["feedType"] for dataset in snapshot["datasets"]] == ["top-free"]


def test_single_dataset_run_writes_files_and_ledger(make_settings) -> None:
    settings = make_settings()
    session = FakeSession({_url(settings, "us"): [FakeResponse(200, results_payload("A", "B", "C"))]})

    summary = _engine(settings, session).run()

    assert (summary.date, summary.succeeded, summary.skipped) == ("2026-10-17", 1, 0)
    dataset = _read(f"{settings.data_dir}/datasets/us/apps/top-free.json")
    assert dataset["total"] == 3
    assert [item["rank"] for item in dataset["items"]] == [1, 2, 3]
    assert dataset["source"] == _url(settings, "us")

    rows = _ledger_rows(settings)
    assert len(rows) == 1
    assert [item["name"] for item in rows[0]["top10"]] == ["A", "B", "C"]
    assert summary.ledger_appended == 1


def test_all_failures_raise_and_write_nothing(make_settings, tmp_path) -> None:
    settings = make_settings()
    session = FakeSession({_url(settings, "us"): [FakeResponse(500)]})

    with pytest.raises(NoDatasetsSucceededError) as excinfo:
        _engine(settings, session).run()

    assert session.calls_to(_url(settings, "us")) == settings.max_retries
    assert len(excinfo.value.failures) == 1
    assert not (tmp_path / "data").exists()


def test_partial_failure_writes_only_successful_slices(make_settings) -> None:
    settings = make_settings(regions=("us", "gb"))
    session = FakeSession(
        {
            _url(settings, "us"): [FakeResponse(200, results_payload("A"))],
            _url(settings, "gb"): [FakeResponse(502)],
        }
    )

    summary = _engine(settings, session).run()

    assert (summary.succeeded, summary.skipped) == (1, 1)
    snapshot = _read(f"{settings.data_dir}/latest/all.json")
    assert snapshot["totalDatasets"] == 1
    assert len(snapshot["warnings"]) == 1
    assert snapshot["warnings"][0].startswith("gb/apps/top-free:")

    data_dir = settings.data_dir
    assert _read(f"{data_dir}/regions/us.json")["totalDatasets"] == 1
    with pytest.raises(FileNotFoundError):
        _read(f"{data_dir}/regions/gb.json")
    with pytest.raises(FileNotFoundError):
        _read(f"{data_dir}/datasets/gb/apps/top-free.json")
    assert _read(f"{data_dir}/datasets/us/apps/top-free.json")["region"] == "us"


def test_rerun_on_same_date_appends_one_ledger_line(make_settings) -> None:
    settings = make_settings()
    url = _url(settings, "us")

    _engine(settings, FakeSession({url: [FakeResponse(200, results_payload("A"))]})).run()
    second = _engine(settings, FakeSession({url: [FakeResponse(200, results_payload("B"))]})).run()

    assert second.ledger_appended == 0
    rows = _ledger_rows(settings)
    assert len(rows) == 1
    assert rows[0]["top10"][0]["name"] == "A"
    # snapshot files are overwritten wholesale
    assert _read(f"{settings.data_dir}/latest/all.json")["datasets"][0]["items"][0]["name"] == "B"


def test_fallback_payload_produces_dataset_without_source(make_settings, tmp_path) -> None:
    fallback = tmp_path / "fallback.json"
    fallback.write_text(json.dumps(results_payload("Cached")), encoding="utf-8")
    settings = make_settings(fallback_file_path=str(fallback))

    summary = _engine(settings, FakeSession()).run()

    assert summary.succeeded == 1
    dataset = _read(f"{settings.data_dir}/datasets/us/apps/top-free.json")
    assert dataset["source"] == ""
    assert dataset["items"][0]["name"] == "Cached"
