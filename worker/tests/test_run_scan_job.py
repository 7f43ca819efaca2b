import argparse
import json

import pytest
import requests

from gridscan.core.config import ConfigError, Settings
from gridscan.core.models import ORGANIC, RankItem
from gridscan.jobs import run_scan


def make_settings(**overrides):
    values = dict(dataforseo_login="login", dataforseo_password="secret", scan_delay_ms=0)
    values.update(overrides)
    return Settings(**values)


def test_run_scan_job_requires_credentials(monkeypatch):
    monkeypatch.setattr(run_scan, "get_settings", lambda: make_settings(dataforseo_login=""))

    with pytest.raises(ConfigError):
        run_scan.run_scan_job(keyword="pizza", lat=47.6, lng=-122.3)


def test_run_scan_job_with_coordinates(monkeypatch):
    settings = make_settings(unit_cost=0.01, scan_depth=30)
    monkeypatch.setattr(run_scan, "get_settings", lambda: settings)
    calls = []

    def fake_query(keyword, lat, lng, depth=20, *, settings=None):
        calls.append((keyword, depth, settings))
        return [RankItem(kind=ORGANIC, rank_absolute=1, place_id="J", title="Joe's Pizza")]

    monkeypatch.setattr(run_scan.dataforseo, "query_maps_point", fake_query)

    summary = run_scan.run_scan_job(
        keyword="pizza", lat=47.6, lng=-122.3, business_name="Joe's", grid_size=3, radius_miles=2
    )

    assert len(calls) == 9
    assert {call[1] for call in calls} == {30}
    assert all(call[2] is settings for call in calls)
    assert summary.stats.ranked_points == 9
    assert summary.stats.average_rank == 1.0
    assert summary.cost == pytest.approx(0.09)
    assert summary.business == "Joe's"


def test_run_scan_job_looks_up_business(monkeypatch):
    monkeypatch.setattr(run_scan, "get_settings", lambda: make_settings())

    def fake_find_business(keyword, business_name, location, *, settings=None):
        assert location == "Seattle, WA"
        return RankItem(
            kind=ORGANIC, rank_absolute=1, place_id="ChIJjoe", title="Joe's Pizza Seattle", lat=47.61, lng=-122.33
        )

    seen = []

    def fake_query(keyword, lat, lng, depth=20, *, settings=None):
        seen.append((lat, lng))
        return []

    monkeypatch.setattr(run_scan.dataforseo, "find_business", fake_find_business)
    monkeypatch.setattr(run_scan.dataforseo, "query_maps_point", fake_query)

    summary = run_scan.run_scan_job(
        keyword="pizza", business_name="joe's pizza", location="Seattle, WA", grid_size=3, radius_miles=1
    )

    assert summary.center_lat == 47.61
    assert summary.place_id == "ChIJjoe"
    assert summary.business == "Joe's Pizza Seattle"
    assert len(seen) == 9
    center_point = summary.results[4].point
    assert (center_point.lat, center_point.lng) == pytest.approx((47.61, -122.33))


def test_run_scan_job_overrides_concurrency_and_delay(monkeypatch):
    monkeypatch.setattr(run_scan, "get_settings", lambda: make_settings(scan_delay_ms=500))
    captured = {}

    def fake_run_grid_scan(keyword, lat, lng, business_name=None, place_id=None, options=None, *, query_point=None):
        captured["options"] = options
        return "summary"

    monkeypatch.setattr(run_scan, "run_grid_scan", fake_run_grid_scan)

    result = run_scan.run_scan_job(keyword="pizza", lat=1.0, lng=2.0, concurrency=6, delay_ms=0, grid_size=7)

    assert result == "summary"
    assert captured["options"].concurrency == 6
    assert captured["options"].delay_ms == 0
    assert captured["options"].grid_size == 7


def test_build_parser_defaults():
    parser = run_scan.build_parser()
    args = parser.parse_args(["--keyword", "pizza", "--lat", "47.6", "--lng", "-122.3"])
    assert isinstance(parser, argparse.ArgumentParser)
    assert args.keyword == "pizza"
    assert args.grid_size == 5
    assert args.radius_miles == 5.0
    assert args.concurrency is None


def test_main_writes_summary(monkeypatch, tmp_path):
    class FakeSummary:
        def to_dict(self):
            return {"gridSize": 3}

    monkeypatch.setattr(run_scan, "run_scan_job", lambda **kwargs: FakeSummary())
    output = tmp_path / "scan.json"

    exit_code = run_scan.main(["--keyword", "pizza", "--lat", "1", "--lng", "2", "--output", str(output)])

    assert exit_code == 0
    assert json.loads(output.read_text(encoding="utf-8")) == {"gridSize": 3}


def test_main_returns_2_on_precondition_failure(monkeypatch):
    def fail(**kwargs):
        raise run_scan.ScanRequestError("Must provide either lat/lng coordinates")

    monkeypatch.setattr(run_scan, "run_scan_job", fail)

    assert run_scan.main(["--keyword", "pizza"]) == 2


def test_main_returns_2_when_business_lookup_fails(monkeypatch):
    monkeypatch.setattr(run_scan, "get_settings", lambda: make_settings())

    def failing_find_business(keyword, business_name, location, *, settings=None):
        raise run_scan.dataforseo.DataForSEOError("Task error: Internal Error")

    monkeypatch.setattr(run_scan.dataforseo, "find_business", failing_find_business)

    exit_code = run_scan.main(["--keyword", "pizza", "--business", "Joe", "--location", "Seattle, WA"])

    assert exit_code == 2


def test_repeated_jobs_reuse_retry_adapters(monkeypatch):
    session = requests.Session()
    monkeypatch.setattr(run_scan.dataforseo, "_SESSION", session)
    monkeypatch.setattr(run_scan.dataforseo, "_session_configured", False)
    monkeypatch.setattr(run_scan, "get_settings", lambda: make_settings(max_retries=2))
    monkeypatch.setattr(run_scan.dataforseo, "query_maps_point", lambda *args, **kwargs: [])

    adapters = []
    for _ in range(3):
        run_scan.run_scan_job(keyword="pizza", lat=1.0, lng=2.0, grid_size=3)
        adapters.append(session.get_adapter("https://api.dataforseo.com"))

    assert adapters[0] is adapters[1] is adapters[2]
    assert adapters[0].max_retries.total == 2
