from datetime import date, datetime
from pathlib import Path

import pytest

from seatwatch import config
from seatwatch.models import Show, ShowInfo, Venue
from seatwatch.pipeline.io import MISSING, clean_field, format_rows
from seatwatch.pipeline.store import VenueStore, parse_roster
from seatwatch.utils.dates import format_minute, show_start
from seatwatch.utils.proxies import ProxyRotator, load_proxies


def test_show_start_reads_24_hour_times_only():
    day = date(2026, 2, 1)
    assert show_start(day, "19:05") == datetime(2026, 2, 1, 19, 5)
    assert show_start(day, "08:00") == datetime(2026, 2, 1, 8, 0)
    assert show_start(day, "23:59:30") == datetime(2026, 2, 1, 23, 59)
    assert show_start(day, "8:15pm") is None
    assert show_start(day, "25:00") is None
    assert show_start(day, "TBD") is None
    assert show_start(day, "") is None
    assert show_start(day, None) is None
    assert format_minute(datetime(2026, 2, 1, 9, 7, 59)) == "2026-02-01 09:07"


def test_clean_field_strips_separators_and_fills_missing():
    assert clean_field("Orbit, Part II\r\n") == "Orbit Part II"
    assert clean_field(None) == MISSING
    assert clean_field("") == MISSING
    assert clean_field(0) == "0"


def test_format_rows_column_order():
    venue = Venue(venue_id="1001", name="Wanda CBD", city_code="110100", retries_left=20)
    info = ShowInfo(
        show_id="S-1",
        show_time=datetime(2026, 2, 1, 19, 30),
        film_id="F1",
        film_name="Harbor Lights",
        film_category="Drama",
        film_duration=118,
        hall_name="Hall 3",
        language=None,
        dimension="2D",
        price=45,
        original_price=80,
        rebate_price=40,
        service_charge=3,
        capacity=120,
    )
    venue.shows["S-1"] = Show(info=info, tickets_left=0, updated_at=datetime(2026, 2, 1, 19, 20))

    rows = format_rows(venue, datetime(2026, 2, 1, 19, 29, 45))

    assert rows == [[
        "110100", "1001", "Wanda CBD", "S-1", "F1", "Harbor Lights", "Drama", "118",
        "Hall 3", MISSING, "2D", "45", "80", "40", "3",
        "2026-02-01 19:30", "2026-02-01 19:20", "2026-02-01 19:29", "0", "120",
    ]]


def test_format_rows_empty_venue():
    venue = Venue(venue_id="1001", name="Wanda CBD", city_code="110100", retries_left=0)
    assert format_rows(venue, datetime(2026, 2, 1)) == []


def test_parse_roster_skips_header_and_malformed_rows():
    text = Path("tests/fixtures/wanda.cinemas.data").read_text()
    venues = parse_roster(text, retry_budget=20)

    assert [(v.venue_id, v.name, v.city_code) for v in venues] == [
        ("1001", "Wanda CBD", "110100"),
        ("1002", "Wanda Tongzhou", "110100"),
        ("3001", "Wanda Pudong", "310100"),
    ]
    assert all(v.retries_left == 20 and v.shows == {} for v in venues)


def test_venue_store_lookup():
    store = VenueStore(parse_roster('id,name,city\n"7","Seven","110100"\n', retry_budget=3))
    assert len(store) == 1
    assert "7" in store
    assert store.get("7").prefix == "110100-7-Seven"
    with pytest.raises(KeyError):
        store.get("8")


def test_proxy_rotator_round_robin():
    rotator = ProxyRotator(["http://a:1", "http://b:2"])
    assert [rotator.next() for _ in range(3)] == ["http://a:1", "http://b:2", "http://a:1"]
    assert ProxyRotator([]).next() is None


def test_load_proxies(tmp_path):
    assert load_proxies(tmp_path / "missing.json") == []

    path = tmp_path / "proxies.json"
    path.write_text('["http://a:1", "", "http://b:2"]')
    assert load_proxies(path) == ["http://a:1", "http://b:2"]

    path.write_text('{"proxy": "http://a:1"}')
    with pytest.raises(ValueError):
        load_proxies(path)


def test_result_path_per_day_and_threshold(tmp_path):
    path = config.result_path(date(2026, 2, 1), 120, tmp_path)
    assert path == tmp_path / "wanda.2026-02-01.120.csv"


def test_log_path_per_threshold(tmp_path):
    assert config.log_path(120, tmp_path) == tmp_path / "wanda.120.log"
    assert config.log_path(120, tmp_path) != config.log_path(600, tmp_path)
