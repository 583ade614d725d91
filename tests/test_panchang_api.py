"""Tests for Panchang API endpoints."""

from __future__ import annotations

import json
import logging
import os

os.environ.setdefault("EPHEMERIS_BACKEND", "moseph")

from fastapi.testclient import TestClient

from vedic_api.app import app


client = TestClient(app)

HYDERABAD_MOMENT = {
    "year": 2024,
    "month": 4,
    "day": 14,
    "hours": 6,
    "minutes": 0,
    "seconds": 0,
    "latitude": 17.385,
    "longitude": 78.4867,
    "timezone": 5.5,
}


def _seconds(clock: str) -> int:
    hh, mm, ss = (int(part) for part in clock.split(":"))
    return hh * 3600 + mm * 60 + ss


def _compute(**overrides):
    payload = {**HYDERABAD_MOMENT, **overrides}
    return client.post("/v1/panchang/compute", json=payload)


def test_health_reports_engine() -> None:
    resp = client.get("/__health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["ok"] is True
    assert data["engine"].startswith("swisseph")


def test_compute_basic_shape() -> None:
    resp = _compute()
    assert resp.status_code == 200, resp.text
    data = resp.json()
    for key in (
        "sun_rise",
        "sun_set",
        "weekday",
        "lunar_month",
        "ritu",
        "aayanam",
        "tithi",
        "nakshatra",
        "yoga",
        "karana",
        "year",
        "calculations",
    ):
        assert key in data
    assert set(data["yoga"]) == {"1", "2"}
    assert set(data["karana"]) == {"1", "2"}
    assert data["year"]["status"] == "success"
    calc = data["calculations"]
    assert [t["name"] for t in calc["auspicious_times"]] == ["Brahma Muhurta", "Abhijit Muhurta"]
    assert [t["name"] for t in calc["inauspicious_times"]] == [
        "Rahu Kaal",
        "Yamaganda",
        "Gulika Kaal",
    ]


def test_compute_hyderabad_sunday() -> None:
    data = _compute().json()
    assert data["weekday"]["weekday_number"] == 1
    assert data["weekday"]["weekday_name"] == "Sunday"
    # 06:00 is before the computed sunrise, so the vara is still Saturday's.
    assert data["sun_rise"] > "06:00:00"
    assert data["weekday"]["vedic_weekday_name"] == "Shanivara"
    assert data["sun_rise"] < data["sun_set"]
    assert data["sun_rise"].startswith("06:")
    assert data["sun_set"].startswith("18:")


def test_compute_hyderabad_calendar_elements() -> None:
    data = _compute().json()
    assert data["tithi"]["paksha"] == "Shukla"
    assert 1 <= data["tithi"]["number"] <= 15
    assert data["lunar_month"]["lunar_month_name"] == "Chaitra"
    assert data["lunar_month"]["adhika"] == 0
    assert data["lunar_month"]["nija"] == 1
    assert data["ritu"] == {"number": 1, "name": "Vasanta"}
    assert data["aayanam"] == "Uttarayanam"
    assert data["year"]["saka_salivahana_number"] == 1946
    assert data["year"]["saka_salivahana_year_name"] == "Krodhi"
    assert data["year"]["vikram_chaitradi_number"] == 2081
    assert data["year"]["vikram_chaitradi_year_name"] == "Kalayukti"


def test_element_ranges_and_percentages() -> None:
    data = _compute().json()
    assert 1 <= data["nakshatra"]["number"] <= 27
    assert 1 <= data["nakshatra"]["pada"] <= 4
    assert 0 < data["tithi"]["left_precentage"] <= 100
    assert 0 < data["nakshatra"]["left_percentage"] <= 100
    for entry in data["yoga"].values():
        assert 1 <= entry["number"] <= 27
    for entry in data["karana"].values():
        assert 1 <= entry["number"] <= 11


def test_rahu_kaal_is_last_eighth_on_sunday() -> None:
    data = _compute().json()
    sunrise = _seconds(data["sun_rise"])
    sunset = _seconds(data["sun_set"])
    eighth = (sunset - sunrise) / 8
    rahu = data["calculations"]["rahu_kaal"]
    assert abs(_seconds(rahu["start"]) - (sunrise + 7 * eighth)) <= 1
    assert abs(_seconds(rahu["end"]) - sunset) <= 1


def test_kaal_windows_lie_within_daylight() -> None:
    data = _compute().json()
    calc = data["calculations"]
    sunrise = _seconds(data["sun_rise"])
    sunset = _seconds(data["sun_set"])
    for key in ("rahu_kaal", "yamaganda", "gulika_kaal"):
        start = _seconds(calc[key]["start"])
        end = _seconds(calc[key]["end"])
        assert sunrise - 1 <= start < end <= sunset + 1
        assert abs((end - start) - (sunset - sunrise) / 8) <= 1


def test_brahma_and_abhijit_durations() -> None:
    data = _compute().json()
    calc = data["calculations"]
    brahma = calc["brahma_muhurta"]
    abhijit = calc["abhijit_muhurta"]
    assert brahma["end"] == data["sun_rise"]
    assert abs(_seconds(brahma["end"]) - _seconds(brahma["start"]) - 96 * 60) <= 1
    assert abs(_seconds(abhijit["end"]) - _seconds(abhijit["start"]) - 48 * 60) <= 1


def test_day_duration_matches_sun_times() -> None:
    data = _compute().json()
    duration = data["calculations"]["day_duration"]
    seconds = _seconds(data["sun_set"]) - _seconds(data["sun_rise"])
    assert abs(duration["hours"] * 60 + duration["minutes"] - seconds // 60) <= 1


def test_identical_requests_give_identical_responses() -> None:
    first = _compute()
    second = _compute()
    assert first.status_code == 200
    assert first.json() == second.json()


def test_date_alias_is_accepted() -> None:
    payload = dict(HYDERABAD_MOMENT)
    payload["date"] = payload.pop("day")
    resp = client.post("/v1/panchang/compute", json=payload)
    assert resp.status_code == 200, resp.text
    assert resp.json() == _compute().json()


def test_tropical_config_changes_lunar_longitudes_only() -> None:
    sidereal = _compute().json()
    tropical = _compute(config={"ayanamsha": "tropical"}).json()
    assert tropical["sun_rise"] == sidereal["sun_rise"]
    assert tropical["tithi"]["number"] == sidereal["tithi"]["number"]
    assert tropical["calculations"] == sidereal["calculations"]


def test_invalid_day_rejected() -> None:
    assert _compute(day=32).status_code == 422
    assert _compute(month=2, day=30).status_code == 422
    assert _compute(month=13).status_code == 422


def test_invalid_coordinates_rejected() -> None:
    assert _compute(latitude=95).status_code == 422
    assert _compute(longitude=-181).status_code == 422
    assert _compute(timezone=15).status_code == 422
    assert _compute(latitude="north").status_code == 422


def test_missing_field_rejected() -> None:
    payload = dict(HYDERABAD_MOMENT)
    payload.pop("latitude")
    resp = client.post("/v1/panchang/compute", json=payload)
    assert resp.status_code == 422


def test_unknown_ayanamsha_rejected() -> None:
    assert _compute(config={"ayanamsha": "made-up"}).status_code == 422


def test_polar_night_still_answers() -> None:
    resp = _compute(year=2024, month=12, day=21, hours=12, latitude=89.0, longitude=0.0, timezone=0)
    assert resp.status_code == 200, resp.text
    data = resp.json()
    assert data["sun_rise"] == data["sun_set"]
    assert data["calculations"]["day_duration"] == {"hours": 0, "minutes": 0}


def test_get_by_date_defaults_to_six_am() -> None:
    resp = client.get(
        "/v1/panchang",
        params={"date": "2024-04-14", "latitude": 17.385, "longitude": 78.4867, "timezone": 5.5},
    )
    assert resp.status_code == 200, resp.text
    assert resp.json() == _compute().json()


def test_get_by_date_uses_default_timezone(monkeypatch) -> None:
    monkeypatch.setenv("DEFAULT_TIMEZONE_OFFSET", "5.5")
    resp = client.get(
        "/v1/panchang",
        params={"date": "2024-04-14", "latitude": 17.385, "longitude": 78.4867},
    )
    assert resp.status_code == 200, resp.text
    assert resp.json()["sun_rise"] == _compute().json()["sun_rise"]


def test_get_by_date_rejects_bad_date() -> None:
    resp = client.get(
        "/v1/panchang",
        params={"date": "14/04/2024", "latitude": 17.385, "longitude": 78.4867},
    )
    assert resp.status_code == 422
    assert "YYYY-MM-DD" in resp.json()["detail"]


def test_get_by_date_rejects_out_of_range_hour() -> None:
    resp = client.get(
        "/v1/panchang",
        params={"date": "2024-04-14", "latitude": 17.385, "longitude": 78.4867, "hours": 24},
    )
    assert resp.status_code == 422


def test_get_by_date_rejects_unknown_ayanamsha() -> None:
    resp = client.get(
        "/v1/panchang",
        params={
            "date": "2024-04-14",
            "latitude": 17.385,
            "longitude": 78.4867,
            "ayanamsha": "nope",
        },
    )
    assert resp.status_code == 422


def test_calculations_endpoint_matches_full_response() -> None:
    resp = client.get(
        "/v1/panchang/calculations",
        params={"date": "2024-04-14", "latitude": 17.385, "longitude": 78.4867, "timezone": 5.5},
    )
    assert resp.status_code == 200, resp.text
    assert resp.json() == _compute().json()["calculations"]


def test_access_log_written_when_enabled(monkeypatch, caplog) -> None:
    monkeypatch.setenv("LOGGING_ENABLED", "true")
    with caplog.at_level(logging.INFO, logger="vedic_api.access"):
        resp = client.get("/__health")
    assert resp.status_code == 200
    records = [json.loads(r.getMessage()) for r in caplog.records if r.name == "vedic_api.access"]
    assert records and records[-1]["endpoint"] == "/__health"
    assert records[-1]["status"] == 200


def test_early_january_margashirsha_uses_previous_era_year() -> None:
    resp = _compute(year=2024, month=1, day=5, hours=12)
    assert resp.status_code == 200, resp.text
    data = resp.json()
    assert data["lunar_month"]["lunar_month_name"] == "Margashirsha"
    assert data["year"]["saka_salivahana_number"] == 1945
    assert data["year"]["saka_salivahana_year_name"] == "Shobhakrit"
    assert data["year"]["vikram_chaitradi_number"] == 2080
    assert data["year"]["vikram_chaitradi_year_name"] == "Pingala"


def test_access_log_carries_panchang_context(monkeypatch, caplog) -> None:
    monkeypatch.setenv("LOGGING_ENABLED", "true")
    with caplog.at_level(logging.INFO, logger="vedic_api.access"):
        resp = _compute(config={"ayanamsha": "raman"})
    assert resp.status_code == 200, resp.text
    records = [json.loads(r.getMessage()) for r in caplog.records if r.name == "vedic_api.access"]
    assert records[-1]["endpoint"] == "/v1/panchang/compute"
    assert records[-1]["method"] == "POST"
    assert records[-1]["ayanamsha"] == "raman"
    assert records[-1]["cache_hit"] is False


def test_access_log_reports_cache_hit(monkeypatch, caplog) -> None:
    from vedic_api.services.cache import ResponseCache

    class MemoryRedis:
        def __init__(self):
            self.store = {}

        def get(self, key):
            return self.store.get(key)

        def setex(self, key, ttl, value):
            self.store[key] = value

        def delete(self, key):
            self.store.pop(key, None)

    cache = ResponseCache(client=MemoryRedis(), ttl_seconds=60)
    monkeypatch.setattr(app.state, "panchang_cache", cache)
    monkeypatch.setenv("LOGGING_ENABLED", "true")
    with caplog.at_level(logging.INFO, logger="vedic_api.access"):
        first = _compute()
        second = _compute()
    assert first.json() == second.json()
    records = [json.loads(r.getMessage()) for r in caplog.records if r.name == "vedic_api.access"]
    assert [r["cache_hit"] for r in records[-2:]] == [False, True]
