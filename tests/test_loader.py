import os
from datetime import date
from types import SimpleNamespace

import pytest
import requests

from lottolens import loader
from lottolens.config import Settings
from lottolens.engine.exceptions import DataLoadError


def _build_mock_response(status_code: int, payload=None, json_error: bool = False):
    def raise_for_status():
        if status_code >= 400:
            raise requests.exceptions.HTTPError(f"{status_code} Server Error")

    def json():
        if json_error:
            raise ValueError("Expecting value")
        return payload

    return SimpleNamespace(status_code=status_code, raise_for_status=raise_for_status, json=json)


def _install_get(monkeypatch, response):
    calls = []

    def get(url, timeout=None, **kwargs):
        calls.append((url, timeout))
        return response

    monkeypatch.setattr(loader.requests, "get", get)
    return calls


class TestNormalize:
    def test_list_with_result_mapping(self, sample_days):
        records = loader.normalize_records(sample_days)

        assert [d for d, _ in records] == [date(2024, 1, 1), date(2024, 1, 3), date(2024, 1, 5)]
        assert records[0][1] == {"1st": ["0102"], "2nd": ["3101", "1234"]}
        assert records[1][1]["100"] == ["abc", None, "5310"]

    def test_slots_list_shape(self):
        raw = [{
            "day": "2024-02-01",
            "slots": [
                {"slot": "1st", "number": "3105"},
                {"name": "2nd", "number": ["3101", "3102"]},
                "not-a-slot",
            ],
        }]

        _, entries = loader.normalize_records(raw)[0]

        assert entries == {"1st": ["3105"], "2nd": ["3101", "3102"]}

    def test_flat_day_and_alternate_mapping_keys(self):
        raw = [
            {"d": "2024/02/01", "1st": "3105", "100": [12, 34]},
            {"date": "2024-02-02", "prizes": {"1st": "0007"}},
        ]

        records = loader.normalize_records(raw)

        assert records[0] == (date(2024, 2, 1), {"1st": ["3105"], "100": [12, 34]})
        assert records[1] == (date(2024, 2, 2), {"1st": ["0007"]})

    def test_object_keyed_by_date(self):
        raw = {"05/01/2024": {"1st": "3105"}, "2024-01-06": {"1st": ["3106"]}}

        records = loader.normalize_records(raw)

        assert records == [
            (date(2024, 1, 5), {"1st": ["3105"]}),
            (date(2024, 1, 6), {"1st": ["3106"]}),
        ]

    def test_unparseable_dates_are_skipped(self):
        raw = [
            {"date": "bad-date", "result": {"1st": "3105"}},
            {"result": {"1st": "3105"}},
            {"date": "2024-01-05", "result": {"1st": "3105"}},
        ]

        assert [d for d, _ in loader.normalize_records(raw)] == [date(2024, 1, 5)]

    @pytest.mark.parametrize("raw", [None, [], {}, 42, "text"])
    def test_empty_or_unsupported_documents(self, raw):
        assert loader.normalize_records(raw) == []


class TestLoad:
    def test_load_from_file(self, sample_json_file):
        store = loader.load_record_store(sample_json_file)

        assert len(store) == 3
        assert store.latest_date == date(2024, 1, 5)
        assert store[1].entries["1st"] == ("3103",)

    def test_missing_file(self, tmp_path):
        with pytest.raises(DataLoadError):
            loader.load_record_store(str(tmp_path / "missing.json"))

    def test_invalid_json_file(self, tmp_path):
        path = tmp_path / "draws.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(DataLoadError):
            loader.load_record_store(str(path))

    def test_file_without_usable_records(self, tmp_path):
        path = tmp_path / "draws.json"
        path.write_text('[{"date": "never", "result": {"1st": "3105"}}]', encoding="utf-8")

        with pytest.raises(DataLoadError):
            loader.load_record_store(str(path))

    def test_load_from_url(self, monkeypatch, sample_days):
        calls = _install_get(monkeypatch, _build_mock_response(200, sample_days))

        store = loader.load_record_store("https://example.org/draws.json", timeout=3)

        assert len(store) == 3
        assert calls == [("https://example.org/draws.json", 3)]

    def test_url_http_error(self, monkeypatch):
        _install_get(monkeypatch, _build_mock_response(503))

        with pytest.raises(DataLoadError):
            loader.fetch_json("https://example.org/draws.json")

    def test_url_invalid_json(self, monkeypatch):
        _install_get(monkeypatch, _build_mock_response(200, json_error=True))

        with pytest.raises(DataLoadError):
            loader.fetch_json("http://example.org/draws.json")

    def test_load_from_settings_returns_none_when_unavailable(self, tmp_path, sample_json_file):
        missing = Settings(data_source=str(tmp_path / "missing.json"))
        assert loader.load_from_settings(missing) is None

        store = loader.load_from_settings(Settings(data_source=sample_json_file))
        assert store is not None and len(store) == 3


def test_bundled_dataset_loads():
    path = os.path.join(os.path.dirname(__file__), "..", "data", "draws.json")
    store = loader.load_record_store(path)

    # the "bad-date" record is dropped
    assert len(store) == 9
    assert store.earliest_date == date(2025, 10, 1)
    assert store.latest_date == date(2025, 10, 12)
