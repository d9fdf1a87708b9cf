#!/usr/bin/env python3
"""
Unit tests for the HTTP and local data sources
"""
import pytest
import requests

from tokenplotter.core.data_source import HttpDataSource, LocalDataSource, create_data_source
from tokenplotter.shared.config import DataConfig
from tokenplotter.shared.errors import DataFormatError, DataSourceError, NotFoundError


class FakeResponse:
    def __init__(self, status_code, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("no JSON")
        return self._payload


@pytest.fixture
def no_sleep(monkeypatch):
    monkeypatch.setattr("tokenplotter.core.data_source.time.sleep", lambda s: None)


class TestHttpDataSource:
    def test_fetch_series_uses_lowercase_address(self, monkeypatch):
        src = HttpDataSource(base_url="https://example.org/data/")
        seen = []

        def fake_get(url, timeout):
            seen.append(url)
            return FakeResponse(200, {"start_index": 0, "prices": [1.0]})

        monkeypatch.setattr(src._session, "get", fake_get)
        assert src.fetch_series("0xABC") == {"start_index": 0, "prices": [1.0]}
        assert seen == ["https://example.org/data/0xabc.json"]

    def test_retries_then_succeeds(self, monkeypatch, no_sleep):
        src = HttpDataSource(base_url="https://example.org", retries=2)
        responses = [FakeResponse(503, text="busy"), FakeResponse(200, {"ok": True})]
        monkeypatch.setattr(src._session, "get", lambda url, timeout: responses.pop(0))
        assert src.fetch_catalog() == {"ok": True}

    def test_gives_up_after_retries(self, monkeypatch, no_sleep):
        src = HttpDataSource(base_url="https://example.org", retries=1)
        calls = []

        def failing_get(url, timeout):
            calls.append(url)
            raise requests.ConnectionError("refused")

        monkeypatch.setattr(src._session, "get", failing_get)
        with pytest.raises(DataSourceError, match="refused"):
            src.fetch_schedule()
        assert len(calls) == 2

    def test_not_found(self, monkeypatch):
        src = HttpDataSource(base_url="https://example.org")
        monkeypatch.setattr(src._session, "get", lambda url, timeout: FakeResponse(404))
        with pytest.raises(NotFoundError):
            src.fetch_series("0x1")

    def test_invalid_json(self, monkeypatch):
        src = HttpDataSource(base_url="https://example.org")
        monkeypatch.setattr(src._session, "get", lambda url, timeout: FakeResponse(200, None, "<html>"))
        with pytest.raises(DataFormatError):
            src.fetch_catalog()


class TestLocalDataSource:
    def test_reads_files(self, data_dir):
        src = LocalDataSource(directory=data_dir)
        assert src.fetch_schedule()["delta"] == 100
        assert "DAI" in src.fetch_catalog()
        assert src.fetch_series("0xMKRaddr")["start_index"] == 1

    def test_missing_file(self, tmp_path):
        with pytest.raises(NotFoundError):
            LocalDataSource(directory=tmp_path).fetch_schedule()

    def test_invalid_json(self, tmp_path):
        (tmp_path / "tokens.json").write_text("{not json", encoding="utf-8")
        with pytest.raises(DataFormatError):
            LocalDataSource(directory=tmp_path).fetch_catalog()


class TestFactory:
    def test_picks_implementation(self, tmp_path):
        assert isinstance(create_data_source(DataConfig(directory=str(tmp_path))), LocalDataSource)
        assert isinstance(create_data_source(DataConfig(base_url="https://x.org")), HttpDataSource)

    def test_no_location(self):
        with pytest.raises(DataSourceError):
            create_data_source(DataConfig())
