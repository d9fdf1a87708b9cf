#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Data sources for the precomputed plotter resources.

Exposes a minimal DataSource interface and two implementations:
- HttpDataSource: GETs the JSON files from a static web directory
- LocalDataSource: reads the same files from a directory on disk

Both return decoded JSON; validation of the payloads happens in the core
(time_axis, token_registry, series_store).
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Optional
import json
import time

import requests

from ..shared.config import DataConfig
from ..shared.errors import DataFormatError, DataSourceError, NotFoundError
from ..shared.logging_setup import get_logger

logger = get_logger(__name__)


class DataSource:
    def __init__(self, *, schedule_file: str = "blocktimes.json", catalog_file: str = "tokens.json") -> None:
        self.schedule_file = schedule_file
        self.catalog_file = catalog_file

    def load(self, name: str) -> Any:
        raise NotImplementedError

    def fetch_schedule(self) -> Any:
        return self.load(self.schedule_file)

    def fetch_catalog(self) -> Any:
        return self.load(self.catalog_file)

    def fetch_series(self, address: str) -> Any:
        return self.load(f"{address.lower()}.json")


class HttpDataSource(DataSource):
    def __init__(self, *, base_url: str, timeout_s: int = 10, retries: int = 2, **kwargs) -> None:
        super().__init__(**kwargs)
        self.base_url = base_url.rstrip("/")
        self.timeout_s = max(1, int(timeout_s))
        self.retries = max(0, int(retries))
        self._session = requests.Session()
        self._session.headers.update({"User-Agent": "tokenplotter/1.0", "Accept": "application/json"})

    def load(self, name: str) -> Any:
        url = f"{self.base_url}/{name.lstrip('/')}"
        last_err: Optional[str] = None
        logger.info(f"GET {url}")
        for i in range(self.retries + 1):
            try:
                r = self._session.get(url, timeout=self.timeout_s)
            except requests.RequestException as e:
                last_err = str(e)
            else:
                if r.status_code == 200:
                    try:
                        return r.json()
                    except ValueError as e:
                        raise DataFormatError(f"{url} is not valid JSON: {e}")
                if r.status_code == 404:
                    raise NotFoundError(f"Resource not found: {url}")
                last_err = f"HTTP {r.status_code}: {r.text[:200]}"
            if i < self.retries:
                time.sleep(0.5 * (2 ** i))
        logger.warning(f"GET FAILED url={url} error={last_err}")
        raise DataSourceError(f"Failed to fetch {url}: {last_err}")

    def close(self) -> None:
        self._session.close()


class LocalDataSource(DataSource):
    def __init__(self, *, directory: str | Path, **kwargs) -> None:
        super().__init__(**kwargs)
        self.directory = Path(directory)

    def load(self, name: str) -> Any:
        path = self.directory / name
        if not path.is_file():
            raise NotFoundError(f"Resource not found: {path}")
        logger.info(f"Reading {path}")
        try:
            with path.open("r", encoding="utf-8") as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise DataFormatError(f"{path} is not valid JSON: {e}")
        except OSError as e:
            raise DataSourceError(f"Failed to read {path}: {e}")


def create_data_source(cfg: DataConfig) -> DataSource:
    """Pick the data source implementation from configuration."""
    names = {"schedule_file": cfg.schedule_file, "catalog_file": cfg.catalog_file}
    if cfg.base_url:
        return HttpDataSource(base_url=cfg.base_url, timeout_s=cfg.timeout_s, retries=cfg.retries, **names)
    if cfg.directory:
        return LocalDataSource(directory=cfg.directory, **names)
    raise DataSourceError("No data location configured: set data.base_url or data.directory")
