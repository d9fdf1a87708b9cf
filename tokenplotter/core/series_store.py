#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Series store: lazy, memoized access to token price series.

get(symbol) resolves a symbol to a series handle:
- the native asset (sentinel) -> ReferenceAsset, constant 1 from axis index 0, no I/O
- a catalog symbol -> RealToken, fetched once and cached for the process lifetime

The per-token resource is {"start_index": int, "prices": [float, ...]} and must
cover the axis exactly from start_index to the end.
"""
from __future__ import annotations

from typing import Any, Dict, Mapping
import logging
import threading

from .data_source import DataSource
from .time_axis import is_int64
from .token_registry import TokenRegistry
from ..shared.errors import DataFormatError
from ..shared.models import RealToken, ReferenceAsset, SeriesHandle, TokenSeries


def parse_series(symbol: str, raw: Any, axis_length: int) -> TokenSeries:
    """Validate a decoded per-token resource against the axis length."""
    if not isinstance(raw, Mapping):
        raise DataFormatError(f"series for {symbol} must be a mapping")
    start = raw.get("start_index")
    prices = raw.get("prices")
    if not is_int64(start):
        raise DataFormatError(f"series for {symbol} has no integer start_index")
    if not isinstance(prices, list):
        raise DataFormatError(f"series for {symbol} has no prices list")
    if not 0 <= start < axis_length:
        raise DataFormatError(f"series for {symbol}: start_index {start} outside axis [0, {axis_length})")
    if len(prices) != axis_length - start:
        raise DataFormatError(
            f"series for {symbol}: expected {axis_length - start} prices from index {start}, got {len(prices)}"
        )
    for i, p in enumerate(prices):
        # null is a missing price (NaN); strings and booleans are malformed
        if p is not None and (isinstance(p, bool) or not isinstance(p, (int, float))):
            raise DataFormatError(f"series for {symbol} has non-numeric prices: prices[{i}]={p!r}")
    try:
        return TokenSeries(symbol=symbol, start_index=start, prices=prices)
    except OverflowError as e:
        raise DataFormatError(f"series for {symbol} has out-of-range prices: {e}")


class SeriesStore:
    def __init__(self, *, registry: TokenRegistry, source: DataSource, axis_length: int, sentinel: str) -> None:
        self.registry = registry
        self.source = source
        self.axis_length = axis_length
        self.reference = ReferenceAsset(symbol=sentinel)
        self.log = logging.getLogger(__name__)
        self._cache: Dict[str, RealToken] = {}
        self._lock = threading.Lock()
        # one lock per symbol so unrelated fetches do not serialize
        self._fetch_locks: Dict[str, threading.Lock] = {}

    @property
    def sentinel(self) -> str:
        return self.reference.symbol

    def is_loaded(self, symbol: str) -> bool:
        return symbol == self.sentinel or symbol in self._cache

    def get(self, symbol: str) -> SeriesHandle:
        if symbol == self.sentinel:
            return self.reference
        cached = self._cache.get(symbol)
        if cached is not None:
            self.log.debug(f"Series cache hit symbol={symbol}")
            return cached
        rec = self.registry.require(symbol)
        with self._lock:
            fetch_lock = self._fetch_locks.setdefault(symbol, threading.Lock())
        with fetch_lock:
            cached = self._cache.get(symbol)
            if cached is not None:
                return cached
            self.log.info(f"Loading series symbol={symbol} address={rec.address}")
            series = parse_series(symbol, self.source.fetch_series(rec.address), self.axis_length)
            handle = RealToken(series=series)
            with self._lock:
                self._cache[symbol] = handle
            return handle
