#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Ratio engine: price of a quote token expressed in a base token.

Both series are aligned on the shared time axis and the trace starts at the
first index where both exist, max(quote.start_index, base.start_index).

Division follows IEEE-754: a zero base price yields +/-inf (or NaN for 0/0);
points are never dropped.
"""
from __future__ import annotations

import logging

import numpy as np

from .series_store import SeriesStore
from ..shared.models import RatioTrace, ReferenceAsset, TimeAxis

log = logging.getLogger(__name__)


class RatioEngine:
    def __init__(self, *, axis: TimeAxis, store: SeriesStore) -> None:
        self.axis = axis
        self.store = store

    def compute_ratio(self, quote_symbol: str, base_symbol: str) -> RatioTrace:
        quote = self.store.get(quote_symbol)
        base = self.store.get(base_symbol)
        if isinstance(quote, ReferenceAsset) and isinstance(base, ReferenceAsset):
            return RatioTrace(timestamps=[], ratios=[], name=quote_symbol)

        n = len(self.axis)
        start = max(quote.start_index, base.start_index)
        with np.errstate(divide="ignore", invalid="ignore"):
            ratios = quote.values(start, n) / base.values(start, n)
        bad = int(np.count_nonzero(~np.isfinite(ratios)))
        if bad:
            log.warning(f"{quote_symbol}/{base_symbol}: {bad} non-finite ratio points (zero base price)")
        log.debug(f"Computed {quote_symbol}/{base_symbol} points={n - start} from index {start}")
        return RatioTrace(timestamps=self.axis[start:n], ratios=ratios, name=quote_symbol)
