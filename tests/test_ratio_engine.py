#!/usr/bin/env python3
"""
Unit tests for the ratio engine

Covers alignment of differently-offset series, the native asset special case
and IEEE-754 behaviour on zero base prices.
"""
import math

import numpy as np
import pytest

from tokenplotter.core.ratio_engine import RatioEngine
from tokenplotter.core.series_store import SeriesStore
from tokenplotter.core.time_axis import build_time_axis
from tokenplotter.core.token_registry import parse_registry
from tokenplotter.shared.errors import NotFoundError
from tokenplotter.shared.models import ScheduleDescriptor

from conftest import FakeDataSource


def make_engine(files, start_ts=1000, interval=100, n=4):
    source = FakeDataSource(files)
    axis = build_time_axis(ScheduleDescriptor(start_ts=start_ts, interval=interval, offsets=(0,) * n))
    registry = parse_registry(files["tokens.json"], sentinel="ETH")
    store = SeriesStore(registry=registry, source=source, axis_length=len(axis), sentinel="ETH")
    return RatioEngine(axis=axis, store=store)


@pytest.fixture
def engine(fake_source):
    return make_engine(fake_source.files)


class TestComputeRatio:
    def test_example_against_native_asset(self):
        files = {
            "tokens.json": {"X": {"address": "0xX"}},
            "0xx.json": {"start_index": 1, "prices": [2.0, 4.0]},
        }
        trace = make_engine(files, n=3).compute_ratio("X", "ETH")
        assert trace.points() == [(1100, 2.0), (1200, 4.0)]
        assert trace.name == "X"

    def test_native_in_native_is_empty(self, engine):
        trace = engine.compute_ratio("ETH", "ETH")
        assert len(trace) == 0
        assert trace.points() == []

    def test_self_ratio_is_one(self, engine):
        trace = engine.compute_ratio("MKR", "MKR")
        assert trace.ratios.tolist() == [1.0, 1.0, 1.0]
        assert trace.timestamps.tolist() == [1100, 1200, 1300]

    def test_starts_at_later_offset(self, engine):
        trace = engine.compute_ratio("MKR", "DAI")
        # MKR starts at 1, DAI at 0 -> 4 - max(1, 0) points
        assert len(trace) == 3
        assert trace.ratios.tolist() == [4.0, 16.0, 32.0]

    def test_base_starts_later(self, engine):
        trace = engine.compute_ratio("DAI", "MKR")
        assert trace.timestamps.tolist() == [1100, 1200, 1300]
        assert trace.ratios.tolist() == [0.25, 0.0625, 0.03125]

    def test_native_in_token(self, engine):
        trace = engine.compute_ratio("ETH", "DAI")
        assert trace.ratios.tolist() == [2.0, 2.0, 4.0, 4.0]

    def test_zero_base_price_gives_infinity(self, engine):
        trace = engine.compute_ratio("MKR", "ZRO")
        assert trace.timestamps.tolist() == [1200, 1300]
        assert math.isinf(trace.ratios[0]) and trace.ratios[0] > 0
        assert trace.ratios[1] == pytest.approx(8.0 / 3.0)

    def test_zero_over_zero_is_nan(self, engine):
        trace = engine.compute_ratio("ZRO", "ZRO")
        assert np.isnan(trace.ratios[0])
        assert trace.ratios[1] == 1.0

    def test_unknown_symbol_propagates(self, engine):
        with pytest.raises(NotFoundError):
            engine.compute_ratio("NOPE", "DAI")

    def test_trace_is_immutable(self, engine):
        trace = engine.compute_ratio("MKR", "DAI")
        with pytest.raises(ValueError):
            trace.ratios[0] = 0.0

    def test_null_price_propagates_as_nan(self):
        files = {
            "tokens.json": {"X": {"address": "0xX"}, "Y": {"address": "0xY"}},
            "0xx.json": {"start_index": 0, "prices": [2.0, None, 6.0]},
            "0xy.json": {"start_index": 0, "prices": [1.0, 2.0, None]},
        }
        trace = make_engine(files, n=3).compute_ratio("X", "Y")
        assert len(trace) == 3
        assert trace.ratios[0] == 2.0
        assert np.isnan(trace.ratios[1])
        assert np.isnan(trace.ratios[2])
