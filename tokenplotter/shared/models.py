#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Domain Models for the token price plotter
Defines the time axis, token series and ratio trace structures.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np


def _frozen_array(values, dtype) -> np.ndarray:
    arr = np.array(values, dtype=dtype)
    arr.setflags(write=False)
    return arr


def to_datetimes(timestamps: Sequence[int]) -> List[datetime]:
    """Convert epoch seconds to timezone-aware UTC datetimes"""
    return [datetime.fromtimestamp(int(ts), tz=timezone.utc) for ts in timestamps]


@dataclass(frozen=True)
class ScheduleDescriptor:
    """
    Compact encoding of the shared time axis

    The number of offsets defines the axis length N.
    """
    start_ts: int
    interval: int
    offsets: Tuple[int, ...]

    def __len__(self) -> int:
        return len(self.offsets)


@dataclass(frozen=True, eq=False)
class TimeAxis:
    """
    Ordered absolute timestamps (epoch seconds) shared by every token series

    Immutable: the underlying array is read-only.
    """
    timestamps: np.ndarray

    def __post_init__(self):
        object.__setattr__(self, "timestamps", _frozen_array(self.timestamps, np.int64))

    def __len__(self) -> int:
        return int(self.timestamps.size)

    def __getitem__(self, index):
        return self.timestamps[index]

    def datetimes(self) -> List[datetime]:
        return to_datetimes(self.timestamps)


@dataclass(frozen=True)
class TokenRecord:
    symbol: str
    address: str

    @property
    def resource_name(self) -> str:
        """File name of the per-token price resource"""
        return f"{self.address.lower()}.json"


@dataclass(frozen=True, eq=False)
class TokenSeries:
    """
    Price series of one token

    prices[k] is the price at axis index start_index + k; values before
    start_index are undefined (the token did not exist yet).
    """
    symbol: str
    start_index: int
    prices: np.ndarray

    def __post_init__(self):
        object.__setattr__(self, "prices", _frozen_array(self.prices, np.float64))

    @property
    def end_index(self) -> int:
        return self.start_index + int(self.prices.size)


@dataclass(frozen=True, eq=False)
class RealToken:
    """Series handle for a token that has a fetched price series"""
    series: TokenSeries

    @property
    def symbol(self) -> str:
        return self.series.symbol

    @property
    def start_index(self) -> int:
        return self.series.start_index

    def values(self, start: int, stop: int) -> np.ndarray:
        """Prices for axis indices [start, stop)"""
        offset = self.series.start_index
        return self.series.prices[start - offset:stop - offset]


@dataclass(frozen=True)
class ReferenceAsset:
    """
    Series handle for the network's native asset

    Present at every axis index with a constant unit value; never fetched.
    """
    symbol: str
    start_index: int = 0

    def values(self, start: int, stop: int) -> np.ndarray:
        return np.ones(max(0, stop - start), dtype=np.float64)


SeriesHandle = Union[RealToken, ReferenceAsset]


@dataclass(frozen=True, eq=False)
class RatioTrace:
    """
    Price of a quote token expressed in a base token over time

    Derived data; never mutated after creation.
    """
    timestamps: np.ndarray
    ratios: np.ndarray
    name: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "timestamps", _frozen_array(self.timestamps, np.int64))
        object.__setattr__(self, "ratios", _frozen_array(self.ratios, np.float64))
        if self.timestamps.size != self.ratios.size:
            raise ValueError("timestamps and ratios must have the same length")

    def __len__(self) -> int:
        return int(self.timestamps.size)

    def points(self) -> List[Tuple[int, float]]:
        return [(int(t), float(r)) for t, r in zip(self.timestamps, self.ratios)]

    def datetimes(self) -> List[datetime]:
        return to_datetimes(self.timestamps)


@dataclass(frozen=True, eq=False)
class ChartView:
    """Everything the renderer needs for one chart"""
    base: str
    traces: Tuple[RatioTrace, ...] = field(default_factory=tuple)
    title: str = ""
    yaxis_title: str = ""

    @classmethod
    def build(cls, base: str, traces: Sequence[RatioTrace]) -> "ChartView":
        names = ", ".join(t.name or "" for t in traces)
        return cls(
            base=base,
            traces=tuple(traces),
            title=f"Price history for {names} (in {base})",
            yaxis_title=f"Price ({base})",
        )
