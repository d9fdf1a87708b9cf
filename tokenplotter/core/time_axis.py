#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Time axis builder.

The schedule resource encodes the shared axis compactly:
  {"start_ts": 1500000000, "delta": 3600, "ts_offsets": [0, 12, -3, ...], "block_diffs": [...]}

axis[i] = start_ts + i * delta + ts_offsets[i]

The length of ts_offsets defines the axis length N. block_diffs, when present,
must have the same length.
"""
from __future__ import annotations

from typing import Any, Mapping

import numpy as np

from ..shared.errors import DataFormatError
from ..shared.models import ScheduleDescriptor, TimeAxis


INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


def is_int64(value: Any) -> bool:
    """True for a JSON integer (not bool, not float) that fits in int64."""
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    return INT64_MIN <= value <= INT64_MAX


def _require_int(raw: Mapping[str, Any], key: str) -> int:
    if key not in raw:
        raise DataFormatError(f"schedule resource is missing '{key}'")
    value = raw[key]
    if not is_int64(value):
        raise DataFormatError(f"schedule field '{key}' must be a 64-bit integer, got {value!r}")
    return value


def parse_schedule(raw: Any) -> ScheduleDescriptor:
    """Validate a decoded schedule resource and build its descriptor."""
    if not isinstance(raw, Mapping):
        raise DataFormatError(f"schedule resource must be a mapping, got {type(raw).__name__}")
    start_ts = _require_int(raw, "start_ts")
    interval = _require_int(raw, "delta")
    offsets = raw.get("ts_offsets")
    if not isinstance(offsets, list):
        raise DataFormatError("schedule field 'ts_offsets' must be a list")
    for i, off in enumerate(offsets):
        if not is_int64(off):
            raise DataFormatError(f"ts_offsets[{i}] must be a 64-bit integer, got {off!r}")
    diffs = raw.get("block_diffs")
    if diffs is not None and (not isinstance(diffs, list) or len(diffs) != len(offsets)):
        raise DataFormatError(
            f"block_diffs length does not match ts_offsets ({len(offsets)} rows)"
        )
    if offsets:
        # timestamps are stored as int64; the extremes must fit before numpy sees them
        last = start_ts + (len(offsets) - 1) * interval
        lo = min(start_ts, last) + min(offsets)
        hi = max(start_ts, last) + max(offsets)
        span = (len(offsets) - 1) * interval
        if not (is_int64(span) and is_int64(last) and INT64_MIN <= lo and hi <= INT64_MAX):
            raise DataFormatError("schedule timestamps overflow 64-bit integers")
    return ScheduleDescriptor(start_ts=start_ts, interval=interval, offsets=tuple(offsets))


def build_time_axis(descriptor) -> TimeAxis:
    """Expand a schedule descriptor (or a raw schedule mapping) into explicit timestamps."""
    if not isinstance(descriptor, ScheduleDescriptor):
        descriptor = parse_schedule(descriptor)
    n = len(descriptor)
    try:
        steps = np.arange(n, dtype=np.int64) * np.int64(descriptor.interval)
        offsets = np.asarray(descriptor.offsets, dtype=np.int64).reshape(n)
        start = np.int64(descriptor.start_ts)
    except (OverflowError, TypeError, ValueError) as e:
        raise DataFormatError(f"schedule values do not fit 64-bit timestamps: {e}")
    return TimeAxis(timestamps=start + steps + offsets)
