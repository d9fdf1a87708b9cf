#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Chart rendering for ratio traces.

Draws one line per RatioTrace of a ChartView against UTC time and writes a PNG.
Non-finite points (zero base prices) are left as gaps by matplotlib.
"""
from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Optional
import logging

import matplotlib
matplotlib.use("Agg")  # non-interactive backend
import matplotlib.pyplot as plt
import matplotlib.dates as mdates
import numpy as np

from ..shared.config import OutputConfig
from ..shared.models import ChartView

log = logging.getLogger(__name__)


def _slug(text: str) -> str:
    return "".join(c if c.isalnum() else "-" for c in text.lower()).strip("-") or "chart"


def chart_filename(view: ChartView, now: Optional[datetime] = None) -> str:
    names = "_".join(_slug(t.name or "") for t in view.traces) or "empty"
    stamp = (now or datetime.now(timezone.utc)).strftime("%Y-%m-%dT%H-%M-%SZ")
    return f"{names}_in_{_slug(view.base)}_{stamp}.png"


def render_chart(view: ChartView, output: OutputConfig, filename: Optional[str] = None) -> str:
    """Render a ChartView to a PNG and return its path."""
    fig, ax = plt.subplots(figsize=(output.chart_width, output.chart_height))
    try:
        for trace in view.traces:
            if len(trace) == 0:
                log.info(f"Trace {trace.name} is empty; nothing to draw")
                continue
            # inf/NaN from zero base prices become gaps
            y = np.where(np.isfinite(trace.ratios), trace.ratios, np.nan)
            ax.plot(trace.datetimes(), y, linewidth=1.2, label=trace.name)

        ax.set_title(view.title)
        ax.set_xlabel("Time (UTC)")
        ax.set_ylabel(view.yaxis_title)
        if output.log_scale:
            ax.set_yscale("log")
        if output.time_format == "human":
            ax.xaxis.set_major_formatter(mdates.DateFormatter("%d %b %Y"))
        else:
            ax.xaxis.set_major_formatter(mdates.DateFormatter("%Y-%m-%d"))
        fig.autofmt_xdate()
        ax.grid(True, alpha=0.3, which='major')
        if any(len(t) for t in view.traces):
            ax.legend(loc="best", fontsize=9)

        plt.tight_layout()
        out_base = Path(output.dir)
        out_base.mkdir(parents=True, exist_ok=True)
        out_path = out_base / (filename or chart_filename(view))
        fig.savefig(str(out_path), dpi=output.dpi, bbox_inches="tight")
    finally:
        plt.close(fig)

    log.info(f"Chart written to {out_path}")
    return str(out_path)


class ChartRenderer:
    """Render callback for the selection controller; remembers the last file written."""

    def __init__(self, output: OutputConfig) -> None:
        self.output = output
        self.last_path: Optional[str] = None

    def __call__(self, view: ChartView) -> None:
        self.last_path = render_chart(view, self.output)
