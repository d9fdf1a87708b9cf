#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Process-scoped application context.

Built once by the entry point: loads the schedule and catalog (fatal on bad
data), then wires the series store, ratio engine and selection controller.
Components receive what they need by reference; nothing lives in module globals.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional
import logging

from .data_source import DataSource, create_data_source
from .ratio_engine import RatioEngine
from .selection import RenderCallback, SelectionController
from .series_store import SeriesStore
from .time_axis import build_time_axis, parse_schedule
from .token_registry import TokenRegistry, parse_registry
from ..shared.config import PlotterConfig
from ..shared.models import TimeAxis

log = logging.getLogger(__name__)


@dataclass
class AppContext:
    config: PlotterConfig
    source: DataSource
    axis: TimeAxis
    registry: TokenRegistry
    store: SeriesStore
    engine: RatioEngine
    controller: SelectionController

    @property
    def sentinel(self) -> str:
        return self.config.selection.sentinel

    def quote_options(self) -> List[str]:
        return self.registry.quote_options(self.sentinel)

    def base_options(self) -> List[str]:
        return self.registry.base_options(self.sentinel)

    def close(self) -> None:
        self.controller.close()
        closer = getattr(self.source, "close", None)
        if closer is not None:
            closer()


def build_context(
    config: PlotterConfig,
    *,
    source: Optional[DataSource] = None,
    on_render: Optional[RenderCallback] = None,
) -> AppContext:
    """
    Load startup resources and assemble the components.

    Raises:
        DataFormatError: schedule or catalog resource is malformed
        NotFoundError / DataSourceError: a startup resource cannot be read
    """
    source = source or create_data_source(config.data)
    sentinel = config.selection.sentinel

    axis = build_time_axis(parse_schedule(source.fetch_schedule()))
    registry = parse_registry(source.fetch_catalog(), sentinel=sentinel)
    log.info(f"Loaded time axis points={len(axis)} and catalog tokens={len(registry)}")

    store = SeriesStore(registry=registry, source=source, axis_length=len(axis), sentinel=sentinel)
    engine = RatioEngine(axis=axis, store=store)
    controller = SelectionController(engine=engine, on_render=on_render, workers=config.selection.workers)
    return AppContext(
        config=config,
        source=source,
        axis=axis,
        registry=registry,
        store=store,
        engine=engine,
        controller=controller,
    )
