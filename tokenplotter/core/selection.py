#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Selection controller: base/quote selection state and memoized ratio traces.

Every selection event returns a Future that resolves to the ChartView for that
selection once the required series are loaded. Events are numbered; when a job
finishes after a newer event was made, its result is discarded and its Future
resolves to None (superseded). Only fresh views reach the render callback.

The memo maps quote symbol -> RatioTrace under the current base and is dropped
whenever the base changes.
"""
from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Dict, Iterable, List, Optional
import logging
import threading

from .ratio_engine import RatioEngine
from ..shared.models import ChartView, RatioTrace

RenderCallback = Callable[[ChartView], None]


def _resolved(value) -> Future:
    fut: Future = Future()
    fut.set_result(value)
    return fut


def _unique(symbols: Iterable[str]) -> List[str]:
    seen = set()
    out = []
    for s in symbols:
        if s and s not in seen:
            seen.add(s)
            out.append(s)
    return out


class SelectionController:
    def __init__(
        self,
        *,
        engine: RatioEngine,
        on_render: Optional[RenderCallback] = None,
        workers: int = 2,
        executor: Optional[ThreadPoolExecutor] = None,
    ) -> None:
        self.engine = engine
        self.on_render = on_render
        self.log = logging.getLogger(__name__)
        self._base: Optional[str] = None
        self._quotes: List[str] = []
        self._memo: Dict[str, RatioTrace] = {}
        self._generation = 0
        self._lock = threading.Lock()
        self._render_lock = threading.Lock()
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=workers, thread_name_prefix="selection")

    @property
    def base(self) -> Optional[str]:
        return self._base

    @property
    def quotes(self) -> List[str]:
        with self._lock:
            return list(self._quotes)

    def memoized(self, quote: str) -> Optional[RatioTrace]:
        with self._lock:
            return self._memo.get(quote)

    def set_base(self, symbol: str) -> "Future[Optional[ChartView]]":
        with self._lock:
            if symbol == self._base:
                return _resolved(self._view_locked())
            self.log.info(f"Base changed {self._base} -> {symbol}; clearing {len(self._memo)} memoized traces")
            self._base = symbol
            self._memo = {}
            return self._schedule_locked()

    def set_quotes(self, symbols: Iterable[str]) -> "Future[Optional[ChartView]]":
        with self._lock:
            self._quotes = _unique(symbols)
            return self._schedule_locked()

    def select(self, base: str, quotes: Iterable[str]) -> "Future[Optional[ChartView]]":
        """Set base and quotes as a single selection event."""
        with self._lock:
            if base != self._base:
                self._base = base
                self._memo = {}
            self._quotes = _unique(quotes)
            return self._schedule_locked()

    def traces(self) -> List[RatioTrace]:
        """Memoized traces for the current quotes, in selection order."""
        with self._lock:
            return [self._memo[q] for q in self._quotes if q in self._memo]

    def view(self) -> Optional[ChartView]:
        with self._lock:
            return self._view_locked()

    def _view_locked(self) -> Optional[ChartView]:
        if self._base is None:
            return None
        return ChartView.build(self._base, [self._memo[q] for q in self._quotes if q in self._memo])

    def _schedule_locked(self) -> "Future[Optional[ChartView]]":
        self._generation += 1
        if self._base is None:
            return _resolved(None)
        quotes = list(self._quotes)
        missing = [q for q in quotes if q not in self._memo]
        return self._executor.submit(self._run, self._generation, self._base, quotes, missing)

    def _run(self, generation: int, base: str, quotes: List[str], missing: List[str]) -> Optional[ChartView]:
        try:
            computed = {q: self.engine.compute_ratio(q, base) for q in missing}
        except Exception:
            with self._lock:
                stale = generation != self._generation
            if not stale:
                raise
            self.log.debug(f"Discarding failed stale selection #{generation}", exc_info=True)
            return None
        with self._lock:
            if generation != self._generation:
                self.log.debug(f"Discarding stale selection #{generation} (current #{self._generation})")
                return None
            for q, trace in computed.items():
                self._memo.setdefault(q, trace)
            view = ChartView.build(base, [self._memo[q] for q in quotes])
        if missing:
            self.log.info(f"Selection #{generation}: computed {len(missing)} of {len(quotes)} traces in {base}")
        if self.on_render is not None:
            with self._render_lock:
                with self._lock:
                    fresh = generation == self._generation
                if not fresh:
                    return None
                self.on_render(view)
        return view

    def close(self) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=True)

    def __enter__(self) -> "SelectionController":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
