#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Token price plotter runner.
- Loads configuration (YAML + CLI overrides)
- Loads the time axis and token catalog from the data source
- Computes ratio traces for the selected base/quotes and renders PNG charts

Usage examples:
  python -m tokenplotter.main --help
  python -m tokenplotter.main --data-dir ./data --base DAI --quote MKR --quote ETH
  python -m tokenplotter.main --data-url https://example.org/tokenplotter_data --list-symbols
  python -m tokenplotter.main --config config/tokenplotter.yaml --interactive
"""
from __future__ import annotations

from concurrent.futures import Future
from dataclasses import asdict
from pathlib import Path
from typing import List, Optional, TextIO
import argparse
import json
import logging
import sys

from .core.context import AppContext, build_context
from .core.plotter import ChartRenderer
from .shared.colored_logging import setup_colored_logging
from .shared.config import PlotterConfig, apply_cli_overrides, load_config
from .shared.errors import TokenPlotterError

log = logging.getLogger(__name__)

INTERACTIVE_HELP = """Commands:
  base SYMBOL            change the base token
  quote SYMBOL [...]     replace the selected quote tokens
  show                   print the current selection
  symbols                list available symbols
  quit                   exit"""


def _default_config_path() -> Optional[str]:
    base = Path(__file__).resolve().parents[1]
    candidate = base / 'config' / 'tokenplotter.yaml'
    return str(candidate) if candidate.exists() else None


def _summarize(ctx: AppContext) -> List[str]:
    lines = []
    for trace in ctx.controller.traces():
        if len(trace) == 0:
            lines.append(f"{trace.name}: no points")
            continue
        first, last = trace.points()[0], trace.points()[-1]
        lines.append(
            f"{trace.name}: points={len(trace)} first={first[1]:.6g} last={last[1]:.6g} (in {ctx.controller.base})"
        )
    return lines


def _report_failure(fut: Future) -> None:
    err = fut.exception()
    if err is not None:
        log.error(f"Selection failed: {err}")


def run_once(ctx: AppContext, base: str, quotes: List[str], timeout: Optional[float] = None) -> Optional[str]:
    """Render one selection and return the chart path."""
    view = ctx.controller.select(base, quotes).result(timeout=timeout)
    for line in _summarize(ctx):
        print(line)
    renderer = ctx.controller.on_render
    return getattr(renderer, "last_path", None) if view is not None else None


def run_interactive(ctx: AppContext, stdin: TextIO = sys.stdin) -> None:
    ctrl = ctx.controller
    print(INTERACTIVE_HELP)
    for raw in stdin:
        parts = raw.split()
        if not parts:
            continue
        cmd, args = parts[0].lower(), parts[1:]
        if cmd in ("quit", "exit"):
            break
        if cmd == "base" and len(args) == 1:
            if args[0] not in ctx.base_options():
                print(f"Unknown base symbol: {args[0]}")
                continue
            ctrl.set_base(args[0]).add_done_callback(_report_failure)
        elif cmd == "quote" and args:
            unknown = [a for a in args if a not in ctx.quote_options()]
            if unknown:
                print(f"Unknown quote symbols: {', '.join(unknown)}")
                continue
            ctrl.set_quotes(args).add_done_callback(_report_failure)
        elif cmd == "show":
            print(f"base={ctrl.base} quotes={', '.join(ctrl.quotes) or '-'}")
            for line in _summarize(ctx):
                print(line)
        elif cmd == "symbols":
            print(f"base:  {' '.join(ctx.base_options())}")
            print(f"quote: {' '.join(ctx.quote_options())}")
        else:
            print(INTERACTIVE_HELP)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description='Token price ratio plotter')
    parser.add_argument('--config', type=str, default=None, help='Path to tokenplotter.yaml')
    location = parser.add_mutually_exclusive_group()
    location.add_argument('--data-dir', type=str, default=None, help='Directory holding blocktimes.json, tokens.json and series files')
    location.add_argument('--data-url', type=str, default=None, help='Base URL serving the same files')
    parser.add_argument('--base', type=str, default=None, help='Base token symbol (default from config)')
    parser.add_argument('--quote', action='append', default=None, help='Quote token symbol; repeat for several')
    parser.add_argument('--out-dir', type=str, default=None, help='Directory for rendered charts')
    parser.add_argument('--list-symbols', action='store_true', help='Print base and quote options and exit')
    parser.add_argument('--interactive', action='store_true', help='Read base/quote commands from stdin')
    parser.add_argument('--print-config', action='store_true', help='Print the effective configuration as JSON and exit')
    parser.add_argument('--log-level', type=str, default=None, choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'], help='Logging level')
    args = parser.parse_args(argv)

    setup_colored_logging(level=args.log_level or 'INFO')
    try:
        config: PlotterConfig = load_config(args.config or _default_config_path())
        config = apply_cli_overrides(config, {
            'data.directory': args.data_dir,
            'data.base_url': args.data_url,
            'output.dir': args.out_dir,
            'logging_level': args.log_level,
        })
    except TokenPlotterError as e:
        log.error(f"Failed to load configuration: {e}")
        return 1
    setup_colored_logging(level=config.logging_level)

    if args.print_config:
        print(json.dumps(asdict(config), indent=2, sort_keys=True))
        return 0

    renderer = ChartRenderer(config.output)
    try:
        ctx = build_context(config, on_render=renderer)
    except TokenPlotterError as e:
        log.error(f"Failed to initialize: {e}")
        return 1

    try:
        if args.list_symbols:
            print(f"base:  {' '.join(ctx.base_options())}")
            print(f"quote: {' '.join(ctx.quote_options())}")
            return 0

        base = args.base or config.selection.default_base
        quotes = args.quote or config.selection.default_quotes
        ok, missing = ctx.registry.validate_symbols_present([base] + list(quotes), ctx.sentinel)
        if not ok:
            log.error(f"Unknown symbols: {', '.join(missing)}. Use --list-symbols to see the catalog.")
            return 1

        if args.interactive:
            ctx.controller.select(base, quotes).add_done_callback(_report_failure)
            run_interactive(ctx)
            return 0

        path = run_once(ctx, base, quotes)
        if path:
            print(f"Chart: {path}")
        return 0
    except TokenPlotterError as e:
        log.error(f"Failed to compute traces: {e}")
        return 1
    finally:
        ctx.close()


if __name__ == '__main__':
    sys.exit(main())
