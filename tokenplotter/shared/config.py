#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Configuration System for the token price plotter
Handles YAML configuration loading, validation, and CLI overrides.
"""

import yaml
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Dict, Any
import logging

from .colored_logging import VALID_LEVELS
from .errors import ConfigError

log = logging.getLogger(__name__)

DEFAULT_SENTINEL = "ETH"


@dataclass
class DataConfig:
    """Where the precomputed JSON resources live"""
    base_url: Optional[str] = None
    directory: Optional[str] = None
    schedule_file: str = "blocktimes.json"
    catalog_file: str = "tokens.json"
    timeout_s: int = 10
    retries: int = 2

    def __post_init__(self):
        """Validate data source parameters"""
        if self.base_url and self.directory:
            raise ValueError("data.base_url and data.directory are mutually exclusive")
        if self.base_url and not str(self.base_url).startswith(("http://", "https://")):
            raise ValueError("data.base_url must start with http:// or https://")
        if not self.schedule_file or not self.catalog_file:
            raise ValueError("schedule_file and catalog_file cannot be empty")
        if self.timeout_s <= 0:
            raise ValueError("timeout_s must be positive")
        if self.retries < 0:
            raise ValueError("retries cannot be negative")

    @property
    def location(self) -> Optional[str]:
        return self.base_url or self.directory


@dataclass
class SelectionConfig:
    """Sentinel symbol and the initial dropdown state"""
    sentinel: str = DEFAULT_SENTINEL
    default_base: str = "DAI"
    default_quotes: List[str] = field(default_factory=lambda: [DEFAULT_SENTINEL])
    workers: int = 2

    def __post_init__(self):
        """Validate selection configuration"""
        self.sentinel = (self.sentinel or "").strip()
        if not self.sentinel:
            raise ValueError("sentinel symbol cannot be empty")
        self.default_base = (self.default_base or "").strip()
        if not self.default_base:
            raise ValueError("default_base cannot be empty")
        if isinstance(self.default_quotes, str):
            self.default_quotes = [self.default_quotes]
        self.default_quotes = [q.strip() for q in self.default_quotes if q and q.strip()]
        if self.workers < 1:
            raise ValueError("workers must be >= 1")


@dataclass
class OutputConfig:
    """Output configuration for rendered charts"""
    dir: str = "output"
    time_format: str = "iso"  # "iso" or "human"
    dpi: int = 150
    chart_width: float = 12.0
    chart_height: float = 7.0
    log_scale: bool = False

    def __post_init__(self):
        """Validate output configuration"""
        if self.time_format not in ["iso", "human"]:
            raise ValueError("time_format must be 'iso' or 'human'")
        if self.dpi <= 0:
            raise ValueError("DPI must be positive")
        if self.chart_width <= 0 or self.chart_height <= 0:
            raise ValueError("Chart dimensions must be positive")


@dataclass
class PlotterConfig:
    """Main plotter configuration"""
    data: DataConfig = field(default_factory=DataConfig)
    selection: SelectionConfig = field(default_factory=SelectionConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging_level: str = "INFO"

    def __post_init__(self):
        if self.logging_level.upper() not in VALID_LEVELS:
            raise ValueError(f"logging_level must be one of: {list(VALID_LEVELS)}")
        self.logging_level = self.logging_level.upper()


def _load_raw_config(config_path: str) -> Dict[str, Any]:
    """
    Load raw configuration from YAML file

    Raises:
        ConfigError: If file cannot be loaded or parsed
    """
    config_file = Path(config_path)

    if not config_file.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        with open(config_file, 'r', encoding='utf-8') as f:
            raw_config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}")
    except OSError as e:
        raise ConfigError(f"Failed to read {config_path}: {e}")

    if raw_config is None:
        return {}
    if not isinstance(raw_config, dict):
        raise ConfigError(f"Configuration must be a YAML mapping, got {type(raw_config)}")

    return raw_config


def _section(raw: Dict[str, Any], name: str) -> Dict[str, Any]:
    value = raw.get(name) or {}
    if not isinstance(value, dict):
        raise ConfigError(f"'{name}' section must be a mapping")
    return value


def build_config_from_dict(config_dict: Dict[str, Any]) -> PlotterConfig:
    """
    Build PlotterConfig from a raw dictionary

    Unknown keys inside a section are ignored with a warning.

    Raises:
        ConfigError: If configuration is invalid
    """
    sections = {
        "data": DataConfig,
        "selection": SelectionConfig,
        "output": OutputConfig,
    }
    try:
        built = {}
        for name, cls in sections.items():
            raw = _section(config_dict, name)
            known = set(cls.__dataclass_fields__)
            unknown = sorted(set(raw) - known)
            if unknown:
                log.warning(f"Ignoring unknown keys in '{name}': {unknown}")
            built[name] = cls(**{k: v for k, v in raw.items() if k in known})
        return PlotterConfig(
            logging_level=str(config_dict.get("logging_level", "INFO")),
            **built,
        )
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid configuration: {e}")


def load_config(config_path: Optional[str] = None) -> PlotterConfig:
    """
    Load configuration from YAML, or defaults when no path is given

    Raises:
        ConfigError: If an explicit path is missing or invalid
    """
    if config_path is None:
        return PlotterConfig()
    config = build_config_from_dict(_load_raw_config(config_path))
    log.debug(f"Loaded configuration from {config_path}")
    return config


def apply_cli_overrides(config: PlotterConfig, overrides: Dict[str, Any]) -> PlotterConfig:
    """
    Override configuration values from command line arguments

    Keys are dotted paths such as 'data.directory'; None values are skipped.
    The result is re-validated.
    """
    raw = {
        "data": dict(config.data.__dict__),
        "selection": dict(config.selection.__dict__),
        "output": dict(config.output.__dict__),
        "logging_level": config.logging_level,
    }
    for key, value in overrides.items():
        if value is None:
            continue
        if "." in key:
            section, name = key.split(".", 1)
            raw[section][name] = value
            # a data location given on the command line replaces the other kind
            if key == "data.directory":
                raw["data"]["base_url"] = None
            elif key == "data.base_url":
                raw["data"]["directory"] = None
        else:
            raw[key] = value
    return build_config_from_dict(raw)
