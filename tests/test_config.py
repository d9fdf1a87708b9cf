#!/usr/bin/env python3
"""
Unit tests for YAML configuration loading and CLI overrides
"""
from pathlib import Path

import pytest

from tokenplotter.shared.config import (
    DataConfig,
    PlotterConfig,
    SelectionConfig,
    apply_cli_overrides,
    build_config_from_dict,
    load_config,
)
from tokenplotter.shared.errors import ConfigError


class TestDefaults:
    def test_default_config(self):
        cfg = load_config(None)
        assert cfg.selection.sentinel == "ETH"
        assert cfg.selection.default_base == "DAI"
        assert cfg.selection.default_quotes == ["ETH"]
        assert cfg.data.location is None
        assert cfg.logging_level == "INFO"

    def test_quote_string_becomes_list(self):
        assert SelectionConfig(default_quotes="MKR").default_quotes == ["MKR"]

    def test_data_locations_exclusive(self):
        with pytest.raises(ValueError):
            DataConfig(base_url="https://x.org", directory="/tmp")

    def test_base_url_scheme(self):
        with pytest.raises(ValueError):
            DataConfig(base_url="ftp://x.org")


class TestLoadYaml:
    def test_load_file(self, tmp_path: Path):
        p = tmp_path / "tokenplotter.yaml"
        p.write_text(
            """
data:
  directory: "/srv/data"
  retries: 0
selection:
  default_base: "ETH"
  default_quotes: ["DAI", "MKR"]
output:
  dpi: 72
  time_format: "human"
logging_level: debug
""",
            encoding="utf-8",
        )
        cfg = load_config(str(p))
        assert cfg.data.directory == "/srv/data"
        assert cfg.data.retries == 0
        assert cfg.selection.default_quotes == ["DAI", "MKR"]
        assert cfg.output.dpi == 72
        assert cfg.logging_level == "DEBUG"

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(str(tmp_path / "nope.yaml"))

    def test_invalid_yaml(self, tmp_path: Path):
        p = tmp_path / "bad.yaml"
        p.write_text("data: [unclosed", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(str(p))

    def test_invalid_value(self):
        with pytest.raises(ConfigError, match="DPI"):
            build_config_from_dict({"output": {"dpi": 0}})

    def test_section_must_be_mapping(self):
        with pytest.raises(ConfigError):
            build_config_from_dict({"data": ["x"]})

    def test_unknown_keys_ignored(self):
        cfg = build_config_from_dict({"selection": {"sentinel": "WETH", "colour": "red"}})
        assert cfg.selection.sentinel == "WETH"


class TestOverrides:
    def test_directory_replaces_url(self):
        cfg = PlotterConfig(data=DataConfig(base_url="https://x.org/data"))
        out = apply_cli_overrides(cfg, {"data.directory": "/tmp/data", "output.dir": None})
        assert out.data.directory == "/tmp/data"
        assert out.data.base_url is None
        assert out.output.dir == "output"

    def test_logging_level(self):
        out = apply_cli_overrides(PlotterConfig(), {"logging_level": "WARNING"})
        assert out.logging_level == "WARNING"
