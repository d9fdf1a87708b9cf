#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Error types shared by the data, core and CLI layers.

- DataFormatError: a schedule, catalog or series resource is malformed (fatal at startup)
- NotFoundError: a symbol is not in the catalog, or a resource does not exist
- DataSourceError: transport failure after the configured retries
- ConfigError: invalid YAML configuration
"""


class TokenPlotterError(Exception):
    """Base class for all tokenplotter errors"""
    pass


class DataFormatError(TokenPlotterError):
    pass


class NotFoundError(TokenPlotterError):
    pass


class DataSourceError(TokenPlotterError):
    pass


class ConfigError(TokenPlotterError):
    """Configuration-related errors"""
    pass
