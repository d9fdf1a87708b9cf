#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Token catalog loader for symbol -> address mappings.

JSON format expected in the catalog resource (tokens.json):
{
  "DAI": {"address": "0x6B17...1d0F"},
  "MKR": {"address": "0x9f8F...79A2"},
  ...
}

Notes:
- Symbols keep the case and order of the resource; lookups are exact.
- Addresses are stored as given; the per-token resource name is lowercased.
- The sentinel (native asset) symbol is never part of the catalog.
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Tuple

from ..shared.errors import DataFormatError, NotFoundError
from ..shared.models import TokenRecord


class TokenRegistry:
    def __init__(self, records: List[TokenRecord]) -> None:
        self._by_symbol: Dict[str, TokenRecord] = {}
        for rec in records:
            self._by_symbol[rec.symbol] = rec

    def __contains__(self, symbol: str) -> bool:
        return symbol in self._by_symbol

    def __len__(self) -> int:
        return len(self._by_symbol)

    @property
    def symbols(self) -> List[str]:
        return list(self._by_symbol)

    def get(self, symbol: str) -> Optional[TokenRecord]:
        if not symbol:
            return None
        return self._by_symbol.get(symbol)

    def require(self, symbol: str) -> TokenRecord:
        rec = self.get(symbol)
        if rec is None:
            raise NotFoundError(f"Unknown token symbol: {symbol!r}")
        return rec

    def validate_symbols_present(self, symbols: List[str], sentinel: str) -> Tuple[bool, List[str]]:
        missing = [s for s in symbols or [] if s != sentinel and s not in self]
        return (len(missing) == 0, missing)

    def quote_options(self, sentinel: str) -> List[str]:
        """Quote dropdown: catalog symbols, then the native asset."""
        return self.symbols + [sentinel]

    def base_options(self, sentinel: str) -> List[str]:
        """Base dropdown: the native asset first, then catalog symbols."""
        return [sentinel] + self.symbols


def parse_registry(raw: Any, sentinel: Optional[str] = None) -> TokenRegistry:
    """Build a registry from a decoded catalog resource."""
    if not isinstance(raw, Mapping):
        raise DataFormatError(f"token catalog must be a mapping, got {type(raw).__name__}")

    records: List[TokenRecord] = []
    for symbol, info in raw.items():
        if not isinstance(info, Mapping):
            raise DataFormatError(f"catalog entry for {symbol!r} must be a mapping")
        address = info.get("address")
        if not isinstance(address, str) or not address.strip():
            raise DataFormatError(f"catalog entry for {symbol!r} has no address")
        if sentinel is not None and symbol == sentinel:
            raise DataFormatError(f"catalog must not contain the native asset symbol {sentinel!r}")
        records.append(TokenRecord(symbol=str(symbol), address=address.strip()))
    return TokenRegistry(records)
