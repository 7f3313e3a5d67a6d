"""Connector Sicoob: API Cobrança Bancária v2 + PIX."""

from .adapter import SicoobAdapter, build_sicoob_headers

__all__ = ["SicoobAdapter", "build_sicoob_headers"]
