"""Connector Sicredi: API Cobrança Boleto v1 + PIX."""

from .adapter import SicrediAdapter, build_sicredi_headers

__all__ = ["SicrediAdapter", "build_sicredi_headers"]
