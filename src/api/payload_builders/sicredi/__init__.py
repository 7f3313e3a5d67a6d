"""Builders de payload para a API Cobrança Boleto v1 do Sicredi."""

from .boleto import SicrediBoletoPayloadBuilder

__all__ = ["SicrediBoletoPayloadBuilder"]
