"""Builders de payload para a API Cobrança Bancária v2 do Sicoob."""

from .boleto import SicoobBoletoPayloadBuilder

__all__ = ["SicoobBoletoPayloadBuilder"]
