"""Normalizer Sicredi: respostas da Cobrança Boleto v1 -> Boleto."""

from .boleto import SicrediBoletoNormalizer

__all__ = ["SicrediBoletoNormalizer"]
