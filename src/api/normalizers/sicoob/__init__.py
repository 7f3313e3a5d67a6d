"""Normalizer Sicoob: respostas da Cobrança Bancária v2 -> Boleto."""

from .boleto import SicoobBoletoNormalizer, unwrap_resultado

__all__ = ["SicoobBoletoNormalizer", "unwrap_resultado"]
