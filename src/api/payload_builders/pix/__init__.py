"""Builder de cobrança PIX imediata (padrão BACEN /cob)."""

from .cob import PixChargePayloadBuilder

__all__ = ["PixChargePayloadBuilder"]
