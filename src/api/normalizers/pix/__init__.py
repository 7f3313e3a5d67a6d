"""Normalizer de cobrança PIX (resposta BACEN /cob)."""

from .cob import normalize_pix_charge

__all__ = ["normalize_pix_charge"]
