"""Protocolos e contratos do core da aplicação."""

from .bank_provider import BankProviderProtocol
from .normalizer import BoletoNormalizerProtocol
from .payload_builder import BoletoPayloadBuilderProtocol, PixPayloadBuilderProtocol

__all__ = [
    "BankProviderProtocol",
    "BoletoNormalizerProtocol",
    "BoletoPayloadBuilderProtocol",
    "PixPayloadBuilderProtocol",
]
