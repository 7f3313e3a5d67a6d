"""Payload builders por provedor: construção de payloads para APIs bancárias.

Estrutura:
- sicoob/: registro de boleto Sicoob
- sicredi/: registro de boleto Sicredi (normal ou híbrido)
- pix/: cobrança imediata /cob (compartilhado)
"""

__all__: list[str] = []
