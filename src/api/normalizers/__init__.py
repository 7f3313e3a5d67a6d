"""Normalizers por provedor: respostas bancárias -> modelos de domínio.

Estrutura:
- bank_shared/: conversões tolerantes de campos (datas, valores, textos)
- sicoob/, sicredi/: boleto
- pix/: cobrança /cob
"""

__all__: list[str] = []
