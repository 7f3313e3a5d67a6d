"""Enumerações fechadas do domínio de cobrança.

Valores fora destas enumerações são rejeitados antes de qualquer chamada
de rede. O valor de cada membro é o nome canônico (padrão Sicredi); cada
provedor traduz para o próprio código no payload builder.
"""

from __future__ import annotations

from enum import Enum


class ProviderName(str, Enum):
    """Provedores bancários suportados."""

    SICOOB = "SICOOB"
    SICREDI = "SICREDI"


class PersonType(str, Enum):
    """Tipo de pessoa do pagador/beneficiário."""

    FISICA = "PESSOA_FISICA"
    JURIDICA = "PESSOA_JURIDICA"


class DocumentSpecies(str, Enum):
    """Espécie do documento (título) que originou o boleto."""

    DUPLICATA_MERCANTIL = "DUPLICATA_MERCANTIL_INDICACAO"
    DUPLICATA_RURAL = "DUPLICATA_RURAL"
    NOTA_PROMISSORIA = "NOTA_PROMISSORIA"
    NOTA_PROMISSORIA_RURAL = "NOTA_PROMISSORIA_RURAL"
    NOTA_SEGUROS = "NOTA_SEGUROS"
    RECIBO = "RECIBO"
    LETRA_CAMBIO = "LETRA_CAMBIO"
    NOTA_DEBITO = "NOTA_DEBITO"
    DUPLICATA_SERVICO = "DUPLICATA_SERVICO_INDICACAO"
    OUTROS = "OUTROS"
    BOLETO_PROPOSTA = "BOLETO_PROPOSTA"
    CARTAO_CREDITO = "CARTAO_CREDITO"


class DiscountType(str, Enum):
    """Forma de cálculo do desconto."""

    FIXED_AMOUNT = "VALOR"
    PERCENTAGE = "PERCENTUAL"


class ChargeType(str, Enum):
    """Forma de cálculo de juros/multa."""

    NONE = "ISENTO"
    FIXED_AMOUNT = "VALOR"
    PERCENTAGE = "PERCENTUAL"


class InstructionName(str, Enum):
    """Comandos de instrução sobre um boleto já registrado."""

    WRITE_OFF = "write_off"
    CHANGE_DUE_DATE = "change_due_date"
    CHANGE_DISCOUNT = "change_discount"
    CHANGE_DISCOUNT_DATES = "change_discount_dates"
    CHANGE_INTEREST = "change_interest"
    CHANGE_THEIR_NUMBER = "change_their_number"
