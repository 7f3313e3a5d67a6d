"""Contrato único de capacidades de um provedor bancário.

O código chamador depende apenas deste protocolo; trocar Sicoob por
Sicredi é uma decisão de configuração (app.bootstrap.providers).
Todas as operações são síncronas e aceitam um RequestContext opcional
(deadline/cancelamento). Falhas são levantadas como BankProviderError.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import date

    from app.domain.boleto import (
        Boleto,
        BoletoListFilter,
        BoletoRequest,
        ChargePolicy,
        DiscountTier,
    )
    from app.domain.instructions import InstructionResult
    from app.domain.pix import PixCharge, PixChargeRequest
    from app.infra.http.context import RequestContext


@runtime_checkable
class BankProviderProtocol(Protocol):
    """Capacidades expostas por todo adaptador bancário."""

    @property
    def provider_name(self) -> str: ...

    def authenticate(self, ctx: RequestContext | None = None) -> None: ...

    def ensure_valid_token(self, ctx: RequestContext | None = None) -> str: ...

    def health_check(self, ctx: RequestContext | None = None) -> None:
        """Obtém (ou confirma) token válido. Não faz chamada de negócio."""
        ...

    def create_boleto(
        self, request: BoletoRequest, ctx: RequestContext | None = None
    ) -> Boleto: ...

    def query_boleto(self, nosso_numero: str, ctx: RequestContext | None = None) -> Boleto: ...

    def list_boletos(
        self, filters: BoletoListFilter, ctx: RequestContext | None = None
    ) -> list[Boleto]:
        """Em aberto primeiro, depois vencimento crescente."""
        ...

    def write_off_boleto(
        self, nosso_numero: str, ctx: RequestContext | None = None
    ) -> InstructionResult: ...

    def change_due_date(
        self, nosso_numero: str, due_date: date, ctx: RequestContext | None = None
    ) -> InstructionResult: ...

    def change_discount(
        self,
        nosso_numero: str,
        discounts: Sequence[DiscountTier],
        ctx: RequestContext | None = None,
    ) -> list[InstructionResult]:
        """Uma ou duas instruções, conforme o provedor aceite datas no mesmo comando.

        Falha na segunda instrução levanta PartialInstructionError com o
        resultado da primeira, já aplicada.
        """
        ...

    def change_interest(
        self, nosso_numero: str, interest: ChargePolicy, ctx: RequestContext | None = None
    ) -> InstructionResult: ...

    def change_their_number(
        self, nosso_numero: str, seu_numero: str, ctx: RequestContext | None = None
    ) -> InstructionResult: ...

    def print_boleto_pdf(
        self,
        nosso_numero: str,
        ctx: RequestContext | None = None,
        *,
        linha_digitavel: str | None = None,
    ) -> bytes: ...

    def create_pix_charge(
        self, request: PixChargeRequest, ctx: RequestContext | None = None
    ) -> PixCharge: ...

    def query_pix_charge(self, txid: str, ctx: RequestContext | None = None) -> PixCharge: ...

    def register_pix_webhook(
        self, key: str, webhook_url: str, ctx: RequestContext | None = None
    ) -> None: ...
