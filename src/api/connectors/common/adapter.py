"""Fluxo de operações compartilhado pelos adaptadores bancários.

O BankAdapter concentra o que é igual entre provedores: token, emissão,
comandos de instrução guiados pelo catálogo YAML, PIX e health check.
Cada subclasse fornece grant, headers, endpoints de consulta/listagem/PDF
e o mapeamento de payload.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar

from pydantic import ValidationError

from api.connectors.common.pix_endpoints import (
    CREATE_PIX_CHARGE,
    CREATE_PIX_CHARGE_WITH_TXID,
    QUERY_PIX_CHARGE,
    REGISTER_PIX_WEBHOOK,
)
from api.normalizers.pix import normalize_pix_charge
from api.payload_builders.pix import PixChargePayloadBuilder
from app.domain.boleto import MAX_DISCOUNT_TIERS, Boleto
from app.domain.enums import InstructionName
from app.domain.instructions import InstructionCommand, InstructionResult
from app.domain.money import quantize_amount, quantize_rate
from app.domain.ordering import sort_boletos
from app.infra.http.errors import (
    BankProviderError,
    PartialInstructionError,
    RequestValidationError,
    SerializationError,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import date

    from api.connectors.common.catalog import InstructionSpec, ProviderCatalog
    from app.domain.boleto import BoletoListFilter, BoletoRequest, ChargePolicy, DiscountTier
    from app.domain.pix import PixCharge, PixChargeRequest
    from app.infra.auth.token_manager import TokenManager
    from app.infra.http.context import RequestContext
    from app.infra.http.endpoint import Endpoint
    from app.infra.http.executor import ExecutorResponse, RequestExecutor
    from app.protocols.normalizer import BoletoNormalizerProtocol
    from app.protocols.payload_builder import BoletoPayloadBuilderProtocol

logger = logging.getLogger(__name__)

# Campo canônico -> tipo de código no catálogo
_CODE_KINDS = {"discount_type": "discount_type", "interest_type": "interest_type"}
_AMOUNT_FIELDS = frozenset({"discount_amount_1", "discount_amount_2", "discount_amount_3"})
_RATE_FIELDS = frozenset({"interest_value"})


class BankAdapter(ABC):
    """Base dos adaptadores Sicoob e Sicredi.

    Implementa BankProviderProtocol; subclasses definem CREATE_BOLETO e os
    métodos abstratos de consulta, listagem e PDF.
    """

    CREATE_BOLETO: ClassVar[Endpoint]

    def __init__(
        self,
        *,
        provider_name: str,
        catalog: ProviderCatalog,
        tokens: TokenManager,
        executor: RequestExecutor,
        boleto_builder: BoletoPayloadBuilderProtocol,
        boleto_normalizer: BoletoNormalizerProtocol,
    ) -> None:
        self._provider_name = provider_name
        self._catalog = catalog
        self._tokens = tokens
        self._executor = executor
        self._boleto_builder = boleto_builder
        self._boleto_normalizer = boleto_normalizer
        self._pix_builder = PixChargePayloadBuilder()

    @property
    def provider_name(self) -> str:
        return self._provider_name

    @property
    def catalog(self) -> ProviderCatalog:
        return self._catalog

    @property
    def tokens(self) -> TokenManager:
        return self._tokens

    # Token

    def authenticate(self, ctx: RequestContext | None = None) -> None:
        self._tokens.authenticate(ctx)

    def ensure_valid_token(self, ctx: RequestContext | None = None) -> str:
        return self._tokens.ensure_valid_token(ctx)

    def health_check(self, ctx: RequestContext | None = None) -> None:
        """Confirma que há (ou é possível obter) token válido."""
        self._tokens.ensure_valid_token(ctx)
        logger.info(
            "provider_health_ok",
            extra={"provider": self._provider_name, "token_state": self._tokens.state.value},
        )

    # Boletos

    def create_boleto(self, request: BoletoRequest, ctx: RequestContext | None = None) -> Boleto:
        body = self._boleto_builder.build(request)
        response = self._executor.execute(self.CREATE_BOLETO, body=body, ctx=ctx)
        boleto = self._normalize_boleto(self._created_payload(response), self.CREATE_BOLETO)
        boleto = _complete_from_request(boleto, request)
        logger.info(
            "boleto_created",
            extra={
                "provider": self._provider_name,
                "nosso_numero": boleto.nosso_numero,
                "hybrid_pix": request.hybrid_pix,
            },
        )
        return boleto

    def query_boleto(self, nosso_numero: str, ctx: RequestContext | None = None) -> Boleto:
        return self._fetch_boleto(self._require_nosso_numero(nosso_numero), ctx)

    def list_boletos(
        self, filters: BoletoListFilter, ctx: RequestContext | None = None
    ) -> list[Boleto]:
        boletos = self._fetch_boletos(filters, ctx)
        logger.info(
            "boletos_listed",
            extra={"provider": self._provider_name, "count": len(boletos)},
        )
        return sort_boletos(boletos)

    def print_boleto_pdf(
        self,
        nosso_numero: str,
        ctx: RequestContext | None = None,
        *,
        linha_digitavel: str | None = None,
    ) -> bytes:
        pdf = self._fetch_pdf(self._require_nosso_numero(nosso_numero), linha_digitavel, ctx)
        if not pdf:
            raise SerializationError("PDF vazio", provider_name=self._provider_name)
        return pdf

    # Instruções

    def write_off_boleto(
        self, nosso_numero: str, ctx: RequestContext | None = None
    ) -> InstructionResult:
        return self._instruction(InstructionName.WRITE_OFF, nosso_numero, {}, ctx)

    def change_due_date(
        self, nosso_numero: str, due_date: date, ctx: RequestContext | None = None
    ) -> InstructionResult:
        return self._instruction(
            InstructionName.CHANGE_DUE_DATE, nosso_numero, {"due_date": due_date}, ctx
        )

    def change_discount(
        self,
        nosso_numero: str,
        discounts: Sequence[DiscountTier],
        ctx: RequestContext | None = None,
    ) -> list[InstructionResult]:
        """Altera faixas de desconto (até 3, mesma forma de cálculo).

        Campos que o comando de desconto do provedor não aceita (datas, no
        Sicredi) seguem numa segunda instrução change_discount_dates.

        Raises:
            PartialInstructionError: A segunda instrução falhou depois de os
                valores já terem sido aplicados (resultado em `applied`)
        """
        tiers = list(discounts)
        if not tiers or len(tiers) > MAX_DISCOUNT_TIERS:
            raise RequestValidationError(
                f"Informe de 1 a {MAX_DISCOUNT_TIERS} faixas de desconto",
                provider_name=self._provider_name,
            )
        if len({tier.discount_type for tier in tiers}) > 1:
            raise RequestValidationError(
                "Todas as faixas de desconto devem usar o mesmo tipo",
                provider_name=self._provider_name,
            )

        body: dict[str, Any] = {"discount_type": tiers[0].discount_type}
        for position, tier in enumerate(tiers, start=1):
            body[f"discount_amount_{position}"] = tier.amount
            body[f"discount_date_{position}"] = tier.limit_date

        accepted = self._catalog.instruction(InstructionName.CHANGE_DISCOUNT).accepted_fields
        main = {key: value for key, value in body.items() if key in accepted}
        leftover = {key: value for key, value in body.items() if key not in accepted}

        commands = [self._command(InstructionName.CHANGE_DISCOUNT, nosso_numero, main)]
        if leftover:
            commands.append(
                self._command(InstructionName.CHANGE_DISCOUNT_DATES, nosso_numero, leftover)
            )
        # Valida todas as instruções antes de enviar a primeira
        for command in commands:
            self._instruction_wire_body(self._catalog.instruction(command.name), command)

        results = [self.execute_instruction(commands[0], ctx)]
        for command in commands[1:]:
            try:
                results.append(self.execute_instruction(command, ctx))
            except BankProviderError as exc:
                logger.warning(
                    "instruction_partially_applied",
                    extra={
                        "provider": self._provider_name,
                        "nosso_numero": nosso_numero,
                        "applied": [result.command.value for result in results],
                        "failed_command": command.name.value,
                    },
                )
                raise PartialInstructionError(
                    exc,
                    failed_command=command.name.value,
                    applied=results,
                ) from exc
        return results

    def change_interest(
        self, nosso_numero: str, interest: ChargePolicy, ctx: RequestContext | None = None
    ) -> InstructionResult:
        body: dict[str, Any] = {"interest_type": interest.charge_type}
        if interest.value is not None:
            body["interest_value"] = interest.value
        if interest.start_date is not None:
            body["interest_date"] = interest.start_date
        return self._instruction(InstructionName.CHANGE_INTEREST, nosso_numero, body, ctx)

    def change_their_number(
        self, nosso_numero: str, seu_numero: str, ctx: RequestContext | None = None
    ) -> InstructionResult:
        return self._instruction(
            InstructionName.CHANGE_THEIR_NUMBER, nosso_numero, {"seu_numero": seu_numero}, ctx
        )

    def execute_instruction(
        self, command: InstructionCommand, ctx: RequestContext | None = None
    ) -> InstructionResult:
        """Executa qualquer comando do catálogo (PATCH /boletos/{nn}/{comando})."""
        spec = self._catalog.instruction(command.name)
        nosso_numero = self._require_nosso_numero(command.nosso_numero)
        body = {**self._instruction_base_body(), **self._instruction_wire_body(spec, command)}
        response = self._executor.execute(
            spec.endpoint(self._catalog.path_prefix),
            path_params={"nosso_numero": nosso_numero},
            body=body,
            ctx=ctx,
        )
        data = response.data if isinstance(response.data, dict) else {}
        result = InstructionResult(
            command=command.name,
            nosso_numero=nosso_numero,
            http_status=response.status_code,
            transaction_id=_optional_text(data.get("transactionId")),
            status=_optional_text(data.get("statusComando")),
            registered_at=_optional_text(data.get("dataHoraRegistro")),
        )
        logger.info(
            "instruction_executed",
            extra={
                "provider": self._provider_name,
                "command": command.name.value,
                "nosso_numero": nosso_numero,
                "status_code": response.status_code,
            },
        )
        return result

    # PIX

    def create_pix_charge(
        self, request: PixChargeRequest, ctx: RequestContext | None = None
    ) -> PixCharge:
        body = self._pix_builder.build(request)
        if request.txid:
            response = self._executor.execute(
                CREATE_PIX_CHARGE_WITH_TXID, path_params={"txid": request.txid}, body=body, ctx=ctx
            )
        else:
            response = self._executor.execute(CREATE_PIX_CHARGE, body=body, ctx=ctx)
        charge = self._normalize_pix(response, CREATE_PIX_CHARGE)
        logger.info(
            "pix_charge_created",
            extra={"provider": self._provider_name, "txid": charge.txid},
        )
        return charge

    def query_pix_charge(self, txid: str, ctx: RequestContext | None = None) -> PixCharge:
        txid = (txid or "").strip()
        if not txid:
            raise RequestValidationError("txid obrigatório", provider_name=self._provider_name)
        response = self._executor.execute(QUERY_PIX_CHARGE, path_params={"txid": txid}, ctx=ctx)
        return self._normalize_pix(response, QUERY_PIX_CHARGE)

    def register_pix_webhook(
        self, key: str, webhook_url: str, ctx: RequestContext | None = None
    ) -> None:
        key = (key or "").strip()
        if not key:
            raise RequestValidationError("chave PIX obrigatória", provider_name=self._provider_name)
        if not webhook_url.startswith("https://"):
            raise RequestValidationError(
                "webhookUrl deve usar https", provider_name=self._provider_name
            )
        self._executor.execute(
            REGISTER_PIX_WEBHOOK,
            path_params={"chave": key},
            body={"webhookUrl": webhook_url},
            ctx=ctx,
        )
        logger.info("pix_webhook_registered", extra={"provider": self._provider_name})

    def close(self) -> None:
        self._executor.close()

    # Hooks

    @abstractmethod
    def _fetch_boleto(self, nosso_numero: str, ctx: RequestContext | None) -> Boleto: ...

    @abstractmethod
    def _fetch_boletos(
        self, filters: BoletoListFilter, ctx: RequestContext | None
    ) -> list[Boleto]: ...

    @abstractmethod
    def _fetch_pdf(
        self, nosso_numero: str, linha_digitavel: str | None, ctx: RequestContext | None
    ) -> bytes: ...

    def _instruction_base_body(self) -> dict[str, Any]:
        """Campos fixos enviados em todo comando de instrução."""
        return {}

    def _created_payload(self, response: ExecutorResponse) -> Any:
        return response.data

    # Helpers

    def _instruction(
        self,
        name: InstructionName,
        nosso_numero: str,
        body: dict[str, Any],
        ctx: RequestContext | None,
    ) -> InstructionResult:
        return self.execute_instruction(self._command(name, nosso_numero, body), ctx)

    def _command(
        self, name: InstructionName, nosso_numero: str, body: dict[str, Any]
    ) -> InstructionCommand:
        try:
            return InstructionCommand(
                name=name, nosso_numero=self._require_nosso_numero(nosso_numero), body=body
            )
        except ValidationError as exc:
            raise RequestValidationError(
                f"Instrução {name.value} inválida: {exc.errors()[0]['msg']}",
                provider_name=self._provider_name,
            ) from exc

    def _instruction_wire_body(
        self, spec: InstructionSpec, command: InstructionCommand
    ) -> dict[str, Any]:
        unsupported = sorted(set(command.body) - spec.accepted_fields)
        if unsupported:
            raise RequestValidationError(
                f"Campos não suportados por {self._provider_name} em "
                f"{command.name.value}: {', '.join(unsupported)}",
                provider_name=self._provider_name,
            )
        missing = sorted(spec.required - set(command.body))
        if missing:
            raise RequestValidationError(
                f"{self._provider_name} exige {', '.join(missing)} em {command.name.value}",
                provider_name=self._provider_name,
            )
        wire: dict[str, Any] = {}
        for field_name, value in command.body.items():
            wire_name = spec.fields.get(field_name)
            if wire_name is None:
                continue
            wire[wire_name] = self._wire_value(field_name, value)
        return wire

    def _wire_value(self, field_name: str, value: Any) -> Any:
        if isinstance(value, Enum):
            return self._catalog.code(_CODE_KINDS[field_name], value)
        if field_name in _AMOUNT_FIELDS:
            return quantize_amount(value)
        if field_name in _RATE_FIELDS:
            return quantize_rate(value)
        return value

    def _require_nosso_numero(self, nosso_numero: str) -> str:
        value = (nosso_numero or "").strip()
        if not value.isdigit() or len(value) > 20:
            raise RequestValidationError(
                f"nosso_numero inválido: {nosso_numero!r}", provider_name=self._provider_name
            )
        return value

    def _normalize_boleto(self, payload: Any, endpoint: Endpoint) -> Boleto:
        if not isinstance(payload, dict):
            raise SerializationError(
                f"resposta de {endpoint.name} não é objeto JSON",
                provider_name=self._provider_name,
            )
        try:
            return self._boleto_normalizer.normalize(payload)
        except (ValueError, TypeError) as exc:
            raise SerializationError(
                f"resposta de {endpoint.name} inválida: {exc}",
                provider_name=self._provider_name,
            ) from exc

    def _normalize_pix(self, response: ExecutorResponse, endpoint: Endpoint) -> PixCharge:
        if not isinstance(response.data, dict):
            raise SerializationError(
                f"resposta de {endpoint.name} não é objeto JSON",
                provider_name=self._provider_name,
            )
        try:
            return normalize_pix_charge(response.data)
        except (ValueError, TypeError) as exc:
            raise SerializationError(
                f"resposta de {endpoint.name} inválida: {exc}",
                provider_name=self._provider_name,
            ) from exc


def _optional_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _complete_from_request(boleto: Boleto, request: BoletoRequest) -> Boleto:
    """Preenche campos que o provedor não ecoa na resposta de emissão."""
    updates: dict[str, Any] = {}
    if boleto.seu_numero is None:
        updates["seu_numero"] = request.seu_numero
    if boleto.amount is None:
        updates["amount"] = quantize_amount(request.amount)
    if boleto.due_date is None:
        updates["due_date"] = request.due_date
    if boleto.issue_date is None and request.issue_date is not None:
        updates["issue_date"] = request.issue_date
    if boleto.payer_name is None:
        updates["payer_name"] = request.payer.name
    if not boleto.discounts and request.discounts:
        updates["discounts"] = list(request.discounts)
    return boleto.model_copy(update=updates) if updates else boleto
