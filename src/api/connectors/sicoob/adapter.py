"""Adaptador Sicoob: Cobrança Bancária v2 + PIX.

- OAuth2 client_credentials (sem refresh: reautentica ao expirar)
- header x-sicoob-clientid em toda chamada (x-api-key quando configurado)
- mTLS somente em produção, com par validado na construção
"""

from __future__ import annotations

import base64
import binascii
import logging
import time
from typing import TYPE_CHECKING, Any

from api.connectors.common.adapter import BankAdapter
from api.connectors.common.catalog import load_provider_catalog
from api.connectors.common.envelopes import parse_error_envelope
from api.connectors.sicoob import endpoints
from api.normalizers.sicoob import SicoobBoletoNormalizer, unwrap_resultado
from api.payload_builders.sicoob import SicoobBoletoPayloadBuilder
from app.domain.enums import ProviderName
from app.infra.auth import ClientCredentialsGrant, TokenManager
from app.infra.crypto import validate_client_certificate
from app.infra.http.client import HttpClientConfig, create_http_client
from app.infra.http.encoding import decode_json
from app.infra.http.errors import (
    ProviderAPIError,
    ProviderError,
    RequestValidationError,
    SerializationError,
)
from app.infra.http.executor import RequestExecutor

if TYPE_CHECKING:
    from collections.abc import Callable

    import httpx

    from app.domain.boleto import Boleto, BoletoListFilter
    from app.infra.http.context import RequestContext
    from app.infra.http.executor import ExecutorResponse
    from config.settings.sicoob import SicoobSettings

logger = logging.getLogger(__name__)

PROVIDER = ProviderName.SICOOB.value


def build_sicoob_headers(settings: SicoobSettings) -> dict[str, str]:
    """Headers fixos de toda chamada de negócio Sicoob."""
    headers = {"x-sicoob-clientid": settings.client_id}
    if settings.api_key:
        headers["x-api-key"] = settings.api_key
    return headers


class SicoobAdapter(BankAdapter):
    """BankProviderProtocol sobre a API do Sicoob.

    Args:
        settings: Credenciais e ambiente
        transport: Transport httpx alternativo (testes)
        clock: Relógio epoch do TokenManager (testes)
        sleep: Espera do backoff sem RequestContext (testes)
    """

    CREATE_BOLETO = endpoints.CREATE_BOLETO

    def __init__(
        self,
        settings: SicoobSettings,
        *,
        transport: httpx.BaseTransport | None = None,
        clock: Callable[[], float] = time.time,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._settings = settings
        self._http_config = HttpClientConfig(
            timeout_seconds=settings.request_timeout_seconds,
            max_retries=settings.max_retries,
            client_cert=self._client_certificate(settings),
        )
        http_client = create_http_client(self._http_config, transport)
        catalog = load_provider_catalog(PROVIDER)

        tokens = TokenManager(
            provider_name=PROVIDER,
            token_url=settings.auth_url,
            grant=ClientCredentialsGrant(
                client_id=settings.client_id,
                client_secret=settings.client_secret,
                scope=settings.scope,
            ),
            http_client=http_client,
            timeout_seconds=settings.request_timeout_seconds,
            clock=clock,
        )
        executor = RequestExecutor(
            provider_name=PROVIDER,
            http_client=http_client,
            tokens=tokens,
            base_urls={
                "api": settings.api_base_url,
                "pix": settings.api_base_url.rstrip("/") + endpoints.PIX_PATH,
            },
            config=self._http_config,
            provider_headers=build_sicoob_headers(settings),
            error_parser=parse_error_envelope,
            sleep=sleep,
        )
        super().__init__(
            provider_name=PROVIDER,
            catalog=catalog,
            tokens=tokens,
            executor=executor,
            boleto_builder=SicoobBoletoPayloadBuilder(catalog, settings.numero_contrato),
            boleto_normalizer=SicoobBoletoNormalizer(catalog),
        )

    @property
    def http_config(self) -> HttpClientConfig:
        return self._http_config

    @staticmethod
    def _client_certificate(settings: SicoobSettings) -> tuple[str, str] | None:
        if not settings.uses_mtls:
            return None
        info = validate_client_certificate(settings.cert_path, settings.key_path)
        logger.info(
            "client_certificate_loaded",
            extra={
                "provider": PROVIDER,
                "days_until_expiry": info.days_until_expiry(),
            },
        )
        return settings.cert_path, settings.key_path

    def _instruction_base_body(self) -> dict[str, Any]:
        return {"numeroContrato": self._settings.numero_contrato}

    def _created_payload(self, response: ExecutorResponse) -> Any:
        items = self._unwrap(response.data, endpoints.CREATE_BOLETO.name)
        return items[0] if items else None

    def _fetch_boleto(self, nosso_numero: str, ctx: RequestContext | None) -> Boleto:
        response = self._executor.execute(
            endpoints.QUERY_BOLETO,
            query={
                "numeroContrato": self._settings.numero_contrato,
                "nossoNumero": nosso_numero,
            },
            ctx=ctx,
        )
        items = self._unwrap(response.data, endpoints.QUERY_BOLETO.name)
        if not items:
            raise ProviderAPIError(
                ProviderError(
                    code="404",
                    message="boleto não encontrado",
                    detail=f"nossoNumero={nosso_numero}",
                    http_status=404,
                    provider_name=PROVIDER,
                )
            )
        return self._normalize_boleto(items[0], endpoints.QUERY_BOLETO)

    def _fetch_boletos(
        self, filters: BoletoListFilter, ctx: RequestContext | None
    ) -> list[Boleto]:
        if not filters.has_range:
            raise RequestValidationError(
                "Listagem Sicoob exige intervalo de datas", provider_name=PROVIDER
            )
        response = self._executor.execute(
            endpoints.LIST_BOLETOS,
            query={
                "numeroContrato": self._settings.numero_contrato,
                "dataInicio": filters.start_date.isoformat() if filters.start_date else None,
                "dataFim": filters.end_date.isoformat() if filters.end_date else None,
                "situacao": filters.status,
            },
            ctx=ctx,
        )
        items = self._unwrap(response.data, endpoints.LIST_BOLETOS.name)
        return [self._normalize_boleto(item, endpoints.LIST_BOLETOS) for item in items]

    def _fetch_pdf(
        self, nosso_numero: str, linha_digitavel: str | None, ctx: RequestContext | None
    ) -> bytes:
        response = self._executor.execute(
            endpoints.PRINT_SECOND_COPY,
            path_params={"nosso_numero": nosso_numero},
            query={"numeroContrato": self._settings.numero_contrato},
            ctx=ctx,
        )
        if response.content_type != "application/json":
            return response.content
        return self._pdf_from_json(response.content)

    def _pdf_from_json(self, content: bytes) -> bytes:
        try:
            data = decode_json(content)
            items = unwrap_resultado(data)
            encoded = items[0].get("pdfBoleto") if items else None
            if not encoded:
                raise ValueError("pdfBoleto ausente")
            return base64.b64decode(encoded, validate=True)
        except (ValueError, binascii.Error) as exc:
            raise SerializationError(
                f"segunda via sem PDF válido: {exc}", provider_name=PROVIDER
            ) from exc

    def _unwrap(self, data: Any, endpoint_name: str) -> list[dict[str, Any]]:
        try:
            return unwrap_resultado(data)
        except ValueError as exc:
            raise SerializationError(
                f"resposta de {endpoint_name} inválida: {exc}", provider_name=PROVIDER
            ) from exc
