"""Adaptador Sicredi: Cobrança Boleto v1 + PIX.

- OAuth2 password com refresh_token (headers x-api-key e context no token)
- x-api-key, cooperativa, posto e codigoBeneficiario em toda chamada
- listagem: somente liquidados, dia a dia em /boletos/liquidados/dia
"""

from __future__ import annotations

import logging
import time
from datetime import timedelta
from typing import TYPE_CHECKING, Any

from api.connectors.common.adapter import BankAdapter
from api.connectors.common.catalog import load_provider_catalog
from api.connectors.common.envelopes import parse_error_envelope
from api.connectors.sicredi import endpoints
from api.normalizers.sicredi import SicrediBoletoNormalizer
from api.payload_builders.sicredi import SicrediBoletoPayloadBuilder
from app.domain.boleto import normalize_status
from app.domain.enums import ProviderName
from app.infra.auth import PasswordGrant, TokenManager
from app.infra.http.client import HttpClientConfig, create_http_client
from app.infra.http.errors import RequestValidationError, SerializationError
from app.infra.http.executor import RequestExecutor
from config.settings.sicredi import SICREDI_AUTH_CONTEXT, SICREDI_AUTH_SCOPE

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import date

    import httpx

    from app.domain.boleto import Boleto, BoletoListFilter
    from app.infra.http.context import RequestContext
    from config.settings.sicredi import SicrediSettings

logger = logging.getLogger(__name__)

PROVIDER = ProviderName.SICREDI.value

# Maior intervalo aceito na listagem (uma consulta paginada por dia)
MAX_LIST_DAYS = 31


def build_sicredi_headers(settings: SicrediSettings) -> dict[str, str]:
    """Headers fixos de toda chamada de negócio Sicredi."""
    return {
        "x-api-key": settings.api_key,
        "cooperativa": settings.cooperativa,
        "posto": settings.posto,
        "codigoBeneficiario": settings.codigo_beneficiario,
    }


class SicrediAdapter(BankAdapter):
    """BankProviderProtocol sobre a API do Sicredi.

    Args:
        settings: Credenciais e ambiente
        transport: Transport httpx alternativo (testes)
        clock: Relógio epoch do TokenManager (testes)
        sleep: Espera do backoff sem RequestContext (testes)
    """

    CREATE_BOLETO = endpoints.CREATE_BOLETO

    def __init__(
        self,
        settings: SicrediSettings,
        *,
        transport: httpx.BaseTransport | None = None,
        clock: Callable[[], float] = time.time,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._settings = settings
        http_config = HttpClientConfig(
            timeout_seconds=settings.request_timeout_seconds,
            max_retries=settings.max_retries,
        )
        http_client = create_http_client(http_config, transport)
        catalog = load_provider_catalog(PROVIDER)

        tokens = TokenManager(
            provider_name=PROVIDER,
            token_url=settings.auth_url,
            grant=PasswordGrant(
                username=settings.username,
                password=settings.password,
                scope=SICREDI_AUTH_SCOPE,
                extra_headers={"x-api-key": settings.api_key, "context": SICREDI_AUTH_CONTEXT},
            ),
            http_client=http_client,
            timeout_seconds=settings.request_timeout_seconds,
            clock=clock,
        )
        executor = RequestExecutor(
            provider_name=PROVIDER,
            http_client=http_client,
            tokens=tokens,
            base_urls={"api": settings.api_base_url, "pix": settings.pix_api_base_url},
            config=http_config,
            provider_headers=build_sicredi_headers(settings),
            error_parser=parse_error_envelope,
            sleep=sleep,
        )
        self._normalizer = SicrediBoletoNormalizer(catalog)
        super().__init__(
            provider_name=PROVIDER,
            catalog=catalog,
            tokens=tokens,
            executor=executor,
            boleto_builder=SicrediBoletoPayloadBuilder(catalog, settings.codigo_beneficiario),
            boleto_normalizer=self._normalizer,
        )

    def _fetch_boleto(self, nosso_numero: str, ctx: RequestContext | None) -> Boleto:
        response = self._executor.execute(
            endpoints.QUERY_BOLETO,
            query={
                "codigoBeneficiario": self._settings.codigo_beneficiario,
                "nossoNumero": nosso_numero,
            },
            ctx=ctx,
        )
        return self._normalize_boleto(response.data, endpoints.QUERY_BOLETO)

    def _fetch_boletos(
        self, filters: BoletoListFilter, ctx: RequestContext | None
    ) -> list[Boleto]:
        if filters.status and normalize_status(filters.status) != "LIQUIDADO":
            raise RequestValidationError(
                "Listagem Sicredi suporta apenas situação LIQUIDADO",
                provider_name=PROVIDER,
            )
        if filters.start_date is None or filters.end_date is None:
            raise RequestValidationError(
                "Listagem Sicredi exige intervalo de datas", provider_name=PROVIDER
            )
        days = (filters.end_date - filters.start_date).days + 1
        if days > MAX_LIST_DAYS:
            raise RequestValidationError(
                f"Intervalo máximo de {MAX_LIST_DAYS} dias na listagem Sicredi",
                provider_name=PROVIDER,
            )

        boletos: list[Boleto] = []
        for offset in range(days):
            boletos.extend(self._settled_on(filters.start_date + timedelta(days=offset), ctx))
        return boletos

    def _settled_on(self, day: date, ctx: RequestContext | None) -> list[Boleto]:
        boletos: list[Boleto] = []
        page = 0
        while True:
            response = self._executor.execute(
                endpoints.LIST_SETTLED_BY_DAY,
                query={
                    "codigoBeneficiario": self._settings.codigo_beneficiario,
                    "dia": day.strftime(endpoints.SETTLED_DAY_FORMAT),
                    "pagina": page or None,
                },
                ctx=ctx,
            )
            data: Any = response.data if isinstance(response.data, dict) else {}
            items = data.get("items") or []
            boletos.extend(self._settled_item(item) for item in items if isinstance(item, dict))
            if not data.get("hasNext") or not items:
                return boletos
            page += 1

    def _settled_item(self, item: dict[str, Any]) -> Boleto:
        try:
            return self._normalizer.normalize_settled(item)
        except (ValueError, TypeError) as exc:
            raise SerializationError(
                f"item de liquidados inválido: {exc}", provider_name=PROVIDER
            ) from exc

    def _fetch_pdf(
        self, nosso_numero: str, linha_digitavel: str | None, ctx: RequestContext | None
    ) -> bytes:
        if not linha_digitavel:
            linha_digitavel = self._fetch_boleto(nosso_numero, ctx).linha_digitavel
        if not linha_digitavel:
            raise SerializationError(
                f"boleto {nosso_numero} sem linha digitável", provider_name=PROVIDER
            )
        response = self._executor.execute(
            endpoints.PRINT_PDF,
            query={"linhaDigitavel": linha_digitavel},
            ctx=ctx,
        )
        return response.content
