"""Executor de requisições autenticadas contra a API de um provedor.

Fluxo de cada chamada:
1. obtém token válido do TokenManager;
2. monta URL, headers do provedor e corpo (JSON ou form);
3. executa com timeout efetivo (menor entre config e deadline do chamador),
   abortando a requisição em voo se o chamador cancelar;
4. sucesso: decodifica conforme Endpoint.response;
5. falha: decodifica envelope de erro do provedor (ProviderAPIError) ou
   devolve status + corpo brutos (UndecodedProviderError).

Retry somente em endpoints idempotentes, em falhas de transporte e
status 429/5xx. Nenhuma resposta de negócio é cacheada.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

import httpx

from app.infra.http.client import HttpClientConfig, backoff_seconds, send_request
from app.infra.http.encoding import decode_json, encode_form, encode_json
from app.infra.http.endpoint import BodyEncoding, ResponseKind
from app.infra.http.errors import (
    BankProviderError,
    ProviderAPIError,
    ProviderError,
    RequestCancelledError,
    SerializationError,
    TransportError,
    UndecodedProviderError,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from app.infra.http.context import RequestContext
    from app.infra.http.endpoint import Endpoint

logger = logging.getLogger(__name__)


class TokenSource(Protocol):
    """Fonte de token usada pelo executor (TokenManager)."""

    def ensure_valid_token(self, ctx: RequestContext | None = None) -> str: ...

    def invalidate(self, access_token: str | None = None) -> None: ...


@dataclass(frozen=True)
class ExecutorResponse:
    """Resposta de sucesso já decodificada.

    Attributes:
        status_code: Status HTTP
        content_type: Header Content-Type (sem parâmetros)
        content: Corpo bruto
        data: JSON decodificado (ResponseKind.JSON), bytes (BINARY) ou None
    """

    status_code: int
    content_type: str
    content: bytes
    data: Any = None


class RequestExecutor:
    """Executa Endpoints de um provedor com token, headers e política de erro.

    Args:
        provider_name: Nome do provedor (erros e logs)
        http_client: Cliente httpx do adaptador
        tokens: Fonte de token (TokenManager)
        base_urls: Bases por chave de Endpoint.base ("api", "pix")
        config: Timeouts e política de retry
        provider_headers: Headers fixos do provedor em toda chamada
        error_parser: Decodificador do envelope de erro do provedor
        sleep: Função de espera usada sem RequestContext (testes injetam no-op)
    """

    def __init__(
        self,
        *,
        provider_name: str,
        http_client: httpx.Client,
        tokens: TokenSource,
        base_urls: Mapping[str, str],
        config: HttpClientConfig,
        provider_headers: Mapping[str, str] | None = None,
        error_parser: Callable[[Any, int, str], ProviderError | None] | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._provider_name = provider_name
        self._client = http_client
        self._tokens = tokens
        self._base_urls = {key: url.rstrip("/") for key, url in base_urls.items()}
        self._config = config
        self._provider_headers = dict(provider_headers or {})
        self._error_parser = error_parser
        self._sleep = sleep

    @property
    def provider_name(self) -> str:
        return self._provider_name

    def close(self) -> None:
        self._client.close()

    def execute(
        self,
        endpoint: Endpoint,
        *,
        path_params: Mapping[str, Any] | None = None,
        query: Mapping[str, Any] | None = None,
        body: Any = None,
        ctx: RequestContext | None = None,
    ) -> ExecutorResponse:
        """Executa o endpoint, com retry se idempotente.

        Raises:
            BankProviderError: Qualquer falha (ver hierarquia em errors.py)
        """
        url = self._build_url(endpoint, path_params)
        content, content_type = self._encode_body(endpoint, body)
        params = {key: str(value) for key, value in (query or {}).items() if value is not None}
        max_retries = self._config.max_retries if endpoint.idempotent else 0

        attempt = 0
        while True:
            try:
                return self._send_once(
                    endpoint, url, params, content, content_type, ctx, attempt
                )
            except BankProviderError as exc:
                if not exc.is_retryable or attempt >= max_retries:
                    raise
                self._backoff(endpoint, attempt, exc, ctx)
            attempt += 1

    def _build_url(self, endpoint: Endpoint, path_params: Mapping[str, Any] | None) -> str:
        base = self._base_urls.get(endpoint.base)
        if base is None:
            raise SerializationError(
                f"URL base '{endpoint.base}' não configurada",
                provider_name=self._provider_name,
            )
        return base + endpoint.render_path(dict(path_params or {}))

    def _encode_body(self, endpoint: Endpoint, body: Any) -> tuple[bytes | None, str | None]:
        if endpoint.encoding is BodyEncoding.NONE or body is None:
            return None, None
        try:
            if endpoint.encoding is BodyEncoding.FORM:
                return encode_form(body), "application/x-www-form-urlencoded"
            return encode_json(body), "application/json"
        except (TypeError, ValueError) as exc:
            raise SerializationError(
                f"falha ao serializar corpo de {endpoint.name}: {exc}",
                provider_name=self._provider_name,
            ) from exc

    def _send_once(
        self,
        endpoint: Endpoint,
        url: str,
        params: dict[str, str],
        content: bytes | None,
        content_type: str | None,
        ctx: RequestContext | None,
        attempt: int,
    ) -> ExecutorResponse:
        self._check_context(ctx)
        token = self._tokens.ensure_valid_token(ctx)
        self._check_context(ctx)

        headers = {
            **self._provider_headers,
            "Authorization": f"Bearer {token}",
            "Accept": endpoint.accept,
        }
        if content_type:
            headers["Content-Type"] = content_type
        timeout = (
            ctx.effective_timeout(self._config.timeout_seconds)
            if ctx is not None
            else self._config.timeout_seconds
        )

        request = self._client.build_request(
            endpoint.method,
            url,
            params=params or None,
            content=content,
            headers=headers,
            timeout=timeout,
        )
        started = time.monotonic()
        try:
            response = send_request(
                self._client, request, ctx, provider_name=self._provider_name
            )
        except httpx.TimeoutException as exc:
            raise TransportError(
                f"timeout em {endpoint.name}", provider_name=self._provider_name
            ) from exc
        except httpx.HTTPError as exc:
            raise TransportError(
                f"falha de rede em {endpoint.name}: {type(exc).__name__}",
                provider_name=self._provider_name,
            ) from exc
        duration_ms = round((time.monotonic() - started) * 1000)

        if response.status_code in endpoint.success_statuses:
            logger.debug(
                "bank_request_completed",
                extra={
                    "provider": self._provider_name,
                    "endpoint": endpoint.name,
                    "status_code": response.status_code,
                    "attempt": attempt,
                    "duration_ms": duration_ms,
                },
            )
            return self._decode_success(endpoint, response)

        error = self._decode_error(response)
        logger.warning(
            "bank_request_failed",
            extra={
                "provider": self._provider_name,
                "endpoint": endpoint.name,
                "status_code": response.status_code,
                "error_code": error.code,
                "attempt": attempt,
                "duration_ms": duration_ms,
            },
        )
        if response.status_code == 401:
            # Só descarta se ainda for o token enviado; outro pode já ter sido obtido
            self._tokens.invalidate(token)
        raise error

    def _decode_success(self, endpoint: Endpoint, response: httpx.Response) -> ExecutorResponse:
        content_type = response.headers.get("content-type", "").split(";")[0].strip().lower()
        data: Any = None
        if endpoint.response is ResponseKind.BINARY:
            data = response.content
        elif endpoint.response is ResponseKind.JSON and response.content.strip():
            try:
                data = decode_json(response.content)
            except (UnicodeDecodeError, ValueError) as exc:
                raise SerializationError(
                    f"resposta JSON inválida em {endpoint.name}",
                    provider_name=self._provider_name,
                    status_code=response.status_code,
                ) from exc
        return ExecutorResponse(
            status_code=response.status_code,
            content_type=content_type,
            content=response.content,
            data=data,
        )

    def _decode_error(self, response: httpx.Response) -> BankProviderError:
        parsed: ProviderError | None = None
        if self._error_parser is not None and response.content.strip():
            try:
                payload = decode_json(response.content)
            except (UnicodeDecodeError, ValueError):
                payload = None
            if payload is not None:
                parsed = self._error_parser(payload, response.status_code, self._provider_name)
        if parsed is not None:
            return ProviderAPIError(parsed)
        return UndecodedProviderError(
            provider_name=self._provider_name,
            status_code=response.status_code,
            body=response.text,
        )

    def _backoff(
        self,
        endpoint: Endpoint,
        attempt: int,
        exc: BankProviderError,
        ctx: RequestContext | None,
    ) -> None:
        delay = backoff_seconds(
            attempt, self._config.backoff_base_seconds, self._config.backoff_max_seconds
        )
        if ctx is not None:
            remaining = ctx.remaining()
            # Sem tempo para outra tentativa: devolve a última falha
            if remaining is not None and remaining <= delay:
                raise exc
        logger.info(
            "http_backoff",
            extra={
                "provider": self._provider_name,
                "endpoint": endpoint.name,
                "attempt": attempt,
                "backoff_seconds": delay,
            },
        )
        if ctx is None:
            self._sleep(delay)
        elif ctx.wait(delay):
            raise RequestCancelledError(
                "chamada cancelada durante backoff", provider_name=self._provider_name
            ) from exc

    def _check_context(self, ctx: RequestContext | None) -> None:
        if ctx is None:
            return
        if ctx.cancelled:
            raise RequestCancelledError("chamada cancelada", provider_name=self._provider_name)
        if ctx.expired:
            raise RequestCancelledError("deadline excedido", provider_name=self._provider_name)
