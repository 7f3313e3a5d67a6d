"""Cliente HTTP base para os adaptadores bancários."""

from __future__ import annotations

import logging
import ssl
import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import httpx

from app.infra.http.errors import RequestCancelledError

if TYPE_CHECKING:
    from app.infra.http.context import RequestContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HttpClientConfig:
    """Configuração do cliente HTTP de um adaptador.

    Attributes:
        timeout_seconds: Timeout padrão por requisição
        max_retries: Novas tentativas em endpoints idempotentes
        backoff_base_seconds: Base do backoff exponencial
        backoff_max_seconds: Teto do backoff
        default_headers: Headers enviados em toda requisição
        verify_ssl: Valida certificado do servidor
        client_cert: Par (certificado, chave) PEM para mTLS
    """

    timeout_seconds: float = 30.0
    max_retries: int = 3
    backoff_base_seconds: float = 0.5
    backoff_max_seconds: float = 8.0
    default_headers: dict[str, str] = field(default_factory=dict)
    verify_ssl: bool = True
    client_cert: tuple[str, str] | None = None


def _build_ssl_context(config: HttpClientConfig) -> ssl.SSLContext | bool:
    if config.client_cert is None:
        return config.verify_ssl
    context = ssl.create_default_context()
    context.minimum_version = ssl.TLSVersion.TLSv1_2
    if not config.verify_ssl:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    cert_path, key_path = config.client_cert
    context.load_cert_chain(certfile=cert_path, keyfile=key_path)
    return context


def create_http_client(
    config: HttpClientConfig,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Cria httpx.Client síncrono (com mTLS quando client_cert informado).

    Args:
        config: Configuração do cliente
        transport: Transport alternativo (testes usam httpx.MockTransport)
    """
    if transport is not None:
        return httpx.Client(
            transport=transport,
            timeout=config.timeout_seconds,
            headers=config.default_headers,
        )
    client = httpx.Client(
        verify=_build_ssl_context(config),
        timeout=config.timeout_seconds,
        headers=config.default_headers,
    )
    logger.debug("http_client_created", extra={"mtls": config.client_cert is not None})
    return client


def backoff_seconds(attempt: int, base: float, max_seconds: float) -> float:
    """Backoff exponencial: min(2**attempt * base, max)."""
    return min((2**attempt) * base, max_seconds)


# Intervalo de verificação de cancelamento enquanto a requisição está em voo
CANCEL_POLL_SECONDS = 0.05


class _InFlightCall:
    """Envio + leitura do corpo numa thread auxiliar (daemon).

    A thread chamadora pode abandonar a chamada; a resposta em streaming é
    então fechada, seja já recebida ou assim que chegar.
    """

    def __init__(self, client: httpx.Client, request: httpx.Request) -> None:
        self.done = threading.Event()
        self._client = client
        self._request = request
        self._lock = threading.Lock()
        self._response: httpx.Response | None = None
        self._error: Exception | None = None
        self._abandoned = False
        self._thread = threading.Thread(target=self._run, name="bank-http-call", daemon=True)

    def start(self) -> None:
        self._thread.start()

    def abandon(self) -> None:
        with self._lock:
            self._abandoned = True
            response = self._response
        if response is not None:
            response.close()

    def result(self) -> httpx.Response:
        """Resposta lida ou a exceção levantada na thread auxiliar."""
        if self._error is not None:
            raise self._error
        if self._response is None:
            raise RuntimeError("requisição encerrada sem resposta")
        return self._response

    def _run(self) -> None:
        try:
            response = self._client.send(self._request, stream=True)
            with self._lock:
                self._response = response
                abandoned = self._abandoned
            if abandoned:
                response.close()
                return
            response.read()
        except Exception as exc:  # noqa: BLE001 - repassada à thread chamadora em result()
            self._error = exc
            with self._lock:
                abandoned = self._abandoned
            if abandoned:
                logger.debug(
                    "abandoned_http_call_failed",
                    extra={"path": self._request.url.path, "error_type": type(exc).__name__},
                )
        finally:
            self.done.set()


def _poll_interval(ctx: RequestContext) -> float:
    remaining = ctx.remaining()
    if remaining is None:
        return CANCEL_POLL_SECONDS
    return min(CANCEL_POLL_SECONDS, max(remaining, 0.0))


def send_request(
    client: httpx.Client,
    request: httpx.Request,
    ctx: RequestContext | None,
    *,
    provider_name: str,
) -> httpx.Response:
    """Envia a requisição e lê o corpo, abortando em cancelamento ou deadline.

    Sem contexto a chamada é direta. Com contexto, o envio roda numa thread
    auxiliar e a chamadora espera pelo fim, pelo cancelamento ou pelo
    deadline. O deadline limita a chamada inteira, não apenas cada fase do
    timeout do httpx. Ao abortar, a resposta é fechada.

    Raises:
        httpx.HTTPError: Falha de transporte na thread auxiliar
        RequestCancelledError: Cancelamento ou deadline com a requisição em voo
    """
    if ctx is None:
        return client.send(request)

    call = _InFlightCall(client, request)
    call.start()
    while not call.done.wait(_poll_interval(ctx)):
        if ctx.cancelled or ctx.expired:
            call.abandon()
            reason = "chamada cancelada" if ctx.cancelled else "deadline excedido"
            logger.info(
                "http_call_aborted",
                extra={"provider": provider_name, "reason": reason},
            )
            raise RequestCancelledError(
                f"{reason} com requisição em voo", provider_name=provider_name
            )
    return call.result()
