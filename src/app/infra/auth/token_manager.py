"""Gerenciamento do token OAuth2 de um adaptador.

Política:
- sem token: autenticação completa;
- now < expires_at - 30s: token válido, sem rede;
- expirado mas now < refresh_expires_at - 30s: refresh;
- refresh recusado (não 2xx) ou refresh expirado: autenticação completa,
  descartando o token antigo;
- grants sem refresh (client_credentials) sempre reautenticam.

Concorrência: caminho rápido sob lock de leitura; refresh/autenticação sob
lock exclusivo mantido durante a chamada de rede, com nova verificação após
obtê-lo. Chamadores concorrentes convergem para no máximo uma requisição
de token em voo.
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import TYPE_CHECKING

import httpx

from app.infra.auth.rwlock import LockTimeoutError, ReadWriteLock
from app.infra.auth.token import EXPIRY_SKEW_SECONDS, Token, TokenState
from app.infra.http.client import send_request
from app.infra.http.encoding import decode_json, encode_form
from app.infra.http.errors import (
    AuthenticationError,
    RequestCancelledError,
    SerializationError,
    TransportError,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from contextlib import AbstractContextManager

    from app.infra.auth.grants import OAuthGrant
    from app.infra.http.context import RequestContext

logger = logging.getLogger(__name__)


class TokenManager:
    """Dono exclusivo do token de uma instância de adaptador.

    Args:
        provider_name: Nome do provedor (erros e logs)
        token_url: URL do endpoint de token
        grant: Grant OAuth2 (client_credentials ou password)
        http_client: Cliente httpx compartilhado com o executor
        timeout_seconds: Timeout padrão da chamada de token
        clock: Relógio epoch injetável (testes usam relógio falso)
        skew_seconds: Margem antes da expiração
    """

    def __init__(
        self,
        *,
        provider_name: str,
        token_url: str,
        grant: OAuthGrant,
        http_client: httpx.Client,
        timeout_seconds: float = 30.0,
        clock: Callable[[], float] = time.time,
        skew_seconds: float = EXPIRY_SKEW_SECONDS,
    ) -> None:
        self._provider_name = provider_name
        self._token_url = token_url
        self._grant = grant
        self._client = http_client
        self._timeout = timeout_seconds
        self._clock = clock
        self._skew = skew_seconds
        self._lock = ReadWriteLock()
        self._token: Token | None = None
        self._last_refresh_failed = False

    @property
    def token(self) -> Token | None:
        """Snapshot do token atual (imutável)."""
        return self._token

    @property
    def state(self) -> TokenState:
        token = self._token
        if token is None:
            if self._last_refresh_failed:
                return TokenState.REFRESH_FAILED
            return TokenState.UNAUTHENTICATED
        return token.state(self._clock(), self._skew)

    def ensure_valid_token(self, ctx: RequestContext | None = None) -> str:
        """Retorna access_token válido, autenticando ou renovando se preciso.

        Raises:
            AuthenticationError: Endpoint de token respondeu != 200
            TransportError: Falha de rede na chamada de token
            RequestCancelledError: Deadline/cancelamento do chamador
        """
        with self._acquire(self._lock.read, ctx):
            token = self._token
            if token is not None and token.is_valid(self._clock(), self._skew):
                return token.access_token

        with self._acquire(self._lock.write, ctx):
            # Outra thread pode ter renovado enquanto esperávamos
            token = self._token
            now = self._clock()
            if token is not None and token.is_valid(now, self._skew):
                return token.access_token

            new_token = None
            if token is not None and self._grant.supports_refresh and token.can_refresh(now, self._skew):
                new_token = self._try_refresh(token, ctx)

            if new_token is None:
                self._token = None
                new_token = self._authenticate(ctx)

            self._token = new_token
            self._last_refresh_failed = False
            return new_token.access_token

    def authenticate(self, ctx: RequestContext | None = None) -> Token:
        """Força autenticação completa, substituindo o token atual."""
        with self._acquire(self._lock.write, ctx):
            self._token = None
            self._token = self._authenticate(ctx)
            return self._token

    def invalidate(self, access_token: str | None = None) -> None:
        """Descarta o token (ex.: API respondeu 401).

        Com `access_token`, descarta apenas se ele ainda for o token atual:
        um 401 de uma requisição antiga não derruba o token que outra thread
        acabou de obter.
        """
        with self._lock.write():
            current = self._token
            if current is None:
                return
            if access_token is not None and current.access_token != access_token:
                logger.debug("token_invalidation_stale", extra={"provider": self._provider_name})
                return
            logger.info("token_invalidated", extra={"provider": self._provider_name})
            self._token = None

    @contextmanager
    def _acquire(
        self,
        lock_factory: Callable[[float | None], AbstractContextManager[None]],
        ctx: RequestContext | None,
    ) -> Iterator[None]:
        self._check_context(ctx)
        remaining = ctx.remaining() if ctx is not None else None
        timeout = max(remaining, 0.0) if remaining is not None else None
        try:
            lock = lock_factory(timeout)
            lock.__enter__()
        except LockTimeoutError as exc:
            raise RequestCancelledError(
                "deadline excedido aguardando renovação de token",
                provider_name=self._provider_name,
            ) from exc
        try:
            yield
        finally:
            lock.__exit__(None, None, None)

    def _check_context(self, ctx: RequestContext | None) -> None:
        if ctx is None:
            return
        if ctx.cancelled:
            raise RequestCancelledError("chamada cancelada", provider_name=self._provider_name)
        if ctx.expired:
            raise RequestCancelledError("deadline excedido", provider_name=self._provider_name)

    def _try_refresh(self, token: Token, ctx: RequestContext | None) -> Token | None:
        if token.refresh_token is None:
            return None
        try:
            new_token = self._request_token(self._grant.refresh_form(token.refresh_token), ctx)
        except AuthenticationError as exc:
            self._last_refresh_failed = True
            logger.warning(
                "token_refresh_rejected",
                extra={"provider": self._provider_name, "status_code": exc.status_code},
            )
            return None
        logger.info("token_refreshed", extra={"provider": self._provider_name})
        return new_token

    def _authenticate(self, ctx: RequestContext | None) -> Token:
        token = self._request_token(self._grant.token_form(), ctx)
        logger.info(
            "token_authenticated",
            extra={
                "provider": self._provider_name,
                "expires_in": round(token.expires_at - self._clock()),
                "has_refresh": token.refresh_token is not None,
            },
        )
        return token

    def _request_token(self, form: dict[str, str], ctx: RequestContext | None) -> Token:
        self._check_context(ctx)
        timeout = ctx.effective_timeout(self._timeout) if ctx is not None else self._timeout
        headers = {
            "Content-Type": "application/x-www-form-urlencoded",
            "Accept": "application/json",
            **self._grant.extra_headers,
        }
        request = self._client.build_request(
            "POST",
            self._token_url,
            content=encode_form(form),
            headers=headers,
            timeout=timeout,
        )
        try:
            response = send_request(
                self._client, request, ctx, provider_name=self._provider_name
            )
        except httpx.TimeoutException as exc:
            raise TransportError(
                "timeout no endpoint de token",
                provider_name=self._provider_name,
                is_retryable=False,
            ) from exc
        except httpx.HTTPError as exc:
            raise TransportError(
                f"falha de rede no endpoint de token: {type(exc).__name__}",
                provider_name=self._provider_name,
                is_retryable=False,
            ) from exc

        if response.status_code != 200:
            raise AuthenticationError(
                f"autenticação falhou (status {response.status_code})",
                provider_name=self._provider_name,
                status_code=response.status_code,
                body=response.text,
            )

        # Instante de emissão medido após a resposta (lado conservador)
        now = self._clock()
        try:
            return Token.from_response(
                decode_json(response.content),
                now,
                keep_refresh=self._grant.supports_refresh,
            )
        except ValueError as exc:
            raise SerializationError(
                f"resposta de token inválida: {exc}",
                provider_name=self._provider_name,
                status_code=response.status_code,
            ) from exc

