"""Testes do TokenManager: política de renovação e concorrência."""

from __future__ import annotations

import threading
import time

import httpx
import pytest

from app.infra.auth import ClientCredentialsGrant, PasswordGrant, Token, TokenManager, TokenState
from app.infra.http import (
    AuthenticationError,
    RequestCancelledError,
    RequestContext,
    SerializationError,
    TransportError,
)
from tests.fakes.bank import FakeBank, FakeClock, form_of, token_response

TOKEN_URL = "https://auth.banco.test/oauth/token"
TOKEN_PATH = "/oauth/token"


def _client_credentials() -> ClientCredentialsGrant:
    return ClientCredentialsGrant(client_id="cid", client_secret="secret", scope="cob.read")


def _password() -> PasswordGrant:
    return PasswordGrant(
        username="123450101",
        password="senha",
        scope="cobranca",
        extra_headers={"x-api-key": "api-key", "context": "COBRANCA"},
    )


def _manager(bank: FakeBank, grant, clock: FakeClock) -> TokenManager:
    return TokenManager(
        provider_name="TESTE",
        token_url=TOKEN_URL,
        grant=grant,
        http_client=httpx.Client(transport=bank.transport),
        clock=clock,
    )


def _grant_types(bank: FakeBank) -> list[str]:
    return [form_of(request)["grant_type"] for request in bank.calls("POST", TOKEN_PATH)]


class TestClientCredentials:
    """client_credentials nunca usa refresh."""

    def test_first_call_authenticates(self) -> None:
        """Sem token, autentica e devolve access_token."""
        bank = FakeBank().add("POST", TOKEN_PATH, token_response("tok-1"))
        manager = _manager(bank, _client_credentials(), FakeClock())

        assert manager.state is TokenState.UNAUTHENTICATED
        assert manager.ensure_valid_token() == "tok-1"
        assert manager.state is TokenState.VALID

        form = form_of(bank.requests[0])
        assert form == {
            "grant_type": "client_credentials",
            "client_id": "cid",
            "client_secret": "secret",
            "scope": "cob.read",
        }
        assert bank.requests[0].headers["content-type"] == "application/x-www-form-urlencoded"

    def test_valid_token_does_not_touch_network(self) -> None:
        """Token dentro da validade (menos 30s) é reutilizado."""
        clock = FakeClock()
        bank = FakeBank().add("POST", TOKEN_PATH, token_response("tok-1", expires_in=3600))
        manager = _manager(bank, _client_credentials(), clock)

        manager.ensure_valid_token()
        clock.advance(3569)
        assert manager.ensure_valid_token() == "tok-1"
        assert len(bank.requests) == 1

    def test_expired_token_reauthenticates_without_refresh(self) -> None:
        """Em t=3601 um token de 3600s leva a nova autenticação, nunca refresh."""
        clock = FakeClock()
        bank = FakeBank().add(
            "POST",
            TOKEN_PATH,
            token_response("tok-1", expires_in=3600, refresh_token="ignorado"),
            token_response("tok-2", expires_in=3600),
        )
        manager = _manager(bank, _client_credentials(), clock)

        manager.ensure_valid_token()
        clock.advance(3601)
        assert manager.ensure_valid_token() == "tok-2"

        assert _grant_types(bank) == ["client_credentials", "client_credentials"]
        assert manager.token is not None
        assert manager.token.refresh_token is None

    def test_skew_window_triggers_renewal(self) -> None:
        """Faltando menos de 30s para expirar, o token já não é usado."""
        clock = FakeClock()
        bank = FakeBank().add(
            "POST", TOKEN_PATH, token_response("tok-1"), token_response("tok-2")
        )
        manager = _manager(bank, _client_credentials(), clock)

        manager.ensure_valid_token()
        clock.advance(3571)
        assert manager.ensure_valid_token() == "tok-2"


class TestPasswordGrant:
    """password + refresh_token."""

    def test_token_request_carries_provider_headers(self) -> None:
        """Headers extras do grant vão no endpoint de token."""
        bank = FakeBank().add("POST", TOKEN_PATH, token_response())
        manager = _manager(bank, _password(), FakeClock())

        manager.ensure_valid_token()

        request = bank.requests[0]
        assert request.headers["x-api-key"] == "api-key"
        assert request.headers["context"] == "COBRANCA"
        assert form_of(request)["grant_type"] == "password"
        assert form_of(request)["username"] == "123450101"

    def test_expired_token_uses_refresh(self) -> None:
        """Access expirado com refresh válido faz refresh."""
        clock = FakeClock()
        bank = FakeBank().add(
            "POST",
            TOKEN_PATH,
            token_response("tok-1", expires_in=300, refresh_token="r-1", refresh_expires_in=1800),
            token_response("tok-2", expires_in=300, refresh_token="r-2", refresh_expires_in=1800),
        )
        manager = _manager(bank, _password(), clock)

        manager.ensure_valid_token()
        clock.advance(301)
        assert manager.state is TokenState.NEAR_EXPIRY
        assert manager.ensure_valid_token() == "tok-2"

        refresh_form = form_of(bank.requests[1])
        assert refresh_form == {"grant_type": "refresh_token", "refresh_token": "r-1"}

    def test_expired_refresh_authenticates(self) -> None:
        """Refresh expirado leva a autenticação completa."""
        clock = FakeClock()
        bank = FakeBank().add(
            "POST",
            TOKEN_PATH,
            token_response("tok-1", expires_in=300, refresh_token="r-1", refresh_expires_in=600),
            token_response("tok-2", expires_in=300, refresh_token="r-2", refresh_expires_in=600),
        )
        manager = _manager(bank, _password(), clock)

        manager.ensure_valid_token()
        clock.advance(700)
        assert manager.state is TokenState.EXPIRED
        assert manager.ensure_valid_token() == "tok-2"
        assert _grant_types(bank) == ["password", "password"]

    def test_token_without_refresh_reauthenticates(self) -> None:
        """Resposta sem refresh_token expira e leva a nova autenticação."""
        clock = FakeClock()
        bank = FakeBank().add(
            "POST",
            TOKEN_PATH,
            token_response("tok-1", expires_in=300),
            token_response("tok-2", expires_in=300),
        )
        manager = _manager(bank, _password(), clock)

        manager.ensure_valid_token()
        assert manager.token is not None and manager.token.refresh_token is None
        clock.advance(400)
        assert manager.ensure_valid_token() == "tok-2"
        assert _grant_types(bank) == ["password", "password"]

    def test_refresh_without_refresh_token_is_skipped(self) -> None:
        """Renovação sem refresh_token devolve None sem ir à rede."""
        bank = FakeBank()
        manager = _manager(bank, _password(), FakeClock())

        assert manager._try_refresh(Token(access_token="tok-1", expires_at=0.0), None) is None
        assert bank.requests == []

    def test_rejected_refresh_falls_back_to_authentication(self) -> None:
        """Refresh recusado (401) cai para autenticação completa."""
        clock = FakeClock()
        bank = FakeBank().add(
            "POST",
            TOKEN_PATH,
            token_response("tok-1", expires_in=300, refresh_token="r-1", refresh_expires_in=1800),
            httpx.Response(401, json={"error": "invalid_grant"}),
            token_response("tok-3", expires_in=300, refresh_token="r-3", refresh_expires_in=1800),
        )
        manager = _manager(bank, _password(), clock)

        manager.ensure_valid_token()
        clock.advance(301)
        assert manager.ensure_valid_token() == "tok-3"
        assert _grant_types(bank) == ["password", "refresh_token", "password"]
        assert manager.state is TokenState.VALID


class TestFailures:
    """Falhas do endpoint de token."""

    def test_non_200_raises_authentication_error(self) -> None:
        """Status != 200 vira AuthenticationError com corpo anexado."""
        bank = FakeBank().add(
            "POST", TOKEN_PATH, httpx.Response(400, text="credenciais inválidas")
        )
        manager = _manager(bank, _client_credentials(), FakeClock())

        with pytest.raises(AuthenticationError) as exc_info:
            manager.ensure_valid_token()

        assert exc_info.value.status_code == 400
        assert exc_info.value.detail == "credenciais inválidas"
        assert exc_info.value.is_retryable is False
        assert len(bank.requests) == 1

    def test_network_failure_is_not_retryable(self) -> None:
        """Falha de rede no token vira TransportError sem retry."""

        def _fail(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("conexão recusada", request=request)

        bank = FakeBank().add("POST", TOKEN_PATH, _fail)
        manager = _manager(bank, _client_credentials(), FakeClock())

        with pytest.raises(TransportError) as exc_info:
            manager.ensure_valid_token()
        assert exc_info.value.is_retryable is False

    def test_body_without_access_token_raises_serialization_error(self) -> None:
        """Resposta 200 sem access_token é erro de serialização."""
        bank = FakeBank().add("POST", TOKEN_PATH, httpx.Response(200, json={"expires_in": 60}))
        manager = _manager(bank, _client_credentials(), FakeClock())

        with pytest.raises(SerializationError):
            manager.ensure_valid_token()

    def test_cancelled_context_skips_network(self) -> None:
        """Contexto cancelado falha antes de qualquer requisição."""
        bank = FakeBank().add("POST", TOKEN_PATH, token_response())
        manager = _manager(bank, _client_credentials(), FakeClock())
        ctx = RequestContext()
        ctx.cancel()

        with pytest.raises(RequestCancelledError):
            manager.ensure_valid_token(ctx)
        assert bank.requests == []

    def test_cancel_aborts_token_request_in_flight(self) -> None:
        """cancel() com o endpoint de token lento libera o chamador."""
        release = threading.Event()

        def slow(request: httpx.Request) -> httpx.Response:
            release.wait(5)
            return token_response()

        bank = FakeBank().add("POST", TOKEN_PATH, slow)
        manager = _manager(bank, _client_credentials(), FakeClock())
        ctx = RequestContext()
        timer = threading.Timer(0.2, ctx.cancel)
        timer.start()
        started = time.monotonic()
        try:
            with pytest.raises(RequestCancelledError):
                manager.ensure_valid_token(ctx)
        finally:
            release.set()
            timer.cancel()

        assert time.monotonic() - started < 2.0
        assert manager.token is None
        assert manager.state is TokenState.UNAUTHENTICATED


class TestInvalidate:
    """invalidate() e authenticate()."""

    def test_invalidate_forces_new_token(self) -> None:
        """Após invalidate, próxima chamada autentica de novo."""
        bank = FakeBank().add(
            "POST", TOKEN_PATH, token_response("tok-1"), token_response("tok-2")
        )
        manager = _manager(bank, _client_credentials(), FakeClock())

        manager.ensure_valid_token()
        manager.invalidate()
        assert manager.state is TokenState.UNAUTHENTICATED
        assert manager.ensure_valid_token() == "tok-2"

    def test_authenticate_replaces_valid_token(self) -> None:
        """authenticate() ignora o token atual."""
        bank = FakeBank().add(
            "POST", TOKEN_PATH, token_response("tok-1"), token_response("tok-2")
        )
        manager = _manager(bank, _client_credentials(), FakeClock())

        manager.ensure_valid_token()
        token = manager.authenticate()
        assert token.access_token == "tok-2"
        assert manager.ensure_valid_token() == "tok-2"

    def test_stale_invalidate_keeps_newer_token(self) -> None:
        """401 de requisição com token antigo não derruba o token já renovado."""
        bank = FakeBank().add(
            "POST", TOKEN_PATH, token_response("tok-1"), token_response("tok-2")
        )
        manager = _manager(bank, _client_credentials(), FakeClock())

        stale = manager.ensure_valid_token()
        manager.authenticate()
        manager.invalidate(stale)
        assert manager.ensure_valid_token() == "tok-2"
        assert len(bank.requests) == 2

        manager.invalidate("tok-2")
        assert manager.state is TokenState.UNAUTHENTICATED


class TestConcurrency:
    """Chamadores concorrentes convergem para uma requisição de token."""

    def test_single_token_request_for_concurrent_callers(self) -> None:
        """Oito threads sem token geram uma única autenticação."""

        def _slow_token(request: httpx.Request) -> httpx.Response:
            time.sleep(0.05)
            return token_response("shared")

        bank = FakeBank().add("POST", TOKEN_PATH, _slow_token)
        manager = _manager(bank, _client_credentials(), FakeClock())
        barrier = threading.Barrier(8)
        results: list[str] = []
        results_lock = threading.Lock()

        def _worker() -> None:
            barrier.wait()
            token = manager.ensure_valid_token()
            with results_lock:
                results.append(token)

        threads = [threading.Thread(target=_worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=5)

        assert results == ["shared"] * 8
        assert len(bank.calls("POST", TOKEN_PATH)) == 1
