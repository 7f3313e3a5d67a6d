"""Parsing dos envelopes de erro dos provedores.

Formatos reconhecidos, na ordem:
- {"codigo", "mensagem", "detalhes"}          (Sicoob)
- {"mensagens": [{"codigo", "mensagem"}]}     (Sicoob, validação)
- {"status", "message", "error"}              (Sicredi)
- {"title", "detail", "status", "violacoes"}  (PIX, RFC 7807)

Corpo sem nenhum destes formatos retorna None e o executor levanta
UndecodedProviderError com status e corpo brutos.
"""

from __future__ import annotations

from typing import Any

from app.infra.http.errors import ProviderError


def _text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _from_codigo(payload: dict[str, Any], status: int, provider: str) -> ProviderError | None:
    message = _text(payload.get("mensagem"))
    if message is None:
        return None
    return ProviderError(
        code=_text(payload.get("codigo")) or str(status),
        message=message,
        detail=_text(payload.get("detalhes")),
        http_status=status,
        provider_name=provider,
    )


def _from_mensagens(payload: dict[str, Any], status: int, provider: str) -> ProviderError | None:
    items = payload.get("mensagens")
    if not isinstance(items, list) or not items:
        return None
    entries = [item for item in items if isinstance(item, dict) and _text(item.get("mensagem"))]
    if not entries:
        return None
    first = entries[0]
    rest = "; ".join(str(item["mensagem"]).strip() for item in entries[1:])
    return ProviderError(
        code=_text(first.get("codigo")) or str(status),
        message=str(first["mensagem"]).strip(),
        detail=rest or None,
        http_status=status,
        provider_name=provider,
    )


def _from_message(payload: dict[str, Any], status: int, provider: str) -> ProviderError | None:
    message = _text(payload.get("message"))
    if message is None:
        return None
    return ProviderError(
        code=_text(payload.get("code")) or _text(payload.get("status")) or str(status),
        message=message,
        detail=_text(payload.get("error")),
        http_status=status,
        provider_name=provider,
    )


def _from_problem(payload: dict[str, Any], status: int, provider: str) -> ProviderError | None:
    title = _text(payload.get("title"))
    if title is None:
        return None
    detail = _text(payload.get("detail"))
    violations = payload.get("violacoes")
    if isinstance(violations, list) and violations:
        reasons = [
            f"{item.get('propriedade', '?')}: {item.get('razao', '')}".strip()
            for item in violations
            if isinstance(item, dict)
        ]
        detail = "; ".join(filter(None, [detail, *reasons])) or None
    problem_type = _text(payload.get("type"))
    return ProviderError(
        code=(problem_type.rsplit("/", 1)[-1] if problem_type else None)
        or _text(payload.get("status"))
        or str(status),
        message=title,
        detail=detail,
        http_status=status,
        provider_name=provider,
    )


_PARSERS = (_from_codigo, _from_mensagens, _from_message, _from_problem)


def parse_error_envelope(payload: Any, status: int, provider: str) -> ProviderError | None:
    """Converte envelope de erro conhecido em ProviderError.

    Args:
        payload: JSON decodificado do corpo de erro
        status: Status HTTP
        provider: Nome do provedor

    Returns:
        ProviderError ou None se o formato não é reconhecido
    """
    if isinstance(payload, list) and payload and isinstance(payload[0], dict):
        # Alguns endpoints devolvem a lista de mensagens sem envelope
        payload = {"mensagens": payload}
    if not isinstance(payload, dict):
        return None
    for parser in _PARSERS:
        error = parser(payload, status, provider)
        if error is not None:
            return error
    return None
