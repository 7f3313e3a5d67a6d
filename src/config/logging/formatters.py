"""Formatter JSON com campos obrigatórios.

Campos: correlation_id, service, asctime, level, logger, message.
Campos de `extra` (provider, status_code, latency_ms...) são anexados pelo
JsonFormatter automaticamente.
"""

from __future__ import annotations

from pythonjsonlogger.json import JsonFormatter

REQUIRED_LOG_FIELDS = (
    "asctime",
    "levelname",
    "name",
    "message",
    "correlation_id",
    "service",
)

FIELD_RENAME_MAP = {
    "levelname": "level",
    "name": "logger",
}


def create_json_formatter() -> JsonFormatter:
    """Cria formatter JSON com campos padronizados.

    Exemplo de output:
        {
            "asctime": "2026-02-02T10:30:00",
            "level": "INFO",
            "logger": "app.infra.auth.token_manager",
            "message": "token_authenticated",
            "correlation_id": "abc-123",
            "service": "cobranca_bancos",
            "provider": "SICREDI"
        }
    """
    format_string = " ".join(f"%({field})s" for field in REQUIRED_LOG_FIELDS)

    return JsonFormatter(
        format_string,
        rename_fields=FIELD_RENAME_MAP,
    )
