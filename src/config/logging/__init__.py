"""Configuração de logging estruturado.

Uso:
    from config.logging import configure_logging, get_logger

    # Na inicialização (app/bootstrap)
    configure_logging(level="INFO", service_name="cobranca_bancos")

    # Em qualquer módulo
    logger = get_logger(__name__)
    logger.info("boleto_created", extra={"provider": "SICREDI", "latency_ms": 42})

Campos obrigatórios em todo log:
- correlation_id
- service
- level
- logger
- message
- asctime

Segredos (tokens, senhas, client_secret) e documentos de pagador nunca
aparecem nos logs: SensitiveFieldFilter mascara esses campos em `extra`.
"""

from config.logging.config import configure_logging, get_logger
from config.logging.filters import (
    SENSITIVE_FIELDS,
    CorrelationIdFilter,
    SensitiveFieldFilter,
)
from config.logging.formatters import (
    FIELD_RENAME_MAP,
    REQUIRED_LOG_FIELDS,
    create_json_formatter,
)

__all__ = [
    "FIELD_RENAME_MAP",
    "REQUIRED_LOG_FIELDS",
    "SENSITIVE_FIELDS",
    # Filters
    "CorrelationIdFilter",
    "SensitiveFieldFilter",
    # Configuração principal
    "configure_logging",
    # Formatters
    "create_json_formatter",
    "get_logger",
]
