"""Infraestrutura HTTP compartilhada pelos adaptadores bancários."""

from .client import HttpClientConfig, backoff_seconds, create_http_client
from .context import RequestContext
from .encoding import decode_json, encode_form, encode_json
from .endpoint import BodyEncoding, Endpoint, ResponseKind
from .errors import (
    AuthenticationError,
    BankProviderError,
    ErrorCategory,
    PartialInstructionError,
    ProviderAPIError,
    ProviderError,
    RequestCancelledError,
    RequestValidationError,
    SerializationError,
    TransportError,
    UndecodedProviderError,
)
from .executor import ExecutorResponse, RequestExecutor

__all__ = [
    "AuthenticationError",
    "BankProviderError",
    "BodyEncoding",
    "Endpoint",
    "ErrorCategory",
    "ExecutorResponse",
    "PartialInstructionError",
    "HttpClientConfig",
    "ProviderAPIError",
    "ProviderError",
    "RequestCancelledError",
    "RequestContext",
    "RequestExecutor",
    "RequestValidationError",
    "ResponseKind",
    "SerializationError",
    "TransportError",
    "UndecodedProviderError",
    "backoff_seconds",
    "create_http_client",
    "decode_json",
    "encode_form",
    "encode_json",
]
