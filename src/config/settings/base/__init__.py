"""Agregador de settings base."""

from __future__ import annotations

from config.settings.base.core import (
    SUPPORTED_PROVIDERS,
    BankEnvironment,
    BaseSettings,
    Environment,
    get_base_settings,
    parse_bank_environment,
)

__all__ = [
    "SUPPORTED_PROVIDERS",
    "BankEnvironment",
    "BaseSettings",
    "Environment",
    "get_base_settings",
    "parse_bank_environment",
]
