"""Agregador de settings do serviço de cobrança.

Re-exporta as settings de cada provedor. Um módulo por provedor para
isolamento de mudanças.
"""

from __future__ import annotations

from config.settings.base import (
    SUPPORTED_PROVIDERS,
    BankEnvironment,
    BaseSettings,
    Environment,
    get_base_settings,
)
from config.settings.sicoob import (
    SicoobSettings,
    get_sicoob_settings,
)
from config.settings.sicredi import (
    SicrediSettings,
    get_sicredi_settings,
)

__all__ = [
    "SUPPORTED_PROVIDERS",
    "BankEnvironment",
    "BaseSettings",
    "Environment",
    "SicoobSettings",
    "SicrediSettings",
    "get_base_settings",
    "get_sicoob_settings",
    "get_sicredi_settings",
]
