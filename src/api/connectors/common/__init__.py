"""Peças compartilhadas pelos connectors bancários.

- adapter: fluxo de operações comum (BankAdapter)
- catalog: catálogo YAML de códigos e instruções por provedor
- envelopes: parsing dos envelopes de erro
- pix_endpoints: endpoints PIX padrão BACEN
"""

from .adapter import BankAdapter
from .catalog import InstructionSpec, ProviderCatalog, load_provider_catalog
from .envelopes import parse_error_envelope

__all__ = [
    "BankAdapter",
    "InstructionSpec",
    "ProviderCatalog",
    "load_provider_catalog",
    "parse_error_envelope",
]
