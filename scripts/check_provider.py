#!/usr/bin/env python3
"""Verifica credenciais e conectividade com o provedor bancário.

Uso:
    python scripts/check_provider.py --provider SICOOB

Padrão: usa BANK_PROVIDER. Executa somente a autenticação OAuth2
(nenhum boleto é emitido).
"""

from __future__ import annotations

import argparse
import sys

from app.bootstrap import create_bank_provider, initialize_app, validate_runtime_settings
from app.infra.http import BankProviderError, RequestContext
from app.observability import correlation_scope


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--provider",
        default=None,
        help="SICOOB ou SICREDI. Se omitido, usa BANK_PROVIDER.",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=30.0,
        help="Prazo total em segundos para a verificação.",
    )
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    initialize_app()
    validate_runtime_settings(args.provider)
    provider = create_bank_provider(args.provider)
    with correlation_scope() as correlation_id:
        try:
            provider.health_check(RequestContext.with_timeout(args.timeout))
        except BankProviderError as exc:
            print(f"[{provider.provider_name}] falha ({correlation_id}): {exc}")
            return 1
        finally:
            provider.close()
    print(f"[{provider.provider_name}] ok ({correlation_id})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
