"""Connectors por provedor bancário: adapters de borda para APIs externas.

Estrutura:
- common/: fluxo compartilhado, catálogo YAML, envelopes de erro, PIX
- sicoob/: API Cobrança Bancária v2 + PIX (client_credentials, mTLS)
- sicredi/: API Cobrança Boleto v1 + PIX (password + refresh_token)

Cada provedor tem seu próprio connector, garantindo SRP e isolamento de falhas.
"""

__all__: list[str] = []
