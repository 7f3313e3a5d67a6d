"""App — núcleo do serviço de cobrança: domínio, infraestrutura e wiring.

Subpastas:
- bootstrap/: composition root (settings, logging, factory de provedor)
- domain/: modelos de boleto, PIX, instruções e dinheiro (sem IO)
- infra/: implementações concretas de IO (http, auth, crypto)
- protocols/: contratos/interfaces consumidos por api/
- observability/: correlation_id por contexto

Padrão: app executa; api adapta; config configura.
"""
