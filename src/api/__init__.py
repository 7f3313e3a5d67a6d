"""API: camada de borda com os provedores bancários.

Responsabilidades:
- Montar requisições específicas de cada banco (headers, endpoints)
- Construir payloads de fio a partir dos modelos de domínio
- Normalizar respostas e envelopes de erro para modelos internos

Subpastas:
- connectors/: adaptadores HTTP por provedor
- normalizers/: conversão de respostas externas -> modelos internos
- payload_builders/: construção de payloads para APIs externas

NÃO PODE conter: regras de negócio de cobrança, persistência, orquestração.
"""
