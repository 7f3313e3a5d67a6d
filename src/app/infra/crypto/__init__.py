"""Certificados cliente para mTLS com os provedores bancários.

Localizado em app/infra/ para manter boundaries corretas:
- app/ não importa de api/ (exceto via bootstrap)
- usado pelos adaptadores na construção do cliente HTTP
"""

from .certificates import CertificateInfo, validate_client_certificate
from .errors import CertificateError

__all__ = [
    "CertificateError",
    "CertificateInfo",
    "validate_client_certificate",
]
