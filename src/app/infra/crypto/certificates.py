"""Validação do par certificado/chave usado em mTLS.

Executada na construção do adaptador, antes de qualquer handshake: falha
cedo e com mensagem clara em vez de um erro TLS opaco na primeira chamada.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from cryptography import x509
from cryptography.hazmat.primitives import serialization

from .errors import CertificateError


@dataclass(frozen=True)
class CertificateInfo:
    """Resumo do certificado cliente (para logs)."""

    subject: str
    issuer: str
    serial_number: int
    not_valid_before: datetime
    not_valid_after: datetime

    def days_until_expiry(self, now: datetime | None = None) -> int:
        reference = now or datetime.now(timezone.utc)
        return (self.not_valid_after - reference).days


def _read(path: str, label: str) -> bytes:
    file_path = Path(path)
    if not file_path.is_file():
        raise CertificateError(f"{label} não encontrado: {path}")
    return file_path.read_bytes()


def _load_private_key(data: bytes, passphrase: str | None) -> Any:
    password = passphrase.encode() if passphrase else None
    try:
        return serialization.load_pem_private_key(data, password=password)
    except (ValueError, TypeError) as exc:
        raise CertificateError(f"Chave privada inválida: {exc}") from exc


def _public_bytes(key: Any) -> bytes:
    return key.public_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )


def validate_client_certificate(
    cert_path: str,
    key_path: str,
    *,
    passphrase: str | None = None,
    now: datetime | None = None,
) -> CertificateInfo:
    """Valida o par PEM de mTLS.

    Verifica que ambos os arquivos existem e são PEM válidos, que a chave
    corresponde ao certificado e que o certificado está dentro da validade.

    Args:
        cert_path: Caminho do certificado PEM
        key_path: Caminho da chave privada PEM
        passphrase: Senha da chave (opcional)
        now: Instante de referência (testes)

    Returns:
        CertificateInfo do certificado

    Raises:
        CertificateError: Se qualquer verificação falhar
    """
    try:
        certificate = x509.load_pem_x509_certificate(_read(cert_path, "Certificado"))
    except ValueError as exc:
        raise CertificateError(f"Certificado inválido: {exc}") from exc
    private_key = _load_private_key(_read(key_path, "Chave privada"), passphrase)

    if _public_bytes(private_key.public_key()) != _public_bytes(certificate.public_key()):
        raise CertificateError("Chave privada não corresponde ao certificado")

    reference = now or datetime.now(timezone.utc)
    not_before = certificate.not_valid_before_utc
    not_after = certificate.not_valid_after_utc
    if reference < not_before:
        raise CertificateError(f"Certificado ainda não é válido (início {not_before.isoformat()})")
    if reference >= not_after:
        raise CertificateError(f"Certificado expirado em {not_after.isoformat()}")

    return CertificateInfo(
        subject=certificate.subject.rfc4514_string(),
        issuer=certificate.issuer.rfc4514_string(),
        serial_number=certificate.serial_number,
        not_valid_before=not_before,
        not_valid_after=not_after,
    )
