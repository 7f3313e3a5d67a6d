"""Erros de criptografia/certificados."""


class CertificateError(Exception):
    """Par certificado/chave de mTLS inválido, divergente ou expirado."""
