"""Utilitários comuns aos normalizers bancários (Sicoob, Sicredi, PIX)."""

from .fields import first_present, nested_object, parse_date, parse_int, text_or_none

__all__ = [
    "first_present",
    "nested_object",
    "parse_date",
    "parse_int",
    "text_or_none",
]
