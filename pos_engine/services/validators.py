"""Girdi validasyonu - ürün alanları ve ortak hata tipleri."""

from __future__ import annotations

from dataclasses import dataclass, field

MAX_PRICE = 1_000_000
MAX_SKU_LENGTH = 50


class ValidationError(Exception):
    """Geçersiz girdi ya da iş kuralı ihlali."""
    pass


@dataclass
class ValidationResult:
    is_valid: bool
    errors: list[str] = field(default_factory=list)


def validate_price(price: float) -> bool:
    return 0 < price < MAX_PRICE


def validate_tax(tax_percent: float) -> bool:
    return 0 <= tax_percent <= 100


def validate_required(value: str) -> bool:
    return bool(value and value.strip())


def validate_sku(sku: str) -> bool:
    return validate_required(sku) and len(sku.strip()) <= MAX_SKU_LENGTH


def validate_product(
    name: str,
    price: float,
    category: str,
    sku: str,
    tax_percent: float = 0.0,
) -> ValidationResult:
    """Ürün alanlarını doğrular; tüm hataları tek seferde toplar."""
    errors = []

    if not validate_required(name):
        errors.append("Ürün adı zorunludur")
    if not validate_required(category):
        errors.append("Kategori zorunludur")
    if not validate_price(price):
        errors.append(f"Fiyat 0 ile {MAX_PRICE} arasında olmalı: {price}")
    if not validate_tax(tax_percent):
        errors.append(f"Vergi oranı 0-100 arasında olmalı: {tax_percent}")
    if not validate_sku(sku):
        errors.append(f"SKU boş olamaz ve en fazla {MAX_SKU_LENGTH} karakter olmalı")

    return ValidationResult(is_valid=len(errors) == 0, errors=errors)
