"""Ürün kataloğu ve mağaza ayarları veri modelleri."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Optional

from pos_engine.models.common import now_millis


class TokenPrintMode(str, Enum):
    SINGLE = "single"
    MULTI = "multi"


@dataclass
class Product:
    id: str
    name: str
    price: float
    category: str
    sku: str = ""
    tax_percent: float = 0.0
    is_active: bool = True
    image_uri: Optional[str] = None
    created_at: int = field(default_factory=now_millis)
    updated_at: int = field(default_factory=now_millis)

    def to_dict(self) -> dict:
        data: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "category": self.category,
            "sku": self.sku,
            "tax": self.tax_percent,
            "isActive": self.is_active,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
        if self.image_uri is not None:
            data["imageUri"] = self.image_uri
        return data

    @classmethod
    def from_dict(cls, data: dict) -> Product:
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            price=float(data["price"]),
            category=str(data.get("category", "")),
            sku=str(data.get("sku", "")),
            tax_percent=float(data.get("tax", data.get("taxPercent", 0))),
            is_active=bool(data.get("isActive", True)),
            image_uri=data.get("imageUri"),
            created_at=int(data.get("createdAt", 0)),
            updated_at=int(data.get("updatedAt", 0)),
        )


@dataclass
class Category:
    id: str
    name: str
    color: str

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> Category:
        return cls(id=str(data["id"]), name=str(data["name"]), color=str(data.get("color", "")))


@dataclass
class Settings:
    currency: str = "INR"
    default_tax_rate: float = 0.0
    shop_name: str = "Tea & Juice Shop"
    auto_print_after_checkout: bool = False
    token_print_mode: TokenPrintMode = TokenPrintMode.SINGLE

    def to_dict(self) -> dict:
        return {
            "currency": self.currency,
            "defaultTaxRate": self.default_tax_rate,
            "shopName": self.shop_name,
            "autoPrintAfterCheckout": self.auto_print_after_checkout,
            "tokenPrintMode": self.token_print_mode.value,
        }
