"""Sipariş, sepet satırı ve satış raporu veri modelleri.

Kalıcı JSON şekli (camelCase anahtarlar) depolamadaki fiili şemadır;
`to_dict` / `from_dict` bu şekle birebir eşlenir.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class OrderStatus(str, Enum):
    PREPARING = "preparing"
    READY = "ready"
    COMPLETED = "completed"


class ReportKind(str, Enum):
    BILLING = "billing"
    TOKEN = "token"


class PaymentMethod(str, Enum):
    CASH = "Cash"
    CARD = "Card"
    SCANNER = "Scanner"
    BANK_ACCOUNT = "Bank Account"


@dataclass
class CartLine:
    product_id: str
    product_name: str
    quantity: int
    unit_price: float
    tax_percent: float = 0.0

    @property
    def pre_tax_amount(self) -> float:
        return self.quantity * self.unit_price

    @property
    def tax_amount(self) -> float:
        return self.pre_tax_amount * (self.tax_percent / 100)

    @property
    def line_subtotal(self) -> float:
        """Vergi dahil satır tutarı: adet × birim fiyat × (1 + vergi/100)."""
        return self.quantity * self.unit_price * (1 + self.tax_percent / 100)


@dataclass
class OrderItem:
    product_id: str
    product_name: str
    quantity: int
    unit_price: float
    tax_percent: float
    subtotal: float
    token_number: Optional[int] = None
    category: Optional[str] = None

    def to_dict(self) -> dict:
        data: dict[str, Any] = {
            "productId": self.product_id,
            "productName": self.product_name,
            "quantity": self.quantity,
            "unitPrice": self.unit_price,
            "tax": self.tax_percent,
            "subtotal": self.subtotal,
        }
        if self.token_number is not None:
            data["tokenNumber"] = self.token_number
        if self.category is not None:
            data["category"] = self.category
        return data

    @classmethod
    def from_dict(cls, data: dict) -> OrderItem:
        tax = data.get("tax", data.get("taxPercent", 0))
        return cls(
            product_id=str(data["productId"]),
            product_name=str(data.get("productName", "")),
            quantity=int(data["quantity"]),
            unit_price=float(data["unitPrice"]),
            tax_percent=float(tax),
            subtotal=float(data["subtotal"]),
            token_number=data.get("tokenNumber"),
            category=data.get("category"),
        )


@dataclass
class Order:
    id: str
    items: list[OrderItem]
    subtotal: float
    tax: float
    total: float
    timestamp: int
    user_id: str
    token_number: Optional[int] = None
    status: Optional[OrderStatus] = None
    payment_method: Optional[str] = None
    is_compliment: bool = False

    @property
    def is_token_order(self) -> bool:
        """Siparişin kendisi ya da herhangi bir kalemi token taşıyorsa token siparişidir."""
        if self.token_number is not None:
            return True
        return any(item.token_number is not None for item in self.items)

    @property
    def is_billing_order(self) -> bool:
        return not self.is_token_order

    def token_numbers(self) -> list[int]:
        """Siparişe ait tüm token numaralarını (sipariş + kalem) sırayla döndürür."""
        numbers: list[int] = []
        if self.token_number is not None:
            numbers.append(self.token_number)
        for item in self.items:
            if item.token_number is not None and item.token_number not in numbers:
                numbers.append(item.token_number)
        return numbers

    def to_dict(self) -> dict:
        data: dict[str, Any] = {
            "id": self.id,
            "items": [item.to_dict() for item in self.items],
            "subtotal": self.subtotal,
            "tax": self.tax,
            "total": self.total,
            "timestamp": self.timestamp,
            "userId": self.user_id,
        }
        if self.token_number is not None:
            data["tokenNumber"] = self.token_number
        if self.status is not None:
            data["status"] = self.status.value
        if self.payment_method is not None:
            data["paymentMethod"] = self.payment_method
        if self.is_compliment:
            data["isCompliment"] = True
        return data

    @classmethod
    def from_dict(cls, data: dict) -> Order:
        status = data.get("status")
        return cls(
            id=str(data["id"]),
            items=[OrderItem.from_dict(i) for i in data.get("items", [])],
            subtotal=float(data["subtotal"]),
            tax=float(data["tax"]),
            total=float(data["total"]),
            timestamp=int(data["timestamp"]),
            user_id=str(data.get("userId", "")),
            token_number=data.get("tokenNumber"),
            status=OrderStatus(status) if status else None,
            payment_method=data.get("paymentMethod"),
            is_compliment=bool(data.get("isCompliment", False)),
        )


@dataclass
class TopProduct:
    product_id: str
    product_name: str
    quantity: int
    revenue: float

    def to_dict(self) -> dict:
        return {
            "productId": self.product_id,
            "productName": self.product_name,
            "quantity": self.quantity,
            "revenue": self.revenue,
        }


@dataclass
class DateRange:
    start: int
    end: int

    def contains(self, timestamp: int) -> bool:
        return self.start <= timestamp <= self.end


@dataclass
class SalesReport:
    total_sales: float
    total_orders: int
    average_order_value: float
    date_range: DateRange
    top_products: list[TopProduct] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "totalSales": self.total_sales,
            "totalOrders": self.total_orders,
            "averageOrderValue": self.average_order_value,
            "topProducts": [p.to_dict() for p in self.top_products],
            "dateRange": {"start": self.date_range.start, "end": self.date_range.end},
        }
