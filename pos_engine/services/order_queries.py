"""Order Query Layer - sipariş günlüğü üzerinde salt okunur filtreler.

Tüm sorgular günlüğün tamamını doğrusal tarar; tek şubeli bir satış noktası
için günlük binlerce kayıt mertebesinde kalır.
"""

from __future__ import annotations

from typing import Optional

from pos_engine.models.order import Order, OrderStatus
from pos_engine.services.order_log import OrderLog
from pos_engine.storage import KeyValueStore


class OrderQueries:
    """Sipariş günlüğü sorguları."""

    def __init__(self, store: KeyValueStore):
        self.order_log = OrderLog(store)

    def all_orders(self) -> list[Order]:
        return self.order_log.load_all()

    def by_id(self, order_id: str) -> Optional[Order]:
        for order in self.order_log.load_all():
            if order.id == order_id:
                return order
        return None

    def by_date_range(self, start: int, end: int) -> list[Order]:
        """Zaman damgası [start, end] aralığındaki siparişler (iki uç dahil)."""
        return [o for o in self.order_log.load_all() if start <= o.timestamp <= end]

    def billing_orders(self) -> list[Order]:
        return [o for o in self.order_log.load_all() if o.is_billing_order]

    def token_orders(self) -> list[Order]:
        return [o for o in self.order_log.load_all() if o.is_token_order]

    def by_token_number(self, token_number: int) -> list[Order]:
        """Sipariş tokenı ya da herhangi bir kalem tokenı eşleşen siparişler."""
        return [
            o for o in self.order_log.load_all()
            if o.token_number == token_number
            or any(item.token_number == token_number for item in o.items)
        ]

    def by_status(self, status: OrderStatus) -> list[Order]:
        """Durumu eşleşen token siparişleri; durumsuz token siparişi `preparing` sayılır."""
        status = OrderStatus(status)
        return [
            o for o in self.order_log.load_all()
            if o.is_token_order and (o.status or OrderStatus.PREPARING) == status
        ]
