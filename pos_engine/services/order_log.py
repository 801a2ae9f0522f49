"""Sipariş günlüğü - tüm siparişlerin tek anahtar altında tutulduğu koleksiyon.

Her değişiklik koleksiyonun tamamını okur, bellekte değiştirir ve tamamını geri
yazar. Aynı süreç içindeki eşzamanlı yazıcılar `orders` anahtar kilidiyle
serileştirilir.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from pos_engine.models.order import Order
from pos_engine.storage import KeyValueStore

logger = logging.getLogger(__name__)

ORDERS_KEY = "orders"


class OrderLog:
    """Sipariş koleksiyonunun okuma/yazma katmanı."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    def load_all(self) -> list[Order]:
        """Tüm siparişleri döndürür; çözümlenemeyen kayıtlar atlanır."""
        orders = []
        for raw in self.store.get_array(ORDERS_KEY):
            try:
                orders.append(Order.from_dict(raw))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Bozuk sipariş kaydı atlandı: %s", e)
        return orders

    def save_all(self, orders: list[Order]) -> None:
        self.store.set_array(ORDERS_KEY, [o.to_dict() for o in orders])

    def append(self, order: Order) -> Order:
        with self.store.lock(ORDERS_KEY):
            orders = self.load_all()
            orders.append(order)
            self.save_all(orders)
        return order

    def replace(
        self, order_id: str, update: Callable[[Order], Order]
    ) -> Optional[Order]:
        """Bir siparişi yerinde günceller; sipariş yoksa hiçbir şey yazmadan None döner.

        `update` bir istisna fırlatırsa koleksiyon yazılmaz.
        """
        with self.store.lock(ORDERS_KEY):
            orders = self.load_all()
            for index, order in enumerate(orders):
                if order.id == order_id:
                    updated = update(order)
                    orders[index] = updated
                    self.save_all(orders)
                    return updated
        return None
