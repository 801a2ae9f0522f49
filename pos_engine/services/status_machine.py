"""Order Status Machine - token siparişlerinin hazırlık yaşam döngüsü.

preparing -> ready -> completed (terminal)

Yalnızca bir sonraki adıma geçişe izin verilir; geri, atlayan ya da aynı
duruma geçişler ve fatura siparişleri üzerindeki geçişler reddedilir.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional, Union

from pos_engine.models.order import Order, OrderStatus
from pos_engine.services.order_log import OrderLog
from pos_engine.services.validators import ValidationError
from pos_engine.storage import KeyValueStore

logger = logging.getLogger(__name__)

NEXT_STATUS: dict[OrderStatus, OrderStatus] = {
    OrderStatus.PREPARING: OrderStatus.READY,
    OrderStatus.READY: OrderStatus.COMPLETED,
}


class InvalidTransitionError(ValidationError):
    """İzin verilmeyen durum geçişi."""
    pass


def current_status(order: Order) -> Optional[OrderStatus]:
    """Token siparişinin etkin durumu; durum alanı yoksa `preparing`. Fatura siparişi için None."""
    if not order.is_token_order:
        return None
    return order.status or OrderStatus.PREPARING


def can_transition(current: OrderStatus, new_status: OrderStatus) -> bool:
    return NEXT_STATUS.get(current) == new_status


class OrderStatusMachine:
    """Token siparişlerinin durumunu ileri yönde güncelleyen servis."""

    def __init__(self, store: KeyValueStore):
        self.order_log = OrderLog(store)

    def update_status(
        self, order_id: str, new_status: Union[OrderStatus, str]
    ) -> Optional[Order]:
        """Sipariş durumunu günceller.

        Returns:
            Güncellenmiş sipariş; sipariş bulunamazsa None (hiçbir yazma yapılmaz).

        Raises:
            InvalidTransitionError: Geçiş yasal bir ileri adım değilse.
        """
        try:
            target = OrderStatus(new_status)
        except ValueError:
            raise InvalidTransitionError(f"Bilinmeyen sipariş durumu: {new_status}")

        def apply(order: Order) -> Order:
            current = current_status(order)
            if current is None:
                raise InvalidTransitionError(
                    f"Fatura siparişinin durumu yoktur: {order.id}"
                )
            if not can_transition(current, target):
                raise InvalidTransitionError(
                    f"Geçersiz durum geçişi: {current.value} -> {target.value} ({order.id})"
                )
            return replace(order, status=target)

        updated = self.order_log.replace(order_id, apply)
        if updated is None:
            logger.warning("Durum güncellemesi: sipariş bulunamadı: %s", order_id)
            return None

        logger.info("Sipariş durumu güncellendi: %s -> %s", order_id, target.value)
        return updated

    def advance_status(self, order_id: str) -> Optional[Order]:
        """Token siparişini bir sonraki duruma taşır."""
        order = next(
            (o for o in self.order_log.load_all() if o.id == order_id), None
        )
        if order is None:
            return None
        current = current_status(order)
        if current is None or current not in NEXT_STATUS:
            raise InvalidTransitionError(
                f"Siparişin ilerletilecek bir sonraki durumu yok: {order_id}"
            )
        return self.update_status(order_id, NEXT_STATUS[current])
