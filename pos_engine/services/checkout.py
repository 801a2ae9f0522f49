"""Checkout - sepeti fatura ya da token siparişine dönüştüren akış.

Token akışında yazdırma moduna göre:
- single: global sayaçtan tek token alınır, sipariş tek tokenlı oluşturulur
- multi: her birime kategori-gün sayacından ayrı token verilir
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from pos_engine.models.catalog import TokenPrintMode
from pos_engine.models.order import Order
from pos_engine.services.cart import Cart
from pos_engine.services.order_engine import EmptyCartError, OrderEngine
from pos_engine.services.settings import SettingsService

logger = logging.getLogger(__name__)


@dataclass
class CheckoutResult:
    order: Order
    auto_print: bool = False


class CheckoutService:
    """Sepet ödemesini Order Engine'e bağlayan servis."""

    def __init__(self, order_engine: OrderEngine, settings_service: SettingsService):
        self.order_engine = order_engine
        self.settings_service = settings_service

    def _ensure_not_empty(self, cart: Cart) -> None:
        # Token tüketilmeden önce kontrol edilir
        if cart.is_empty():
            raise EmptyCartError("Sepet boş, ödeme alınamaz")

    def checkout_billing(self, cart: Cart, user_id: str) -> CheckoutResult:
        self._ensure_not_empty(cart)
        order = self.order_engine.create_order(
            cart.lines,
            user_id,
            payment_method=cart.payment_method,
            is_compliment=cart.is_compliment,
        )
        cart.clear()
        return CheckoutResult(order, self.settings_service.get_settings().auto_print_after_checkout)

    def checkout_tokens(self, cart: Cart, user_id: str) -> CheckoutResult:
        self._ensure_not_empty(cart)
        settings = self.settings_service.get_settings()

        if settings.token_print_mode == TokenPrintMode.SINGLE:
            token = self.order_engine.token_allocator.next_global_token()
            order = self.order_engine.create_order(
                cart.lines,
                user_id,
                token_number=token,
                payment_method=cart.payment_method,
                is_compliment=cart.is_compliment,
            )
        else:
            order = self.order_engine.create_token_order(
                cart.lines,
                user_id,
                payment_method=cart.payment_method,
                is_compliment=cart.is_compliment,
            )

        cart.clear()
        logger.info(
            "Token ödemesi tamamlandı: %s (mod=%s, token=%s)",
            order.id,
            settings.token_print_mode.value,
            order.token_number,
        )
        return CheckoutResult(order, settings.auto_print_after_checkout)
