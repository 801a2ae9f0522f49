"""Order Engine - sepet içeriğinden sipariş oluşturma.

- Fatura siparişi: sepet satırları olduğu gibi kaleme dönüşür
- Token siparişi: her satır adet kadar tekil kaleme açılır, her birime
  kategori-gün sayacından yeni bir token verilir
- İkram (compliment) siparişlerinde kalem ve adetler korunur, tüm parasal
  alanlar sıfırlanır
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Callable, Optional, Union

from pos_engine.models.common import generate_id, now_millis
from pos_engine.models.order import CartLine, Order, OrderItem, OrderStatus, PaymentMethod
from pos_engine.services.order_log import OrderLog
from pos_engine.services.token_allocator import TokenAllocator
from pos_engine.services.validators import ValidationError
from pos_engine.storage import KeyValueStore

logger = logging.getLogger(__name__)

# Ürün çözümlenemediğinde kullanılan varsayılan kategori
FALLBACK_CATEGORY = "Other"


class EmptyCartError(ValidationError):
    """Boş sepetten sipariş oluşturulamaz."""
    pass


class OrderEngine:
    """Sepet satırlarından siparişleri oluşturup sipariş günlüğüne ekleyen servis.

    `catalog`, `get_product_by_id(product_id)` metodunu sağlayan herhangi bir
    nesne olabilir (ör. ProductCatalog).
    """

    def __init__(
        self,
        store: KeyValueStore,
        catalog: Optional[Any] = None,
        token_allocator: Optional[TokenAllocator] = None,
        clock: Optional[Callable[[], int]] = None,
    ):
        self.order_log = OrderLog(store)
        self.catalog = catalog
        self.token_allocator = token_allocator or TokenAllocator(store)
        self._clock = clock or now_millis

    # --- Yardımcılar ---

    @staticmethod
    def _validate_lines(items: list[CartLine]) -> None:
        if not items:
            raise EmptyCartError("Sepet boş, sipariş oluşturulamaz")
        for line in items:
            if line.quantity < 1:
                raise ValidationError(
                    f"Adet en az 1 olmalıdır: {line.product_id} (adet={line.quantity})"
                )

    @staticmethod
    def _payment_value(payment_method: Union[PaymentMethod, str, None]) -> Optional[str]:
        if isinstance(payment_method, PaymentMethod):
            return payment_method.value
        return payment_method

    def resolve_category(self, product_id: str) -> str:
        """Ürünün kategorisini katalogdan bulur; bulunamazsa FALLBACK_CATEGORY döner."""
        product = self.catalog.get_product_by_id(product_id) if self.catalog else None
        if product is None or not product.category:
            logger.warning(
                "Ürün kategorisi çözümlenemedi, '%s' kullanılıyor: %s",
                FALLBACK_CATEGORY,
                product_id,
            )
            return FALLBACK_CATEGORY
        return product.category

    # --- Fatura siparişi ---

    def create_order(
        self,
        items: list[CartLine],
        user_id: str,
        token_number: Optional[int] = None,
        payment_method: Union[PaymentMethod, str, None] = None,
        is_compliment: bool = False,
    ) -> Order:
        """Sepetten sipariş oluşturur.

        `token_number` verilirse sipariş tek tokenlı (eski mod) token siparişi
        olur ve `preparing` durumunda başlar.
        """
        self._validate_lines(items)

        order_items = [
            OrderItem(
                product_id=line.product_id,
                product_name=line.product_name,
                quantity=line.quantity,
                unit_price=line.unit_price,
                tax_percent=line.tax_percent,
                subtotal=0.0 if is_compliment else line.line_subtotal,
            )
            for line in items
        ]

        if is_compliment:
            subtotal = tax = total = 0.0
        else:
            subtotal = sum(line.pre_tax_amount for line in items)
            tax = sum(line.tax_amount for line in items)
            total = subtotal + tax

        timestamp = self._clock()
        order = Order(
            id=generate_id("order", timestamp),
            items=order_items,
            subtotal=subtotal,
            tax=tax,
            total=total,
            timestamp=timestamp,
            user_id=user_id,
            token_number=token_number,
            status=OrderStatus.PREPARING if token_number is not None else None,
            payment_method=self._payment_value(payment_method),
            is_compliment=is_compliment,
        )

        self.order_log.append(order)
        logger.info(
            "Sipariş oluşturuldu: %s (%d kalem, toplam=%.2f, token=%s)",
            order.id,
            len(order_items),
            total,
            token_number,
        )
        return order

    # --- Çok tokenlı sipariş ---

    def create_token_order(
        self,
        items: list[CartLine],
        user_id: str,
        payment_method: Union[PaymentMethod, str, None] = None,
        is_compliment: bool = False,
        day: Optional[date] = None,
    ) -> Order:
        """Her birime ayrı token veren sipariş oluşturur.

        Sipariş seviyesindeki token, tüm açılımda tahsis edilen ilk tokendır
        (önce sepet satırı sırası, sonra satır içindeki birim sırası).
        """
        self._validate_lines(items)

        timestamp = self._clock()
        token_day = day or datetime.fromtimestamp(timestamp / 1000).date()

        order_items: list[OrderItem] = []
        for line in items:
            category = self.resolve_category(line.product_id)
            unit_subtotal = 0.0 if is_compliment else line.unit_price * (1 + line.tax_percent / 100)
            for _ in range(line.quantity):
                token = self.token_allocator.next_token_for_category(category, token_day)
                order_items.append(
                    OrderItem(
                        product_id=line.product_id,
                        product_name=line.product_name,
                        quantity=1,
                        unit_price=line.unit_price,
                        tax_percent=line.tax_percent,
                        subtotal=unit_subtotal,
                        token_number=token,
                        category=category,
                    )
                )

        if is_compliment:
            subtotal = tax = total = 0.0
        else:
            subtotal = sum(item.unit_price for item in order_items)
            tax = sum(item.unit_price * (item.tax_percent / 100) for item in order_items)
            total = subtotal + tax

        order = Order(
            id=generate_id("order", timestamp),
            items=order_items,
            subtotal=subtotal,
            tax=tax,
            total=total,
            timestamp=timestamp,
            user_id=user_id,
            token_number=order_items[0].token_number,
            status=OrderStatus.PREPARING,
            payment_method=self._payment_value(payment_method),
            is_compliment=is_compliment,
        )

        self.order_log.append(order)
        logger.info(
            "Token siparişi oluşturuldu: %s (%d token, ilk=%d, toplam=%.2f)",
            order.id,
            len(order_items),
            order.token_number,
            total,
        )
        return order
