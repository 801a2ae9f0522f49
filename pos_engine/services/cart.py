"""Sepet - ödeme öncesi geçici satır listesi, ödeme yöntemi ve ikram bayrağı."""

from __future__ import annotations

from typing import Union

from pos_engine.models.catalog import Product
from pos_engine.models.order import CartLine, PaymentMethod
from pos_engine.services.validators import ValidationError


class Cart:
    """Bellek içi sepet; kalıcı değildir, bir kez siparişe dönüştürülür."""

    def __init__(self) -> None:
        self._lines: list[CartLine] = []
        self.payment_method = PaymentMethod.CASH
        self.is_compliment = False

    @property
    def lines(self) -> list[CartLine]:
        return list(self._lines)

    def is_empty(self) -> bool:
        return not self._lines

    def _find(self, product_id: str) -> int:
        for index, line in enumerate(self._lines):
            if line.product_id == product_id:
                return index
        return -1

    def add_item(self, product: Product) -> CartLine:
        """Ürünü sepete ekler; ürün zaten varsa adedini bir artırır."""
        index = self._find(product.id)
        if index >= 0:
            self._lines[index].quantity += 1
            return self._lines[index]
        line = CartLine(
            product_id=product.id,
            product_name=product.name,
            quantity=1,
            unit_price=product.price,
            tax_percent=product.tax_percent,
        )
        self._lines.append(line)
        return line

    def remove_item(self, product_id: str) -> None:
        self._lines = [line for line in self._lines if line.product_id != product_id]

    def update_quantity(self, product_id: str, quantity: int) -> None:
        """Adedi günceller; 0 veya altı satırı kaldırır."""
        if quantity <= 0:
            self.remove_item(product_id)
            return
        index = self._find(product_id)
        if index >= 0:
            self._lines[index].quantity = quantity

    def clear(self) -> None:
        self._lines = []
        self.is_compliment = False

    def set_payment_method(self, method: Union[PaymentMethod, str]) -> None:
        try:
            self.payment_method = PaymentMethod(method)
        except ValueError:
            raise ValidationError(f"Geçersiz ödeme yöntemi: {method}")

    # --- Tutarlar ---

    @property
    def subtotal(self) -> float:
        if self.is_compliment:
            return 0.0
        return sum(line.pre_tax_amount for line in self._lines)

    @property
    def tax(self) -> float:
        if self.is_compliment:
            return 0.0
        return sum(line.tax_amount for line in self._lines)

    @property
    def total(self) -> float:
        return self.subtotal + self.tax

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self._lines)
