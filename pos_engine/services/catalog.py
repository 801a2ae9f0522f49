"""Ürün Kataloğu - ürün ve kategori CRUD işlemleri.

Order Engine için katalog sağlayıcısıdır (`get_product_by_id`).
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Callable, Optional

from pos_engine.models.catalog import Category, Product
from pos_engine.models.common import generate_id, now_millis
from pos_engine.services.validators import ValidationError, validate_product
from pos_engine.storage import KeyValueStore

logger = logging.getLogger(__name__)

PRODUCTS_KEY = "products"
CATEGORIES_KEY = "categories"
ALL_CATEGORIES = "all"

DEFAULT_CATEGORIES: list[Category] = [
    Category(id="cat_tea", name="Tea", color="#4A7C59"),
    Category(id="cat_juice", name="Juice", color="#FF8C42"),
    Category(id="cat_smoothie", name="Smoothie", color="#27AE60"),
    Category(id="cat_other", name="Other", color="#7F8C8D"),
]

# update_product ile değiştirilebilecek alanlar
_PRODUCT_FIELDS = {"name", "price", "category", "sku", "tax_percent", "is_active", "image_uri"}


class ProductCatalog:
    """Ürün ve kategorileri kalıcı depoda tutan servis."""

    def __init__(self, store: KeyValueStore, clock: Optional[Callable[[], int]] = None):
        self.store = store
        self._clock = clock or now_millis

    # --- Ürünler ---

    def get_all_products(self) -> list[Product]:
        products = []
        for raw in self.store.get_array(PRODUCTS_KEY):
            try:
                products.append(Product.from_dict(raw))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Bozuk ürün kaydı atlandı: %s", e)
        return products

    def _save_products(self, products: list[Product]) -> None:
        self.store.set_array(PRODUCTS_KEY, [p.to_dict() for p in products])

    def get_active_products(self) -> list[Product]:
        return [p for p in self.get_all_products() if p.is_active]

    def get_product_by_id(self, product_id: str) -> Optional[Product]:
        for product in self.get_all_products():
            if product.id == product_id:
                return product
        return None

    def get_products_by_category(self, category: str) -> list[Product]:
        """Kategoriye göre aktif ürünler; "all" tüm aktif ürünleri döndürür."""
        active = self.get_active_products()
        if category == ALL_CATEGORIES:
            return active
        return [p for p in active if p.category == category]

    def create_product(
        self,
        name: str,
        price: float,
        category: str,
        sku: str,
        tax_percent: float = 0.0,
        is_active: bool = True,
        image_uri: Optional[str] = None,
    ) -> Product:
        result = validate_product(name, price, category, sku, tax_percent)
        if not result.is_valid:
            raise ValidationError("; ".join(result.errors))

        now = self._clock()
        product = Product(
            id=generate_id("prod", now),
            name=name.strip(),
            price=price,
            category=category,
            sku=sku.strip(),
            tax_percent=tax_percent,
            is_active=is_active,
            image_uri=image_uri,
            created_at=now,
            updated_at=now,
        )
        with self.store.lock(PRODUCTS_KEY):
            products = self.get_all_products()
            products.append(product)
            self._save_products(products)

        logger.info("Ürün oluşturuldu: %s (%s)", product.id, product.name)
        return product

    def update_product(self, product_id: str, **changes: Any) -> Optional[Product]:
        """Ürünü günceller; ürün yoksa None döner."""
        unknown = set(changes) - _PRODUCT_FIELDS
        if unknown:
            raise ValidationError(f"Güncellenemeyen ürün alanları: {sorted(unknown)}")

        with self.store.lock(PRODUCTS_KEY):
            products = self.get_all_products()
            for index, product in enumerate(products):
                if product.id != product_id:
                    continue
                updated = replace(product, **changes, updated_at=self._clock())
                result = validate_product(
                    updated.name, updated.price, updated.category, updated.sku, updated.tax_percent
                )
                if not result.is_valid:
                    raise ValidationError("; ".join(result.errors))
                products[index] = updated
                self._save_products(products)
                return updated
        return None

    def delete_product(self, product_id: str) -> bool:
        with self.store.lock(PRODUCTS_KEY):
            products = self.get_all_products()
            remaining = [p for p in products if p.id != product_id]
            if len(remaining) == len(products):
                return False
            self._save_products(remaining)
        logger.info("Ürün silindi: %s", product_id)
        return True

    # --- Kategoriler ---

    def get_all_categories(self) -> list[Category]:
        categories = []
        for raw in self.store.get_array(CATEGORIES_KEY):
            try:
                categories.append(Category.from_dict(raw))
            except (KeyError, TypeError) as e:
                logger.warning("Bozuk kategori kaydı atlandı: %s", e)
        return categories

    def _save_categories(self, categories: list[Category]) -> None:
        self.store.set_array(CATEGORIES_KEY, [c.to_dict() for c in categories])

    def get_category_by_id(self, category_id: str) -> Optional[Category]:
        for category in self.get_all_categories():
            if category.id == category_id:
                return category
        return None

    def create_category(self, name: str, color: str) -> Category:
        if not name or not name.strip():
            raise ValidationError("Kategori adı zorunludur")
        category = Category(id=generate_id("cat", self._clock()), name=name.strip(), color=color)
        with self.store.lock(CATEGORIES_KEY):
            categories = self.get_all_categories()
            categories.append(category)
            self._save_categories(categories)
        return category

    def update_category(
        self, category_id: str, name: Optional[str] = None, color: Optional[str] = None
    ) -> Optional[Category]:
        with self.store.lock(CATEGORIES_KEY):
            categories = self.get_all_categories()
            for index, category in enumerate(categories):
                if category.id != category_id:
                    continue
                updated = Category(
                    id=category.id,
                    name=name if name is not None else category.name,
                    color=color if color is not None else category.color,
                )
                categories[index] = updated
                self._save_categories(categories)
                return updated
        return None

    def delete_category(self, category_id: str) -> bool:
        with self.store.lock(CATEGORIES_KEY):
            categories = self.get_all_categories()
            remaining = [c for c in categories if c.id != category_id]
            if len(remaining) == len(categories):
                return False
            self._save_categories(remaining)
        return True

    def initialize_default_categories(self) -> None:
        """Hiç kategori yoksa varsayılan kategorileri yükler."""
        with self.store.lock(CATEGORIES_KEY):
            if self.get_all_categories():
                return
            self._save_categories(list(DEFAULT_CATEGORIES))
        logger.info("Varsayılan kategoriler yüklendi: %d", len(DEFAULT_CATEGORIES))
