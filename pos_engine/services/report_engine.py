"""Report Engine - tarih aralığına göre satış raporu ve CSV dışa aktarımı.

- Sipariş günlüğünü tür (fatura/token) ve [start, end] aralığına göre filtreler
- Toplam satış, sipariş sayısı ve ortalama sipariş değerini hesaplar
- Ürünleri gelire göre sıralayıp ilk 10'u döndürür
- Her sipariş için bir CSV satırı üretir
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Union

from pos_engine.models.common import now_millis
from pos_engine.models.order import DateRange, Order, ReportKind, SalesReport, TopProduct
from pos_engine.services.order_log import OrderLog
from pos_engine.storage import KeyValueStore

logger = logging.getLogger(__name__)

TOP_PRODUCTS_LIMIT = 10

CSV_HEADER = [
    "orderId",
    "tokenNumber",
    "timestamp",
    "subtotal",
    "tax",
    "total",
    "itemsCount",
    "userId",
]


def format_iso_timestamp(timestamp_ms: int) -> str:
    """Epoch milisaniyeyi `2024-06-15T09:30:00.000Z` biçimine çevirir."""
    moment = datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc)
    return f"{moment.strftime('%Y-%m-%dT%H:%M:%S')}.{timestamp_ms % 1000:03d}Z"


def _format_value(value: Union[str, int, float, None]) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def to_csv_value(value: Union[str, int, float, None]) -> str:
    """Değeri tırnak içine alır; içteki tırnaklar ikilenir. Sayılar da tırnaklanır."""
    escaped = _format_value(value).replace('"', '""')
    return f'"{escaped}"'


@dataclass
class ReportRow:
    order_id: str
    token_number: Optional[int]
    iso_timestamp: str
    subtotal: float
    tax: float
    total: float
    items_count: int
    user_id: str

    @classmethod
    def from_order(cls, order: Order) -> ReportRow:
        return cls(
            order_id=order.id,
            token_number=order.token_number,
            iso_timestamp=format_iso_timestamp(order.timestamp),
            subtotal=order.subtotal,
            tax=order.tax,
            total=order.total,
            items_count=len(order.items),
            user_id=order.user_id,
        )

    def values(self) -> list:
        return [
            self.order_id,
            self.token_number,
            self.iso_timestamp,
            self.subtotal,
            self.tax,
            self.total,
            self.items_count,
            self.user_id,
        ]


class ReportEngine:
    """Satış raporlarını sipariş günlüğünden türeten servis."""

    def __init__(self, store: KeyValueStore):
        self.order_log = OrderLog(store)

    def filtered_orders(
        self, kind: Union[ReportKind, str], start: int, end: int
    ) -> list[Order]:
        """Türe ve [start, end] aralığına uyan siparişler."""
        kind = ReportKind(kind)
        window = DateRange(start, end)
        want_token = kind == ReportKind.TOKEN
        return [
            o for o in self.order_log.load_all()
            if o.is_token_order == want_token and window.contains(o.timestamp)
        ]

    def get_report(
        self, kind: Union[ReportKind, str], start: int, end: int
    ) -> SalesReport:
        orders = self.filtered_orders(kind, start, end)

        total_sales = sum(o.total for o in orders)
        total_orders = len(orders)
        average = total_sales / total_orders if total_orders > 0 else 0.0

        # İlk görülme sırası korunur; eşit gelirde sıralama kararlı kalır
        products: dict[str, TopProduct] = {}
        for order in orders:
            for item in order.items:
                entry = products.get(item.product_id)
                if entry:
                    entry.quantity += item.quantity
                    entry.revenue += item.subtotal
                else:
                    products[item.product_id] = TopProduct(
                        product_id=item.product_id,
                        product_name=item.product_name,
                        quantity=item.quantity,
                        revenue=item.subtotal,
                    )

        top_products = sorted(products.values(), key=lambda p: p.revenue, reverse=True)

        logger.info(
            "Rapor oluşturuldu [%s]: %d sipariş, toplam=%.2f",
            ReportKind(kind).value,
            total_orders,
            total_sales,
        )

        return SalesReport(
            total_sales=total_sales,
            total_orders=total_orders,
            average_order_value=average,
            top_products=top_products[:TOP_PRODUCTS_LIMIT],
            date_range=DateRange(start, end),
        )

    # --- CSV dışa aktarım ---

    def export_rows(
        self, kind: Union[ReportKind, str], start: int, end: int
    ) -> list[ReportRow]:
        return [ReportRow.from_order(o) for o in self.filtered_orders(kind, start, end)]

    def export_csv(self, kind: Union[ReportKind, str], start: int, end: int) -> str:
        """UTF-8 CSV metni üretir; dosyaya yazma ve paylaşma çağırana aittir."""
        lines = [",".join(CSV_HEADER)]
        for row in self.export_rows(kind, start, end):
            lines.append(",".join(to_csv_value(v) for v in row.values()))
        return "\n".join(lines)

    @staticmethod
    def report_file_name(kind: Union[ReportKind, str], timestamp: Optional[int] = None) -> str:
        return f"{ReportKind(kind).value}-report-{timestamp or now_millis()}.csv"
