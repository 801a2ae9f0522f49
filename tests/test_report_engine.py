"""Report Engine unit testleri."""

import pytest

from pos_engine.models.order import Order, OrderItem, OrderStatus
from pos_engine.services import ReportEngine
from pos_engine.services.order_log import OrderLog
from pos_engine.services.report_engine import (
    CSV_HEADER,
    TOP_PRODUCTS_LIMIT,
    format_iso_timestamp,
    to_csv_value,
)
from pos_engine.storage import InMemoryStore

NOW = 1718444400000  # 2024-06-15T09:40:00Z


def _order(order_id, total, timestamp=NOW, token=None, items=None, user_id="user_1") -> Order:
    items = items or [OrderItem("p1", "Chai", 1, total, 0.0, total, token_number=token)]
    return Order(
        id=order_id, items=items, subtotal=total, tax=0.0, total=total,
        timestamp=timestamp, user_id=user_id, token_number=token,
        status=OrderStatus.PREPARING if token is not None else None,
    )


def _create_engine(*orders) -> ReportEngine:
    store = InMemoryStore()
    OrderLog(store).save_all(list(orders))
    return ReportEngine(store)


class TestSalesReport:
    """Toplam, ortalama ve en çok satan ürünler."""

    def test_totals_and_average(self):
        engine = _create_engine(_order("a", 100), _order("b", 50))
        report = engine.get_report("billing", NOW - 1000, NOW + 1000)
        assert report.total_sales == 150
        assert report.total_orders == 2
        assert report.average_order_value == 75

    def test_empty_window(self):
        engine = _create_engine(_order("a", 100))
        report = engine.get_report("billing", 0, 10)
        assert report.total_sales == 0
        assert report.total_orders == 0
        assert report.average_order_value == 0
        assert report.top_products == []
        assert (report.date_range.start, report.date_range.end) == (0, 10)

    def test_kind_filter(self):
        engine = _create_engine(_order("a", 100), _order("t", 30, token=1))
        assert engine.get_report("billing", 0, NOW).total_sales == 100
        assert engine.get_report("token", 0, NOW).total_sales == 30

    def test_window_bounds_inclusive(self):
        engine = _create_engine(_order("a", 10, timestamp=NOW), _order("b", 20, timestamp=NOW + 1))
        assert engine.get_report("billing", NOW, NOW).total_orders == 1

    def test_top_products_aggregated_and_sorted(self):
        engine = _create_engine(
            _order("a", 30, items=[
                OrderItem("tea", "Chai", 2, 10.0, 0.0, 20.0),
                OrderItem("juice", "Juice", 1, 10.0, 0.0, 10.0),
            ]),
            _order("b", 40, items=[OrderItem("juice", "Juice", 2, 20.0, 0.0, 40.0)]),
        )
        top = engine.get_report("billing", 0, NOW).top_products
        assert [(p.product_id, p.quantity, p.revenue) for p in top] == [
            ("juice", 3, 50.0), ("tea", 2, 20.0),
        ]

    def test_top_products_limited(self):
        items = [OrderItem(f"p{i}", f"Ürün {i}", 1, float(i), 0.0, float(i)) for i in range(1, 16)]
        engine = _create_engine(_order("a", 120, items=items))
        top = engine.get_report("billing", 0, NOW).top_products
        assert len(top) == TOP_PRODUCTS_LIMIT
        assert top[0].product_id == "p15"

    def test_equal_revenue_keeps_first_seen_order(self):
        engine = _create_engine(_order("a", 20, items=[
            OrderItem("x", "X", 1, 10.0, 0.0, 10.0),
            OrderItem("y", "Y", 1, 10.0, 0.0, 10.0),
        ]))
        top = engine.get_report("billing", 0, NOW).top_products
        assert [p.product_id for p in top] == ["x", "y"]

    def test_report_dict_shape(self):
        data = _create_engine(_order("a", 10)).get_report("billing", 0, NOW).to_dict()
        assert set(data) == {"totalSales", "totalOrders", "averageOrderValue", "topProducts", "dateRange"}

    def test_invalid_kind_raises(self):
        with pytest.raises(ValueError):
            _create_engine().get_report("weekly", 0, NOW)


class TestCsvExport:

    def test_iso_timestamp(self):
        assert format_iso_timestamp(NOW) == "2024-06-15T09:40:00.000Z"
        assert format_iso_timestamp(NOW + 45) == "2024-06-15T09:40:00.045Z"

    def test_value_quoting(self):
        assert to_csv_value('say "hi"') == '"say ""hi"""'
        assert to_csv_value(22.0) == '"22"'
        assert to_csv_value(2.5) == '"2.5"'
        assert to_csv_value(None) == '""'

    def test_header_only_when_empty(self):
        assert _create_engine().export_csv("billing", 0, NOW) == ",".join(CSV_HEADER)

    def test_rows(self):
        engine = _create_engine(
            _order("order_1", 22, user_id='ali "usta"'),
            _order("order_2", 11.5, token=4),
        )
        billing = engine.export_csv("billing", 0, NOW).split("\n")
        assert billing[0] == "orderId,tokenNumber,timestamp,subtotal,tax,total,itemsCount,userId"
        assert billing[1] == (
            '"order_1","","2024-06-15T09:40:00.000Z","22","0","22","1","ali ""usta"""'
        )
        token = engine.export_csv("token", 0, NOW).split("\n")
        assert token[1].startswith('"order_2","4",')

    def test_file_name(self):
        assert ReportEngine.report_file_name("token", 1700000000000) == "token-report-1700000000000.csv"
