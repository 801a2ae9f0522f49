"""POS Tools MCP server unit testleri."""

import asyncio

import pytest

from mcp_servers import pos_tools_server
from pos_engine.services import build_services
from pos_engine.storage import InMemoryStore

NOW = 1718444400000


@pytest.fixture
def services(monkeypatch):
    services = build_services(store=InMemoryStore(), clock=lambda: NOW)
    services.catalog.initialize_default_categories()
    monkeypatch.setattr(pos_tools_server, "_services", services)
    return services


@pytest.fixture
def tea(services):
    return services.catalog.create_product("Masala Chai", 10, "Tea", "CH-01", tax_percent=10)


class TestToolListing:

    def test_all_tools_listed(self):
        names = {tool.name for tool in asyncio.run(pos_tools_server.list_tools())}
        assert names == {
            "list_products", "create_billing_order", "create_token_order", "get_order",
            "list_token_orders", "update_order_status", "peek_next_token",
            "get_sales_report", "export_report_csv",
        }


class TestOrderTools:

    def test_create_billing_order(self, services, tea):
        result = pos_tools_server.create_billing_order(
            "user_1", [{"product_id": tea.id, "quantity": 2}], payment_method="Card"
        )
        assert result["success"] is True
        assert result["order"]["total"] == pytest.approx(22)
        assert result["order"]["paymentMethod"] == "Card"

    def test_repeated_product_quantities_are_summed(self, services, tea):
        result = pos_tools_server.create_billing_order(
            "user_1", [{"product_id": tea.id, "quantity": 2}, {"product_id": tea.id, "quantity": 3}]
        )
        assert len(result["order"]["items"]) == 1
        assert result["order"]["items"][0]["quantity"] == 5

    def test_repeated_product_gets_token_per_unit(self, services, tea):
        created = pos_tools_server.create_token_order(
            "user_1", [{"product_id": tea.id, "quantity": 1}, {"product_id": tea.id, "quantity": 2}]
        )
        assert created["tokens"] == [1, 2, 3]

    def test_unknown_product(self, services):
        result = pos_tools_server.create_billing_order("user_1", [{"product_id": "yok", "quantity": 1}])
        assert result["success"] is False

    def test_empty_items(self, services):
        assert pos_tools_server.create_billing_order("user_1", [])["success"] is False

    def test_token_order_and_status_flow(self, services, tea):
        created = pos_tools_server.create_token_order("user_1", [{"product_id": tea.id, "quantity": 2}])
        assert created["tokens"] == [1, 2]
        order_id = created["order"]["id"]

        listed = pos_tools_server.list_token_orders("preparing")
        assert [o["id"] for o in listed["orders"]] == [order_id]

        assert pos_tools_server.update_order_status(order_id, "ready")["status"] == "ready"
        rejected = pos_tools_server.update_order_status(order_id, "preparing")
        assert rejected["success"] is False

    def test_get_order(self, services, tea):
        created = pos_tools_server.create_billing_order("user_1", [{"product_id": tea.id, "quantity": 1}])
        assert pos_tools_server.get_order(created["order"]["id"])["found"] is True
        assert pos_tools_server.get_order("yok")["found"] is False

    def test_peek_next_token(self, services):
        assert pos_tools_server.peek_next_token()["next_token"] == 1
        assert pos_tools_server.peek_next_token("Tea")["next_token"] == 1


class TestReportTools:

    def test_sales_report(self, services, tea):
        pos_tools_server.create_billing_order("user_1", [{"product_id": tea.id, "quantity": 2}])
        report = pos_tools_server.get_sales_report("billing", 0, NOW)
        assert report["totalOrders"] == 1
        assert report["topProducts"][0]["productId"] == tea.id

    def test_invalid_kind(self, services):
        assert pos_tools_server.get_sales_report("weekly", 0, NOW)["success"] is False

    def test_export_csv(self, services, tea):
        pos_tools_server.create_billing_order("user_1", [{"product_id": tea.id, "quantity": 1}])
        exported = pos_tools_server.export_report_csv("billing", 0, NOW)
        assert exported["file_name"].startswith("billing-report-")
        assert len(exported["csv"].split("\n")) == 2

    def test_call_tool_unknown_name(self, services):
        with pytest.raises(ValueError):
            asyncio.run(pos_tools_server.call_tool("yok", {}))
