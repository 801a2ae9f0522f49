"""
POS Tools MCP Server

Provides tools for checkout, token queue management and sales reporting.
All tools run against one service bundle built from the environment
(POS_STORAGE_BACKEND / POS_STORAGE_TABLE / POS_STORAGE_PREFIX / AWS_DEFAULT_REGION).
"""

import json
import logging
from datetime import date
from typing import Dict, List, Optional

from mcp.server import Server
from mcp.types import TextContent, Tool

from pos_engine.models.order import OrderStatus
from pos_engine.services import Cart, PosServices, ValidationError, build_services

logger = logging.getLogger(__name__)

app = Server("pos-tools")

_services: Optional[PosServices] = None


def _get_services() -> PosServices:
    global _services
    if _services is None:
        _services = build_services()
        _services.catalog.initialize_default_categories()
    return _services


def _result(data):
    return [TextContent(type="text", text=json.dumps(data, indent=2, ensure_ascii=False))]


_ITEMS_SCHEMA = {
    "type": "array",
    "items": {"type": "object", "properties": {
        "product_id": {"type": "string"}, "quantity": {"type": "integer", "minimum": 1}
    }, "required": ["product_id", "quantity"]},
}


@app.list_tools()
async def list_tools() -> List[Tool]:
    return [
        Tool(name="list_products", description="List active products, optionally filtered by category",
             inputSchema={"type": "object", "properties": {
                 "category": {"type": "string", "default": "all"}
             }}),
        Tool(name="create_billing_order", description="Create a billing order from product ids and quantities",
             inputSchema={"type": "object", "properties": {
                 "user_id": {"type": "string"}, "items": _ITEMS_SCHEMA,
                 "payment_method": {"type": "string", "enum": ["Cash", "Card", "Scanner", "Bank Account"]},
                 "is_compliment": {"type": "boolean", "default": False}
             }, "required": ["user_id", "items"]}),
        Tool(name="create_token_order", description="Create a multi-token order, one token per unit, numbered per category and day",
             inputSchema={"type": "object", "properties": {
                 "user_id": {"type": "string"}, "items": _ITEMS_SCHEMA,
                 "payment_method": {"type": "string", "enum": ["Cash", "Card", "Scanner", "Bank Account"]},
                 "is_compliment": {"type": "boolean", "default": False}
             }, "required": ["user_id", "items"]}),
        Tool(name="get_order", description="Get an order by id",
             inputSchema={"type": "object", "properties": {"order_id": {"type": "string"}}, "required": ["order_id"]}),
        Tool(name="list_token_orders", description="List token orders, highest token first, optionally filtered by status",
             inputSchema={"type": "object", "properties": {
                 "status": {"type": "string", "enum": ["preparing", "ready", "completed"]}
             }}),
        Tool(name="update_order_status", description="Move a token order to its next status (preparing -> ready -> completed)",
             inputSchema={"type": "object", "properties": {
                 "order_id": {"type": "string"}, "status": {"type": "string", "enum": ["preparing", "ready", "completed"]}
             }, "required": ["order_id", "status"]}),
        Tool(name="peek_next_token", description="Show the next token number without consuming it",
             inputSchema={"type": "object", "properties": {
                 "category": {"type": "string", "description": "Optional: per-category counter for today"}
             }}),
        Tool(name="get_sales_report", description="Sales report (totals, average, top 10 products) for a time window in epoch millis",
             inputSchema={"type": "object", "properties": {
                 "kind": {"type": "string", "enum": ["billing", "token"]},
                 "start": {"type": "integer"}, "end": {"type": "integer"}
             }, "required": ["kind", "start", "end"]}),
        Tool(name="export_report_csv", description="Export the orders of a report window as CSV text",
             inputSchema={"type": "object", "properties": {
                 "kind": {"type": "string", "enum": ["billing", "token"]},
                 "start": {"type": "integer"}, "end": {"type": "integer"}
             }, "required": ["kind", "start", "end"]}),
    ]


@app.call_tool()
async def call_tool(name: str, arguments: dict) -> List[TextContent]:
    handlers = {
        "list_products": lambda a: list_products(a.get("category", "all")),
        "create_billing_order": lambda a: create_billing_order(a["user_id"], a["items"], a.get("payment_method"), a.get("is_compliment", False)),
        "create_token_order": lambda a: create_token_order(a["user_id"], a["items"], a.get("payment_method"), a.get("is_compliment", False)),
        "get_order": lambda a: get_order(a["order_id"]),
        "list_token_orders": lambda a: list_token_orders(a.get("status")),
        "update_order_status": lambda a: update_order_status(a["order_id"], a["status"]),
        "peek_next_token": lambda a: peek_next_token(a.get("category")),
        "get_sales_report": lambda a: get_sales_report(a["kind"], a["start"], a["end"]),
        "export_report_csv": lambda a: export_report_csv(a["kind"], a["start"], a["end"]),
    }
    handler = handlers.get(name)
    if not handler:
        raise ValueError(f"Unknown tool: {name}")
    return _result(handler(arguments))


# --- Implementation ---

def _build_cart(items: List[Dict], payment_method: Optional[str], is_compliment: bool) -> Cart:
    """Ürün id/adet listesinden sepet kurar; bilinmeyen ürün ValidationError fırlatır.

    Aynı ürün birden fazla kez gelirse adetleri toplanır.
    """
    catalog = _get_services().catalog
    quantities: Dict[str, int] = {}
    for entry in items:
        product_id = entry["product_id"]
        quantities[product_id] = quantities.get(product_id, 0) + int(entry["quantity"])

    cart = Cart()
    for product_id, quantity in quantities.items():
        product = catalog.get_product_by_id(product_id)
        if product is None:
            raise ValidationError(f"Ürün bulunamadı: {product_id}")
        cart.add_item(product)
        cart.update_quantity(product.id, quantity)
    if payment_method:
        cart.set_payment_method(payment_method)
    cart.is_compliment = bool(is_compliment)
    return cart


def list_products(category: str = "all") -> Dict:
    products = _get_services().catalog.get_products_by_category(category)
    return {"count": len(products), "products": [p.to_dict() for p in products]}


def create_billing_order(user_id: str, items: List[Dict], payment_method: Optional[str] = None,
                         is_compliment: bool = False) -> Dict:
    try:
        cart = _build_cart(items, payment_method, is_compliment)
        result = _get_services().checkout.checkout_billing(cart, user_id)
        return {"success": True, "order": result.order.to_dict(), "auto_print": result.auto_print}
    except ValidationError as e:
        return {"success": False, "error": str(e)}


def create_token_order(user_id: str, items: List[Dict], payment_method: Optional[str] = None,
                       is_compliment: bool = False) -> Dict:
    try:
        cart = _build_cart(items, payment_method, is_compliment)
        order = _get_services().orders.create_token_order(
            cart.lines, user_id, payment_method=cart.payment_method, is_compliment=cart.is_compliment
        )
        return {"success": True, "order": order.to_dict(), "tokens": order.token_numbers()}
    except ValidationError as e:
        return {"success": False, "error": str(e)}


def get_order(order_id: str) -> Dict:
    order = _get_services().queries.by_id(order_id)
    if order is None:
        return {"found": False, "order_id": order_id}
    return {"found": True, "order": order.to_dict()}


def list_token_orders(status: Optional[str] = None) -> Dict:
    queries = _get_services().queries
    try:
        orders = queries.by_status(OrderStatus(status)) if status else queries.token_orders()
    except ValueError:
        return {"success": False, "error": f"Geçersiz durum: {status}"}
    orders.sort(key=lambda o: o.token_number or 0, reverse=True)
    return {"count": len(orders), "orders": [o.to_dict() for o in orders]}


def update_order_status(order_id: str, status: str) -> Dict:
    try:
        order = _get_services().status.update_status(order_id, status)
    except ValidationError as e:
        return {"success": False, "error": str(e)}
    if order is None:
        return {"success": False, "error": f"Sipariş bulunamadı: {order_id}"}
    return {"success": True, "order_id": order_id, "status": order.status.value}


def peek_next_token(category: Optional[str] = None) -> Dict:
    tokens = _get_services().tokens
    if category:
        return {"category": category, "date": date.today().isoformat(),
                "next_token": tokens.peek_next_token_for_category(category)}
    return {"next_token": tokens.peek_global_token()}


def get_sales_report(kind: str, start: int, end: int) -> Dict:
    try:
        return _get_services().reports.get_report(kind, start, end).to_dict()
    except ValueError:
        return {"success": False, "error": f"Geçersiz rapor türü: {kind}"}


def export_report_csv(kind: str, start: int, end: int) -> Dict:
    reports = _get_services().reports
    try:
        csv_text = reports.export_csv(kind, start, end)
    except ValueError:
        return {"success": False, "error": f"Geçersiz rapor türü: {kind}"}
    return {"file_name": reports.report_file_name(kind), "csv": csv_text}


if __name__ == "__main__":
    import asyncio
    from mcp.server.stdio import stdio_server

    async def run():
        async with stdio_server() as (read, write):
            await app.run(read, write, app.create_initialization_options())

    asyncio.run(run())
