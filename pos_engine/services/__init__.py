from pos_engine.services.cart import Cart
from pos_engine.services.catalog import ProductCatalog
from pos_engine.services.checkout import CheckoutResult, CheckoutService
from pos_engine.services.container import PosServices, build_services
from pos_engine.services.order_engine import FALLBACK_CATEGORY, EmptyCartError, OrderEngine
from pos_engine.services.order_queries import OrderQueries
from pos_engine.services.report_engine import ReportEngine
from pos_engine.services.settings import SettingsService
from pos_engine.services.status_machine import InvalidTransitionError, OrderStatusMachine
from pos_engine.services.token_allocator import TokenAllocator
from pos_engine.services.validators import ValidationError

__all__ = [
    "Cart",
    "CheckoutResult",
    "CheckoutService",
    "EmptyCartError",
    "FALLBACK_CATEGORY",
    "InvalidTransitionError",
    "OrderEngine",
    "OrderQueries",
    "OrderStatusMachine",
    "PosServices",
    "ProductCatalog",
    "ReportEngine",
    "SettingsService",
    "TokenAllocator",
    "ValidationError",
    "build_services",
]
