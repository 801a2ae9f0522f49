"""Servislerin tek bir depo üzerinde kurulması."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from pos_engine.config import StoreConfig, create_store, load_config
from pos_engine.services.catalog import ProductCatalog
from pos_engine.services.checkout import CheckoutService
from pos_engine.services.order_engine import OrderEngine
from pos_engine.services.order_queries import OrderQueries
from pos_engine.services.report_engine import ReportEngine
from pos_engine.services.settings import SettingsService
from pos_engine.services.status_machine import OrderStatusMachine
from pos_engine.services.token_allocator import TokenAllocator
from pos_engine.storage import KeyValueStore


@dataclass
class PosServices:
    store: KeyValueStore
    catalog: ProductCatalog
    tokens: TokenAllocator
    orders: OrderEngine
    queries: OrderQueries
    status: OrderStatusMachine
    reports: ReportEngine
    settings: SettingsService
    checkout: CheckoutService


def build_services(
    store: Optional[KeyValueStore] = None,
    config: Optional[StoreConfig] = None,
    clock: Optional[Callable[[], int]] = None,
) -> PosServices:
    """Verilen (ya da yapılandırmadan oluşturulan) depo üzerinde tüm servisleri kurar."""
    if store is None:
        store = create_store(config or load_config())

    catalog = ProductCatalog(store, clock=clock)
    tokens = TokenAllocator(store)
    orders = OrderEngine(store, catalog=catalog, token_allocator=tokens, clock=clock)
    settings = SettingsService(store)

    return PosServices(
        store=store,
        catalog=catalog,
        tokens=tokens,
        orders=orders,
        queries=OrderQueries(store),
        status=OrderStatusMachine(store),
        reports=ReportEngine(store),
        settings=settings,
        checkout=CheckoutService(orders, settings),
    )
