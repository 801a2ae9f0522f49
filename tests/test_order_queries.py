"""Order Query Layer unit testleri."""

from pos_engine.models.order import Order, OrderItem, OrderStatus
from pos_engine.services import OrderQueries
from pos_engine.services.order_log import ORDERS_KEY, OrderLog
from pos_engine.storage import InMemoryStore


def _item(token=None) -> OrderItem:
    return OrderItem("p1", "Chai", 1, 10.0, 0.0, 10.0, token_number=token)


def _order(order_id, timestamp=1000, token=None, status=None, item_tokens=(None,)) -> Order:
    return Order(
        id=order_id,
        items=[_item(t) for t in item_tokens],
        subtotal=10.0,
        tax=0.0,
        total=10.0,
        timestamp=timestamp,
        user_id="user_1",
        token_number=token,
        status=status,
    )


def _create_queries(*orders) -> OrderQueries:
    store = InMemoryStore()
    OrderLog(store).save_all(list(orders))
    return OrderQueries(store)


class TestPartition:
    """Her sipariş ya fatura ya token siparişidir."""

    def test_billing_and_token_are_disjoint(self):
        queries = _create_queries(
            _order("b1"),
            _order("t1", token=1, status=OrderStatus.PREPARING),
            _order("t2", item_tokens=(5, 6)),
        )
        billing = {o.id for o in queries.billing_orders()}
        tokens = {o.id for o in queries.token_orders()}
        assert billing == {"b1"}
        assert tokens == {"t1", "t2"}
        assert billing | tokens == {o.id for o in queries.all_orders()}


class TestLookups:

    def test_by_id(self):
        queries = _create_queries(_order("a"), _order("b"))
        assert queries.by_id("b").id == "b"
        assert queries.by_id("yok") is None

    def test_by_date_range_is_inclusive(self):
        queries = _create_queries(_order("a", 1000), _order("b", 2000), _order("c", 3000))
        assert [o.id for o in queries.by_date_range(1000, 2000)] == ["a", "b"]
        assert queries.by_date_range(3001, 4000) == []

    def test_by_token_number_matches_items(self):
        queries = _create_queries(_order("a", token=3, item_tokens=(3, 4)), _order("b", token=9))
        assert [o.id for o in queries.by_token_number(4)] == ["a"]
        assert [o.id for o in queries.by_token_number(9)] == ["b"]

    def test_by_status_defaults_to_preparing(self):
        queries = _create_queries(
            _order("a", token=1),
            _order("b", token=2, status=OrderStatus.READY),
            _order("c"),
        )
        assert [o.id for o in queries.by_status(OrderStatus.PREPARING)] == ["a"]
        assert [o.id for o in queries.by_status("ready")] == ["b"]

    def test_malformed_records_are_skipped(self):
        store = InMemoryStore()
        store.set_array(ORDERS_KEY, [{"id": "eksik"}, _order("a").to_dict()])
        assert [o.id for o in OrderQueries(store).all_orders()] == ["a"]

    def test_empty_log(self):
        assert _create_queries().all_orders() == []
