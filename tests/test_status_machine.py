"""Order Status Machine unit testleri."""

import pytest

from pos_engine.models.order import Order, OrderItem, OrderStatus
from pos_engine.services import InvalidTransitionError, OrderStatusMachine
from pos_engine.services.order_log import ORDERS_KEY, OrderLog
from pos_engine.services.status_machine import can_transition, current_status
from pos_engine.storage import InMemoryStore


def _order(order_id, token=1, status=OrderStatus.PREPARING) -> Order:
    return Order(
        id=order_id,
        items=[OrderItem("p1", "Chai", 1, 10.0, 0.0, 10.0, token_number=token)],
        subtotal=10.0, tax=0.0, total=10.0, timestamp=1000, user_id="user_1",
        token_number=token, status=status if token is not None else None,
    )


def _create_machine(*orders) -> OrderStatusMachine:
    store = InMemoryStore()
    OrderLog(store).save_all(list(orders))
    return OrderStatusMachine(store)


class TestTransitions:
    """preparing -> ready -> completed; yalnızca ileri tek adım."""

    def test_forward_steps_allowed(self):
        assert can_transition(OrderStatus.PREPARING, OrderStatus.READY)
        assert can_transition(OrderStatus.READY, OrderStatus.COMPLETED)

    def test_other_steps_rejected(self):
        assert not can_transition(OrderStatus.READY, OrderStatus.PREPARING)
        assert not can_transition(OrderStatus.PREPARING, OrderStatus.COMPLETED)
        assert not can_transition(OrderStatus.COMPLETED, OrderStatus.COMPLETED)

    def test_current_status(self):
        assert current_status(_order("a", status=None)) == OrderStatus.PREPARING
        assert current_status(_order("b", token=None)) is None


class TestUpdateStatus:

    def test_full_lifecycle(self):
        machine = _create_machine(_order("a"))
        assert machine.update_status("a", OrderStatus.READY).status == OrderStatus.READY
        assert machine.update_status("a", "completed").status == OrderStatus.COMPLETED
        stored = machine.order_log.load_all()[0]
        assert stored.status == OrderStatus.COMPLETED

    def test_only_target_order_changes(self):
        machine = _create_machine(_order("a"), _order("b", token=2))
        machine.update_status("a", OrderStatus.READY)
        statuses = {o.id: o.status for o in machine.order_log.load_all()}
        assert statuses == {"a": OrderStatus.READY, "b": OrderStatus.PREPARING}

    def test_unknown_order_returns_none_and_keeps_log(self):
        machine = _create_machine(_order("a"))
        before = machine.order_log.store.get_string(ORDERS_KEY)
        assert machine.update_status("yok", OrderStatus.READY) is None
        assert machine.order_log.store.get_string(ORDERS_KEY) == before

    def test_backward_transition_raises_and_keeps_state(self):
        machine = _create_machine(_order("a", status=OrderStatus.READY))
        with pytest.raises(InvalidTransitionError):
            machine.update_status("a", OrderStatus.PREPARING)
        assert machine.order_log.load_all()[0].status == OrderStatus.READY

    def test_skipping_raises(self):
        machine = _create_machine(_order("a"))
        with pytest.raises(InvalidTransitionError):
            machine.update_status("a", OrderStatus.COMPLETED)

    def test_billing_order_raises(self):
        machine = _create_machine(_order("a", token=None))
        with pytest.raises(InvalidTransitionError):
            machine.update_status("a", OrderStatus.READY)

    def test_invalid_status_value_raises(self):
        machine = _create_machine(_order("a"))
        with pytest.raises(InvalidTransitionError):
            machine.update_status("a", "cancelled")


class TestAdvanceStatus:

    def test_advance(self):
        machine = _create_machine(_order("a"))
        assert machine.advance_status("a").status == OrderStatus.READY
        assert machine.advance_status("a").status == OrderStatus.COMPLETED

    def test_completed_cannot_advance(self):
        machine = _create_machine(_order("a", status=OrderStatus.COMPLETED))
        with pytest.raises(InvalidTransitionError):
            machine.advance_status("a")

    def test_unknown_order(self):
        assert _create_machine().advance_status("yok") is None
