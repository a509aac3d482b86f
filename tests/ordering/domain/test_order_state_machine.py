"""Tests for the order status machine: legal transitions and terminal states."""

import pytest
from ordering.models import OrderStatus
from ordering.order.lifecycle import (
    CANCELLABLE_STATES,
    assert_can_transition,
    can_transition,
    predecessors_of,
)
from shared.errors import InvalidStateTransitionError

LEGAL = [
    (OrderStatus.PENDING, OrderStatus.CONFIRMED),
    (OrderStatus.PENDING, OrderStatus.CANCELLED),
    (OrderStatus.CONFIRMED, OrderStatus.SHIPPED),
    (OrderStatus.CONFIRMED, OrderStatus.CANCELLED),
    (OrderStatus.SHIPPED, OrderStatus.DELIVERED),
]


@pytest.mark.parametrize("current, target", LEGAL)
def test_legal_transitions(current, target):
    assert can_transition(current, target)
    assert_can_transition(current, target)


@pytest.mark.parametrize(
    "current, target",
    [
        (OrderStatus.PENDING, OrderStatus.SHIPPED),
        (OrderStatus.CONFIRMED, OrderStatus.PENDING),
        (OrderStatus.SHIPPED, OrderStatus.CANCELLED),
        (OrderStatus.DELIVERED, OrderStatus.CANCELLED),
        (OrderStatus.CANCELLED, OrderStatus.CONFIRMED),
    ],
)
def test_illegal_transitions_raise(current, target):
    assert not can_transition(current, target)
    with pytest.raises(InvalidStateTransitionError):
        assert_can_transition(current, target)


@pytest.mark.parametrize("terminal", [OrderStatus.DELIVERED, OrderStatus.CANCELLED])
def test_terminal_states_have_no_exits(terminal):
    assert not any(can_transition(terminal, target) for target in OrderStatus)


def test_only_pending_and_confirmed_are_cancellable():
    assert CANCELLABLE_STATES == {OrderStatus.PENDING, OrderStatus.CONFIRMED}


def test_predecessors_of_shipped():
    assert predecessors_of(OrderStatus.SHIPPED) == {OrderStatus.CONFIRMED}
    assert predecessors_of(OrderStatus.CONFIRMED) == {OrderStatus.PENDING}
