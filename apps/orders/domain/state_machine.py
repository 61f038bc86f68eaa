"""
Order status machine.

The usual flow is pending -> confirmed -> processing -> shipped -> delivered,
but any non-terminal order may move to any status, including backwards or
out through cancelled and refunded. Only delivered and cancelled are terminal.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from apps.orders.domain.errors import IllegalTransitionError, InvalidStatusError


class OrderStatus(StrEnum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"


TERMINAL = frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED})


@dataclass(frozen=True)
class StatusTransition:
    previous: OrderStatus
    target: OrderStatus

    @property
    def is_noop(self) -> bool:
        return self.previous == self.target


def parse_status(value) -> OrderStatus:
    try:
        return OrderStatus(str(value or "").strip().lower())
    except ValueError:
        valid = ", ".join(status.value for status in OrderStatus)
        raise InvalidStatusError(f"Invalid status. Valid statuses: {valid}") from None


def allowed_targets(current) -> frozenset[OrderStatus]:
    if OrderStatus(current) in TERMINAL:
        return frozenset()
    return frozenset(OrderStatus)


def check_transition(current, target) -> StatusTransition:
    current = OrderStatus(current)
    target = parse_status(target)
    if target not in allowed_targets(current):
        raise IllegalTransitionError(
            f"Cannot change status of {current.value} order",
            current=current.value,
            target=target.value,
        )
    return StatusTransition(previous=current, target=target)
