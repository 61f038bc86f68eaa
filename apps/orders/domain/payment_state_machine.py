from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from apps.orders.domain.errors import IllegalTransitionError, OrderValidationError


class PaymentStatus(StrEnum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"
    PARTIALLY_REFUNDED = "partially_refunded"


class PaymentMethod(StrEnum):
    MPESA = "mpesa"
    STRIPE = "stripe"
    BANK_TRANSFER = "bank_transfer"
    CASH_ON_DELIVERY = "cash_on_delivery"


@dataclass(frozen=True)
class PaymentTransition:
    previous: PaymentStatus
    target: PaymentStatus


def parse_payment_status(value) -> PaymentStatus:
    try:
        return PaymentStatus(str(value or "").strip().lower())
    except ValueError:
        valid = ", ".join(status.value for status in PaymentStatus)
        raise OrderValidationError(
            f"Invalid payment status. Valid statuses: {valid}", field="paymentStatus"
        ) from None


def parse_payment_method(value) -> PaymentMethod:
    try:
        return PaymentMethod(str(value or "").strip().lower())
    except ValueError:
        valid = ", ".join(method.value for method in PaymentMethod)
        raise OrderValidationError(
            f"Invalid payment method. Valid methods: {valid}", field="paymentMethod"
        ) from None


def check_payment_transition(current, target) -> PaymentTransition:
    current = PaymentStatus(current)
    target = parse_payment_status(target)
    if current == PaymentStatus.REFUNDED and target != PaymentStatus.REFUNDED:
        raise IllegalTransitionError(
            "Payment has been fully refunded and cannot change status",
            current=current.value,
            target=target.value,
        )
    return PaymentTransition(previous=current, target=target)
