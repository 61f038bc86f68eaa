from __future__ import annotations

from django.utils import timezone

from apps.orders.domain.payment_state_machine import (
    PaymentStatus,
    PaymentTransition,
    check_payment_transition,
)
from apps.orders.models import Order
from apps.orders.services.history_service import OrderHistoryService


class PaymentService:
    @staticmethod
    def change_status(
        order: Order,
        target,
        *,
        note: str = "",
        method: str = "",
        transaction_id: str = "",
        actor_id=None,
        now=None,
    ) -> PaymentTransition:
        """Apply a payment status change in memory and log it. The caller saves ``order``."""
        transition = check_payment_transition(order.payment_status, target)
        now = now or timezone.now()

        order.payment_status = transition.target.value
        if method:
            order.payment_method = method
        if transaction_id:
            order.transaction_id = transaction_id

        if transition.target == PaymentStatus.PAID:
            order.paid_at = now
        elif transition.target == PaymentStatus.REFUNDED:
            order.refunded_at = now
            order.refund_amount = order.total_amount
        elif transition.target == PaymentStatus.PARTIALLY_REFUNDED:
            order.partially_refunded_at = now

        OrderHistoryService.payment(
            order,
            status=transition.target.value,
            method=method or order.payment_method,
            transaction_id=transaction_id,
            note=note or f"Payment status changed from {transition.previous.value} to {transition.target.value}",
            actor_id=actor_id,
        )
        return transition
