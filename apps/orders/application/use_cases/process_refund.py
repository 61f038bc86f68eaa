from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from django.db import transaction

from apps.accounts.domain.types import AuthContext
from apps.orders.domain.errors import OrderValidationError, RefundRejectedError
from apps.orders.domain.payment_state_machine import PaymentStatus
from apps.orders.domain.pricing import format_amount, money
from apps.orders.models import Order
from apps.orders.services.history_service import OrderHistoryService
from apps.orders.services.order_query_service import lookup_order
from apps.orders.services.payment_service import PaymentService
from apps.orders.services.status_service import OrderStatusService

logger = logging.getLogger("bondex.orders")

DEFAULT_REFUND_METHOD = "original_payment"


@dataclass(frozen=True)
class ProcessRefundCommand:
    order_id: int
    amount: object
    reason: str
    method: str = DEFAULT_REFUND_METHOD


@dataclass(frozen=True)
class ProcessRefundResult:
    order: Order
    amount: Decimal
    fully_refunded: bool


def _refund_amount(raw) -> Decimal:
    try:
        amount = Decimal(str(raw))
    except (InvalidOperation, ValueError):
        raise OrderValidationError("Valid refund amount is required", field="amount") from None
    if not amount.is_finite() or amount <= 0:
        raise OrderValidationError("Valid refund amount is required", field="amount")
    return money(amount)


class ProcessRefundUseCase:
    @staticmethod
    @transaction.atomic
    def execute(cmd: ProcessRefundCommand, actor: AuthContext) -> ProcessRefundResult:
        if cmd.amount in (None, ""):
            raise OrderValidationError("Valid refund amount is required", field="amount")
        amount = _refund_amount(cmd.amount)
        reason = (cmd.reason or "").strip()
        if not reason:
            raise OrderValidationError("Refund reason is required", field="reason")

        order = lookup_order(cmd.order_id, for_update=True)
        if order.payment_status == PaymentStatus.REFUNDED.value:
            raise RefundRejectedError("Order has already been fully refunded")

        max_refundable = money(order.total_amount) - money(order.refund_amount)
        if amount > max_refundable:
            raise RefundRejectedError(
                f"Cannot refund KES {format_amount(amount)}. "
                f"Maximum refundable amount: KES {format_amount(max_refundable)}"
            )

        method = (cmd.method or "").strip() or DEFAULT_REFUND_METHOD
        order.refund_amount = money(order.refund_amount) + amount
        fully_refunded = order.refund_amount >= money(order.total_amount)
        PaymentService.change_status(
            order,
            PaymentStatus.REFUNDED if fully_refunded else PaymentStatus.PARTIALLY_REFUNDED,
            note=f"Refund of KES {format_amount(amount)}: {reason}",
            actor_id=actor.user_id,
        )
        OrderHistoryService.refund(order, amount=amount, reason=reason, method=method, actor_id=actor.user_id)
        if fully_refunded:
            OrderStatusService.cancel_for_full_refund(order, reason=reason, actor_id=actor.user_id)
        order.save()

        logger.info(
            "order.refunded",
            extra={
                "order_number": order.order_number,
                "amount": str(amount),
                "total_refunded": str(order.refund_amount),
            },
        )
        return ProcessRefundResult(order=order, amount=amount, fully_refunded=fully_refunded)
