from __future__ import annotations

import logging

from django.utils import timezone

from apps.orders.domain.payment_state_machine import PaymentStatus
from apps.orders.domain.state_machine import OrderStatus, StatusTransition, check_transition
from apps.orders.models import Order
from apps.orders.services.history_service import OrderHistoryService
from apps.orders.services.payment_service import PaymentService
from apps.orders.services.stock_service import OrderStockService

logger = logging.getLogger("bondex.orders")

# A fully refunded payment is locked; everything else becomes paid on delivery.
_KEPT_ON_DELIVERY = {PaymentStatus.PAID.value, PaymentStatus.REFUNDED.value}


class OrderStatusService:
    @staticmethod
    def transition(
        order: Order,
        target,
        *,
        note: str = "",
        actor_id=None,
        tracking_number: str = "",
        estimated_delivery=None,
        now=None,
    ) -> StatusTransition:
        """Apply a guarded status change plus its side effects. The caller saves ``order``."""
        transition = check_transition(order.status, target)
        now = now or timezone.now()
        previous, new = transition.previous, transition.target
        order.status = new.value

        if new == OrderStatus.CONFIRMED and not transition.is_noop:
            order.confirmed_at = now
        elif new == OrderStatus.PROCESSING and not transition.is_noop:
            # Stock was taken at creation; processing only records the time.
            order.processing_at = now
        elif new == OrderStatus.SHIPPED:
            order.shipped_at = order.shipped_at if transition.is_noop else now
            if tracking_number:
                order.tracking_number = tracking_number
            if estimated_delivery:
                order.estimated_delivery = estimated_delivery
        elif new == OrderStatus.DELIVERED:
            order.delivered_at = now
            order.actual_delivery = now
            # Delivered goods never return to stock.
            order.stock_reserved = False
            if order.payment_status not in _KEPT_ON_DELIVERY:
                PaymentService.change_status(
                    order,
                    PaymentStatus.PAID,
                    note="Payment settled on delivery",
                    actor_id=actor_id,
                    now=now,
                )
        elif new == OrderStatus.CANCELLED:
            order.cancelled_at = now
            order.cancel_reason = note or "Cancelled by admin"
            OrderStockService.restore(order)
        elif new == OrderStatus.REFUNDED:
            OrderStockService.restore(order)

        OrderHistoryService.status(
            order,
            status=new.value,
            note=note or f"Status changed from {previous.value} to {new.value}",
            actor_id=actor_id,
        )
        logger.info(
            "order.status_changed",
            extra={"order_number": order.order_number, "from": previous.value, "to": new.value},
        )
        return transition

    @staticmethod
    def cancel_for_full_refund(order: Order, *, reason: str, actor_id=None, now=None) -> bool:
        """Full refunds cancel the order even when it was delivered or marked refunded."""
        if order.status == OrderStatus.CANCELLED.value:
            return False
        now = now or timezone.now()
        note = f"Order cancelled due to full refund: {reason}"
        order.status = OrderStatus.CANCELLED.value
        order.cancelled_at = now
        order.cancel_reason = note
        OrderStockService.restore(order)
        OrderHistoryService.status(order, status=OrderStatus.CANCELLED.value, note=note, actor_id=actor_id)
        logger.info("order.cancelled_by_refund", extra={"order_number": order.order_number})
        return True
