from __future__ import annotations

from apps.orders.models import (
    Order,
    OrderTimelineEntry,
    PaymentHistoryEntry,
    RefundEntry,
    TrackingEntry,
)


class OrderHistoryService:
    """Append-only logs attached to an order."""

    @staticmethod
    def status(order: Order, *, status: str, note: str = "", actor_id=None) -> OrderTimelineEntry:
        return OrderTimelineEntry.objects.create(order=order, status=status, note=note, updated_by_id=actor_id)

    @staticmethod
    def payment(
        order: Order,
        *,
        status: str,
        note: str = "",
        method: str = "",
        transaction_id: str = "",
        actor_id=None,
    ) -> PaymentHistoryEntry:
        return PaymentHistoryEntry.objects.create(
            order=order,
            status=status,
            method=method,
            transaction_id=transaction_id,
            note=note,
            updated_by_id=actor_id,
        )

    @staticmethod
    def refund(order: Order, *, amount, reason: str, method: str, actor_id=None) -> RefundEntry:
        return RefundEntry.objects.create(
            order=order,
            amount=amount,
            reason=reason,
            method=method,
            processed_by_id=actor_id,
        )

    @staticmethod
    def tracking(
        order: Order,
        *,
        tracking_number: str,
        carrier: str = "",
        tracking_url: str = "",
        estimated_delivery=None,
        note: str = "",
        actor_id=None,
    ) -> TrackingEntry:
        return TrackingEntry.objects.create(
            order=order,
            tracking_number=tracking_number,
            carrier=carrier,
            tracking_url=tracking_url,
            estimated_delivery=estimated_delivery,
            note=note,
            updated_by_id=actor_id,
        )
