from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from django.db import transaction

from apps.accounts.domain.types import AuthContext
from apps.orders.domain.errors import OrderValidationError
from apps.orders.domain.state_machine import OrderStatus
from apps.orders.models import Order
from apps.orders.services.history_service import OrderHistoryService
from apps.orders.services.order_query_service import lookup_order
from apps.orders.services.status_service import OrderStatusService

DEFAULT_TRACKING_NOTE = "Tracking information updated"


@dataclass(frozen=True)
class UpdateTrackingCommand:
    order_id: int
    tracking_number: str
    carrier: str = ""
    tracking_url: str = ""
    estimated_delivery: datetime | None = None
    note: str = ""


class UpdateTrackingUseCase:
    @staticmethod
    @transaction.atomic
    def execute(cmd: UpdateTrackingCommand, actor: AuthContext) -> Order:
        tracking_number = (cmd.tracking_number or "").strip()
        if not tracking_number:
            raise OrderValidationError("Tracking number is required", field="trackingNumber")

        order = lookup_order(cmd.order_id, for_update=True)
        if order.status not in (OrderStatus.SHIPPED.value, OrderStatus.DELIVERED.value):
            OrderStatusService.transition(
                order,
                OrderStatus.SHIPPED,
                note=f"Order shipped with tracking number {tracking_number}",
                actor_id=actor.user_id,
            )

        order.tracking_number = tracking_number
        if cmd.carrier:
            order.carrier = cmd.carrier.strip()
        if cmd.tracking_url:
            order.tracking_url = cmd.tracking_url.strip()
        if cmd.estimated_delivery:
            order.estimated_delivery = cmd.estimated_delivery

        OrderHistoryService.tracking(
            order,
            tracking_number=tracking_number,
            carrier=order.carrier,
            tracking_url=order.tracking_url,
            estimated_delivery=order.estimated_delivery,
            note=cmd.note or DEFAULT_TRACKING_NOTE,
            actor_id=actor.user_id,
        )
        order.save()
        return order
