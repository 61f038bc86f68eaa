from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from django.db import transaction

from apps.accounts.domain.types import AuthContext
from apps.orders.domain.state_machine import StatusTransition, parse_status
from apps.orders.models import Order
from apps.orders.services.order_query_service import lookup_order
from apps.orders.services.status_service import OrderStatusService


@dataclass(frozen=True)
class UpdateOrderStatusCommand:
    order_id: int
    status: str
    note: str = ""
    tracking_number: str = ""
    estimated_delivery: datetime | None = None


@dataclass(frozen=True)
class UpdateOrderStatusResult:
    order: Order
    transition: StatusTransition


class UpdateOrderStatusUseCase:
    @staticmethod
    @transaction.atomic
    def execute(cmd: UpdateOrderStatusCommand, actor: AuthContext) -> UpdateOrderStatusResult:
        target = parse_status(cmd.status)
        order = lookup_order(cmd.order_id, for_update=True)
        transition = OrderStatusService.transition(
            order,
            target,
            note=cmd.note,
            actor_id=actor.user_id,
            tracking_number=cmd.tracking_number,
            estimated_delivery=cmd.estimated_delivery,
        )
        order.save()
        return UpdateOrderStatusResult(order=order, transition=transition)
