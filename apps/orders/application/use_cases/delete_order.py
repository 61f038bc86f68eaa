from __future__ import annotations

import logging
from dataclasses import dataclass

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from apps.accounts.domain.types import AuthContext
from apps.orders.domain.errors import OrderDeletionRejectedError
from apps.orders.domain.state_machine import OrderStatus
from apps.orders.services.order_query_service import lookup_order, stale_pending_cutoff
from apps.orders.services.stock_service import OrderStockService

logger = logging.getLogger("bondex.orders")


@dataclass(frozen=True)
class DeleteOrderCommand:
    order_id: int


@dataclass(frozen=True)
class DeleteOrderResult:
    order_id: int
    order_number: str


class DeleteOrderUseCase:
    @staticmethod
    @transaction.atomic
    def execute(cmd: DeleteOrderCommand, actor: AuthContext, now=None) -> DeleteOrderResult:
        order = lookup_order(cmd.order_id, for_update=True)
        cutoff = stale_pending_cutoff(getattr(settings, "ORDER_STALE_PENDING_DAYS", 7), now or timezone.now())
        deletable = order.status == OrderStatus.CANCELLED.value or (
            order.status == OrderStatus.PENDING.value and order.created_at < cutoff
        )
        if not deletable:
            raise OrderDeletionRejectedError(
                "Can only delete cancelled orders or pending orders older than 7 days"
            )

        OrderStockService.restore(order)
        order_id, order_number = order.pk, order.order_number
        order.delete()
        logger.info("order.deleted", extra={"order_number": order_number, "actor_id": actor.user_id})
        return DeleteOrderResult(order_id=order_id, order_number=order_number)
