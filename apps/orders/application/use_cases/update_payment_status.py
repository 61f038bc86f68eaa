from __future__ import annotations

import logging
from dataclasses import dataclass

from django.db import transaction

from apps.accounts.domain.types import AuthContext
from apps.orders.domain.payment_state_machine import parse_payment_method, parse_payment_status
from apps.orders.models import Order
from apps.orders.services.order_query_service import lookup_order
from apps.orders.services.payment_service import PaymentService

logger = logging.getLogger("bondex.orders")


@dataclass(frozen=True)
class UpdatePaymentStatusCommand:
    order_id: int
    payment_status: str
    payment_method: str = ""
    transaction_id: str = ""
    note: str = ""


class UpdatePaymentStatusUseCase:
    @staticmethod
    @transaction.atomic
    def execute(cmd: UpdatePaymentStatusCommand, actor: AuthContext) -> Order:
        target = parse_payment_status(cmd.payment_status)
        method = parse_payment_method(cmd.payment_method).value if cmd.payment_method else ""
        order = lookup_order(cmd.order_id, for_update=True)
        transition = PaymentService.change_status(
            order,
            target,
            note=cmd.note,
            method=method,
            transaction_id=cmd.transaction_id.strip(),
            actor_id=actor.user_id,
        )
        order.save()
        logger.info(
            "order.payment_changed",
            extra={
                "order_number": order.order_number,
                "from": transition.previous.value,
                "to": transition.target.value,
            },
        )
        return order
