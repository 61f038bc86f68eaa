from __future__ import annotations

import logging
from dataclasses import dataclass, field

from apps.accounts.domain.types import AuthContext
from apps.orders.application.use_cases.update_order_status import (
    UpdateOrderStatusCommand,
    UpdateOrderStatusUseCase,
)
from apps.orders.domain.errors import OrderDomainError, OrderNotFoundError, OrderValidationError
from apps.orders.domain.state_machine import parse_status

logger = logging.getLogger("bondex.orders")


def parse_order_ids(raw) -> tuple[int, ...]:
    if not isinstance(raw, (list, tuple)) or not raw:
        raise OrderValidationError("Order IDs array is required", field="orderIds")
    ids = []
    for value in raw:
        if isinstance(value, bool):
            raise OrderValidationError("Order IDs must be integers", field="orderIds")
        try:
            order_id = int(value)
        except (TypeError, ValueError):
            raise OrderValidationError("Order IDs must be integers", field="orderIds") from None
        if order_id not in ids:
            ids.append(order_id)
    return tuple(ids)


@dataclass(frozen=True)
class BulkUpdateOrderStatusCommand:
    order_ids: tuple[int, ...]
    status: str
    note: str = ""


@dataclass
class BulkUpdateOrderStatusResult:
    status: str
    updated: list[int] = field(default_factory=list)
    failed: list[dict] = field(default_factory=list)

    @property
    def matched(self) -> int:
        missing = sum(1 for failure in self.failed if failure["notFound"])
        return len(self.updated) + len(self.failed) - missing


class BulkUpdateOrderStatusUseCase:
    """
    Move many orders to one status.

    Each order is locked and transitioned in its own transaction, so an order
    the state machine rejects does not undo the others.
    """

    @staticmethod
    def execute(cmd: BulkUpdateOrderStatusCommand, actor: AuthContext) -> BulkUpdateOrderStatusResult:
        if not (cmd.status or "").strip():
            raise OrderValidationError("Status is required", field="status")
        target = parse_status(cmd.status)
        if not cmd.order_ids:
            raise OrderValidationError("Order IDs array is required", field="orderIds")

        note = (cmd.note or "").strip() or f"Bulk status update to {target.value}"
        result = BulkUpdateOrderStatusResult(status=target.value)
        for order_id in cmd.order_ids:
            try:
                UpdateOrderStatusUseCase.execute(
                    UpdateOrderStatusCommand(order_id=order_id, status=target.value, note=note),
                    actor,
                )
            except OrderDomainError as exc:
                result.failed.append(
                    {
                        "orderId": order_id,
                        "error": str(exc),
                        "notFound": isinstance(exc, OrderNotFoundError),
                    }
                )
            else:
                result.updated.append(order_id)

        logger.info(
            "order.bulk_status_changed",
            extra={"to": target.value, "updated": len(result.updated), "failed": len(result.failed)},
        )
        return result
