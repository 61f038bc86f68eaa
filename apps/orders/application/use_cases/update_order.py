from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation

from django.db import transaction

from apps.accounts.domain.types import AuthContext
from apps.orders.domain.errors import OrderValidationError
from apps.orders.domain.payment_state_machine import parse_payment_method
from apps.orders.domain.pricing import money, total_amount
from apps.orders.models import Order
from apps.orders.services.order_query_service import lookup_order

# Order fields an admin may edit directly; status, payment and tracking have their own flows.
EDITABLE_FIELDS = frozenset(
    {
        "customer_name",
        "customer_phone",
        "shipping_full_name",
        "shipping_phone",
        "shipping_email",
        "shipping_address",
        "shipping_city",
        "shipping_county",
        "shipping_postal_code",
        "shipping_country",
        "billing_address",
        "shipping_method",
        "payment_method",
        "carrier",
        "tracking_url",
        "estimated_delivery",
        "customer_note",
        "internal_note",
        "discount",
    }
)


@dataclass(frozen=True)
class UpdateOrderCommand:
    order_id: int
    changes: dict = field(default_factory=dict)


class UpdateOrderUseCase:
    @staticmethod
    @transaction.atomic
    def execute(cmd: UpdateOrderCommand, actor: AuthContext) -> Order:
        order = lookup_order(cmd.order_id, for_update=True)
        changes = {key: value for key, value in cmd.changes.items() if key in EDITABLE_FIELDS}

        if "payment_method" in changes:
            changes["payment_method"] = parse_payment_method(changes["payment_method"]).value
        if "discount" in changes:
            changes["discount"] = UpdateOrderUseCase._validated_discount(order, changes["discount"])

        for name, value in changes.items():
            setattr(order, name, value)
        order.save()
        return order

    @staticmethod
    def _validated_discount(order: Order, raw) -> Decimal:
        try:
            discount = money(raw)
        except (InvalidOperation, ValueError):
            raise OrderValidationError("Discount must be a number", field="discount") from None
        if discount < 0:
            raise OrderValidationError("Discount cannot be negative", field="discount")
        gross = total_amount(subtotal=order.subtotal, shipping=order.shipping_cost, tax=order.tax)
        if discount > gross:
            raise OrderValidationError("Discount cannot exceed the order total", field="discount")
        if gross - discount < money(order.refund_amount):
            raise OrderValidationError("Discount would reduce the total below the amount refunded", field="discount")
        return discount
