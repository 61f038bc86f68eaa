from __future__ import annotations

from datetime import date

from django.utils import timezone

from apps.orders.domain.order_number import daily_prefix, format_order_number, next_sequence
from apps.orders.models import Order


class OrderNumberService:
    @staticmethod
    def next_number(day: date | None = None) -> str:
        day = day or timezone.localdate()
        prefix = daily_prefix(day)
        last = (
            Order.objects.filter(order_number__startswith=prefix)
            .order_by("-order_number")
            .values_list("order_number", flat=True)
            .first()
        )
        return format_order_number(day, next_sequence(last))
