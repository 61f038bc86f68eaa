from __future__ import annotations

from datetime import timedelta

from django.db.models import Avg, Count, Q, Sum
from django.db.models.functions import TruncDate
from django.utils import timezone

from apps.orders.domain.pricing import ZERO, money
from apps.orders.domain.state_machine import OrderStatus
from apps.orders.models import Order, OrderItem

PERIODS = {"7d": 7, "30d": 30, "90d": 90, "1y": 365}
DEFAULT_PERIOD = "30d"


def resolve_period(raw: str | None) -> str:
    return raw if raw in PERIODS else DEFAULT_PERIOD


def orders_analytics(period: str | None = None, *, now=None) -> dict:
    period = resolve_period(period)
    now = now or timezone.now()
    start = now - timedelta(days=PERIODS[period])

    in_period = Order.objects.filter(created_at__gte=start).order_by()
    billable = in_period.filter(~Q(status=OrderStatus.CANCELLED.value))

    totals = billable.aggregate(
        total_revenue=Sum("total_amount"),
        total_orders=Count("id"),
        average_order_value=Avg("total_amount"),
    )
    total_items = OrderItem.objects.filter(order__in=billable.values("id")).count()

    status_rows = (
        in_period.values("status").annotate(count=Count("id"), revenue=Sum("total_amount")).order_by("status")
    )
    daily_rows = (
        billable.annotate(day=TruncDate("created_at"))
        .values("day")
        .annotate(orders=Count("id"), revenue=Sum("total_amount"))
        .order_by("day")
    )
    method_rows = (
        in_period.values("payment_method")
        .annotate(count=Count("id"), revenue=Sum("total_amount"))
        .order_by("payment_method")
    )

    return {
        "period": period,
        "startDate": start,
        "endDate": now,
        "totalStats": {
            "totalRevenue": totals["total_revenue"] or ZERO,
            "totalOrders": totals["total_orders"],
            "averageOrderValue": money(totals["average_order_value"] or ZERO),
            "totalItems": total_items,
        },
        "statusBreakdown": [
            {"status": row["status"], "count": row["count"], "revenue": row["revenue"] or ZERO}
            for row in status_rows
        ],
        "dailyTrend": [
            {"date": row["day"].isoformat(), "orders": row["orders"], "revenue": row["revenue"] or ZERO}
            for row in daily_rows
        ],
        "paymentMethods": [
            {"method": row["payment_method"], "count": row["count"], "revenue": row["revenue"] or ZERO}
            for row in method_rows
        ],
    }
