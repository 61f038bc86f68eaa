from __future__ import annotations

from datetime import datetime, time, timedelta
from decimal import Decimal, InvalidOperation

from django.db.models import Avg, Count, Q, Sum
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from apps.orders.domain.errors import OrderNotFoundError, OrderValidationError
from apps.orders.domain.pricing import ZERO, money
from apps.orders.domain.state_machine import OrderStatus
from apps.orders.models import Order, OrderItem

SORT_FIELDS = {
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "orderNumber": "order_number",
    "totalAmount": "total_amount",
    "status": "status",
    "paymentStatus": "payment_status",
    "customerName": "customer_name",
}


def _parse_moment(value: str, *, field: str, end_of_day: bool = False) -> datetime:
    moment = parse_datetime(value)
    if moment is None:
        day = parse_date(value)
        if day is None:
            raise OrderValidationError(f"Invalid date: {value}", field=field)
        moment = datetime.combine(day, time.max if end_of_day else time.min)
    if timezone.is_naive(moment):
        moment = timezone.make_aware(moment)
    return moment


def _parse_amount(value: str, *, field: str) -> Decimal:
    try:
        return Decimal(str(value))
    except InvalidOperation:
        raise OrderValidationError(f"Invalid amount: {value}", field=field) from None


def date_range_filter(params) -> Q:
    """``startDate`` inclusive; a date-only ``endDate`` covers the whole day."""
    query = Q()
    if params.get("startDate"):
        query &= Q(created_at__gte=_parse_moment(params["startDate"], field="startDate"))
    if params.get("endDate"):
        query &= Q(created_at__lte=_parse_moment(params["endDate"], field="endDate", end_of_day=True))
    return query


def base_queryset():
    return Order.objects.select_related("customer").prefetch_related("items")


def filter_orders(params):
    queryset = base_queryset().filter(date_range_filter(params))

    status = params.get("status")
    if status and status != "all":
        queryset = queryset.filter(status=status)
    payment_status = params.get("paymentStatus")
    if payment_status and payment_status != "all":
        queryset = queryset.filter(payment_status=payment_status)
    if params.get("customer"):
        queryset = queryset.filter(customer_id=params["customer"])

    search = (params.get("search") or "").strip()
    if search:
        queryset = queryset.filter(
            Q(order_number__icontains=search)
            | Q(customer_name__icontains=search)
            | Q(customer_email__icontains=search)
            | Q(customer_phone__icontains=search)
        )

    if params.get("minAmount"):
        queryset = queryset.filter(total_amount__gte=_parse_amount(params["minAmount"], field="minAmount"))
    if params.get("maxAmount"):
        queryset = queryset.filter(total_amount__lte=_parse_amount(params["maxAmount"], field="maxAmount"))

    field = SORT_FIELDS.get(params.get("sortBy") or "createdAt", "created_at")
    prefix = "" if params.get("sortOrder") == "asc" else "-"
    return queryset.order_by(f"{prefix}{field}", f"{prefix}id")


def summarize(queryset) -> dict:
    stats = queryset.order_by().aggregate(
        total_revenue=Sum("total_amount"),
        average_order_value=Avg("total_amount"),
        total_orders=Count("id"),
    )
    return {
        "totalRevenue": stats["total_revenue"] or ZERO,
        "averageOrderValue": money(stats["average_order_value"] or ZERO),
        "totalOrders": stats["total_orders"],
    }


def status_breakdown(queryset) -> dict[str, int]:
    rows = queryset.order_by().prefetch_related(None).values("status").annotate(count=Count("id"))
    return {row["status"]: row["count"] for row in rows}


def lookup_order(order_id, *, for_update: bool = False) -> Order:
    queryset = Order.objects.select_for_update() if for_update else base_queryset()
    order = queryset.filter(pk=order_id).first()
    if order is None:
        raise OrderNotFoundError()
    return order


def lookup_by_number(order_number: str) -> Order:
    order = (
        Order.objects.prefetch_related("items", "timeline", "tracking_history")
        .filter(order_number=(order_number or "").strip().upper())
        .first()
    )
    if order is None:
        raise OrderNotFoundError()
    return order


def customer_orders(customer_id, params):
    return filter_orders(params).filter(customer_id=customer_id)


def lookup_customer_order(order_id, customer_id) -> Order:
    order = base_queryset().filter(pk=order_id, customer_id=customer_id).first()
    if order is None:
        raise OrderNotFoundError()
    return order


def order_analytics(order: Order) -> dict:
    items = list(order.items.all())
    total_quantity = sum(item.quantity for item in items)
    subtotal = Decimal(order.subtotal)
    return {
        "itemsCount": len(items),
        "totalQuantity": total_quantity,
        "averageItemPrice": money(subtotal / total_quantity) if total_quantity else ZERO,
        "discountPercentage": money(Decimal(order.discount) / subtotal * 100) if subtotal and order.discount else ZERO,
    }


def recent_orders(limit: int = 10):
    return Order.objects.select_related("customer").order_by("-created_at", "-id")[:limit]


def export_rows(params) -> list[dict]:
    queryset = Order.objects.filter(date_range_filter(params)).order_by("-created_at", "-id")
    if params.get("status") and params["status"] != "all":
        queryset = queryset.filter(status=params["status"])
    return [
        {
            "Order Number": order.order_number,
            "Customer Name": order.customer_name,
            "Customer Email": order.customer_email,
            "Customer Phone": order.customer_phone,
            "Status": order.status,
            "Payment Status": order.payment_status,
            "Total Amount (KES)": order.total_amount,
            "Shipping Cost (KES)": order.shipping_cost,
            "Order Date": timezone.localtime(order.created_at).date().isoformat(),
            "Shipping Address": f"{order.shipping_address}, {order.shipping_city}, {order.shipping_county}",
            "Tracking Number": order.tracking_number or "N/A",
        }
        for order in queryset
    ]


def top_products(queryset, limit: int = 10) -> list[dict]:
    rows = (
        OrderItem.objects.filter(order__in=queryset.order_by().values("id"))
        .values("product_id")
        .annotate(
            total_quantity=Sum("quantity"),
            total_revenue=Sum("total_price"),
            order_count=Count("order", distinct=True),
        )
        .order_by("-total_quantity", "product_id")[:limit]
    )
    names = dict(
        OrderItem.objects.filter(product_id__in=[row["product_id"] for row in rows])
        .order_by("product_id", "-id")
        .values_list("product_id", "product_name")
    )
    return [
        {
            "productId": row["product_id"],
            "productName": names.get(row["product_id"], ""),
            "totalQuantity": row["total_quantity"],
            "totalRevenue": row["total_revenue"],
            "orderCount": row["order_count"],
        }
        for row in rows
    ]


def order_stats(params) -> dict:
    queryset = Order.objects.filter(date_range_filter(params))
    overview = queryset.aggregate(
        total_orders=Count("id"),
        total_revenue=Sum("total_amount"),
        average_order_value=Avg("total_amount"),
        pending_orders=Count("id", filter=Q(status=OrderStatus.PENDING.value)),
        completed_orders=Count("id", filter=Q(status=OrderStatus.DELIVERED.value)),
    )
    breakdown = (
        queryset.order_by("status")
        .values("status")
        .annotate(count=Count("id"), total_value=Sum("total_amount"))
    )
    return {
        "overview": {
            "totalOrders": overview["total_orders"],
            "totalRevenue": overview["total_revenue"] or ZERO,
            "averageOrderValue": money(overview["average_order_value"] or ZERO),
            "pendingOrders": overview["pending_orders"],
            "completedOrders": overview["completed_orders"],
        },
        "topProducts": top_products(queryset),
        "statusBreakdown": [
            {"status": row["status"], "count": row["count"], "totalValue": row["total_value"] or ZERO}
            for row in breakdown
        ],
    }


def stale_pending_cutoff(days: int, now=None) -> datetime:
    return (now or timezone.now()) - timedelta(days=days)
