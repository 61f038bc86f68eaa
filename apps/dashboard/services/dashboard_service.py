"""Back-office overview: catalog counts, users, alerts and the order snapshot."""

from __future__ import annotations

from django.db.models import Avg, Count, F, Q, Sum
from django.utils import timezone

from apps.accounts.services.profile_service import AccountProfileService
from apps.catalog.models import Category, Product
from apps.orders.domain.pricing import ZERO, money
from apps.orders.domain.state_machine import OrderStatus
from apps.orders.models import Order

TOP_PRODUCTS_LIMIT = 5
ALERTS_LIMIT = 10
CATEGORY_LIMIT = 10


def product_totals() -> dict:
    return Product.objects.aggregate(
        totalProducts=Count("id"),
        activeProducts=Count("id", filter=Q(status=Product.STATUS_ACTIVE)),
        lowStockProducts=Count("id", filter=Q(stock__lte=F("low_stock_threshold"))),
        featuredProducts=Count("id", filter=Q(is_featured=True)),
    )


def category_totals() -> dict:
    return Category.objects.aggregate(
        totalCategories=Count("id"),
        activeCategories=Count("id", filter=Q(status=Category.STATUS_ACTIVE)),
    )


def top_products(limit: int = TOP_PRODUCTS_LIMIT) -> list[dict]:
    products = Product.objects.prefetch_related("images").order_by("-sales_count", "name")[:limit]
    return [
        {
            "id": product.id,
            "name": product.name,
            "sales": product.sales_count,
            "revenue": money(product.price * product.sales_count),
            "image": product.main_image_url,
        }
        for product in products
    ]


def low_stock_alerts(limit: int = ALERTS_LIMIT) -> list[dict]:
    products = (
        Product.objects.filter(stock__lte=F("low_stock_threshold"))
        .select_related("primary_category")
        .order_by("stock", "name")[:limit]
    )
    return [
        {
            "id": product.id,
            "name": product.name,
            "currentStock": product.stock,
            "threshold": product.low_stock_threshold,
            "category": product.primary_category.name,
            "severity": "critical" if product.stock == 0 else "warning",
        }
        for product in products
    ]


def products_by_category(limit: int = CATEGORY_LIMIT) -> list[dict]:
    rows = (
        Product.objects.filter(status=Product.STATUS_ACTIVE)
        .values("primary_category_id", "primary_category__name")
        .annotate(count=Count("id"), total_value=Sum("price"))
        .order_by("-count", "primary_category__name")[:limit]
    )
    return [
        {
            "categoryId": row["primary_category_id"],
            "category": row["primary_category__name"],
            "count": row["count"],
            "totalValue": row["total_value"] or ZERO,
        }
        for row in rows
    ]


def order_overview() -> dict:
    today = timezone.localdate()
    stats = Order.objects.aggregate(
        totalOrders=Count("id"),
        pendingOrders=Count("id", filter=Q(status=OrderStatus.PENDING.value)),
        processingOrders=Count("id", filter=Q(status=OrderStatus.PROCESSING.value)),
        deliveredOrders=Count("id", filter=Q(status=OrderStatus.DELIVERED.value)),
        ordersToday=Count("id", filter=Q(created_at__date=today)),
        totalRevenue=Sum("total_amount", filter=~Q(status=OrderStatus.CANCELLED.value)),
    )
    stats["totalRevenue"] = stats["totalRevenue"] or ZERO
    return stats


def dashboard_stats() -> dict:
    products = product_totals()
    categories = category_totals()
    users = AccountProfileService.user_stats()
    by_category = products_by_category()
    average_price = Product.objects.aggregate(avg=Avg("price"))["avg"] or ZERO
    return {
        "overview": {**products, **categories, **users},
        "orders": order_overview(),
        "charts": {
            "productsByCategory": by_category,
            "topProducts": top_products(),
        },
        "alerts": {"lowStockAlerts": low_stock_alerts()},
        "quickStats": {
            "productsNeedingAttention": products["lowStockProducts"],
            "categoryWithMostProducts": by_category[0]["category"] if by_category else "None",
            "averageProductPrice": money(average_price),
            "lastUpdated": timezone.now(),
        },
    }
