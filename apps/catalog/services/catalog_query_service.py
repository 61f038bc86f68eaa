from __future__ import annotations

from decimal import Decimal, InvalidOperation

from django.db.models import Q

from apps.catalog.domain.errors import ProductNotFoundError
from apps.catalog.models import Product

PUBLIC_STATUSES = (Product.STATUS_ACTIVE, Product.STATUS_OUT_OF_STOCK)

_SORTS = {
    "price_low": ("price", "-created_at"),
    "price_high": ("-price", "-created_at"),
    "name": ("name",),
    "newest": ("-created_at",),
    "oldest": ("created_at",),
    "rating": ("-avg_rating", "-review_count"),
    "popular": ("-sales_count", "-views"),
}


def _decimal(raw) -> Decimal | None:
    if raw in (None, ""):
        return None
    try:
        return Decimal(str(raw))
    except InvalidOperation:
        return None


def _truthy(raw) -> bool:
    return str(raw).strip().lower() in ("1", "true", "yes", "on")


def base_queryset():
    return Product.objects.select_related("primary_category").prefetch_related("images", "secondary_categories")


def filter_products(params, *, public: bool = True):
    qs = base_queryset()
    if public:
        qs = qs.filter(status__in=PUBLIC_STATUSES)
    elif params.get("status"):
        qs = qs.filter(status=params["status"])

    category = params.get("category")
    if category:
        lookup = Q(primary_category__slug=category) | Q(secondary_categories__slug=category)
        if str(category).isdigit():
            lookup |= Q(primary_category_id=int(category)) | Q(secondary_categories__id=int(category))
        qs = qs.filter(lookup).distinct()

    brand = params.get("brand")
    if brand:
        qs = qs.filter(brand__iexact=brand)

    search = (params.get("search") or "").strip()
    if search:
        qs = qs.filter(
            Q(name__icontains=search) | Q(description__icontains=search) | Q(sku__icontains=search)
        )

    min_price = _decimal(params.get("minPrice"))
    if min_price is not None:
        qs = qs.filter(price__gte=min_price)
    max_price = _decimal(params.get("maxPrice"))
    if max_price is not None:
        qs = qs.filter(price__lte=max_price)

    if _truthy(params.get("featured", "")):
        qs = qs.filter(is_featured=True)
    if _truthy(params.get("inStock", "")):
        qs = qs.filter(stock__gt=0)
    if _truthy(params.get("onSale", "")):
        qs = qs.filter(is_on_sale=True)

    return qs.order_by(*_SORTS.get(params.get("sortBy") or "newest", _SORTS["newest"]))


def featured_products(limit: int = 8):
    return base_queryset().filter(status=Product.STATUS_ACTIVE, is_featured=True).order_by("-created_at")[:limit]


def lookup_product(id_or_slug, *, public: bool = True) -> Product:
    value = str(id_or_slug)
    lookup = Q(slug=value)
    if value.isdigit():
        lookup |= Q(pk=int(value))
    qs = base_queryset().filter(lookup)
    if public:
        qs = qs.filter(status__in=PUBLIC_STATUSES)
    product = qs.first()
    if product is None:
        raise ProductNotFoundError()
    return product
