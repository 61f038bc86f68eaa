from __future__ import annotations

from decimal import Decimal

from apps.catalog.domain.policies import slugify_name
from apps.catalog.models import Category, Product


def make_category(name: str = "Head Protection", *, type: str = Category.TYPE_PROTECTION, **extra) -> Category:
    return Category.objects.create(name=name, slug=slugify_name(name), type=type, **extra)


def make_product(
    name: str = "Safety Helmet",
    *,
    category: Category | None = None,
    price: str | Decimal = "1000.00",
    stock: int = 10,
    **extra,
) -> Product:
    category = category or Category.objects.first() or make_category()
    return Product.objects.create(
        name=name,
        slug=extra.pop("slug", slugify_name(name)),
        primary_category=category,
        price=Decimal(str(price)),
        stock=stock,
        **extra,
    )
