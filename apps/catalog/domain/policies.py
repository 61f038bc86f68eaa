from __future__ import annotations

import re
from decimal import Decimal
from typing import Callable

from django.utils import timezone

from apps.catalog.domain.errors import CatalogValidationError

_NON_SLUG = re.compile(r"[^a-z0-9\s-]")
_SPACES = re.compile(r"\s+")
_DASHES = re.compile(r"-+")


def slugify_name(name: str) -> str:
    """Lowercase, strip anything but letters, digits, spaces and dashes, then dash-join."""
    slug = _NON_SLUG.sub("", (name or "").lower().strip())
    slug = _SPACES.sub("-", slug)
    slug = _DASHES.sub("-", slug)
    return slug.strip("-")


def unique_slug(name: str, *, exists: Callable[[str], bool], fallback: str = "item") -> str:
    base = slugify_name(name) or fallback
    slug = base
    counter = 2
    while exists(slug):
        slug = f"{base}-{counter}"
        counter += 1
    return slug


def validate_sale(*, price: Decimal, sale_price: Decimal | None, is_on_sale: bool, sale_end_date=None) -> None:
    if price is None or price < 0:
        raise CatalogValidationError("Price cannot be negative", field="price")
    if sale_price is None:
        return
    if sale_price < 0:
        raise CatalogValidationError("Sale price cannot be negative", field="sale_price")
    if sale_price >= price:
        raise CatalogValidationError("Sale price must be less than regular price", field="sale_price")
    if is_on_sale and sale_end_date is not None and sale_end_date <= timezone.now():
        raise CatalogValidationError("Sale end date must be in the future", field="sale_end_date")


def status_for_stock(status: str, stock: int) -> str:
    if stock <= 0 and status == "active":
        return "out_of_stock"
    if stock > 0 and status == "out_of_stock":
        return "active"
    return status


def parse_list(value) -> list:
    """Accepts a list or a comma separated string."""
    if not value:
        return []
    if isinstance(value, (list, tuple)):
        return [item for item in value if item not in ("", None)]
    return [item.strip() for item in str(value).split(",") if item.strip()]
