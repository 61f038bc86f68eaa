from __future__ import annotations

import logging

from django.db import transaction
from django.db.models import F
from django.db.models.functions import Greatest

from apps.catalog.domain.errors import CatalogValidationError, ProductNotFoundError
from apps.catalog.models import Product

logger = logging.getLogger("bondex.catalog")


class InventoryService:
    """Stock mutations. Every decrement is a conditional UPDATE so stock never goes negative."""

    @staticmethod
    def reserve(*, product_id: int, quantity: int) -> bool:
        updated = Product.objects.filter(pk=product_id, stock__gte=quantity).update(
            stock=F("stock") - quantity,
            sales_count=F("sales_count") + quantity,
        )
        if not updated:
            return False
        Product.objects.filter(pk=product_id, stock=0, status=Product.STATUS_ACTIVE).update(
            status=Product.STATUS_OUT_OF_STOCK
        )
        return True

    @staticmethod
    def release(*, product_id: int | None, quantity: int) -> bool:
        if product_id is None:
            return False
        updated = Product.objects.filter(pk=product_id).update(
            stock=F("stock") + quantity,
            sales_count=Greatest(F("sales_count") - quantity, 0),
        )
        if not updated:
            logger.warning("inventory.release_missing_product", extra={"product_id": product_id})
            return False
        Product.objects.filter(pk=product_id, stock__gt=0, status=Product.STATUS_OUT_OF_STOCK).update(
            status=Product.STATUS_ACTIVE
        )
        return True

    @staticmethod
    @transaction.atomic
    def set_stock(*, product_id: int, stock: int | None = None, adjustment: int | None = None, actor_id=None):
        product = Product.objects.select_for_update().filter(pk=product_id).first()
        if product is None:
            raise ProductNotFoundError()

        if stock is None and adjustment is None:
            raise CatalogValidationError("Provide stock or adjustment", field="stock")
        new_stock = stock if stock is not None else product.stock + adjustment
        if new_stock < 0:
            raise CatalogValidationError("Stock cannot be negative", field="stock")

        previous = product.stock
        product.stock = new_stock
        product.updated_by_id = actor_id
        product.save(update_fields=["stock", "updated_by", "updated_at"])
        logger.info(
            "inventory.stock_set",
            extra={"product_id": product.id, "previous": previous, "stock": new_stock},
        )
        return product

    @staticmethod
    def low_stock():
        return (
            Product.objects.filter(stock__lte=F("low_stock_threshold"))
            .exclude(status=Product.STATUS_DRAFT)
            .select_related("primary_category")
            .order_by("stock", "name")
        )
