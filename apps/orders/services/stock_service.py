from __future__ import annotations

import logging
from collections import Counter

from apps.catalog.models import Product
from apps.catalog.services.inventory_service import InventoryService
from apps.orders.domain.errors import InsufficientStockError
from apps.orders.models import Order

logger = logging.getLogger("bondex.orders")


class OrderStockService:
    @staticmethod
    def reserve(quantities: Counter, *, products: dict[int, Product]) -> None:
        """Decrement stock for every product; must run inside the caller's transaction."""
        for product_id, quantity in quantities.items():
            if not InventoryService.reserve(product_id=product_id, quantity=quantity):
                snapshot = products[product_id]
                available = Product.objects.filter(pk=product_id).values_list("stock", flat=True).first()
                if available is None:
                    available = snapshot.stock
                raise InsufficientStockError(
                    product_name=snapshot.name,
                    available=available,
                    requested=quantity,
                )

    @staticmethod
    def restore(order: Order) -> bool:
        """Give reserved quantities back to stock once. The caller saves ``order``."""
        if not order.stock_reserved:
            return False
        for item in order.items.all():
            InventoryService.release(product_id=item.product_id, quantity=item.quantity)
        order.stock_reserved = False
        logger.info("order.stock_restored", extra={"order_number": order.order_number})
        return True
