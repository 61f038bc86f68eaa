from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from datetime import timedelta

from django.conf import settings
from django.db import IntegrityError, transaction
from django.utils import timezone

from apps.accounts.domain.types import ANONYMOUS, AuthContext
from apps.accounts.models import AccountProfile
from apps.catalog.models import Product
from apps.orders.domain.errors import (
    InsufficientStockError,
    OrderNumberExhaustedError,
    OrderProductNotFoundError,
    OrderValidationError,
    ProductUnavailableError,
)
from apps.orders.domain.payment_state_machine import PaymentMethod, parse_payment_method
from apps.orders.domain.pricing import compute_totals, line_total
from apps.orders.domain.state_machine import OrderStatus
from apps.orders.domain.types import AddressSnapshot, CustomerSnapshot, LineRequest
from apps.orders.models import Order, OrderItem
from apps.orders.services.history_service import OrderHistoryService
from apps.orders.services.order_number_service import OrderNumberService
from apps.orders.services.pricing_service import configured_rules
from apps.orders.services.stock_service import OrderStockService

logger = logging.getLogger("bondex.orders")

MAX_NUMBER_ATTEMPTS = 5


def parse_line_items(raw_items) -> tuple[LineRequest, ...]:
    """Turn ``[{product, quantity}, ...]`` into line requests."""
    if not raw_items or not isinstance(raw_items, (list, tuple)):
        raise OrderValidationError("Order items are required", field="items")

    lines = []
    for raw in raw_items:
        if not isinstance(raw, dict):
            raise OrderValidationError("Each item must have a valid product ID and quantity", field="items")
        product_id = raw.get("product", raw.get("productId"))
        try:
            product_id = int(product_id)
            quantity = int(raw.get("quantity"))
        except (TypeError, ValueError):
            raise OrderValidationError(
                "Each item must have a valid product ID and quantity", field="items"
            ) from None
        if product_id < 1 or quantity < 1:
            raise OrderValidationError("Each item must have a valid product ID and quantity", field="items")
        lines.append(LineRequest(product_id=product_id, quantity=quantity))
    return tuple(lines)


@dataclass(frozen=True)
class CreateOrderCommand:
    customer: CustomerSnapshot
    shipping_address: AddressSnapshot
    items: tuple[LineRequest, ...]
    billing_address: dict | None = None
    payment_method: str = PaymentMethod.CASH_ON_DELIVERY.value
    shipping_method: str = "standard"
    customer_note: str = ""
    source: str = "web"
    user_agent: str = ""
    ip_address: str | None = None


@dataclass(frozen=True)
class CreateOrderResult:
    order: Order


class CreateOrderUseCase:
    @staticmethod
    def execute(cmd: CreateOrderCommand, actor: AuthContext = ANONYMOUS) -> CreateOrderResult:
        customer = CreateOrderUseCase._validate_customer(cmd.customer)
        address = cmd.shipping_address
        if not (address.address.strip() and address.city.strip() and address.county.strip()):
            raise OrderValidationError("Complete shipping address is required", field="shippingAddress")
        if not cmd.items:
            raise OrderValidationError("Order items are required", field="items")
        payment_method = parse_payment_method(cmd.payment_method or PaymentMethod.CASH_ON_DELIVERY.value)

        with transaction.atomic():
            quantities: Counter = Counter()
            for line in cmd.items:
                quantities[line.product_id] += line.quantity
            products = CreateOrderUseCase._load_products(quantities)

            totals = compute_totals(
                [(products[product_id].price, quantity) for product_id, quantity in quantities.items()],
                city=address.city,
                rules=configured_rules(),
            )
            now = timezone.now()
            order = CreateOrderUseCase._insert_order(
                cmd,
                customer=customer,
                address=address,
                totals=totals,
                payment_method=payment_method.value,
                customer_id=actor.user_id,
                now=now,
            )

            OrderStockService.reserve(quantities, products=products)
            OrderItem.objects.bulk_create(
                [
                    OrderItem(
                        order=order,
                        product=products[product_id],
                        product_name=products[product_id].name,
                        product_image=products[product_id].main_image_url,
                        quantity=quantity,
                        price=products[product_id].price,
                        total_price=line_total(products[product_id].price, quantity),
                    )
                    for product_id, quantity in quantities.items()
                ]
            )
            OrderHistoryService.status(
                order, status=OrderStatus.PENDING.value, note="Order created", actor_id=actor.user_id
            )

            if actor.user_id is not None:
                profile = AccountProfile.objects.filter(user_id=actor.user_id).first()
                if profile is not None:
                    profile.record_order(order.total_amount)

        logger.info(
            "order.created",
            extra={
                "order_number": order.order_number,
                "total_amount": str(order.total_amount),
                "items": len(quantities),
                "customer_id": actor.user_id,
            },
        )
        return CreateOrderResult(order=order)

    @staticmethod
    def _validate_customer(customer: CustomerSnapshot) -> CustomerSnapshot:
        name = (customer.name or "").strip()
        email = (customer.email or "").strip().lower()
        phone = (customer.phone or "").strip()
        if not (name and email and phone):
            raise OrderValidationError(
                "Customer information (name, email, phone) is required", field="customerInfo"
            )
        return CustomerSnapshot(name=name, email=email, phone=phone)

    @staticmethod
    def _load_products(quantities: Counter) -> dict[int, Product]:
        products = Product.objects.prefetch_related("images").in_bulk(list(quantities))
        for product_id, quantity in quantities.items():
            product = products.get(product_id)
            if product is None:
                raise OrderProductNotFoundError(product_id)
            if product.status != Product.STATUS_ACTIVE:
                raise ProductUnavailableError(product.name)
            if product.stock < quantity:
                raise InsufficientStockError(
                    product_name=product.name, available=product.stock, requested=quantity
                )
        return products

    @staticmethod
    def _insert_order(cmd, *, customer, address, totals, payment_method, customer_id, now) -> Order:
        delivery_days = getattr(settings, "ORDER_ESTIMATED_DELIVERY_DAYS", 7)
        fields = dict(
            customer_id=customer_id,
            customer_name=customer.name,
            customer_email=customer.email,
            customer_phone=customer.phone,
            shipping_full_name=address.full_name or customer.name,
            shipping_phone=address.phone or customer.phone,
            shipping_email=(address.email or customer.email).lower(),
            shipping_address=address.address.strip(),
            shipping_city=address.city.strip(),
            shipping_county=address.county.strip(),
            shipping_postal_code=address.postal_code,
            shipping_country=address.country or "Kenya",
            billing_address=cmd.billing_address or address.as_dict(),
            subtotal=totals.subtotal,
            shipping_cost=totals.shipping_cost,
            tax=totals.tax,
            discount=totals.discount,
            currency=getattr(settings, "ORDER_CURRENCY", "KES"),
            payment_method=payment_method,
            shipping_method=cmd.shipping_method or "standard",
            estimated_delivery=now + timedelta(days=delivery_days),
            customer_note=cmd.customer_note,
            source=cmd.source,
            user_agent=cmd.user_agent,
            ip_address=cmd.ip_address,
            stock_reserved=True,
        )
        for _ in range(MAX_NUMBER_ATTEMPTS):
            order_number = OrderNumberService.next_number()
            try:
                with transaction.atomic():
                    return Order.objects.create(order_number=order_number, **fields)
            except IntegrityError:
                logger.warning("order.number_collision", extra={"order_number": order_number})
        raise OrderNumberExhaustedError("Could not allocate a unique order number")
