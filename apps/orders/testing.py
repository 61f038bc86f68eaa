from __future__ import annotations

from apps.accounts.domain.types import ANONYMOUS, AuthContext
from apps.orders.application.use_cases.create_order import CreateOrderCommand, CreateOrderUseCase
from apps.orders.domain.types import AddressSnapshot, CustomerSnapshot, LineRequest


def checkout_payload(*lines, city: str = "Nairobi", **extra) -> dict:
    """Request body for ``POST /api/orders/``; ``lines`` are ``(product, quantity)`` pairs."""
    payload = {
        "customerInfo": {"name": "Jane Wanjiku", "email": "Jane@Example.com", "phone": "0712345678"},
        "items": [{"product": product.pk, "quantity": quantity} for product, quantity in lines],
        "shippingAddress": {"address": "1 Moi Avenue", "city": city, "county": "Nairobi"},
    }
    payload.update(extra)
    return payload


def place_order(*lines, city: str = "Nairobi", actor: AuthContext = ANONYMOUS):
    cmd = CreateOrderCommand(
        customer=CustomerSnapshot(name="Jane Wanjiku", email="jane@example.com", phone="0712345678"),
        shipping_address=AddressSnapshot(address="1 Moi Avenue", city=city, county="Nairobi"),
        items=tuple(LineRequest(product_id=product.pk, quantity=quantity) for product, quantity in lines),
    )
    return CreateOrderUseCase.execute(cmd, actor).order
