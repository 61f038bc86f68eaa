from __future__ import annotations

from decimal import Decimal

from django.conf import settings

from apps.orders.domain.pricing import PricingRules


def configured_rules() -> PricingRules:
    cities = getattr(settings, "ORDER_REMOTE_CITIES", ["lodwar", "mandera", "wajir", "garissa"])
    return PricingRules(
        vat_rate=Decimal(str(getattr(settings, "ORDER_VAT_RATE", "0.16"))),
        base_shipping=Decimal(str(getattr(settings, "ORDER_BASE_SHIPPING", 300))),
        free_shipping_threshold=Decimal(str(getattr(settings, "ORDER_FREE_SHIPPING_THRESHOLD", 5000))),
        remote_surcharge=Decimal(str(getattr(settings, "ORDER_REMOTE_SURCHARGE", 200))),
        remote_cities=frozenset(city.strip().lower() for city in cities),
    )
