"""Order pricing: subtotal, shipping, VAT and totals. All amounts are KES ``Decimal``."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

ZERO = Decimal("0")
CENTS = Decimal("0.01")
WHOLE = Decimal("1")


@dataclass(frozen=True)
class PricingRules:
    vat_rate: Decimal = Decimal("0.16")
    base_shipping: Decimal = Decimal("300")
    free_shipping_threshold: Decimal = Decimal("5000")
    remote_surcharge: Decimal = Decimal("200")
    remote_cities: frozenset[str] = frozenset({"lodwar", "mandera", "wajir", "garissa"})


@dataclass(frozen=True)
class OrderTotals:
    subtotal: Decimal
    shipping_cost: Decimal
    tax: Decimal
    discount: Decimal
    total_amount: Decimal


def money(value) -> Decimal:
    return Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)


def line_total(price, quantity: int) -> Decimal:
    return money(Decimal(str(price)) * quantity)


def shipping_cost(subtotal: Decimal, city: str, rules: PricingRules) -> Decimal:
    if subtotal >= rules.free_shipping_threshold:
        return ZERO
    if (city or "").strip().lower() in rules.remote_cities:
        return rules.base_shipping + rules.remote_surcharge
    return rules.base_shipping


def tax_for(subtotal: Decimal, rules: PricingRules) -> Decimal:
    """VAT rounded half-up to a whole shilling."""
    return (subtotal * rules.vat_rate).quantize(WHOLE, rounding=ROUND_HALF_UP)


def total_amount(*, subtotal, shipping, tax, discount=ZERO) -> Decimal:
    return money(Decimal(subtotal) + Decimal(shipping) + Decimal(tax) - Decimal(discount))


def compute_totals(
    lines: Iterable[tuple[Decimal, int]],
    *,
    city: str,
    rules: PricingRules,
    discount: Decimal = ZERO,
) -> OrderTotals:
    subtotal = money(sum((line_total(price, quantity) for price, quantity in lines), ZERO))
    shipping = money(shipping_cost(subtotal, city, rules))
    tax = money(tax_for(subtotal, rules))
    return OrderTotals(
        subtotal=subtotal,
        shipping_cost=shipping,
        tax=tax,
        discount=money(discount),
        total_amount=total_amount(subtotal=subtotal, shipping=shipping, tax=tax, discount=discount),
    )


def format_amount(value) -> str:
    """Render KES amounts the way customers see them: ``2620`` or ``99.50``."""
    value = money(value)
    if value == value.to_integral_value():
        return str(value.quantize(WHOLE))
    return str(value)
