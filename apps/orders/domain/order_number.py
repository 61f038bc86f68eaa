from __future__ import annotations

import re
from datetime import date

from apps.orders.domain.errors import OrderNumberExhaustedError

PREFIX = "ORD"
MAX_DAILY_SEQUENCE = 9999
ORDER_NUMBER_PATTERN = re.compile(r"^ORD\d{6}\d{4}$")


def daily_prefix(day: date) -> str:
    return f"{PREFIX}{day:%y%m%d}"


def next_sequence(last_number: str | None) -> int:
    if not last_number:
        return 1
    try:
        return int(last_number[-4:]) + 1
    except ValueError:
        return 1


def format_order_number(day: date, sequence: int) -> str:
    if sequence > MAX_DAILY_SEQUENCE:
        raise OrderNumberExhaustedError(f"Daily order number sequence exhausted for {day.isoformat()}")
    return f"{daily_prefix(day)}{sequence:04d}"


def is_order_number(value: str) -> bool:
    return bool(ORDER_NUMBER_PATTERN.match(value or ""))
