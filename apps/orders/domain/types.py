from __future__ import annotations

from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class CustomerSnapshot:
    name: str
    email: str
    phone: str


@dataclass(frozen=True)
class AddressSnapshot:
    address: str
    city: str
    county: str
    full_name: str = ""
    phone: str = ""
    email: str = ""
    postal_code: str = ""
    country: str = "Kenya"

    def as_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class LineRequest:
    product_id: int
    quantity: int
