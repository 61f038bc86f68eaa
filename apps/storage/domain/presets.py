from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class ResizeMode(StrEnum):
    FILL = "fill"
    LIMIT = "limit"


@dataclass(frozen=True)
class ImagePreset:
    folder: str
    prefix: str
    width: int
    height: int
    mode: ResizeMode
    allowed_formats: frozenset[str]


_RASTER = frozenset({"jpg", "jpeg", "png", "webp"})

PRODUCT_IMAGE = ImagePreset(
    folder="products", prefix="product", width=800, height=600, mode=ResizeMode.FILL, allowed_formats=_RASTER
)
CATEGORY_IMAGE = ImagePreset(
    folder="categories",
    prefix="category",
    width=400,
    height=300,
    mode=ResizeMode.FILL,
    allowed_formats=_RASTER | {"svg"},
)
GENERAL_IMAGE = ImagePreset(
    folder="general", prefix="upload", width=1200, height=800, mode=ResizeMode.LIMIT, allowed_formats=_RASTER
)

PRESETS: dict[str, ImagePreset] = {
    "products": PRODUCT_IMAGE,
    "categories": CATEGORY_IMAGE,
    "general": GENERAL_IMAGE,
}


def preset_for(kind: str) -> ImagePreset:
    return PRESETS.get((kind or "").strip().lower(), GENERAL_IMAGE)
