from __future__ import annotations

import logging
from dataclasses import dataclass, field

from django.db import transaction
from django.db.models import F

from apps.catalog.domain.errors import CatalogValidationError, ProductNotFoundError
from apps.catalog.domain.policies import parse_list, unique_slug, validate_sale
from apps.catalog.models import Category, Product, ProductImage
from apps.storage.application.services.media_service import MediaService
from apps.storage.domain.presets import PRODUCT_IMAGE

logger = logging.getLogger("bondex.catalog")

_SCALARS = (
    "description",
    "brand",
    "sku",
    "price",
    "sale_price",
    "is_on_sale",
    "sale_start_date",
    "sale_end_date",
    "stock",
    "low_stock_threshold",
    "status",
    "is_featured",
    "is_new_arrival",
    "meta_title",
    "meta_description",
    "specifications",
)
_LISTS = ("features", "certifications", "compliance_standards", "tags", "keywords")


@dataclass
class ProductInput:
    values: dict = field(default_factory=dict)
    primary_category_id: int | None = None
    secondary_category_ids: list[int] | None = None
    images: list[dict] | None = None
    image_files: list = field(default_factory=list)


def _slug_taken(exclude_id=None):
    def exists(slug: str) -> bool:
        qs = Product.objects.filter(slug=slug)
        if exclude_id:
            qs = qs.exclude(pk=exclude_id)
        return qs.exists()

    return exists


class ProductService:
    @staticmethod
    def _primary_category(category_id) -> Category:
        if not category_id:
            raise CatalogValidationError("Primary category (protection type) is required", field="category")
        category = Category.objects.filter(pk=category_id).first()
        if category is None:
            raise CatalogValidationError("Primary category not found", field="category")
        return category

    @staticmethod
    def _secondary_ids(ids) -> list[int]:
        if not ids:
            return []
        # Unknown ids are dropped rather than rejected.
        return list(Category.objects.filter(pk__in=ids).values_list("pk", flat=True))

    @staticmethod
    def _assert_unique_name(name: str, exclude_id=None) -> None:
        qs = Product.objects.filter(name__iexact=name)
        if exclude_id:
            qs = qs.exclude(pk=exclude_id)
        if qs.exists():
            raise CatalogValidationError(f'Product with name "{name}" already exists.', field="name")

    @staticmethod
    def _assert_unique_sku(sku: str, exclude_id=None) -> None:
        if not sku:
            return
        qs = Product.objects.filter(sku__iexact=sku)
        if exclude_id:
            qs = qs.exclude(pk=exclude_id)
        if qs.exists():
            raise CatalogValidationError(f'Product with SKU "{sku}" already exists.', field="sku")

    @staticmethod
    def _collect_images(product_name: str, data: ProductInput) -> list[dict]:
        images = []
        for entry in data.images or []:
            if entry.get("url"):
                images.append(
                    {
                        "url": entry["url"],
                        "key": entry.get("key") or entry.get("public_id") or "",
                        "alt": entry.get("alt") or "",
                        "is_main": bool(entry.get("is_main") or entry.get("isMain")),
                    }
                )
        for upload in data.image_files:
            stored = MediaService.upload_image(upload, preset=PRODUCT_IMAGE)
            images.append({"url": stored.url, "key": stored.key, "alt": "", "is_main": False})

        if images and not any(image["is_main"] for image in images):
            images[0]["is_main"] = True
        for index, image in enumerate(images, start=1):
            image["alt"] = image["alt"] or f"{product_name} - Image {index}"
        return images

    @staticmethod
    def _attach_images(product: Product, images: list[dict]) -> None:
        ProductImage.objects.bulk_create(
            [ProductImage(product=product, position=index, **image) for index, image in enumerate(images)]
        )

    @staticmethod
    def _apply_values(product: Product, values: dict) -> None:
        for attr in _SCALARS:
            if attr in values:
                setattr(product, attr, values[attr])
        for attr in _LISTS:
            if attr in values:
                setattr(product, attr, parse_list(values[attr]))

    @staticmethod
    @transaction.atomic
    def create_product(data: ProductInput, *, actor_id=None) -> Product:
        name = (data.values.get("name") or "").strip()
        if not name:
            raise CatalogValidationError("Product name is required", field="name")
        if data.values.get("price") is None:
            raise CatalogValidationError("Valid product price is required", field="price")

        primary = ProductService._primary_category(data.primary_category_id)
        ProductService._assert_unique_name(name)
        ProductService._assert_unique_sku((data.values.get("sku") or "").strip())

        product = Product(name=name, primary_category=primary, created_by_id=actor_id, updated_by_id=actor_id)
        ProductService._apply_values(product, data.values)
        product.sku = (product.sku or "").strip()
        validate_sale(
            price=product.price,
            sale_price=product.sale_price,
            is_on_sale=product.is_on_sale,
            sale_end_date=product.sale_end_date,
        )
        product.slug = unique_slug(name, exists=_slug_taken(), fallback="product")
        product.save()

        product.secondary_categories.set(ProductService._secondary_ids(data.secondary_category_ids))
        ProductService._attach_images(product, ProductService._collect_images(name, data))
        logger.info("product.created", extra={"product_id": product.id, "slug": product.slug})
        return product

    @staticmethod
    @transaction.atomic
    def update_product(product_id, data: ProductInput, *, actor_id=None) -> Product:
        product = Product.objects.select_for_update().filter(pk=product_id).first()
        if product is None:
            raise ProductNotFoundError()

        name = (data.values.get("name") or "").strip()
        if name and name != product.name:
            ProductService._assert_unique_name(name, exclude_id=product.pk)
            product.name = name
            product.slug = unique_slug(name, exists=_slug_taken(product.pk), fallback="product")
        if "sku" in data.values:
            ProductService._assert_unique_sku((data.values.get("sku") or "").strip(), exclude_id=product.pk)

        ProductService._apply_values(product, data.values)
        product.sku = (product.sku or "").strip()
        if data.primary_category_id:
            product.primary_category = ProductService._primary_category(data.primary_category_id)
        validate_sale(
            price=product.price,
            sale_price=product.sale_price,
            is_on_sale=product.is_on_sale,
            sale_end_date=product.sale_end_date if "sale_end_date" in data.values else None,
        )
        product.updated_by_id = actor_id
        product.save()

        if data.secondary_category_ids is not None:
            product.secondary_categories.set(ProductService._secondary_ids(data.secondary_category_ids))

        if data.images is not None or data.image_files:
            old_keys = list(product.images.exclude(key="").values_list("key", flat=True))
            kept = {entry.get("key") or entry.get("public_id") for entry in data.images or []}
            for key in old_keys:
                if key not in kept:
                    MediaService.delete_quietly(key)
            product.images.all().delete()
            ProductService._attach_images(product, ProductService._collect_images(product.name, data))

        logger.info("product.updated", extra={"product_id": product.id})
        return product

    @staticmethod
    @transaction.atomic
    def delete_product(product_id) -> None:
        product = Product.objects.select_for_update().filter(pk=product_id).first()
        if product is None:
            raise ProductNotFoundError()
        keys = list(product.images.exclude(key="").values_list("key", flat=True))
        product.delete()
        for key in keys:
            MediaService.delete_quietly(key)
        logger.info("product.deleted", extra={"product_id": product_id, "images": len(keys)})

    @staticmethod
    def record_view(product: Product) -> None:
        Product.objects.filter(pk=product.pk).update(views=F("views") + 1)
