from __future__ import annotations

import logging
from dataclasses import dataclass, field

from django.db import IntegrityError, transaction
from django.db.models import Count, Q

from apps.catalog.domain.defaults import DEFAULT_CATEGORIES
from apps.catalog.domain.errors import (
    CatalogValidationError,
    CategoryInUseError,
    CategoryNotFoundError,
    DuplicateCategoryError,
)
from apps.catalog.domain.policies import parse_list, unique_slug
from apps.catalog.models import Category, Product
from apps.storage.application.services.media_service import MediaService
from apps.storage.domain.presets import CATEGORY_IMAGE

logger = logging.getLogger("bondex.catalog")

_EDITABLE = (
    "description",
    "type",
    "icon",
    "color_primary",
    "color_secondary",
    "status",
    "sort_order",
    "is_featured",
    "meta_title",
    "meta_description",
)


@dataclass
class CategoryInput:
    name: str | None = None
    values: dict = field(default_factory=dict)
    parent_id: int | None = None
    parent_given: bool = False
    keywords: list | str | None = None
    image_file: object = None


def _slug_taken(exclude_id=None):
    def exists(slug: str) -> bool:
        qs = Category.objects.filter(slug=slug)
        if exclude_id:
            qs = qs.exclude(pk=exclude_id)
        return qs.exists()

    return exists


def lookup_category(id_or_slug) -> Category:
    value = str(id_or_slug)
    lookup = Q(slug=value)
    if value.isdigit():
        lookup |= Q(pk=int(value))
    category = Category.objects.select_related("parent").filter(lookup).first()
    if category is None:
        raise CategoryNotFoundError()
    return category


def with_product_counts(queryset, *, active_only: bool = False):
    status_filter = Q(primary_products__status=Product.STATUS_ACTIVE) if active_only else Q()
    return queryset.annotate(product_count=Count("primary_products", filter=status_filter, distinct=True))


class CategoryService:
    @staticmethod
    def _resolve_parent(parent_id, *, current: Category | None = None) -> Category | None:
        if not parent_id:
            return None
        parent = Category.objects.filter(pk=parent_id).first()
        if parent is None:
            raise CatalogValidationError("Parent category not found", field="parent")
        if current is not None and parent.pk == current.pk:
            raise CatalogValidationError("A category cannot be its own parent", field="parent")
        return parent

    @staticmethod
    @transaction.atomic
    def create_category(data: CategoryInput) -> Category:
        name = (data.name or "").strip()
        if not name:
            raise CatalogValidationError("Category name is required", field="name")
        if not data.values.get("type"):
            raise CatalogValidationError("Category type is required", field="type")
        if Category.objects.filter(name__iexact=name).exists():
            raise DuplicateCategoryError()

        category = Category(name=name, slug=unique_slug(name, exists=_slug_taken(), fallback="category"))
        for attr in _EDITABLE:
            if attr in data.values and data.values[attr] is not None:
                setattr(category, attr, data.values[attr])
        category.parent = CategoryService._resolve_parent(data.parent_id)
        category.keywords = parse_list(data.keywords)
        category.meta_title = category.meta_title or name
        category.meta_description = category.meta_description or category.description

        if data.image_file is not None:
            stored = MediaService.upload_image(data.image_file, preset=CATEGORY_IMAGE)
            category.image_url, category.image_key = stored.url, stored.key

        try:
            category.save()
        except IntegrityError as exc:
            raise DuplicateCategoryError() from exc
        logger.info("category.created", extra={"category_id": category.id, "slug": category.slug})
        return category

    @staticmethod
    @transaction.atomic
    def update_category(category_id, data: CategoryInput) -> Category:
        category = Category.objects.select_for_update().filter(pk=category_id).first()
        if category is None:
            raise CategoryNotFoundError()

        name = (data.name or "").strip()
        if name and name != category.name:
            if Category.objects.filter(name__iexact=name).exclude(pk=category.pk).exists():
                raise DuplicateCategoryError()
            category.name = name
            category.slug = unique_slug(name, exists=_slug_taken(category.pk), fallback="category")

        for attr in _EDITABLE:
            if attr in data.values and data.values[attr] not in (None, ""):
                setattr(category, attr, data.values[attr])
        if data.parent_given:
            category.parent = CategoryService._resolve_parent(data.parent_id, current=category)
        if data.keywords is not None:
            category.keywords = parse_list(data.keywords)

        if data.image_file is not None:
            # Old image goes first; a failed delete must not block the new upload.
            MediaService.delete_quietly(category.image_key)
            stored = MediaService.upload_image(data.image_file, preset=CATEGORY_IMAGE)
            category.image_url, category.image_key = stored.url, stored.key

        try:
            category.save()
        except IntegrityError as exc:
            raise DuplicateCategoryError() from exc
        logger.info("category.updated", extra={"category_id": category.id})
        return category

    @staticmethod
    @transaction.atomic
    def delete_category(category_id) -> None:
        category = Category.objects.select_for_update().filter(pk=category_id).first()
        if category is None:
            raise CategoryNotFoundError()

        product_count = (
            Product.objects.filter(Q(primary_category=category) | Q(secondary_categories=category))
            .distinct()
            .count()
        )
        if product_count:
            raise CategoryInUseError(
                f"Cannot delete category. It has {product_count} products. "
                "Please move or delete the products first.",
                product_count=product_count,
            )
        subcategory_count = category.subcategories.count()
        if subcategory_count:
            raise CategoryInUseError(
                f"Cannot delete category. It has {subcategory_count} subcategories. "
                "Please delete subcategories first.",
                subcategory_count=subcategory_count,
            )

        image_key = category.image_key
        category.delete()
        MediaService.delete_quietly(image_key)
        logger.info("category.deleted", extra={"category_id": category_id})

    @staticmethod
    @transaction.atomic
    def reorder(orders: list[dict]) -> int:
        updated = 0
        for entry in orders:
            try:
                pk = int(entry.get("id"))
                sort_order = int(entry.get("sortOrder", entry.get("sort_order")))
            except (TypeError, ValueError) as exc:
                raise CatalogValidationError("Each entry needs a numeric id and sortOrder") from exc
            updated += Category.objects.filter(pk=pk).update(sort_order=sort_order)
        return updated

    @staticmethod
    @transaction.atomic
    def seed_defaults() -> list[Category]:
        created = []
        for entry in DEFAULT_CATEGORIES:
            if Category.objects.filter(name=entry["name"]).exists():
                continue
            values = dict(entry)
            name = values.pop("name")
            values.setdefault("meta_description", values["description"])
            category = Category.objects.create(
                name=name,
                slug=unique_slug(name, exists=_slug_taken(), fallback="category"),
                **values,
            )
            created.append(category)
        return created
