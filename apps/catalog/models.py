from __future__ import annotations

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models

from apps.catalog.domain.policies import status_for_stock


class Category(models.Model):
    TYPE_PROTECTION = "protection_type"
    TYPE_INDUSTRY = "industry"
    TYPE_BRAND = "brand"
    TYPE_CERTIFICATION = "certification"

    TYPE_CHOICES = [
        (TYPE_PROTECTION, "Protection type"),
        (TYPE_INDUSTRY, "Industry"),
        (TYPE_BRAND, "Brand"),
        (TYPE_CERTIFICATION, "Certification"),
    ]

    STATUS_ACTIVE = "active"
    STATUS_INACTIVE = "inactive"

    STATUS_CHOICES = [
        (STATUS_ACTIVE, "Active"),
        (STATUS_INACTIVE, "Inactive"),
    ]

    name = models.CharField(max_length=100, unique=True)
    description = models.CharField(max_length=500, blank=True, default="")
    slug = models.SlugField(max_length=120, unique=True)
    type = models.CharField(max_length=20, choices=TYPE_CHOICES, db_index=True)
    parent = models.ForeignKey(
        "self",
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name="subcategories",
    )
    icon = models.CharField(max_length=32, blank=True, default="📦")
    color_primary = models.CharField(max_length=7, default="#f59e0b")
    color_secondary = models.CharField(max_length=7, default="#fef3c7")
    image_url = models.CharField(max_length=500, blank=True, default="")
    image_key = models.CharField(max_length=500, blank=True, default="")
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_ACTIVE, db_index=True)
    sort_order = models.IntegerField(default=0)
    is_featured = models.BooleanField(default=False)
    meta_title = models.CharField(max_length=200, blank=True, default="")
    meta_description = models.CharField(max_length=500, blank=True, default="")
    keywords = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["type", "sort_order", "name"]
        verbose_name_plural = "categories"

    def __str__(self) -> str:
        return self.name


class Product(models.Model):
    STATUS_ACTIVE = "active"
    STATUS_INACTIVE = "inactive"
    STATUS_DRAFT = "draft"
    STATUS_OUT_OF_STOCK = "out_of_stock"

    STATUS_CHOICES = [
        (STATUS_ACTIVE, "Active"),
        (STATUS_INACTIVE, "Inactive"),
        (STATUS_DRAFT, "Draft"),
        (STATUS_OUT_OF_STOCK, "Out of stock"),
    ]

    name = models.CharField(max_length=200)
    description = models.TextField(max_length=2000, blank=True, default="")
    brand = models.CharField(max_length=100, blank=True, default="")
    sku = models.CharField(max_length=64, blank=True, default="", db_index=True)
    slug = models.SlugField(max_length=220, unique=True)
    primary_category = models.ForeignKey(
        Category,
        on_delete=models.PROTECT,
        related_name="primary_products",
    )
    secondary_categories = models.ManyToManyField(Category, related_name="secondary_products", blank=True)
    price = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    sale_price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    is_on_sale = models.BooleanField(default=False)
    sale_start_date = models.DateTimeField(null=True, blank=True)
    sale_end_date = models.DateTimeField(null=True, blank=True)
    stock = models.PositiveIntegerField(default=0)
    low_stock_threshold = models.PositiveIntegerField(default=10)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_ACTIVE, db_index=True)
    features = models.JSONField(default=list, blank=True)
    specifications = models.JSONField(default=dict, blank=True)
    certifications = models.JSONField(default=list, blank=True)
    compliance_standards = models.JSONField(default=list, blank=True)
    tags = models.JSONField(default=list, blank=True)
    keywords = models.JSONField(default=list, blank=True)
    meta_title = models.CharField(max_length=200, blank=True, default="")
    meta_description = models.CharField(max_length=160, blank=True, default="")
    views = models.PositiveIntegerField(default=0)
    sales_count = models.PositiveIntegerField(default=0)
    avg_rating = models.DecimalField(max_digits=3, decimal_places=2, default=0)
    review_count = models.PositiveIntegerField(default=0)
    is_featured = models.BooleanField(default=False, db_index=True)
    is_new_arrival = models.BooleanField(default=False)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="created_products",
    )
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="updated_products",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status", "created_at"], name="catalog_pro_status_3b7e21_idx"),
            models.Index(fields=["status", "stock"], name="catalog_pro_stock_9a4c10_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.slug})"

    def save(self, *args, **kwargs):
        if not self.meta_title:
            self.meta_title = self.name
        if not self.meta_description and self.description:
            self.meta_description = self.description[:160]
        self.status = status_for_stock(self.status, self.stock)
        update_fields = kwargs.get("update_fields")
        if update_fields is not None and "stock" in update_fields:
            kwargs["update_fields"] = set(update_fields) | {"status"}
        super().save(*args, **kwargs)

    @property
    def is_low_stock(self) -> bool:
        return self.stock <= self.low_stock_threshold

    @property
    def main_image(self) -> ProductImage | None:
        images = list(self.images.all())
        for image in images:
            if image.is_main:
                return image
        return images[0] if images else None

    @property
    def main_image_url(self) -> str:
        image = self.main_image
        return image.url if image else ""


class ProductImage(models.Model):
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name="images")
    url = models.CharField(max_length=500)
    key = models.CharField(max_length=500, blank=True, default="")
    alt = models.CharField(max_length=255, blank=True, default="")
    is_main = models.BooleanField(default=False)
    position = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["position", "id"]

    def __str__(self) -> str:
        return f"ProductImage(product_id={self.product_id}, key={self.key})"
