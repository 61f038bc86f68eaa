from __future__ import annotations

import json

from rest_framework import serializers

from apps.catalog.models import Category, Product, ProductImage


class FlexibleListField(serializers.Field):
    """Accepts a JSON list, a JSON-encoded string (multipart forms) or a comma separated string."""

    def to_internal_value(self, data):
        if isinstance(data, (list, tuple)):
            return list(data)
        if data in (None, ""):
            return []
        if isinstance(data, str):
            text = data.strip()
            if text.startswith("["):
                try:
                    parsed = json.loads(text)
                except ValueError as exc:
                    raise serializers.ValidationError("Invalid list value.") from exc
                if isinstance(parsed, list):
                    return parsed
            return [item.strip() for item in text.split(",") if item.strip()]
        raise serializers.ValidationError("Expected a list.")

    def to_representation(self, value):
        return list(value or [])


class FlexibleDictField(serializers.Field):
    def to_internal_value(self, data):
        if isinstance(data, dict):
            return data
        if isinstance(data, str) and data.strip():
            try:
                parsed = json.loads(data)
            except ValueError as exc:
                raise serializers.ValidationError("Invalid object value.") from exc
            if isinstance(parsed, dict):
                return parsed
        if data in (None, ""):
            return {}
        raise serializers.ValidationError("Expected an object.")

    def to_representation(self, value):
        return dict(value or {})


class CategoryRefSerializer(serializers.ModelSerializer):
    class Meta:
        model = Category
        fields = ["id", "name", "slug", "type", "icon"]


class CategorySerializer(serializers.ModelSerializer):
    parent = CategoryRefSerializer(read_only=True)
    colors = serializers.SerializerMethodField()
    image = serializers.SerializerMethodField()
    sortOrder = serializers.IntegerField(source="sort_order")
    isFeatured = serializers.BooleanField(source="is_featured")
    metaTitle = serializers.CharField(source="meta_title")
    metaDescription = serializers.CharField(source="meta_description")
    productCount = serializers.SerializerMethodField()
    createdAt = serializers.DateTimeField(source="created_at")
    updatedAt = serializers.DateTimeField(source="updated_at")

    class Meta:
        model = Category
        fields = [
            "id",
            "name",
            "slug",
            "description",
            "type",
            "parent",
            "icon",
            "colors",
            "image",
            "status",
            "sortOrder",
            "isFeatured",
            "metaTitle",
            "metaDescription",
            "keywords",
            "productCount",
            "createdAt",
            "updatedAt",
        ]

    def get_colors(self, obj):
        return {"primary": obj.color_primary, "secondary": obj.color_secondary}

    def get_image(self, obj):
        return {"url": obj.image_url or None, "public_id": obj.image_key or None}

    def get_productCount(self, obj):
        return getattr(obj, "product_count", None)


class CategoryWriteSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100, required=False)
    description = serializers.CharField(max_length=500, required=False, allow_blank=True)
    type = serializers.ChoiceField(choices=[choice for choice, _ in Category.TYPE_CHOICES], required=False)
    parent = serializers.IntegerField(required=False, allow_null=True)
    icon = serializers.CharField(max_length=32, required=False, allow_blank=True)
    colors = FlexibleDictField(required=False)
    status = serializers.ChoiceField(choices=[choice for choice, _ in Category.STATUS_CHOICES], required=False)
    sortOrder = serializers.IntegerField(source="sort_order", required=False)
    isFeatured = serializers.BooleanField(source="is_featured", required=False)
    metaTitle = serializers.CharField(source="meta_title", max_length=200, required=False, allow_blank=True)
    metaDescription = serializers.CharField(
        source="meta_description", max_length=500, required=False, allow_blank=True
    )
    keywords = FlexibleListField(required=False)
    image = serializers.FileField(required=False)

    def validate_parent(self, value):
        return value or None

    def validate(self, attrs):
        colors = attrs.pop("colors", None) or {}
        if colors.get("primary"):
            attrs["color_primary"] = colors["primary"]
        if colors.get("secondary"):
            attrs["color_secondary"] = colors["secondary"]
        return attrs


class ReorderEntrySerializer(serializers.Serializer):
    id = serializers.IntegerField()
    sortOrder = serializers.IntegerField()


class ReorderSerializer(serializers.Serializer):
    categoryOrders = ReorderEntrySerializer(many=True)


class ProductImageSerializer(serializers.ModelSerializer):
    public_id = serializers.CharField(source="key")
    isMain = serializers.BooleanField(source="is_main")

    class Meta:
        model = ProductImage
        fields = ["id", "url", "public_id", "alt", "isMain"]


class ProductSerializer(serializers.ModelSerializer):
    primaryCategory = CategoryRefSerializer(source="primary_category", read_only=True)
    secondaryCategories = CategoryRefSerializer(source="secondary_categories", many=True, read_only=True)
    images = ProductImageSerializer(many=True, read_only=True)
    mainImage = serializers.CharField(source="main_image_url", read_only=True)
    salePrice = serializers.DecimalField(source="sale_price", max_digits=12, decimal_places=2, allow_null=True)
    isOnSale = serializers.BooleanField(source="is_on_sale")
    saleStartDate = serializers.DateTimeField(source="sale_start_date", allow_null=True)
    saleEndDate = serializers.DateTimeField(source="sale_end_date", allow_null=True)
    lowStockThreshold = serializers.IntegerField(source="low_stock_threshold")
    isLowStock = serializers.BooleanField(source="is_low_stock", read_only=True)
    complianceStandards = serializers.JSONField(source="compliance_standards")
    metaTitle = serializers.CharField(source="meta_title")
    metaDescription = serializers.CharField(source="meta_description")
    salesCount = serializers.IntegerField(source="sales_count")
    avgRating = serializers.DecimalField(source="avg_rating", max_digits=3, decimal_places=2)
    reviewCount = serializers.IntegerField(source="review_count")
    isFeatured = serializers.BooleanField(source="is_featured")
    isNewArrival = serializers.BooleanField(source="is_new_arrival")
    createdAt = serializers.DateTimeField(source="created_at")
    updatedAt = serializers.DateTimeField(source="updated_at")

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "slug",
            "description",
            "brand",
            "sku",
            "primaryCategory",
            "secondaryCategories",
            "price",
            "salePrice",
            "isOnSale",
            "saleStartDate",
            "saleEndDate",
            "stock",
            "lowStockThreshold",
            "isLowStock",
            "status",
            "images",
            "mainImage",
            "features",
            "specifications",
            "certifications",
            "complianceStandards",
            "tags",
            "keywords",
            "metaTitle",
            "metaDescription",
            "views",
            "salesCount",
            "avgRating",
            "reviewCount",
            "isFeatured",
            "isNewArrival",
            "createdAt",
            "updatedAt",
        ]


class ImageRefSerializer(serializers.Serializer):
    url = serializers.CharField(max_length=500)
    public_id = serializers.CharField(max_length=500, required=False, allow_blank=True, source="key")
    alt = serializers.CharField(max_length=255, required=False, allow_blank=True)
    isMain = serializers.BooleanField(required=False, source="is_main")


class ProductWriteSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200, required=False)
    description = serializers.CharField(max_length=2000, required=False, allow_blank=True)
    brand = serializers.CharField(max_length=100, required=False, allow_blank=True)
    sku = serializers.CharField(max_length=64, required=False, allow_blank=True)
    category = serializers.IntegerField(required=False)
    secondaryCategories = FlexibleListField(required=False)
    price = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)
    salePrice = serializers.DecimalField(
        source="sale_price", max_digits=12, decimal_places=2, required=False, allow_null=True
    )
    isOnSale = serializers.BooleanField(source="is_on_sale", required=False)
    saleStartDate = serializers.DateTimeField(source="sale_start_date", required=False, allow_null=True)
    saleEndDate = serializers.DateTimeField(source="sale_end_date", required=False, allow_null=True)
    stock = serializers.IntegerField(min_value=0, required=False)
    lowStockThreshold = serializers.IntegerField(source="low_stock_threshold", min_value=0, required=False)
    status = serializers.ChoiceField(choices=[choice for choice, _ in Product.STATUS_CHOICES], required=False)
    isFeatured = serializers.BooleanField(source="is_featured", required=False)
    isNewArrival = serializers.BooleanField(source="is_new_arrival", required=False)
    metaTitle = serializers.CharField(source="meta_title", max_length=200, required=False, allow_blank=True)
    metaDescription = serializers.CharField(
        source="meta_description", max_length=160, required=False, allow_blank=True
    )
    features = FlexibleListField(required=False)
    specifications = FlexibleDictField(required=False)
    certifications = FlexibleListField(required=False)
    complianceStandards = FlexibleListField(source="compliance_standards", required=False)
    tags = FlexibleListField(required=False)
    keywords = FlexibleListField(required=False)
    images = ImageRefSerializer(many=True, required=False)

    def validate_secondaryCategories(self, value):
        ids = []
        for item in value:
            try:
                ids.append(int(item))
            except (TypeError, ValueError):
                continue
        return ids

    def validate_tags(self, value):
        return [str(tag).strip().lower() for tag in value if str(tag).strip()]

    def validate_keywords(self, value):
        return [str(keyword).strip().lower() for keyword in value if str(keyword).strip()]


class StockUpdateSerializer(serializers.Serializer):
    stock = serializers.IntegerField(min_value=0, required=False)
    adjustment = serializers.IntegerField(required=False)

    def validate(self, attrs):
        if "stock" not in attrs and "adjustment" not in attrs:
            raise serializers.ValidationError("Provide stock or adjustment.")
        return attrs
