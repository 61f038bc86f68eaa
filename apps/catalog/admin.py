from django.contrib import admin

from .models import Category, Product, ProductImage


class ProductImageInline(admin.TabularInline):
    model = ProductImage
    extra = 0


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ("name", "type", "status", "sort_order", "is_featured")
    list_filter = ("type", "status", "is_featured")
    search_fields = ("name", "slug")


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("name", "sku", "price", "stock", "status", "is_featured")
    list_filter = ("status", "is_featured", "primary_category")
    search_fields = ("name", "sku", "slug")
    inlines = [ProductImageInline]
