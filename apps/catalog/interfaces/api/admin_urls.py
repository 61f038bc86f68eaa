from django.urls import path

from .views import (
    AdminCategoryDetailAPI,
    AdminCategoryListCreateAPI,
    AdminCategoryReorderAPI,
    AdminCategorySeedAPI,
    AdminLowStockAPI,
    AdminProductDetailAPI,
    AdminProductListCreateAPI,
    AdminProductStockAPI,
)

urlpatterns = [
    path("products/", AdminProductListCreateAPI.as_view(), name="api_admin_products"),
    path("products/low-stock/", AdminLowStockAPI.as_view(), name="api_admin_products_low_stock"),
    path("products/<int:product_id>/", AdminProductDetailAPI.as_view(), name="api_admin_product_detail"),
    path("products/<int:product_id>/stock/", AdminProductStockAPI.as_view(), name="api_admin_product_stock"),
    path("categories/", AdminCategoryListCreateAPI.as_view(), name="api_admin_categories"),
    path("categories/reorder/", AdminCategoryReorderAPI.as_view(), name="api_admin_categories_reorder"),
    path("categories/seed/", AdminCategorySeedAPI.as_view(), name="api_admin_categories_seed"),
    path("categories/<int:category_id>/", AdminCategoryDetailAPI.as_view(), name="api_admin_category_detail"),
]
