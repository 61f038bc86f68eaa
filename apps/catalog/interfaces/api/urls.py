from django.urls import path

from .views import CategoryDetailAPI, CategoryListAPI, FeaturedProductsAPI, ProductDetailAPI, ProductListAPI

urlpatterns = [
    path("products/", ProductListAPI.as_view(), name="api_products"),
    path("products/featured/", FeaturedProductsAPI.as_view(), name="api_products_featured"),
    path("products/<str:id_or_slug>/", ProductDetailAPI.as_view(), name="api_product_detail"),
    path("categories/", CategoryListAPI.as_view(), name="api_categories"),
    path("categories/<str:id_or_slug>/", CategoryDetailAPI.as_view(), name="api_category_detail"),
]
