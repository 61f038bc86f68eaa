from __future__ import annotations

from django.db.models import Q
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.views import APIView

from apps.accounts.interfaces.api.request_context import auth_context
from apps.catalog.domain.errors import (
    CatalogDomainError,
    CatalogValidationError,
    CategoryNotFoundError,
    ProductNotFoundError,
)
from apps.catalog.interfaces.api.serializers import (
    CategorySerializer,
    CategoryWriteSerializer,
    ProductSerializer,
    ProductWriteSerializer,
    ReorderSerializer,
    StockUpdateSerializer,
)
from apps.catalog.models import Category, Product
from apps.catalog.services.catalog_query_service import (
    featured_products,
    filter_products,
    lookup_product,
)
from apps.catalog.services.category_service import (
    CategoryInput,
    CategoryService,
    lookup_category,
    with_product_counts,
)
from apps.catalog.services.inventory_service import InventoryService
from apps.catalog.services.product_service import ProductInput, ProductService
from apps.storage.domain.errors import StorageBackendError, StorageError
from bondex.api_responses import api_error, api_success
from bondex.pagination import page_request, paginate


def _domain_error(exc: Exception):
    if isinstance(exc, (CategoryNotFoundError, ProductNotFoundError)):
        return api_error(message=str(exc), http_status=status.HTTP_404_NOT_FOUND)
    if isinstance(exc, StorageBackendError):
        return api_error(
            message="Error uploading image",
            error=str(exc),
            http_status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    field = exc.field if isinstance(exc, CatalogValidationError) else None
    return api_error(message=str(exc), field=field)


def _split_payload(request, file_field: str):
    """Multipart forms carry files next to scalar fields; JSON bodies carry only data."""
    if request.FILES:
        data = {key: value for key, value in request.data.items() if key not in request.FILES}
        return data, request.FILES.getlist(file_field)
    return request.data, []


# Public catalog


class ProductListAPI(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def get(self, request):
        queryset = filter_products(request.query_params, public=True)
        items, pagination = paginate(queryset, page_request(request.query_params), total_key="totalProducts")
        return api_success(
            data=ProductSerializer(items, many=True).data,
            count=len(items),
            pagination=pagination,
        )


class FeaturedProductsAPI(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def get(self, request):
        limit = page_request(request.query_params, default_limit=8).limit
        products = featured_products(limit)
        return api_success(data=ProductSerializer(products, many=True).data)


class ProductDetailAPI(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def get(self, request, id_or_slug):
        try:
            product = lookup_product(id_or_slug, public=True)
        except ProductNotFoundError as exc:
            return _domain_error(exc)
        ProductService.record_view(product)
        product.views += 1
        return api_success(data=ProductSerializer(product).data)


class CategoryListAPI(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def get(self, request):
        queryset = Category.objects.filter(status=Category.STATUS_ACTIVE).select_related("parent")
        if request.query_params.get("type"):
            queryset = queryset.filter(type=request.query_params["type"])
        if str(request.query_params.get("featured", "")).lower() in ("1", "true"):
            queryset = queryset.filter(is_featured=True)
        categories = with_product_counts(queryset, active_only=True)
        data = CategorySerializer(categories, many=True).data
        return api_success(data=data, count=len(data))


class CategoryDetailAPI(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def get(self, request, id_or_slug):
        try:
            category = lookup_category(id_or_slug)
        except CategoryNotFoundError as exc:
            return _domain_error(exc)
        if category.status != Category.STATUS_ACTIVE:
            return api_error(message="Category not found", http_status=status.HTTP_404_NOT_FOUND)

        subcategories = with_product_counts(
            category.subcategories.filter(status=Category.STATUS_ACTIVE), active_only=True
        )
        data = CategorySerializer(category).data
        data["productCount"] = (
            Product.objects.filter(status=Product.STATUS_ACTIVE)
            .filter(Q(primary_category=category) | Q(secondary_categories=category))
            .distinct()
            .count()
        )
        data["subcategories"] = CategorySerializer(subcategories, many=True).data
        return api_success(data=data)


# Admin catalog


def _product_input(validated: dict, files) -> ProductInput:
    values = dict(validated)
    return ProductInput(
        values=values,
        primary_category_id=values.pop("category", None),
        secondary_category_ids=values.pop("secondaryCategories", None),
        images=values.pop("images", None),
        image_files=list(files),
    )


class AdminProductListCreateAPI(APIView):
    def get(self, request):
        queryset = filter_products(request.query_params, public=False)
        items, pagination = paginate(
            queryset,
            page_request(request.query_params, default_limit=20),
            total_key="totalProducts",
        )
        return api_success(data=ProductSerializer(items, many=True).data, pagination=pagination)

    def post(self, request):
        data, files = _split_payload(request, "images")
        serializer = ProductWriteSerializer(data=data)
        if not serializer.is_valid():
            return api_error(message="Product validation failed", errors=serializer.errors)
        try:
            product = ProductService.create_product(
                _product_input(serializer.validated_data, files),
                actor_id=auth_context(request).user_id,
            )
        except (CatalogDomainError, StorageError) as exc:
            return _domain_error(exc)
        product = lookup_product(product.pk, public=False)
        return api_success(
            message="Product created successfully",
            data=ProductSerializer(product).data,
            http_status=status.HTTP_201_CREATED,
        )


class AdminLowStockAPI(APIView):
    def get(self, request):
        products = InventoryService.low_stock()
        data = [
            {
                "id": product.id,
                "name": product.name,
                "stock": product.stock,
                "threshold": product.low_stock_threshold,
                "status": product.status,
                "category": product.primary_category.name,
            }
            for product in products
        ]
        return api_success(data=data, count=len(data))


class AdminProductDetailAPI(APIView):
    def get(self, request, product_id):
        try:
            product = lookup_product(product_id, public=False)
        except ProductNotFoundError as exc:
            return _domain_error(exc)
        return api_success(data=ProductSerializer(product).data)

    def put(self, request, product_id):
        data, files = _split_payload(request, "images")
        serializer = ProductWriteSerializer(data=data, partial=True)
        if not serializer.is_valid():
            return api_error(message="Product validation failed", errors=serializer.errors)
        try:
            ProductService.update_product(
                product_id,
                _product_input(serializer.validated_data, files),
                actor_id=auth_context(request).user_id,
            )
        except (CatalogDomainError, StorageError) as exc:
            return _domain_error(exc)
        product = lookup_product(product_id, public=False)
        return api_success(message="Product updated successfully", data=ProductSerializer(product).data)

    patch = put

    def delete(self, request, product_id):
        try:
            ProductService.delete_product(product_id)
        except CatalogDomainError as exc:
            return _domain_error(exc)
        return api_success(message="Product deleted successfully")


class AdminProductStockAPI(APIView):
    def patch(self, request, product_id):
        serializer = StockUpdateSerializer(data=request.data)
        if not serializer.is_valid():
            return api_error(message="Provide stock or adjustment", errors=serializer.errors)
        try:
            product = InventoryService.set_stock(
                product_id=product_id,
                stock=serializer.validated_data.get("stock"),
                adjustment=serializer.validated_data.get("adjustment"),
                actor_id=auth_context(request).user_id,
            )
        except CatalogDomainError as exc:
            return _domain_error(exc)
        return api_success(
            message="Stock updated successfully",
            data={"id": product.id, "stock": product.stock, "status": product.status},
        )


def _category_input(validated: dict, image_file, *, raw_data) -> CategoryInput:
    values = dict(validated)
    values.pop("image", None)
    return CategoryInput(
        name=values.pop("name", None),
        parent_id=values.pop("parent", None),
        parent_given="parent" in raw_data,
        keywords=values.pop("keywords", None),
        values=values,
        image_file=image_file,
    )


class AdminCategoryListCreateAPI(APIView):
    def get(self, request):
        queryset = Category.objects.select_related("parent")
        params = request.query_params
        if params.get("type"):
            queryset = queryset.filter(type=params["type"])
        if params.get("status"):
            queryset = queryset.filter(status=params["status"])
        search = (params.get("search") or "").strip()
        if search:
            queryset = queryset.filter(Q(name__icontains=search) | Q(description__icontains=search))
        data = CategorySerializer(with_product_counts(queryset), many=True).data
        return api_success(data=data, count=len(data))

    def post(self, request):
        serializer = CategoryWriteSerializer(data=request.data)
        if not serializer.is_valid():
            return api_error(message="Validation Error", errors=serializer.errors)
        try:
            category = CategoryService.create_category(
                _category_input(
                    serializer.validated_data,
                    serializer.validated_data.get("image"),
                    raw_data=request.data,
                )
            )
        except (CatalogDomainError, StorageError) as exc:
            return _domain_error(exc)
        return api_success(
            message="Category created successfully",
            data=CategorySerializer(category).data,
            http_status=status.HTTP_201_CREATED,
        )


class AdminCategoryReorderAPI(APIView):
    def post(self, request):
        serializer = ReorderSerializer(data=request.data)
        if not serializer.is_valid():
            return api_error(message="Category orders array is required", errors=serializer.errors)
        try:
            CategoryService.reorder(serializer.validated_data["categoryOrders"])
        except CatalogDomainError as exc:
            return _domain_error(exc)
        return api_success(message="Categories reordered successfully")


class AdminCategorySeedAPI(APIView):
    def post(self, request):
        created = CategoryService.seed_defaults()
        if not created:
            return api_error(message="Default categories already exist")
        return api_success(
            message=f"{len(created)} default categories created successfully",
            data=CategorySerializer(created, many=True).data,
            http_status=status.HTTP_201_CREATED,
        )


class AdminCategoryDetailAPI(APIView):
    def get(self, request, category_id):
        category = with_product_counts(Category.objects.select_related("parent").filter(pk=category_id)).first()
        if category is None:
            return api_error(message="Category not found", http_status=status.HTTP_404_NOT_FOUND)
        return api_success(data=CategorySerializer(category).data)

    def put(self, request, category_id):
        serializer = CategoryWriteSerializer(data=request.data, partial=True)
        if not serializer.is_valid():
            return api_error(message="Validation Error", errors=serializer.errors)
        try:
            category = CategoryService.update_category(
                category_id,
                _category_input(
                    serializer.validated_data,
                    serializer.validated_data.get("image"),
                    raw_data=request.data,
                ),
            )
        except (CatalogDomainError, StorageError) as exc:
            return _domain_error(exc)
        return api_success(message="Category updated successfully", data=CategorySerializer(category).data)

    patch = put

    def delete(self, request, category_id):
        try:
            CategoryService.delete_category(category_id)
        except CatalogDomainError as exc:
            return _domain_error(exc)
        return api_success(message="Category deleted successfully")
