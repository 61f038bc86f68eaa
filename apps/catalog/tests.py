from __future__ import annotations

from datetime import timedelta
from decimal import Decimal
from io import BytesIO, StringIO
from unittest import mock

from django.core.files.uploadedfile import SimpleUploadedFile
from django.core.management import call_command
from django.test import TestCase, override_settings
from django.utils import timezone
from PIL import Image
from rest_framework.test import APIClient

from apps.accounts.testing import bearer_for, create_user_with_profile
from apps.catalog.domain.errors import CatalogValidationError, CategoryInUseError
from apps.catalog.domain.policies import slugify_name, unique_slug, validate_sale
from apps.catalog.models import Category, Product, ProductImage
from apps.catalog.services.category_service import CategoryService
from apps.catalog.services.inventory_service import InventoryService
from apps.catalog.testing import make_category, make_product
from apps.storage.domain.errors import StorageBackendError

IN_MEMORY_STORAGES = {
    "default": {"BACKEND": "django.core.files.storage.InMemoryStorage"},
    "staticfiles": {"BACKEND": "django.contrib.staticfiles.storage.StaticFilesStorage"},
}


def _png(name: str = "photo.png") -> SimpleUploadedFile:
    out = BytesIO()
    Image.new("RGB", (1000, 900), (10, 120, 200)).save(out, format="PNG")
    return SimpleUploadedFile(name, out.getvalue(), content_type="image/png")


class CatalogPolicyTests(TestCase):
    def test_slugify_strips_symbols(self):
        self.assertEqual(slugify_name("  Oil & Gas -- Kits! "), "oil-gas-kits")

    def test_unique_slug_appends_counter(self):
        taken = {"safety-helmet", "safety-helmet-2"}
        self.assertEqual(unique_slug("Safety Helmet", exists=taken.__contains__), "safety-helmet-3")

    def test_sale_price_must_be_below_price(self):
        with self.assertRaises(CatalogValidationError) as ctx:
            validate_sale(price=Decimal("100"), sale_price=Decimal("100"), is_on_sale=True)
        self.assertEqual(ctx.exception.field, "sale_price")
        validate_sale(price=Decimal("100"), sale_price=Decimal("80"), is_on_sale=True)

    def test_sale_end_date_must_be_future(self):
        with self.assertRaises(CatalogValidationError):
            validate_sale(
                price=Decimal("100"),
                sale_price=Decimal("80"),
                is_on_sale=True,
                sale_end_date=timezone.now() - timedelta(days=1),
            )

    def test_meta_defaults_on_save(self):
        product = make_product("Ear Muffs", description="x" * 300)
        self.assertEqual(product.meta_title, "Ear Muffs")
        self.assertEqual(len(product.meta_description), 160)


class InventoryServiceTests(TestCase):
    def test_reserve_decrements_and_flips_status(self):
        product = make_product(stock=3)
        self.assertTrue(InventoryService.reserve(product_id=product.id, quantity=3))
        product.refresh_from_db()
        self.assertEqual(product.stock, 0)
        self.assertEqual(product.status, Product.STATUS_OUT_OF_STOCK)
        self.assertEqual(product.sales_count, 3)

        self.assertTrue(InventoryService.release(product_id=product.id, quantity=2))
        product.refresh_from_db()
        self.assertEqual(product.stock, 2)
        self.assertEqual(product.status, Product.STATUS_ACTIVE)
        self.assertEqual(product.sales_count, 1)

    def test_reserve_never_goes_negative(self):
        product = make_product(stock=2)
        self.assertFalse(InventoryService.reserve(product_id=product.id, quantity=5))
        product.refresh_from_db()
        self.assertEqual(product.stock, 2)

    def test_draft_product_keeps_status(self):
        product = make_product(stock=1, status=Product.STATUS_DRAFT)
        InventoryService.reserve(product_id=product.id, quantity=1)
        product.refresh_from_db()
        self.assertEqual(product.status, Product.STATUS_DRAFT)

    def test_set_stock_rejects_negative_adjustment(self):
        product = make_product(stock=2)
        with self.assertRaises(CatalogValidationError):
            InventoryService.set_stock(product_id=product.id, adjustment=-3)

    def test_low_stock(self):
        make_product("Plenty", stock=50)
        low = make_product("Scarce", stock=4)
        self.assertEqual([p.id for p in InventoryService.low_stock()], [low.id])


class CategoryServiceTests(TestCase):
    def test_delete_guard_reports_product_count(self):
        category = make_category()
        make_product(category=category)
        with self.assertRaises(CategoryInUseError) as ctx:
            CategoryService.delete_category(category.id)
        self.assertEqual(ctx.exception.product_count, 1)
        self.assertIn("1 products", str(ctx.exception))

    def test_delete_guard_counts_secondary_links(self):
        primary = make_category()
        industry = make_category("Construction & Building", type=Category.TYPE_INDUSTRY)
        product = make_product(category=primary)
        product.secondary_categories.add(industry)
        with self.assertRaises(CategoryInUseError):
            CategoryService.delete_category(industry.id)

    def test_delete_guard_reports_subcategories(self):
        parent = make_category()
        make_category("Hard Hats", parent=parent)
        with self.assertRaises(CategoryInUseError) as ctx:
            CategoryService.delete_category(parent.id)
        self.assertEqual(ctx.exception.subcategory_count, 1)

    def test_seed_command_is_idempotent(self):
        call_command("seed_categories", stdout=StringIO())
        count = Category.objects.count()
        self.assertEqual(count, 12)
        call_command("seed_categories", stdout=StringIO())
        self.assertEqual(Category.objects.count(), count)
        self.assertTrue(Category.objects.filter(slug="oil-gas").exists())


class PublicCatalogApiTests(TestCase):
    def setUp(self) -> None:
        super().setUp()
        self.client = APIClient()
        self.head = make_category()
        self.feet = make_category("Foot Protection")
        self.helmet = make_product("Safety Helmet", category=self.head, price="1500", is_featured=True)
        self.boot = make_product("Steel Toe Boot", category=self.feet, price="4500", brand="Bata")
        make_product("Hidden Draft", category=self.head, status=Product.STATUS_DRAFT)

    def test_list_hides_drafts_and_filters(self):
        response = self.client.get("/api/products/")
        self.assertEqual(response.status_code, 200)
        payload = response.json()
        self.assertEqual(payload["pagination"]["totalProducts"], 2)

        response = self.client.get("/api/products/", {"category": "foot-protection"})
        self.assertEqual([p["name"] for p in response.json()["data"]], ["Steel Toe Boot"])

        response = self.client.get("/api/products/", {"minPrice": "2000", "sortBy": "price_low"})
        self.assertEqual([p["name"] for p in response.json()["data"]], ["Steel Toe Boot"])

        response = self.client.get("/api/products/", {"featured": "true"})
        self.assertEqual([p["name"] for p in response.json()["data"]], ["Safety Helmet"])

    def test_detail_by_slug_counts_views(self):
        response = self.client.get("/api/products/safety-helmet/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["views"], 1)
        self.helmet.refresh_from_db()
        self.assertEqual(self.helmet.views, 1)

    def test_detail_missing(self):
        response = self.client.get("/api/products/hidden-draft/")
        self.assertEqual(response.status_code, 404)
        self.assertFalse(response.json()["success"])

    def test_categories_with_counts(self):
        response = self.client.get("/api/categories/")
        counts = {c["slug"]: c["productCount"] for c in response.json()["data"]}
        self.assertEqual(counts["head-protection"], 1)

        response = self.client.get(f"/api/categories/{self.feet.id}/")
        self.assertEqual(response.json()["data"]["productCount"], 1)


@override_settings(STORAGES=IN_MEMORY_STORAGES)
class AdminCatalogApiTests(TestCase):
    def setUp(self) -> None:
        super().setUp()
        self.admin = create_user_with_profile()
        self.client = APIClient()
        self.client.credentials(HTTP_AUTHORIZATION=bearer_for(self.admin))
        self.category = make_category()

    def test_requires_token(self):
        response = APIClient().get("/api/admin/products/")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["message"], "Access denied. No token provided.")

    def test_create_product_with_uploaded_image(self):
        response = self.client.post(
            "/api/admin/products/",
            data={
                "name": "Hi-Vis Vest",
                "description": "Reflective vest",
                "category": str(self.category.id),
                "price": "850",
                "stock": "20",
                "tags": '["Reflective", "Vest"]',
                "images": [_png()],
            },
            format="multipart",
        )
        self.assertEqual(response.status_code, 201, response.content)
        data = response.json()["data"]
        self.assertEqual(data["slug"], "hi-vis-vest")
        self.assertEqual(data["tags"], ["reflective", "vest"])
        self.assertEqual(len(data["images"]), 1)
        self.assertTrue(data["images"][0]["isMain"])
        product = Product.objects.get(pk=data["id"])
        self.assertEqual(product.created_by_id, self.admin.id)

    def test_duplicate_name_rejected(self):
        make_product("Hi-Vis Vest", category=self.category)
        response = self.client.post(
            "/api/admin/products/",
            data={"name": "hi-vis vest", "category": self.category.id, "price": "10", "stock": 1},
            format="json",
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["field"], "name")

    def test_rename_regenerates_slug_and_replaces_images(self):
        product = make_product("Old Name", category=self.category)
        ProductImage.objects.create(product=product, url="/media/old.png", key="bondex-safety/products/old.png")
        with mock.patch("apps.catalog.services.product_service.MediaService.delete_quietly") as delete_quietly:
            response = self.client.put(
                f"/api/admin/products/{product.id}/",
                data={"name": "New Name", "images": [{"url": "/media/new.png", "public_id": "k/new.png"}]},
                format="json",
            )
        self.assertEqual(response.status_code, 200, response.content)
        delete_quietly.assert_called_once_with("bondex-safety/products/old.png")
        product.refresh_from_db()
        self.assertEqual(product.slug, "new-name")
        self.assertEqual(list(product.images.values_list("key", flat=True)), ["k/new.png"])

    def test_sale_price_validation(self):
        product = make_product(category=self.category, price="100")
        response = self.client.put(
            f"/api/admin/products/{product.id}/",
            data={"salePrice": "120", "isOnSale": True},
            format="json",
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Sale price must be less than regular price")

    def test_delete_product_survives_storage_failure(self):
        product = make_product(category=self.category)
        ProductImage.objects.create(product=product, url="/media/a.png", key="missing/a.png")
        with mock.patch(
            "apps.storage.application.services.media_service.ObjectStorageFacade.get",
            side_effect=StorageBackendError("down"),
        ):
            response = self.client.delete(f"/api/admin/products/{product.id}/")
        self.assertEqual(response.status_code, 200)
        self.assertFalse(Product.objects.filter(pk=product.id).exists())

    def test_stock_update_flips_status(self):
        product = make_product(category=self.category, stock=5)
        response = self.client.patch(f"/api/admin/products/{product.id}/stock/", data={"stock": 0}, format="json")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["status"], "out_of_stock")

    def test_category_crud(self):
        response = self.client.post(
            "/api/admin/categories/",
            data={"name": "Fall Protection", "type": "protection_type", "description": "Harnesses"},
            format="json",
        )
        self.assertEqual(response.status_code, 201)
        category_id = response.json()["data"]["id"]
        self.assertEqual(response.json()["data"]["slug"], "fall-protection")

        response = self.client.post(
            "/api/admin/categories/",
            data={"name": "Fall Protection", "type": "protection_type"},
            format="json",
        )
        self.assertEqual(response.status_code, 400)

        response = self.client.put(
            f"/api/admin/categories/{category_id}/",
            data={"name": "Fall Arrest", "colors": {"primary": "#000000"}},
            format="json",
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["slug"], "fall-arrest")
        self.assertEqual(response.json()["data"]["colors"]["primary"], "#000000")

        response = self.client.delete(f"/api/admin/categories/{category_id}/")
        self.assertEqual(response.status_code, 200)

    def test_category_delete_guard_over_api(self):
        make_product(category=self.category)
        response = self.client.delete(f"/api/admin/categories/{self.category.id}/")
        self.assertEqual(response.status_code, 400)
        self.assertIn("It has 1 products", response.json()["message"])
