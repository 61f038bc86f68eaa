from __future__ import annotations

from io import BytesIO
from unittest import mock

from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase, override_settings
from PIL import Image
from rest_framework.test import APIClient

from apps.accounts.models import AccountProfile
from apps.accounts.testing import bearer_for, create_user_with_profile
from apps.storage.application.services.image_processing import ImageProcessor, extension_of
from apps.storage.application.services.media_service import MediaService
from apps.storage.domain.errors import ImageTooLargeError, StorageBackendError, UnsupportedImageFormatError
from apps.storage.domain.presets import CATEGORY_IMAGE, GENERAL_IMAGE, PRODUCT_IMAGE, preset_for

IN_MEMORY_STORAGES = {
    "default": {"BACKEND": "django.core.files.storage.InMemoryStorage"},
    "staticfiles": {"BACKEND": "django.contrib.staticfiles.storage.StaticFilesStorage"},
}


def _png_bytes(width: int = 1600, height: int = 1000, color=(200, 40, 40)) -> bytes:
    out = BytesIO()
    Image.new("RGB", (width, height), color).save(out, format="PNG")
    return out.getvalue()


class ImageProcessorTests(TestCase):
    def test_extension_of(self):
        self.assertEqual(extension_of("helmet.JPG"), "jpg")
        self.assertEqual(extension_of("noext"), "")

    def test_product_images_fill_exact_box(self):
        processed = ImageProcessor.transform(raw=_png_bytes(), filename="a.png", preset=PRODUCT_IMAGE)
        image = Image.open(BytesIO(processed.content))
        self.assertEqual(image.size, (800, 600))
        self.assertEqual(processed.content_type, "image/png")

    def test_general_images_only_shrink(self):
        processed = ImageProcessor.transform(raw=_png_bytes(600, 400), filename="a.png", preset=GENERAL_IMAGE)
        self.assertEqual(Image.open(BytesIO(processed.content)).size, (600, 400))

        processed = ImageProcessor.transform(raw=_png_bytes(2400, 800), filename="a.png", preset=GENERAL_IMAGE)
        self.assertEqual(Image.open(BytesIO(processed.content)).size, (1200, 400))

    def test_svg_allowed_only_for_categories(self):
        svg = b"<svg xmlns='http://www.w3.org/2000/svg'></svg>"
        processed = ImageProcessor.transform(raw=svg, filename="icon.svg", preset=CATEGORY_IMAGE)
        self.assertEqual(processed.content, svg)
        with self.assertRaises(UnsupportedImageFormatError):
            ImageProcessor.transform(raw=svg, filename="icon.svg", preset=PRODUCT_IMAGE)

    def test_unknown_kind_falls_back_to_general(self):
        self.assertIs(preset_for("banner"), GENERAL_IMAGE)
        self.assertIs(preset_for("Products"), PRODUCT_IMAGE)


@override_settings(STORAGES=IN_MEMORY_STORAGES, OBJECT_STORAGE_ROOT_FOLDER="bondex-test")
class MediaServiceTests(TestCase):
    def test_upload_and_delete(self):
        upload = SimpleUploadedFile("vest.png", _png_bytes(), content_type="image/png")
        stored = MediaService.upload_image(upload, preset=PRODUCT_IMAGE)
        self.assertTrue(stored.key.startswith("bondex-test/products/product-"))
        self.assertTrue(stored.key.endswith(".png"))
        self.assertTrue(MediaService.delete(stored.key))
        self.assertFalse(MediaService.delete(stored.key))

    @override_settings(UPLOAD_MAX_BYTES=10)
    def test_rejects_large_files(self):
        upload = SimpleUploadedFile("vest.png", _png_bytes(), content_type="image/png")
        with self.assertRaises(ImageTooLargeError):
            MediaService.upload_image(upload, preset=PRODUCT_IMAGE)

    def test_delete_quietly_swallows_backend_errors(self):
        gateway = mock.Mock()
        gateway.delete.side_effect = StorageBackendError("boom")
        with mock.patch(
            "apps.storage.application.services.media_service.ObjectStorageFacade.get",
            return_value=gateway,
        ):
            self.assertFalse(MediaService.delete_quietly("bondex-test/products/x.png"))
        self.assertFalse(MediaService.delete_quietly(""))


@override_settings(STORAGES=IN_MEMORY_STORAGES)
class UploadApiTests(TestCase):
    def setUp(self) -> None:
        super().setUp()
        self.client = APIClient()
        self.admin = create_user_with_profile()
        self.client.credentials(HTTP_AUTHORIZATION=bearer_for(self.admin))

    def test_upload_requires_admin(self):
        customer = create_user_with_profile(email="buyer@bondex.test", role=AccountProfile.ROLE_CUSTOMER)
        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION=bearer_for(customer))
        upload = SimpleUploadedFile("a.png", _png_bytes(), content_type="image/png")
        response = client.post("/api/admin/uploads/", data={"image": upload}, format="multipart")
        self.assertEqual(response.status_code, 403)

    def test_upload_returns_url_and_key(self):
        upload = SimpleUploadedFile("a.png", _png_bytes(), content_type="image/png")
        response = self.client.post(
            "/api/admin/uploads/",
            data={"image": upload, "kind": "categories"},
            format="multipart",
        )
        self.assertEqual(response.status_code, 201)
        payload = response.json()
        self.assertTrue(payload["success"])
        self.assertIn("/categories/category-", payload["data"]["public_id"])

        response = self.client.post(
            "/api/admin/uploads/delete/",
            data={"key": payload["data"]["public_id"]},
            format="json",
        )
        self.assertEqual(response.status_code, 200)

    def test_missing_file(self):
        response = self.client.post("/api/admin/uploads/", data={}, format="multipart")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "No image file provided")

    def test_bad_format(self):
        upload = SimpleUploadedFile("a.gif", b"GIF89a", content_type="image/gif")
        response = self.client.post("/api/admin/uploads/", data={"image": upload}, format="multipart")
        self.assertEqual(response.status_code, 400)
