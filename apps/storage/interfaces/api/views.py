from __future__ import annotations

from rest_framework import status
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.views import APIView

from apps.storage.application.services.media_service import MediaService
from apps.storage.domain.errors import StorageBackendError, StorageError
from apps.storage.domain.presets import preset_for
from apps.storage.interfaces.api.serializers import DeleteUploadSerializer, UploadImageSerializer
from bondex.api_responses import api_error, api_success


class UploadImageAPI(APIView):
    parser_classes = [MultiPartParser, FormParser]

    def post(self, request):
        serializer = UploadImageSerializer(data=request.data)
        if not serializer.is_valid():
            return api_error(message="No image file provided", errors=serializer.errors)

        try:
            stored = MediaService.upload_image(
                serializer.validated_data["image"],
                preset=preset_for(serializer.validated_data.get("kind", "general")),
            )
        except StorageBackendError as exc:
            return api_error(
                message="Error uploading image",
                error=str(exc),
                http_status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )
        except StorageError as exc:
            return api_error(message=str(exc))

        return api_success(
            message="Image uploaded successfully",
            data={"url": stored.url, "public_id": stored.key},
            http_status=status.HTTP_201_CREATED,
        )


class DeleteUploadAPI(APIView):
    parser_classes = [JSONParser, FormParser]

    def post(self, request):
        serializer = DeleteUploadSerializer(data=request.data)
        if not serializer.is_valid():
            return api_error(message="Image key is required", errors=serializer.errors)

        key = serializer.validated_data["key"]
        try:
            deleted = MediaService.delete(key)
        except StorageError as exc:
            return api_error(
                message="Error deleting image",
                error=str(exc),
                http_status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )
        if not deleted:
            return api_error(message="Image not found", http_status=status.HTTP_404_NOT_FOUND)
        return api_success(message="Image deleted successfully", data={"public_id": key})
