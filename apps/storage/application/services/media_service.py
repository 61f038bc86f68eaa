from __future__ import annotations

import logging
import secrets
import time

from django.conf import settings

from apps.storage.application.facade import ObjectStorageFacade
from apps.storage.application.services.image_processing import ImageProcessor
from apps.storage.domain.errors import ImageTooLargeError, StorageError
from apps.storage.domain.ports import StoredObject
from apps.storage.domain.presets import ImagePreset

logger = logging.getLogger("bondex.storage")


def _object_name(prefix: str, extension: str) -> str:
    return f"{prefix}-{int(time.time() * 1000)}-{secrets.randbelow(1000)}.{extension}"


class MediaService:
    @staticmethod
    def upload_image(uploaded_file, *, preset: ImagePreset) -> StoredObject:
        max_bytes = getattr(settings, "UPLOAD_MAX_BYTES", 5 * 1024 * 1024)
        size = getattr(uploaded_file, "size", None)
        if size is not None and size > max_bytes:
            raise ImageTooLargeError(f"File too large. Maximum size is {max_bytes // (1024 * 1024)}MB")

        raw = uploaded_file.read()
        processed = ImageProcessor.transform(raw=raw, filename=uploaded_file.name, preset=preset)
        root = getattr(settings, "OBJECT_STORAGE_ROOT_FOLDER", "bondex-safety")
        stored = ObjectStorageFacade.get().upload(
            content=processed.content,
            folder=f"{root}/{preset.folder}",
            filename=_object_name(preset.prefix, processed.extension),
            content_type=processed.content_type,
        )
        logger.info("storage.uploaded", extra={"key": stored.key, "bytes": len(processed.content)})
        return stored

    @staticmethod
    def delete(key: str) -> bool:
        return ObjectStorageFacade.get().delete(key=key)

    @staticmethod
    def delete_quietly(key: str | None) -> bool:
        """Best-effort cleanup: failures are logged, never raised."""
        if not key:
            return False
        try:
            return ObjectStorageFacade.get().delete(key=key)
        except StorageError as exc:
            logger.error("storage.delete_failed", extra={"key": key, "error": str(exc)})
            return False
