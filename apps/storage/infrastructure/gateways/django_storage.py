from __future__ import annotations

from django.core.files.base import ContentFile
from django.core.files.storage import default_storage

from apps.storage.domain.errors import StorageBackendError
from apps.storage.domain.ports import StoredObject


class DjangoStorageGateway:
    """Object storage on top of whatever `STORAGES["default"]` points at."""

    code = "django"
    name = "Django default storage"

    def __init__(self, storage=None):
        self._storage = storage

    @property
    def storage(self):
        return self._storage or default_storage

    def upload(self, *, content: bytes, folder: str, filename: str, content_type: str = "") -> StoredObject:
        path = f"{folder.strip('/')}/{filename}" if folder else filename
        try:
            key = self.storage.save(path, ContentFile(content))
        except OSError as exc:
            raise StorageBackendError(f"Upload failed: {exc}") from exc
        return StoredObject(url=self.storage.url(key), key=key)

    def delete(self, *, key: str) -> bool:
        if not key:
            return False
        try:
            if not self.storage.exists(key):
                return False
            self.storage.delete(key)
        except OSError as exc:
            raise StorageBackendError(f"Delete failed: {exc}") from exc
        return True

    def url(self, *, key: str) -> str:
        return self.storage.url(key)
