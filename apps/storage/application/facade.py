from __future__ import annotations

from django.conf import settings

from apps.storage.domain.errors import StorageError
from apps.storage.domain.ports import ObjectStoragePort
from apps.storage.infrastructure.gateways.django_storage import DjangoStorageGateway


class ObjectStorageFacade:
    _registry: dict[str, ObjectStoragePort] = {
        DjangoStorageGateway.code: DjangoStorageGateway(),
    }

    @classmethod
    def get(cls, backend_code: str | None = None) -> ObjectStoragePort:
        key = (backend_code or getattr(settings, "OBJECT_STORAGE_BACKEND", "django") or "").strip().lower()
        if key not in cls._registry:
            raise StorageError(f"Unknown object storage backend: {key}")
        return cls._registry[key]

    @classmethod
    def available_backends(cls) -> list[dict]:
        return [{"code": adapter.code, "name": adapter.name} for adapter in cls._registry.values()]
