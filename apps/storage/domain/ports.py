from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class StoredObject:
    url: str
    key: str


class ObjectStoragePort(Protocol):
    code: str
    name: str

    def upload(self, *, content: bytes, folder: str, filename: str, content_type: str = "") -> StoredObject:
        ...

    def delete(self, *, key: str) -> bool:
        ...

    def url(self, *, key: str) -> str:
        ...
