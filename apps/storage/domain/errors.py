from __future__ import annotations


class StorageError(ValueError):
    pass


class UnsupportedImageFormatError(StorageError):
    pass


class ImageTooLargeError(StorageError):
    pass


class InvalidImageError(StorageError):
    pass


class StorageBackendError(StorageError):
    pass
