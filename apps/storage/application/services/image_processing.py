from __future__ import annotations

from dataclasses import dataclass
from io import BytesIO

from PIL import Image, ImageOps, UnidentifiedImageError

from apps.storage.domain.errors import InvalidImageError, UnsupportedImageFormatError
from apps.storage.domain.presets import ImagePreset, ResizeMode

_PIL_FORMATS = {"jpg": "JPEG", "jpeg": "JPEG", "png": "PNG", "webp": "WEBP"}
_CONTENT_TYPES = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "webp": "image/webp",
    "svg": "image/svg+xml",
}


@dataclass(frozen=True)
class ProcessedImage:
    content: bytes
    extension: str
    content_type: str


def extension_of(filename: str) -> str:
    _, _, ext = (filename or "").rpartition(".")
    return ext.lower() if ext and ext != filename else ""


class ImageProcessor:
    @staticmethod
    def transform(*, raw: bytes, filename: str, preset: ImagePreset) -> ProcessedImage:
        ext = extension_of(filename)
        if ext not in preset.allowed_formats:
            allowed = ", ".join(sorted(preset.allowed_formats))
            raise UnsupportedImageFormatError(f"Unsupported image format '{ext or filename}'. Allowed: {allowed}")

        # Vector images are stored as-is.
        if ext == "svg":
            return ProcessedImage(content=raw, extension=ext, content_type=_CONTENT_TYPES[ext])

        try:
            image = Image.open(BytesIO(raw))
            image.load()
        except (UnidentifiedImageError, OSError) as exc:
            raise InvalidImageError("Uploaded file is not a valid image") from exc

        image = ImageOps.exif_transpose(image)
        size = (preset.width, preset.height)
        if preset.mode == ResizeMode.FILL:
            image = ImageOps.fit(image, size, method=Image.Resampling.LANCZOS)
        else:
            image.thumbnail(size, Image.Resampling.LANCZOS)

        fmt = _PIL_FORMATS[ext]
        save_kwargs: dict = {}
        if fmt == "JPEG":
            if image.mode not in ("RGB", "L"):
                image = image.convert("RGB")
            save_kwargs = {"quality": 85, "optimize": True}
        elif fmt == "WEBP":
            save_kwargs = {"quality": 85}

        out = BytesIO()
        image.save(out, format=fmt, **save_kwargs)
        return ProcessedImage(content=out.getvalue(), extension=ext, content_type=_CONTENT_TYPES[ext])
