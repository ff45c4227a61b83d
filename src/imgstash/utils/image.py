"""Image loading and re-encoding utilities."""

from __future__ import annotations

import io
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from imgstash.errors.exceptions import DecodeError

_SUPPORTED_EXTENSIONS = {".png", ".jpg", ".jpeg", ".gif", ".bmp", ".tiff", ".tif", ".webp"}
_MAX_IMAGE_SIZE_BYTES = 50 * 1024 * 1024  # 50 MB
_DEFAULT_JPEG_QUALITY = 75


def load_image(path: str | Path) -> bytes:
    """Load an image file and return raw bytes."""
    path = Path(path)
    _validate_path(path)
    return path.read_bytes()


def encode_image(data: bytes, quality: int = _DEFAULT_JPEG_QUALITY) -> bytes:
    """Decode any format Pillow understands and re-encode it as JPEG.

    Raises DecodeError if the bytes are not an image or cannot be encoded.
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            return _to_jpeg_bytes(img, quality)
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise DecodeError(f"Cannot decode image: {e}", original=e) from e


def _to_jpeg_bytes(img: Image.Image, quality: int) -> bytes:
    # JPEG has no alpha or palette
    if img.mode not in ("RGB", "L"):
        img = img.convert("RGB")
    buf = io.BytesIO()
    img.save(buf, format="JPEG", quality=quality)
    return buf.getvalue()


def _validate_path(path: Path) -> None:
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    if path.is_symlink():
        raise ValueError(f"Symlinks not allowed: {path}")
    if path.suffix.lower() not in _SUPPORTED_EXTENSIONS:
        raise ValueError(f"Unsupported file type: {path.suffix}")
    size = path.stat().st_size
    if size > _MAX_IMAGE_SIZE_BYTES:
        raise ValueError(f"File too large ({size} bytes, max {_MAX_IMAGE_SIZE_BYTES})")
