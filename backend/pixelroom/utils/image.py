"""Encoded image buffers and the base64 / data-URI forms they travel in."""

from __future__ import annotations

import base64
import binascii
import io
from dataclasses import dataclass, field

from PIL import Image, UnidentifiedImageError

DATA_URI_PREFIX = "data:image/png;base64,"


@dataclass
class GeneratedImage:
    """Encoded image bytes with lazily read pixel dimensions."""

    data: bytes
    _size: tuple[int, int] | None = field(default=None, init=False, repr=False)
    _size_read: bool = field(default=False, init=False, repr=False)

    @property
    def size(self) -> tuple[int, int] | None:
        """(width, height), or None when the bytes cannot be decoded."""
        if not self._size_read:
            self._size_read = True
            try:
                with Image.open(io.BytesIO(self.data)) as img:
                    self._size = img.size
            except (UnidentifiedImageError, OSError):
                self._size = None
        return self._size

    def to_b64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")

    def to_data_uri(self) -> str:
        return DATA_URI_PREFIX + self.to_b64()

    @classmethod
    def from_b64(cls, value: str) -> GeneratedImage:
        return cls(decode_image_payload(value))


def decode_image_payload(value: str) -> bytes:
    """Decode a bare base64 string or a ``data:image/...;base64,`` URI.

    Whitespace (MIME line wrapping) is ignored and missing ``=`` padding is
    restored. Raises ValueError for characters outside the base64 alphabet.
    """
    payload = value.strip()
    if payload.startswith("data:"):
        header, sep, payload = payload.partition(",")
        if not sep or ";base64" not in header:
            raise ValueError("Only base64 data URIs are supported")
    payload = "".join(payload.split())
    payload += "=" * (-len(payload) % 4)
    try:
        return base64.b64decode(payload, validate=True)
    except binascii.Error as exc:
        raise ValueError(f"Invalid base64 image payload: {exc}") from exc


def image_to_bytes(image: Image.Image, fmt: str = "PNG") -> bytes:
    """Convert PIL Image to bytes."""
    buf = io.BytesIO()
    image.save(buf, format=fmt)
    return buf.getvalue()
