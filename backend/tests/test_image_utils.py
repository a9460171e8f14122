"""Tests for encoded image helpers (pixelroom/utils/image.py).

No API keys needed: pure Pillow operations.
"""

import base64

import pytest
from PIL import Image

from pixelroom.utils.image import (
    DATA_URI_PREFIX,
    GeneratedImage,
    decode_image_payload,
    image_to_bytes,
)
from tests.imaging import open_png, png_bytes


class TestGeneratedImage:
    def test_size_read_from_bytes(self):
        assert GeneratedImage(png_bytes(32, 16)).size == (32, 16)

    def test_size_none_for_undecodable_bytes(self):
        assert GeneratedImage(b"not an image").size is None

    def test_data_uri(self):
        data = png_bytes(4, 4)
        uri = GeneratedImage(data).to_data_uri()
        assert uri.startswith(DATA_URI_PREFIX)
        assert base64.b64decode(uri[len(DATA_URI_PREFIX) :]) == data

    def test_from_b64_accepts_bare_and_uri_forms(self):
        data = png_bytes(4, 4)
        b64 = base64.b64encode(data).decode()
        assert GeneratedImage.from_b64(b64).data == data
        assert GeneratedImage.from_b64(DATA_URI_PREFIX + b64).data == data


class TestDecodeImagePayload:
    def test_bare_base64(self):
        assert decode_image_payload(base64.b64encode(b"abc").decode()) == b"abc"

    def test_jpeg_data_uri(self):
        uri = "data:image/jpeg;base64," + base64.b64encode(b"jpeg").decode()
        assert decode_image_payload(uri) == b"jpeg"

    def test_surrounding_whitespace_ignored(self):
        assert decode_image_payload("  " + base64.b64encode(b"abc").decode() + "\n") == b"abc"

    @pytest.mark.parametrize("payload", ["YWJjZA", "YWJjZA=", "data:image/png;base64,YWJjZA"])
    def test_missing_padding_restored(self, payload):
        assert decode_image_payload(payload) == b"abcd"

    def test_line_wrapped_base64(self):
        data = bytes(range(256))
        encoded = base64.encodebytes(data).decode()
        assert "\n" in encoded.strip()
        assert decode_image_payload(encoded) == data
        assert decode_image_payload("data:image/png;base64," + encoded) == data

    def test_invalid_base64_raises_value_error(self):
        with pytest.raises(ValueError, match="Invalid base64"):
            decode_image_payload("!!!not base64!!!")

    def test_non_base64_data_uri_rejected(self):
        with pytest.raises(ValueError, match="base64 data URIs"):
            decode_image_payload("data:image/svg+xml,<svg/>")


def test_image_to_bytes_round_trips_pixels():
    img = Image.new("RGBA", (8, 8), (10, 20, 30, 255))
    decoded = open_png(image_to_bytes(img))
    assert decoded.format == "PNG"
    assert decoded.getpixel((0, 0)) == (10, 20, 30, 255)
