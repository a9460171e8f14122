"""Sprite composition onto a base room image.

Sprites land on four fixed anchors (top-left corners, as fractions of the
canvas). Each sprite is fitted inside a 0.28W x 0.28H box without
upscaling or cropping, then alpha-blended in sequence order. These anchors
are independent of the UI hotspot catalog in ``services.room_prompt``.
"""

from __future__ import annotations

import io
import math
from collections.abc import Sequence

import structlog
from PIL import Image

from pixelroom.utils.image import GeneratedImage, image_to_bytes

logger = structlog.get_logger()

COMPOSITION_ANCHORS: tuple[tuple[float, float], ...] = (
    (0.15, 0.55),
    (0.60, 0.55),
    (0.20, 0.80),
    (0.65, 0.80),
)
SPRITE_BOX_FRACTION = 0.28
DEFAULT_CANVAS_SIZE = (1024, 1024)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def canvas_size(base: GeneratedImage) -> tuple[int, int]:
    """Pixel size of the base, or the default when its header gives none."""
    size = base.size
    if size is None or size[0] <= 0 or size[1] <= 0:
        logger.warning("compose_base_size_unavailable", size=size)
        return DEFAULT_CANVAS_SIZE
    return size


def anchor_positions(width: int, height: int) -> list[tuple[int, int]]:
    return [(_round_half_up(width * fx), _round_half_up(height * fy)) for fx, fy in COMPOSITION_ANCHORS]


def sprite_box(width: int, height: int) -> tuple[int, int]:
    return (
        max(1, _round_half_up(width * SPRITE_BOX_FRACTION)),
        max(1, _round_half_up(height * SPRITE_BOX_FRACTION)),
    )


def fit_sprite(sprite: Image.Image, box: tuple[int, int]) -> Image.Image:
    """Scale down to fit inside ``box``, keeping aspect ratio; never upscale."""
    fitted = sprite.convert("RGBA")
    fitted.thumbnail(box, Image.Resampling.LANCZOS)
    return fitted


def compose_room(base: bytes, sprites: Sequence[bytes]) -> bytes:
    """Composite up to four sprites over ``base`` and return PNG bytes.

    Sprites past the fourth are dropped. With no sprites the base is still
    re-encoded, so the output is always PNG. Geometry comes from the base
    size read by GeneratedImage; a base that cannot be decoded still raises.
    """
    width, height = canvas_size(GeneratedImage(base))
    with Image.open(io.BytesIO(base)) as base_img:
        canvas = base_img.convert("RGBA")

    anchors = anchor_positions(width, height)
    box = sprite_box(width, height)

    if len(sprites) > len(anchors):
        logger.info("compose_sprites_dropped", supplied=len(sprites), used=len(anchors))

    for index, (sprite_bytes, (left, top)) in enumerate(zip(sprites, anchors)):
        with Image.open(io.BytesIO(sprite_bytes)) as sprite_img:
            sprite = fit_sprite(sprite_img, box)
        # Clip to the canvas; anchors near the bottom edge can overhang
        visible_w = min(sprite.width, canvas.width - left)
        visible_h = min(sprite.height, canvas.height - top)
        if visible_w <= 0 or visible_h <= 0:
            logger.warning("compose_sprite_off_canvas", index=index, left=left, top=top)
            continue
        if (visible_w, visible_h) != sprite.size:
            sprite = sprite.crop((0, 0, visible_w, visible_h))
        canvas.alpha_composite(sprite, dest=(left, top))

    return image_to_bytes(canvas, "PNG")
