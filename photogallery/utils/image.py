"""Image byte helpers."""

from __future__ import annotations

import io
import logging

from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)


def probe_dimensions(data: bytes) -> tuple[int, int] | None:
    """Get (width, height) of encoded image bytes without decoding pixels.

    Returns None when the bytes are not a recognizable image.
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            return img.size  # (width, height)
    except (UnidentifiedImageError, OSError) as exc:
        logger.debug("Cannot read image header: %s", exc)
        return None
