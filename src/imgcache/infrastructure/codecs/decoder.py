"""Decode arbitrary source bytes into a Pillow image."""

import logging
from io import BytesIO

import pillow_avif  # noqa: F401  # registers AVIF with Pillow
import pillow_jxl  # noqa: F401  # registers JXL with Pillow
from PIL import Image
from pillow_heif import register_heif_opener

from imgcache.domain.exceptions import ImageDecodeError

logger = logging.getLogger(__name__)

register_heif_opener()

# Modes the resampler and every encoder know how to handle
NATIVE_MODES = frozenset({"L", "LA", "RGB", "RGBA"})


def has_alpha(image: Image.Image) -> bool:
    """True if the image carries alpha, as a band or as transparency info."""
    return "A" in image.getbands() or image.has_transparency_data


def normalize_mode(image: Image.Image) -> Image.Image:
    """Bring exotic colour models (palette, CMYK, 16-bit, ...) to L/LA/RGB/RGBA.

    Alpha survives the conversion if the source had any.
    """
    if image.mode in NATIVE_MODES:
        return image
    if image.mode == "1":
        return image.convert("L")
    return image.convert("RGBA" if has_alpha(image) else "RGB")


def decode_image(data: bytes) -> Image.Image:
    """Decode raw bytes into a fully loaded image in its native colour model.

    Raises:
        ImageDecodeError: bytes are not a decodable image
    """
    try:
        with Image.open(BytesIO(data)) as opened:
            opened.load()
            image = normalize_mode(opened)
            if image is opened:
                # Detach from the (about to be closed) file handle
                image = opened.copy()
    except Exception as e:
        logger.warning("Failed to decode image (%d bytes): %s", len(data), e)
        raise ImageDecodeError() from e

    return image
