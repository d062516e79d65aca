"""Encode backends, one per output format.

Presets are design constants - requests can't tune them:

    avif  speed 8, quality 85                      -> buffer
    heic  HEVC, lossy quality 85, RGB              -> writes destination file
    jxl   lossy, effort 3 ("falcon"), distance 1.0 -> buffer
    qoi   lossless, RGB or RGBA by source alpha    -> buffer

Every backend turns library exceptions into ImageEncodeError. The HEIC one is
special: when writing its destination file fails it raises FileCreationError,
because for that backend "encode" and "create the output file" are the same
library call.
"""

import logging
from typing import ClassVar

import numpy as np
import pillow_avif  # noqa: F401  # registers AVIF with Pillow
import pillow_heif
import pillow_jxl  # noqa: F401  # registers JXL with Pillow
import qoi
from PIL import Image

from imgcache.domain.exceptions import (
    FileCreationError,
    ImageCacheError,
    ImageEncodeError,
)
from imgcache.domain.ports.codec import ImageCodec, OutputSink
from imgcache.domain.value_objects.image_format import ImageFormat
from imgcache.infrastructure.codecs.decoder import has_alpha

logger = logging.getLogger(__name__)


def _to_color(image: Image.Image) -> Image.Image:
    """RGB or RGBA, keeping alpha if there is any."""
    target = "RGBA" if has_alpha(image) else "RGB"
    return image if image.mode == target else image.convert(target)


def _to_rgb(image: Image.Image) -> Image.Image:
    return image if image.mode == "RGB" else image.convert("RGB")


class AvifCodec:
    format: ClassVar[ImageFormat] = ImageFormat.AVIF
    writes_to_path: ClassVar[bool] = False

    QUALITY: ClassVar[int] = 85
    SPEED: ClassVar[int] = 8

    def encode(self, image: Image.Image, sink: OutputSink) -> None:
        try:
            _to_color(image).save(
                sink.target, format="AVIF", quality=self.QUALITY, speed=self.SPEED
            )
        except Exception as e:
            logger.warning("AVIF encode failed: %s", e)
            raise ImageEncodeError() from e


class HeicCodec:
    """HEVC-in-HEIF via libheif. Can only write to a destination."""

    format: ClassVar[ImageFormat] = ImageFormat.HEIC
    writes_to_path: ClassVar[bool] = True

    QUALITY: ClassVar[int] = 85

    def encode(self, image: Image.Image, sink: OutputSink) -> None:
        try:
            heif_file = pillow_heif.from_pillow(_to_rgb(image))
        except Exception as e:
            logger.warning("HEIC conversion failed: %s", e)
            raise ImageEncodeError() from e

        try:
            heif_file.save(sink.target, quality=self.QUALITY)
        except OSError as e:
            logger.warning("HEIC destination write failed (%s): %s", sink.target, e)
            raise FileCreationError() from e
        except Exception as e:
            logger.warning("HEIC encode failed: %s", e)
            raise ImageEncodeError() from e


class JxlCodec:
    format: ClassVar[ImageFormat] = ImageFormat.JXL
    writes_to_path: ClassVar[bool] = False

    # libjxl maps quality 90 to butteraugli distance 1.0
    QUALITY: ClassVar[float] = 90.0
    # effort 3 is libjxl's "falcon" speed tier
    EFFORT: ClassVar[int] = 3

    def encode(self, image: Image.Image, sink: OutputSink) -> None:
        try:
            _to_rgb(image).save(
                sink.target,
                format="JXL",
                lossless=False,
                quality=self.QUALITY,
                effort=self.EFFORT,
            )
        except Exception as e:
            logger.warning("JXL encode failed: %s", e)
            raise ImageEncodeError() from e


class QoiCodec:
    """Always lossless. RGBA if the image carries alpha, RGB otherwise."""

    format: ClassVar[ImageFormat] = ImageFormat.QOI
    writes_to_path: ClassVar[bool] = False

    def encode(self, image: Image.Image, sink: OutputSink) -> None:
        try:
            pixels = np.ascontiguousarray(np.asarray(_to_color(image), dtype=np.uint8))
            encoded = qoi.encode(pixels)
        except Exception as e:
            logger.warning("QOI encode failed: %s", e)
            raise ImageEncodeError() from e

        try:
            sink.write(encoded)
        except ImageCacheError:
            raise
        except Exception as e:
            raise ImageEncodeError() from e


def default_codecs() -> list[ImageCodec]:
    return [AvifCodec(), HeicCodec(), JxlCodec(), QoiCodec()]
