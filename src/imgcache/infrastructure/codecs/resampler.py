"""High-quality resampling for the resize stage."""

import logging

from PIL import Image

from imgcache.domain.exceptions import ResizeError
from imgcache.domain.value_objects.dimensions import ResizedDimensions

logger = logging.getLogger(__name__)

# Pillow's bicubic kernel uses a = -0.5, i.e. Catmull-Rom
RESAMPLE_FILTER = Image.Resampling.BICUBIC


def resample(image: Image.Image, dimensions: ResizedDimensions) -> Image.Image:
    """Resize ``image`` to ``dimensions`` with the Catmull-Rom convolution.

    Alpha is NOT used as a weight: Pillow premultiplies RGBA/LA before
    resizing, so images with alpha are resized band by band instead. Colour
    under fully transparent pixels is kept as-is.

    Returns the input unchanged if it already has the target size.

    Raises:
        ResizeError: target is (0, 0) or the resampler failed
    """
    size = dimensions.as_tuple()

    # Hey future me - (0, 0) comes from a zero tallest_side (or a zero-sized
    # source). A 0x0 image can't be encoded, so fail here instead of letting
    # some encoder choke on it later.
    if dimensions.is_empty:
        raise ResizeError()

    if image.size == size:
        return image

    try:
        if "A" in image.getbands():
            bands = [band.resize(size, RESAMPLE_FILTER) for band in image.split()]
            return Image.merge(image.mode, bands)
        return image.resize(size, RESAMPLE_FILTER)
    except Exception as e:
        logger.warning("Failed to resize %s image %s -> %s: %s", image.mode, image.size, size, e)
        raise ResizeError() from e
