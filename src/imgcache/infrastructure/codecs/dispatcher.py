"""Codec Dispatcher - routes decode/encode to the right backend.

Hey future me - the dispatcher checks at construction time that EVERY
ImageFormat has a backend. That way a lookup by format can never miss at
request time, and adding a new ImageFormat member without a backend blows up
at startup instead of on the first unlucky request.
"""

import logging
from collections.abc import Callable, Iterable
from pathlib import Path

from PIL import Image

from imgcache.domain.exceptions import ConfigurationError
from imgcache.domain.ports.codec import ImageCodec, OutputSink
from imgcache.domain.value_objects.image_format import ImageFormat
from imgcache.infrastructure.codecs.decoder import decode_image
from imgcache.infrastructure.codecs.sinks import BufferSink, PathSink

logger = logging.getLogger(__name__)


class CodecDispatcher:
    """Decode any supported input, encode to any ImageFormat."""

    def __init__(
        self,
        codecs: Iterable[ImageCodec] | None = None,
        decoder: Callable[[bytes], Image.Image] = decode_image,
    ) -> None:
        if codecs is None:
            from imgcache.infrastructure.codecs.encoders import default_codecs

            codecs = default_codecs()

        self._codecs: dict[ImageFormat, ImageCodec] = {c.format: c for c in codecs}
        self._decoder = decoder

        missing = [fmt.value for fmt in ImageFormat if fmt not in self._codecs]
        if missing:
            raise ConfigurationError(f"No encoder registered for: {', '.join(missing)}")

    def codec_for(self, fmt: ImageFormat) -> ImageCodec:
        return self._codecs[fmt]

    def decode(self, data: bytes) -> Image.Image:
        """Raises ImageDecodeError."""
        return self._decoder(data)

    def sink_for(self, fmt: ImageFormat, destination: Path) -> OutputSink:
        """Pick the output sink matching the backend's output convention."""
        if self.codec_for(fmt).writes_to_path:
            return PathSink(destination)
        return BufferSink()

    def encode(self, image: Image.Image, fmt: ImageFormat, sink: OutputSink) -> None:
        """Raises ImageEncodeError (or FileCreationError for path sinks)."""
        self.codec_for(fmt).encode(image, sink)
