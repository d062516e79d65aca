"""Image codecs: decoding, resampling, encoding and output sinks.

Usage:
    from imgcache.infrastructure.codecs import CodecDispatcher, resample

    dispatcher = CodecDispatcher()
    image = dispatcher.decode(raw_bytes)
    image = resample(image, calculate_resized_dimensions(*image.size, 800))
    sink = dispatcher.sink_for(ImageFormat.QOI, destination)
    dispatcher.encode(image, ImageFormat.QOI, sink)
"""

from imgcache.infrastructure.codecs.decoder import decode_image, normalize_mode
from imgcache.infrastructure.codecs.dispatcher import CodecDispatcher
from imgcache.infrastructure.codecs.resampler import RESAMPLE_FILTER, resample
from imgcache.infrastructure.codecs.sinks import BufferSink, PathSink

__all__ = [
    "RESAMPLE_FILTER",
    "BufferSink",
    "CodecDispatcher",
    "PathSink",
    "decode_image",
    "normalize_mode",
    "resample",
]
