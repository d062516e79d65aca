"""Domain ports (interfaces) for dependency inversion."""

from imgcache.domain.ports.codec import ImageCodec, OutputSink
from imgcache.domain.ports.downloader import ImageDownloader

__all__ = [
    "ImageCodec",
    "ImageDownloader",
    "OutputSink",
]
