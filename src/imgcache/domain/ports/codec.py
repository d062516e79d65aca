"""Codec Port (Interface).

Future me note:
Encoders come in two flavours. Most of them hand us bytes, but the HEIF
library can only write straight to a destination file. Instead of two encode
signatures we give every backend an OutputSink to write into:

- BufferSink: in-memory buffer, the orchestrator persists the bytes afterwards
- PathSink:   the destination file itself, nothing left to persist

The orchestrator asks the dispatcher for the right sink, hands it to encode(),
and only checks ``sink.persisted`` at the end. It never knows which backend it
talked to.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, BinaryIO, ClassVar, Protocol

if TYPE_CHECKING:
    from PIL.Image import Image

    from imgcache.domain.value_objects.image_format import ImageFormat


class OutputSink(ABC):
    """Where an encoder puts its output."""

    # True if a finished encode already IS the persisted transformed blob
    persisted: ClassVar[bool] = False

    @property
    @abstractmethod
    def target(self) -> BinaryIO | str:
        """File object or filesystem path for libraries with a ``save(fp)`` API."""

    @abstractmethod
    def write(self, data: bytes) -> None:
        """Write a complete encoded payload."""


class ImageCodec(Protocol):
    """One encode backend.

    Implementations raise ImageEncodeError (or FileCreationError when a
    destination write fails) - never raw library exceptions.
    """

    format: ImageFormat
    writes_to_path: bool

    def encode(self, image: Image, sink: OutputSink) -> None: ...
