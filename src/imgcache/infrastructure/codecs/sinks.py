"""Concrete output sinks (see domain/ports/codec.py)."""

from io import BytesIO
from pathlib import Path
from typing import BinaryIO, ClassVar

from imgcache.domain.exceptions import FileCreationError, FileWriteError
from imgcache.domain.ports.codec import OutputSink


class BufferSink(OutputSink):
    """In-memory sink. The orchestrator persists ``getvalue()`` afterwards."""

    persisted: ClassVar[bool] = False

    def __init__(self) -> None:
        self._buffer = BytesIO()

    @property
    def target(self) -> BinaryIO:
        return self._buffer

    def write(self, data: bytes) -> None:
        self._buffer.write(data)

    def getvalue(self) -> bytes:
        return self._buffer.getvalue()


class PathSink(OutputSink):
    """Sink that IS the destination file. Nothing left to persist afterwards.

    Hey future me - this is how the HEIC backend ends up writing straight into
    the cache directory. It's the one place where a crash can leave a
    transformed file on disk without a success response ever going out.
    """

    persisted: ClassVar[bool] = True

    def __init__(self, path: Path) -> None:
        self.path = path

    @property
    def target(self) -> str:
        return str(self.path)

    def write(self, data: bytes) -> None:
        try:
            handle = self.path.open("wb")
        except OSError as e:
            raise FileCreationError() from e
        with handle:
            try:
                handle.write(data)
            except OSError as e:
                raise FileWriteError() from e
