"""Tests for the domain exception taxonomy."""

import pytest

from imgcache.domain.exceptions import (
    BadRequestError,
    DirectoryCreationError,
    DownloadError,
    FileCorruptError,
    FileCreationError,
    FileReadError,
    FileWriteError,
    ImageCacheError,
    ImageDecodeError,
    ImageEncodeError,
    JsonDeserializeError,
    ProcessingError,
    ResizeError,
    StorageError,
    UnsupportedFormatError,
    ValidationException,
)


class TestReasonTexts:
    @pytest.mark.parametrize(
        ("exc", "reason", "status"),
        [
            (
                UnsupportedFormatError(),
                "Unsupported format. Use 'avif', 'heic', 'jxl', or 'qoi'.",
                422,
            ),
            (BadRequestError(), "Bad request: invalid request format.", 400),
            (DownloadError(), "Failed to download image from URL.", 502),
            (DirectoryCreationError(), "Failed to create directories.", 500),
            (FileCreationError(), "Failed to create output file.", 500),
            (FileWriteError(), "Failed to write image data to file.", 500),
            (FileReadError(), "Failed to read image data from file.", 500),
            (FileCorruptError(), "File was empty or corrupt.", 500),
            (
                ImageDecodeError(),
                "Failed to decode image. May be corrupt or unsupported.",
                500,
            ),
            (ResizeError(), "Failed to resize image.", 500),
            (ImageEncodeError(), "Failed to encode image.", 500),
        ],
    )
    def test_default_reason_and_status(self, exc, reason, status):
        assert exc.reason == reason
        assert str(exc) == reason
        assert exc.http_status == status

    def test_json_error_includes_details(self):
        exc = JsonDeserializeError("tallestSide: Field required")
        assert exc.reason == "Bad request: invalid JSON - tallestSide: Field required"
        assert exc.details == "tallestSide: Field required"
        assert exc.http_status == 400

    def test_processing_error_includes_details(self):
        exc = ProcessingError("boom")
        assert exc.reason == "Internal processing error: boom"


class TestHierarchy:
    def test_everything_is_an_image_cache_error(self):
        for cls in (BadRequestError, DownloadError, FileReadError, ResizeError, ProcessingError):
            assert issubclass(cls, ImageCacheError)

    def test_categories(self):
        assert issubclass(UnsupportedFormatError, ValidationException)
        assert issubclass(FileCorruptError, StorageError)
        assert FileCorruptError.category == "io"
        assert DownloadError.category == "network"
        assert ImageEncodeError.category == "codec"

    def test_custom_message_overrides_default(self):
        assert BadRequestError("nope").reason == "nope"
