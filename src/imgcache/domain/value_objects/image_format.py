"""Output image formats.

Hey future me - this is the CLOSED set of formats we can produce. Strings from
the outside world get parsed into an ImageFormat exactly once (in the request
validator); everything downstream matches on the enum, never on raw strings.
Adding a format means adding a member here AND a backend in
infrastructure/codecs - the dispatcher refuses to start without one.
"""

from enum import Enum

from imgcache.domain.exceptions import UnsupportedFormatError


class ImageFormat(str, Enum):
    """Supported output formats. Values double as file extensions."""

    AVIF = "avif"
    HEIC = "heic"
    JXL = "jxl"
    QOI = "qoi"

    @property
    def extension(self) -> str:
        return self.value

    @classmethod
    def parse(cls, raw: str | None) -> "ImageFormat":
        """Parse a user-supplied format tag.

        The tag is lowercased and then matched exactly - "AVIF" is fine,
        " avif" or "avif2" are not.

        Raises:
            UnsupportedFormatError: tag is missing or not in the table
        """
        if raw is None:
            raise UnsupportedFormatError()
        try:
            return cls(raw.lower())
        except ValueError as e:
            raise UnsupportedFormatError() from e
