"""Turn a raw transform request into a validated TransformRequest.

Everything here happens BEFORE any network or disk access - a request that
fails validation never downloads, never touches the cache directory.

Order of checks:
1. body size (max_request_bytes)       -> BadRequestError
2. UTF-8                               -> BadRequestError
3. JSON + schema (tallestSide etc.)    -> JsonDeserializeError
4. format                              -> UnsupportedFormatError
5. source (body, else request path)    -> BadRequestError if empty
"""

import logging

from pydantic import ValidationError

from imgcache.api.schemas.transform import TransformRequestBody
from imgcache.config import ProcessingSettings
from imgcache.domain.dtos import TransformRequest
from imgcache.domain.exceptions import (
    BadRequestError,
    JsonDeserializeError,
)
from imgcache.domain.value_objects.image_format import ImageFormat

logger = logging.getLogger(__name__)


def _describe_validation_error(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        location = ".".join(str(p) for p in item.get("loc", ())) or "body"
        parts.append(f"{location}: {item.get('msg', 'invalid value')}")
    return "; ".join(parts)


def source_from_path(path: str, query: str = "") -> str:
    """Rebuild the source URL from the request path.

    ``POST /https://example.com/cat.png?w=1`` arrives as path
    ``/https://example.com/cat.png`` plus query ``w=1``.
    """
    source = path[1:] if path.startswith("/") else path
    if query:
        source = f"{source}?{query}"
    return source


def parse_transform_request(
    body: bytes,
    path_source: str,
    settings: ProcessingSettings | None = None,
) -> TransformRequest:
    """Validate a transform request.

    Args:
        body: Raw request body (must be a JSON transform descriptor)
        path_source: Source derived from the request path (see source_from_path)
        settings: Processing settings (size limit, default format)

    Raises:
        BadRequestError: body too large, not UTF-8, or empty source
        JsonDeserializeError: malformed JSON or schema violation
        UnsupportedFormatError: unknown output format
    """
    settings = settings or ProcessingSettings()

    if len(body) > settings.max_request_bytes:
        logger.debug(
            "Rejecting transform body of %d bytes (limit %d)",
            len(body),
            settings.max_request_bytes,
        )
        raise BadRequestError()

    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError as e:
        raise BadRequestError() from e

    try:
        descriptor = TransformRequestBody.model_validate_json(text)
    except ValidationError as e:
        raise JsonDeserializeError(_describe_validation_error(e)) from e

    if descriptor.format is None:
        fmt = settings.default_format
    else:
        fmt = ImageFormat.parse(descriptor.format)

    source = descriptor.source if descriptor.source is not None else path_source
    if not source:
        raise BadRequestError()

    return TransformRequest(
        source=source,
        tallest_side=descriptor.tallest_side,
        format=fmt,
    )
