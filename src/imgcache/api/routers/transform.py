"""Transform endpoint.

    POST /https://example.com/cat.png
    {"tallestSide": 800, "format": "qoi"}

    200 {"status": "TRANSFORMED", "hash": "<sha256>", "filename": "<sha256>_800.qoi"}

The source comes from the body's "source" field if present, otherwise from
the request path exactly as sent (still percent-encoded, query string
included).
"""

import logging

from fastapi import APIRouter, Depends, Request

from imgcache.api.dependencies import get_app_settings, get_transform_service
from imgcache.api.schemas.transform import ErrorResponse, TransformResponse
from imgcache.application.services.request_validator import (
    parse_transform_request,
    source_from_path,
)
from imgcache.application.services.transform import TransformService
from imgcache.config import Settings
from imgcache.domain.exceptions import BadRequestError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Transform"])


def raw_path_source(request: Request) -> str:
    """Source as the client sent it, before any percent-decoding.

    Starlette decodes the route path, which would turn an escaped ``%2F``
    into a real ``/`` and change both the download URL and the cache key.
    """
    raw_path = request.scope.get("raw_path")
    if raw_path is not None:
        # some ASGI servers leave the query string on raw_path
        path = raw_path.decode("latin-1").split("?", 1)[0]
    else:
        path = request.url.path
    query = request.scope.get("query_string", b"").decode("latin-1")
    return source_from_path(path, query)


async def read_limited_body(request: Request, limit: int) -> bytes:
    """Read the request body, giving up as soon as it exceeds ``limit`` bytes.

    Raises:
        BadRequestError: body larger than ``limit``
    """
    chunks: list[bytes] = []
    size = 0
    async for chunk in request.stream():
        size += len(chunk)
        if size > limit:
            raise BadRequestError()
        chunks.append(chunk)
    return b"".join(chunks)


@router.post(
    "/{source:path}",
    response_model=TransformResponse,
    responses={
        400: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
)
async def transform_image(
    source: str,
    request: Request,
    service: TransformService = Depends(get_transform_service),
    settings: Settings = Depends(get_app_settings),
) -> TransformResponse:
    """Transform the source image, or report that it already was."""
    processing = settings.processing
    body = await read_limited_body(request, processing.max_request_bytes)

    path_source = raw_path_source(request)
    transform_request = parse_transform_request(body, path_source, processing)

    result = await service.transform(transform_request)
    return TransformResponse(**result.to_response())
