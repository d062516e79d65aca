"""Application services."""

from imgcache.application.services.request_validator import (
    parse_transform_request,
    source_from_path,
)
from imgcache.application.services.single_flight import InFlightRegistry
from imgcache.application.services.transform import TransformService

__all__ = [
    "InFlightRegistry",
    "TransformService",
    "parse_transform_request",
    "source_from_path",
]
