"""API schemas for the transform endpoint."""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr

# tallestSide is an unsigned 32-bit integer on the wire
MAX_TALLEST_SIDE = 2**32 - 1


class TransformRequestBody(BaseModel):
    """Transform descriptor posted to ``/{source}``.

    ``format`` is kept as a raw string here; the validator resolves it
    against ImageFormat so an unknown format is a 422, not a schema error.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    tallest_side: Annotated[StrictInt, Field(ge=0, le=MAX_TALLEST_SIDE)] = Field(
        ...,
        alias="tallestSide",
        description="Target length of the longer image side in pixels",
    )
    format: StrictStr | None = Field(
        default=None, description="Output format: avif, heic, jxl or qoi"
    )
    source: StrictStr | None = Field(
        default=None,
        description="Source image URL; defaults to the request path",
    )


class TransformResponse(BaseModel):
    """Successful transform (fresh or from cache)."""

    status: Literal["TRANSFORMED", "ALREADY_TRANSFORMED"]
    hash: str = Field(..., description="SHA-256 hex digest of the source")
    filename: str = Field(..., description="Name of the transformed file")


class ErrorResponse(BaseModel):
    """Body of every error response."""

    status: Literal["ERROR"] = "ERROR"
    reason: str
