"""Data transfer objects passed between the API, the pipeline and the cache.

Flow: HTTP body → TransformRequest → TransformService → TransformResult → JSON
"""

from dataclasses import dataclass, field
from enum import Enum

from imgcache.domain.value_objects.image_format import ImageFormat


@dataclass(frozen=True)
class TransformRequest:
    """A validated transform request.

    Only the request validator builds these - by the time you hold one, the
    format is known-good and the source is non-empty.
    """

    source: str
    tallest_side: int
    format: ImageFormat


class TransformStatus(str, Enum):
    """Outcome of a successful transform request."""

    TRANSFORMED = "TRANSFORMED"
    ALREADY_TRANSFORMED = "ALREADY_TRANSFORMED"


@dataclass(frozen=True)
class StageTiming:
    """Wall-clock duration of one pipeline stage."""

    step: str
    duration_ms: float


# Hey future me - these names show up in the log table and as the "step" label
# of the stage duration metric. Keep them stable, dashboards depend on them!
STEP_DOWNLOADING = "Downloading"
STEP_DECODING = "Decoding"
STEP_RESIZING = "Resizing"
STEP_ENCODING = "Encoding"
STEP_SAVING = "Saving"


@dataclass
class PipelineMetrics:
    """Per-stage timings of one pipeline run, in execution order.

    Observability only - nothing makes decisions based on these values.
    """

    stages: list[StageTiming] = field(default_factory=list)

    def record(self, step: str, duration_ms: float) -> None:
        self.stages.append(StageTiming(step=step, duration_ms=duration_ms))

    def prepend(self, step: str, duration_ms: float) -> None:
        self.stages.insert(0, StageTiming(step=step, duration_ms=duration_ms))

    def extend(self, other: "PipelineMetrics") -> None:
        self.stages.extend(other.stages)

    @property
    def steps(self) -> list[str]:
        return [stage.step for stage in self.stages]

    @property
    def total_ms(self) -> float:
        return sum(stage.duration_ms for stage in self.stages)

    def to_table(self) -> str:
        """Render as a small fixed-width table for the completion log line."""
        width = max([len("step"), *(len(s.step) for s in self.stages)])
        lines = [f"{'step':<{width}} │ duration_ms", f"{'─' * width}─┼─{'─' * 11}"]
        for stage in self.stages:
            lines.append(f"{stage.step:<{width}} │ {stage.duration_ms:>11.3f}")
        return "\n".join(lines)


@dataclass(frozen=True)
class TransformResult:
    """What the orchestrator hands back to the API layer."""

    status: TransformStatus
    hash: str
    filename: str
    metrics: PipelineMetrics | None = None

    def to_response(self) -> dict[str, str]:
        return {
            "status": self.status.value,
            "hash": self.hash,
            "filename": self.filename,
        }


__all__ = [
    "STEP_DECODING",
    "STEP_DOWNLOADING",
    "STEP_ENCODING",
    "STEP_RESIZING",
    "STEP_SAVING",
    "PipelineMetrics",
    "StageTiming",
    "TransformRequest",
    "TransformResult",
    "TransformStatus",
]
