"""Small logging helpers shared by services."""

import logging
from typing import Any


# Yo, use this wherever a slow step is worth a warning but not an error. It
# only logs when duration_ms exceeds threshold_ms; grep for "operation.slow".
def log_slow_operation(
    logger: logging.Logger,
    operation: str,
    duration_ms: int,
    threshold_ms: int = 100,
    **context: Any,
) -> None:
    """Log warning if operation exceeded threshold.

    Args:
        logger: Logger instance
        operation: Operation name
        duration_ms: Actual operation duration
        threshold_ms: Threshold for "slow" (default: 100ms)
        **context: Additional fields (e.g., source, hash)

    Example:
        >>> log_slow_operation(
        ...     logger, "transform", 3120, threshold_ms=2000,
        ...     source="https://example.com/cat.png", format="avif"
        ... )
    """
    if duration_ms > threshold_ms:
        logger.warning(
            "operation.slow",
            extra={
                **context,
                "operation": operation,
                "duration_ms": duration_ms,
                "threshold_ms": threshold_ms,
            },
        )
