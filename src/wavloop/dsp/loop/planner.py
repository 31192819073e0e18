"""Loop repetition planning."""
import logging

from wavloop.utils.errors import DegenerateLoopError
from wavloop.utils.types import RIFF_HEADER_OVERHEAD, LoopPlan, LoopPoints

logger = logging.getLogger(__name__)

# Largest data chunk whose RIFF chunk_size still fits in 32 bits
MAX_DATA_SIZE = 0xFFFFFFFF - RIFF_HEADER_OVERHEAD


def plan_duration(
    points: LoopPoints,
    list_size: int,
    byte_rate: int,
    bytes_per_sample: int,
    minutes: int,
) -> LoopPlan:
    """
    Work out how often the loop segment must repeat to last `minutes`.

    The output keeps the samples before and after the segment and plays the
    segment `loops` times in between, where `loops` is the smallest
    non-negative count that reaches the requested length.

    Args:
        points: Loop segment boundaries
        list_size: Total number of samples in the input
        byte_rate: Bytes per second of the stream (all channels)
        bytes_per_sample: Width of one sample in bytes
        minutes: Requested output length

    Returns:
        LoopPlan with the repetition count and resulting sizes

    Raises:
        DegenerateLoopError: If the loop segment is empty
        ValueError: If the stream parameters are invalid or the result does
            not fit a WAVE file
    """
    if points.end <= points.start:
        raise DegenerateLoopError(
            f"Loop segment {points.start}-{points.end} is empty; "
            "choose loop times further apart"
        )
    if bytes_per_sample <= 0:
        raise ValueError(f"Invalid bytes per sample: {bytes_per_sample}")
    if minutes < 0:
        raise ValueError(f"Minutes must not be negative: {minutes}")

    samples_per_second = byte_rate // bytes_per_sample
    if samples_per_second <= 0:
        raise ValueError(f"Invalid byte rate: {byte_rate}")

    segment = points.end - points.start
    base_count = points.start + (list_size - points.end)
    target = samples_per_second * 60 * minutes

    shortfall = target - base_count
    loops = max(0, -(-shortfall // segment))
    total_samples = base_count + loops * segment

    plan = LoopPlan(
        samples_per_second=samples_per_second,
        minutes=minutes,
        loops=loops,
        total_samples=total_samples,
        bytes_per_sample=bytes_per_sample,
    )
    if plan.data_size > MAX_DATA_SIZE:
        raise ValueError(
            f"Extended audio needs {plan.data_size} bytes, "
            f"more than a WAVE file can hold ({MAX_DATA_SIZE})"
        )

    logger.debug(
        "Planned %d loops of %d samples: %d samples total",
        loops,
        segment,
        total_samples,
    )
    return plan
