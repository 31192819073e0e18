"""Loop point detection by decibel threshold."""
import logging
from enum import Enum

import numpy as np

from wavloop.utils.errors import LoopConfigError
from wavloop.utils.types import DEFAULT_THRESHOLD_DB, LoopPoints, SampleBuffer

logger = logging.getLogger(__name__)

# Samples examined per vectorised step of the scan
SCAN_CHUNK = 1 << 16


class SearchPhase(Enum):
    SEARCHING_START = "searching_start"
    SEARCHING_END = "searching_end"


def hint_to_index(
    seconds: float,
    byte_rate: int,
    bytes_per_sample: int,
    num_channels: int,
) -> int:
    """
    Convert a timestamp to the sample index of the frame it falls in.

    The index is snapped down to channel 0 of its frame so that a stride of
    `num_channels` keeps examining the same channel.
    """
    index = int(seconds * byte_rate / bytes_per_sample)
    return index - index % num_channels


def search_bounds(
    list_size: int,
    start_index: int,
    end_index: int,
) -> tuple[int, int]:
    """Clamp start into [0, list_size/2] and end into [list_size/2, list_size]."""
    half = list_size // 2
    start = min(max(start_index, 0), half)
    end = min(max(end_index, half), list_size)
    return start, end


def first_crossing(
    buffer: SampleBuffer,
    start: int,
    step: int,
    threshold_db: float,
) -> int | None:
    """
    Find the first index at or after `start`, stepping by `step`, whose level
    reaches `threshold_db`.

    Returns:
        The sample index, or None if no sample reaches the threshold
    """
    list_size = len(buffer)
    chunk_span = SCAN_CHUNK * step

    for chunk_start in range(start, list_size, chunk_span):
        chunk_stop = min(chunk_start + chunk_span, list_size)
        levels = buffer.decibels_range(chunk_start, chunk_stop, step)
        # -inf (silence) never reaches a finite threshold
        hits = np.flatnonzero(levels >= threshold_db)
        if hits.size:
            return chunk_start + int(hits[0]) * step

    return None


def find_loop_points(
    buffer: SampleBuffer,
    start_hint_s: float,
    end_hint_s: float,
    byte_rate: int,
    num_channels: int,
    threshold_db: float = DEFAULT_THRESHOLD_DB,
) -> LoopPoints:
    """
    Locate a loop segment around two rough timestamps.

    The scan walks channel 0 of each frame from the start hint. A sample
    reaching the threshold in the first half of the buffer becomes the loop
    start, and the scan resumes at the end hint. A sample reaching it in the
    second half becomes the loop end and finishes the search.

    Args:
        buffer: Decoded samples
        start_hint_s: Rough loop start in seconds
        end_hint_s: Rough loop end in seconds
        byte_rate: Bytes per second of the stream (all channels)
        num_channels: Interleaved channel count, used as the scan stride
        threshold_db: Level in dBFS that marks a loop point

    Returns:
        LoopPoints with found=True on success, otherwise the clamped hint
        positions with found=False

    Raises:
        LoopConfigError: If num_channels or byte_rate cannot drive the scan
    """
    if num_channels <= 0:
        raise LoopConfigError(f"Channel count must be positive, got {num_channels}")
    if byte_rate <= 0:
        raise LoopConfigError(f"Byte rate must be positive, got {byte_rate}")

    list_size = len(buffer)
    half = list_size // 2

    start, end = search_bounds(
        list_size,
        hint_to_index(start_hint_s, byte_rate, buffer.sample_width, num_channels),
        hint_to_index(end_hint_s, byte_rate, buffer.sample_width, num_channels),
    )
    logger.debug("Searching loop points from %d and %d of %d samples", start, end, list_size)

    phase = SearchPhase.SEARCHING_START
    loop_start = start
    cursor = start

    while True:
        hit = first_crossing(buffer, cursor, num_channels, threshold_db)
        if hit is None:
            logger.warning(
                "Unable to find exact looping point at %.1f dB; using %d-%d",
                threshold_db,
                start,
                end,
            )
            return LoopPoints(start=start, end=end, found=False)

        if phase is SearchPhase.SEARCHING_START and hit < half:
            loop_start = hit
            phase = SearchPhase.SEARCHING_END
            cursor = end
            continue

        logger.info("Found loop points %d-%d", loop_start, hit)
        return LoopPoints(start=loop_start, end=hit, found=True)
