"""Core extension pipeline orchestrator."""
import logging
from pathlib import Path

from wavloop.dsp.loop.finder import find_loop_points
from wavloop.dsp.loop.planner import plan_duration
from wavloop.io.wave.container import read_wave
from wavloop.io.wave.writer import write_extended
from wavloop.utils.timecode import extended_output_path, format_timestamp
from wavloop.utils.types import ExtendRequest

logger = logging.getLogger(__name__)


def resolve_output_path(request: ExtendRequest) -> Path:
    """Explicit output path, or the input path with the configured suffix."""
    if request.output_path is not None:
        return Path(request.output_path)
    return extended_output_path(request.input_path, request.config.output_suffix)


def extend_wave(request: ExtendRequest) -> dict:
    """
    Extend a WAVE file by repeating its loop segment.

    This orchestrates the full extension pipeline:
    1. Read and validate the input
    2. Find loop points around the requested timestamps
    3. Plan the number of repetitions
    4. Write the extended file (skipped for dry runs)

    Args:
        request: ExtendRequest with extension parameters

    Returns:
        Dictionary with loop points, plan, warnings and paths

    Raises:
        FileNotFoundError: If the input file doesn't exist
        FileExistsError: If the output exists and overwrite is not set
        WaveReadError: If the input cannot be read
        WaveWriteError: If the output cannot be written
        DegenerateLoopError: If the loop segment is empty
        LoopConfigError: If the header cannot drive the loop search
    """
    output_path = resolve_output_path(request)

    if output_path.exists() and not request.overwrite and not request.dry_run:
        raise FileExistsError(f"Output file already exists: {output_path}")

    # Step 1: Read input
    header, buffer, warnings = read_wave(request.input_path)

    # Step 2: Find loop points
    points = find_loop_points(
        buffer,
        request.loop_start_s,
        request.loop_end_s,
        byte_rate=header.byte_rate,
        num_channels=header.num_channels,
        threshold_db=request.config.threshold_db,
    )

    # Step 3: Plan repetitions
    plan = plan_duration(
        points,
        list_size=len(buffer),
        byte_rate=header.byte_rate,
        bytes_per_sample=header.bytes_per_sample,
        minutes=request.minutes,
    )

    # Step 4: Write output
    written = False
    if not request.dry_run:
        write_extended(output_path, header, buffer, points, plan)
        written = True

    samples_per_second = plan.samples_per_second
    start_s = points.start / samples_per_second
    end_s = points.end / samples_per_second

    return {
        "input_file": str(request.input_path),
        "output_file": str(output_path),
        "written": written,
        "found": points.found,
        "threshold_db": request.config.threshold_db,
        "loop_start": points.start,
        "loop_end": points.end,
        "loop_start_time": format_timestamp(start_s),
        "loop_end_time": format_timestamp(end_s),
        "loops": plan.loops,
        "total_samples": plan.total_samples,
        "data_size": plan.data_size,
        "original_duration_s": len(buffer) / samples_per_second,
        "extended_duration_s": plan.length_s,
        "warnings": warnings,
    }
