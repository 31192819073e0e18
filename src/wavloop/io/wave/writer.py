"""Extended WAVE file writing."""
import logging
import os
import tempfile
from pathlib import Path

from wavloop.io.wave.container import serialize_header
from wavloop.utils.errors import WaveWriteError
from wavloop.utils.types import LoopPlan, LoopPoints, SampleBuffer, WaveHeader

logger = logging.getLogger(__name__)


def _default_file_mode() -> int:
    """Permission bits a plain open() would give a new file under the current umask."""
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def write_extended(
    output_path: str | Path,
    header: WaveHeader,
    buffer: SampleBuffer,
    points: LoopPoints,
    plan: LoopPlan,
) -> Path:
    """
    Write the input audio with its loop segment repeated.

    The file holds the updated header, samples before the loop, `plan.loops`
    copies of the loop segment, then the samples after it. It is assembled
    in a temporary file next to `output_path` and moved into place once
    complete, so a failed write leaves nothing behind.

    Args:
        output_path: Destination path
        header: Header of the input file
        buffer: Decoded input samples
        points: Loop segment boundaries
        plan: Repetition count and resulting sizes

    Returns:
        Path of the written file

    Raises:
        WaveWriteError: If the file cannot be created or fully written
    """
    path = Path(output_path)
    out_header = header.with_data_size(plan.data_size)

    prefix = buffer.to_bytes(0, points.start)
    segment = buffer.to_bytes(points.start, points.end)
    suffix = buffer.to_bytes(points.end, len(buffer))

    expected = len(prefix) + plan.loops * len(segment) + len(suffix)
    if expected != plan.data_size:
        raise WaveWriteError(
            f"Planned {plan.data_size} data bytes but segments add up to {expected}"
        )

    tmp_name = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            dir=path.parent,
            prefix=f".{path.stem}-",
            suffix=".part",
            delete=False,
        ) as f:
            tmp_name = f.name
            f.write(serialize_header(out_header))
            f.write(prefix)
            for _ in range(plan.loops):
                f.write(segment)
            f.write(suffix)
        # NamedTemporaryFile creates 0600 files
        os.chmod(tmp_name, _default_file_mode())
        os.replace(tmp_name, path)
    except OSError as e:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise WaveWriteError(f"Failed to write audio file {path}: {e}") from e

    logger.info(
        "Wrote %s: %d samples (%d loop repetitions)",
        path,
        plan.total_samples,
        plan.loops,
    )
    return path
