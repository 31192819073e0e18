"""Timestamp parsing and output naming helpers."""
import math
from pathlib import Path


def parse_timestamp(text: str) -> float:
    """
    Convert a `[[MM:]SS[.frac]]` timestamp to seconds.

    Without a colon the whole string is seconds. An empty string (or an empty
    side of the colon) counts as zero.

    Examples:
        "75" -> 75.0
        "1:15.5" -> 75.5
        "" -> 0.0

    Raises:
        ValueError: If the text is not a valid, non-negative timestamp
    """
    text = text.strip()
    minutes_part, _, seconds_part = text.rpartition(":")

    try:
        minutes = int(minutes_part) if minutes_part else 0
        seconds = float(seconds_part) if seconds_part else 0.0
    except ValueError as e:
        raise ValueError(f"Invalid timestamp {text!r}, expected [[MM:]SS[.frac]]") from e

    if not math.isfinite(seconds):
        raise ValueError(f"Timestamp must be finite: {text!r}")

    if minutes < 0 or seconds < 0:
        raise ValueError(f"Timestamp must not be negative: {text!r}")

    return minutes * 60 + seconds


def format_timestamp(seconds: float) -> str:
    """Format seconds as M:SS.ffffff."""
    minutes, rest = divmod(seconds, 60.0)
    return f"{int(minutes)}:{rest:09.6f}"


def extended_output_path(path: str | Path, suffix: str = "-EXTENDED") -> Path:
    """
    Insert `suffix` right before the file extension.

    Example: song.wav -> song-EXTENDED.wav

    Raises:
        ValueError: If the path has no extension
    """
    path = Path(path)
    if not path.suffix:
        raise ValueError(f"Path has no filename extension: {path}")
    return path.with_name(f"{path.stem}{suffix}{path.suffix}")
