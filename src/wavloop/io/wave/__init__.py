"""WAVE container I/O module."""
from wavloop.io.wave.container import (
    parse_header,
    parse_wave,
    read_wave,
    serialize_header,
    validate_header,
)
from wavloop.io.wave.writer import write_extended

__all__ = [
    "parse_header",
    "parse_wave",
    "read_wave",
    "serialize_header",
    "validate_header",
    "write_extended",
]
