"""Canonical 44-byte RIFF/WAVE header handling."""
import logging
import struct
from pathlib import Path

from wavloop.utils.errors import WaveReadError
from wavloop.utils.types import HEADER_SIZE, SampleBuffer, WaveHeader

logger = logging.getLogger(__name__)

# Field order of the canonical PCM header, little-endian
HEADER_FORMAT = "<4sI4s4sIHHIIHH4sI"

SUPPORTED_BITS_PER_SAMPLE = (8, 16, 32)


def parse_header(data: bytes) -> WaveHeader:
    """
    Parse the first 44 bytes of a WAVE stream.

    Raises:
        WaveReadError: If fewer than 44 bytes are available
    """
    if len(data) < HEADER_SIZE:
        raise WaveReadError(
            f"Stream too short for a WAVE header: {len(data)} of {HEADER_SIZE} bytes"
        )
    return WaveHeader(*struct.unpack(HEADER_FORMAT, data[:HEADER_SIZE]))


def parse_wave(data: bytes) -> tuple[WaveHeader, bytes]:
    """
    Split a WAVE stream into its header and sample bytes.

    Args:
        data: Complete file contents

    Returns:
        Tuple of (header, sample_bytes) where sample_bytes holds exactly
        subchunk2_size bytes

    Raises:
        WaveReadError: If the header is incomplete or the data chunk is
            shorter than subchunk2_size announces
    """
    header = parse_header(data)
    payload = data[HEADER_SIZE:]

    if len(payload) < header.subchunk2_size:
        raise WaveReadError(
            f"Data chunk truncated: expected {header.subchunk2_size} bytes, "
            f"found {len(payload)}"
        )
    if len(payload) > header.subchunk2_size:
        logger.debug(
            "Ignoring %d bytes after the data chunk",
            len(payload) - header.subchunk2_size,
        )

    return header, payload[:header.subchunk2_size]


def validate_header(header: WaveHeader) -> list[str]:
    """
    Check the header for unexpected tags and bit depths.

    None of the findings are fatal; the parsed values are used as-is.

    Returns:
        One warning string per failed check
    """
    warnings = []
    if header.chunk_id != b"RIFF":
        warnings.append("ChunkID is not 'RIFF'")
    if header.format != b"WAVE":
        warnings.append("Format is not 'WAVE'")
    if header.subchunk1_id != b"fmt ":
        warnings.append("SubChunk1ID is not 'fmt '")
    if header.subchunk2_id != b"data":
        warnings.append("SubChunk2ID is not 'data'")
    if header.bits_per_sample not in SUPPORTED_BITS_PER_SAMPLE:
        warnings.append("BitsPerSample is not 8, 16, or 32")
    return warnings


def serialize_header(header: WaveHeader) -> bytes:
    """Pack a header back into its 44-byte form."""
    return struct.pack(
        HEADER_FORMAT,
        header.chunk_id,
        header.chunk_size,
        header.format,
        header.subchunk1_id,
        header.subchunk1_size,
        header.audio_format,
        header.num_channels,
        header.sample_rate,
        header.byte_rate,
        header.block_align,
        header.bits_per_sample,
        header.subchunk2_id,
        header.subchunk2_size,
    )


def read_wave(file_path: str | Path) -> tuple[WaveHeader, SampleBuffer, list[str]]:
    """
    Load a WAVE file fully into memory.

    Args:
        file_path: Path to the WAVE file

    Returns:
        Tuple of (header, buffer, warnings)

    Raises:
        FileNotFoundError: If the file doesn't exist
        WaveReadError: If the file cannot be read or is truncated
        ValueError: If the sample width cannot be decoded
    """
    path = Path(file_path)

    if not path.exists():
        raise FileNotFoundError(f"Audio file not found: {path}")

    try:
        with open(path, "rb") as f:
            data = f.read()
    except OSError as e:
        raise WaveReadError(f"Could not read {path}: {e}") from e

    header, raw = parse_wave(data)

    warnings = validate_header(header)
    for warning in warnings:
        logger.warning("%s: %s", path.name, warning)

    buffer = SampleBuffer.from_bytes(raw, header.bytes_per_sample)
    if len(raw) % header.bytes_per_sample:
        warning = f"Data size {len(raw)} is not a multiple of {header.bytes_per_sample} bytes"
        logger.warning("%s: %s", path.name, warning)
        warnings.append(warning)

    logger.debug(
        "Read %s: %d samples, %d channel(s), %d-bit",
        path.name,
        len(buffer),
        header.num_channels,
        header.bits_per_sample,
    )
    return header, buffer, warnings
