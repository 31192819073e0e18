"""Header inspection for WAVE files."""
from pathlib import Path

from wavloop.io.wave.container import read_wave


def inspect_wave(file_path: str | Path) -> dict:
    """
    Read a WAVE file and summarise its header.

    Args:
        file_path: Path to the WAVE file

    Returns:
        Dictionary with the header fields, warnings, sample count and duration

    Raises:
        FileNotFoundError: If file doesn't exist
        WaveReadError: If the file is truncated
    """
    header, buffer, warnings = read_wave(file_path)

    samples_per_second = header.byte_rate // header.bytes_per_sample if header.bytes_per_sample else 0
    duration_s = len(buffer) / samples_per_second if samples_per_second else 0.0

    return {
        "input_file": str(file_path),
        "header": {
            "chunk_id": header.chunk_id.decode("latin-1"),
            "chunk_size": header.chunk_size,
            "format": header.format.decode("latin-1"),
            "subchunk1_id": header.subchunk1_id.decode("latin-1"),
            "subchunk1_size": header.subchunk1_size,
            "audio_format": header.audio_format,
            "num_channels": header.num_channels,
            "sample_rate": header.sample_rate,
            "byte_rate": header.byte_rate,
            "block_align": header.block_align,
            "bits_per_sample": header.bits_per_sample,
            "subchunk2_id": header.subchunk2_id.decode("latin-1"),
            "subchunk2_size": header.subchunk2_size,
        },
        "sample_count": len(buffer),
        "duration_s": duration_s,
        "warnings": warnings,
    }
