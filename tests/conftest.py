"""Shared test fixtures."""
import struct

import numpy as np
import pytest

from wavloop.utils.types import SampleBuffer


def make_wave_bytes(
    samples: np.ndarray,
    sample_rate: int = 8000,
    channels: int = 1,
    bits_per_sample: int = 16,
) -> bytes:
    """Build a canonical 44-byte-header WAVE file around interleaved samples."""
    width = bits_per_sample // 8
    data = np.asarray(samples).astype(f"<i{width}").tobytes()
    header = struct.pack(
        "<4sI4s4sIHHIIHH4sI",
        b"RIFF",
        36 + len(data),
        b"WAVE",
        b"fmt ",
        16,
        1,
        channels,
        sample_rate,
        sample_rate * channels * width,
        channels * width,
        bits_per_sample,
        b"data",
        len(data),
    )
    return header + data


@pytest.fixture
def write_wave(tmp_path):
    """Write a WAVE file into tmp_path and return its path."""
    def _write(samples, name="loop.wav", **kwargs):
        path = tmp_path / name
        path.write_bytes(make_wave_bytes(samples, **kwargs))
        return path

    return _write


@pytest.fixture
def quiet_samples():
    """16-bit mono samples that stay well below -6 dBFS everywhere."""
    rng = np.random.default_rng(0)
    return rng.integers(-1000, 1000, size=100000).astype(np.int16)


@pytest.fixture
def transient_samples():
    """16-bit mono samples with loud transients at 40 and 70000."""
    samples = np.full(100000, 100, dtype=np.int16)
    samples[20000] = 30000  # between the start hint and the end hint, skipped
    samples[40] = -30000
    samples[70000] = 30000
    return samples


@pytest.fixture
def transient_buffer(transient_samples):
    return SampleBuffer(samples=transient_samples, sample_width=2)


@pytest.fixture
def stereo_loop_samples():
    """Stereo 16-bit samples, 4 s at 8 kHz, with transients on the left channel."""
    frames = 32000
    t = np.arange(frames) / 8000
    left = (2000 * np.sin(2 * np.pi * 220 * t)).astype(np.int16)
    right = (2000 * np.sin(2 * np.pi * 330 * t)).astype(np.int16)
    left[4000] = 32000  # 0.5 s
    left[24000] = 32000  # 3.0 s
    right[2000] = 32000  # right channel only, never scanned
    return np.column_stack([left, right]).reshape(-1)
