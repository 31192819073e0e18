"""Test bit-depth generic sample storage and decibel conversion."""
import math

import pytest
import numpy as np

from wavloop.utils.types import SampleBuffer


@pytest.mark.parametrize(
    "width, dtype, full_scale",
    [(1, np.int8, 128), (2, np.int16, 32768), (4, np.int32, 2147483648)],
)
def test_from_bytes_widths(width, dtype, full_scale):
    """Test decoding signed little-endian samples of each width."""
    values = np.array([0, 1, -1, full_scale - 1, -full_scale], dtype=dtype)
    buffer = SampleBuffer.from_bytes(values.astype(f"<i{width}").tobytes(), width)

    assert len(buffer) == 5
    assert buffer.full_scale == full_scale
    np.testing.assert_array_equal(buffer.samples, values)


def test_from_bytes_24_bit():
    """Test that 3-byte samples are sign-extended."""
    raw = bytes([0x01, 0x00, 0x00, 0xFF, 0xFF, 0xFF, 0x00, 0x00, 0x80])
    buffer = SampleBuffer.from_bytes(raw, 3)

    assert buffer.samples.tolist() == [1, -1, -8388608]
    assert buffer.full_scale == 8388608
    assert buffer.to_bytes() == raw


def test_from_bytes_drops_partial_sample():
    """Test that a trailing partial sample is not decoded."""
    buffer = SampleBuffer.from_bytes(b"\x01\x00\x02\x00\x03", 2)

    assert buffer.samples.tolist() == [1, 2]


def test_from_bytes_empty():
    """Test decoding an empty data chunk."""
    buffer = SampleBuffer.from_bytes(b"", 2)

    assert len(buffer) == 0


def test_from_bytes_unsupported_width():
    """Test that undecodable widths are rejected."""
    with pytest.raises(ValueError):
        SampleBuffer.from_bytes(b"\x00" * 10, 0)
    with pytest.raises(ValueError):
        SampleBuffer.from_bytes(b"\x00" * 10, 5)


def test_to_bytes_slice():
    """Test re-encoding a slice in the native width."""
    values = np.array([10, -20, 30, -40], dtype=np.int16)
    buffer = SampleBuffer(samples=values, sample_width=2)

    assert buffer.to_bytes(1, 3) == values[1:3].astype("<i2").tobytes()
    assert buffer.to_bytes() == values.astype("<i2").tobytes()


def test_decibels_full_scale():
    """Test that full-scale samples sit at 0 dBFS."""
    buffer = SampleBuffer(samples=np.array([-32768, 16384], dtype=np.int16), sample_width=2)

    assert buffer.decibels(0) == pytest.approx(0.0)
    assert buffer.decibels(1) == pytest.approx(20 * math.log10(0.5))


def test_decibels_zero_sample_never_matches():
    """Test that silence yields -inf instead of raising."""
    buffer = SampleBuffer(samples=np.array([0, 5], dtype=np.int8), sample_width=1)

    level = buffer.decibels(0)

    assert level == -math.inf
    assert not level >= -200.0
    assert not level >= -6.0


@pytest.mark.parametrize("width", [1, 2, 4])
def test_decibels_monotonic(width):
    """Test that level increases with sample magnitude."""
    full_scale = 1 << (8 * width - 1)
    magnitudes = np.unique(np.linspace(1, full_scale - 1, 50).astype(np.int64))
    values = np.concatenate([magnitudes, -magnitudes]).astype(f"i{width}")
    buffer = SampleBuffer(samples=values, sample_width=width)

    levels = [buffer.decibels(i) for i in range(len(magnitudes))]
    negative_levels = [buffer.decibels(i) for i in range(len(magnitudes), len(values))]

    assert all(a < b for a, b in zip(levels, levels[1:]))
    assert levels == pytest.approx(negative_levels)


def test_decibels_most_negative_int8():
    """Test that the most negative sample does not overflow on abs()."""
    buffer = SampleBuffer(samples=np.array([-128], dtype=np.int8), sample_width=1)

    assert buffer.decibels(0) == pytest.approx(0.0)
    assert buffer.decibels_range(0, 1)[0] == pytest.approx(0.0)


def test_decibels_out_of_range():
    """Test that indices outside the buffer are an error."""
    buffer = SampleBuffer(samples=np.array([1, 2, 3], dtype=np.int16), sample_width=2)

    with pytest.raises(IndexError):
        buffer.decibels(3)
    with pytest.raises(IndexError):
        buffer.decibels(-1)


def test_decibels_range_matches_scalar():
    """Test that the vectorised form agrees with per-index levels."""
    values = np.array([0, 100, -2000, 32767, -5, 7, 12000], dtype=np.int16)
    buffer = SampleBuffer(samples=values, sample_width=2)

    levels = buffer.decibels_range(1, 7, 2)

    assert levels.tolist() == pytest.approx([buffer.decibels(i) for i in (1, 3, 5)])
    assert buffer.decibels_range(0, 1)[0] == -np.inf
