from dataclasses import dataclass, replace
from typing import Self
import math

import numpy as np
from pydantic import BaseModel, Field, field_validator, model_validator

from wavloop.utils.timecode import parse_timestamp


DEFAULT_THRESHOLD_DB = -6.0
HEADER_SIZE = 44

# Bytes between the RIFF size field and the end of the canonical header
RIFF_HEADER_OVERHEAD = 36


@dataclass(frozen=True)
class WaveHeader:
    chunk_id: bytes
    chunk_size: int
    format: bytes
    subchunk1_id: bytes
    subchunk1_size: int
    audio_format: int
    num_channels: int
    sample_rate: int
    byte_rate: int
    block_align: int
    bits_per_sample: int
    subchunk2_id: bytes
    subchunk2_size: int

    @property
    def bytes_per_sample(self) -> int:
        return self.bits_per_sample // 8

    def with_data_size(self, data_size: int) -> 'WaveHeader':
        """Return a copy whose size fields describe `data_size` bytes of samples."""
        return replace(
            self,
            subchunk2_size=data_size,
            chunk_size=data_size + RIFF_HEADER_OVERHEAD,
        )


@dataclass
class SampleBuffer:
    """Interleaved signed PCM samples of a single width."""
    samples: np.ndarray
    sample_width: int

    @classmethod
    def from_bytes(cls, raw: bytes, sample_width: int) -> 'SampleBuffer':
        """
        Decode little-endian signed PCM bytes.

        Args:
            raw: Sample bytes as stored in the data chunk
            sample_width: Bytes per sample (1 to 4)

        Returns:
            SampleBuffer holding one integer per sample

        Raises:
            ValueError: If the width cannot be decoded
        """
        if sample_width not in (1, 2, 3, 4):
            raise ValueError(f"Cannot decode samples {sample_width} bytes wide")

        # A trailing partial sample is not addressable
        usable = len(raw) - len(raw) % sample_width
        if usable == 0:
            dtype = np.int32 if sample_width == 3 else f"i{sample_width}"
            return cls(samples=np.zeros(0, dtype=dtype), sample_width=sample_width)

        data = np.frombuffer(raw, dtype=np.uint8, count=usable)

        if sample_width == 3:
            triples = data.reshape(-1, 3)
            # Sign-extend the most significant byte into a fourth byte
            sign = np.where(triples[:, 2] & 0x80, 0xFF, 0x00).astype(np.uint8)
            padded = np.column_stack([triples, sign])
            samples = padded.view("<i4").reshape(-1).astype(np.int32)
        else:
            samples = data.view(f"<i{sample_width}").astype(f"i{sample_width}")

        return cls(samples=samples, sample_width=sample_width)

    def __len__(self) -> int:
        return self.samples.shape[0]

    @property
    def full_scale(self) -> int:
        return 1 << (8 * self.sample_width - 1)

    def decibels(self, index: int) -> float:
        """
        Level of one sample in dB relative to full scale.

        A zero sample has no finite level and yields -inf.

        Raises:
            IndexError: If index is outside the buffer
        """
        if index < 0 or index >= len(self):
            raise IndexError(f"Sample index {index} out of range [0, {len(self)})")

        magnitude = abs(int(self.samples[index]))
        if magnitude == 0:
            return -math.inf
        return 20.0 * math.log10(magnitude / self.full_scale)

    def decibels_range(self, start: int, stop: int, step: int = 1) -> np.ndarray:
        """Vectorised `decibels` over samples[start:stop:step]."""
        # Widen first: abs() of the most negative int8/16/32 overflows in place
        magnitudes = np.abs(self.samples[start:stop:step].astype(np.float64))
        with np.errstate(divide="ignore"):
            return 20.0 * np.log10(magnitudes / self.full_scale)

    def to_bytes(self, start: int = 0, stop: int | None = None) -> bytes:
        """Encode samples[start:stop] back into their native width."""
        segment = self.samples[start:stop]
        if self.sample_width == 3:
            wide = segment.astype("<i4").view(np.uint8).reshape(-1, 4)
            return wide[:, :3].tobytes()
        return segment.astype(f"<i{self.sample_width}").tobytes()


@dataclass(frozen=True)
class LoopPoints:
    start: int
    end: int
    found: bool

    @property
    def length(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class LoopPlan:
    samples_per_second: int
    minutes: int
    loops: int
    total_samples: int
    bytes_per_sample: int

    @property
    def data_size(self) -> int:
        return self.total_samples * self.bytes_per_sample

    @property
    def chunk_size(self) -> int:
        return self.data_size + RIFF_HEADER_OVERHEAD

    @property
    def length_s(self) -> float:
        return self.total_samples / self.samples_per_second


class LoopConfig(BaseModel):
    """Configuration for loop detection and output naming."""
    threshold_db: float = Field(
        default=DEFAULT_THRESHOLD_DB,
        le=0.0,
        description="Level in dBFS a sample must reach to mark a loop point",
    )
    output_suffix: str = Field(
        default="-EXTENDED",
        min_length=1,
        description="Inserted before the extension of the output file name",
    )


class ExtendRequest(BaseModel):
    input_path: str
    output_path: str | None = None

    minutes: int = Field(ge=1, description="Target length of the output in whole minutes.")
    loop_start: str = Field(description="Rough loop start as [[MM:]SS[.frac]]")
    loop_end: str = Field(description="Rough loop end as [[MM:]SS[.frac]]")

    config: LoopConfig = Field(default_factory=LoopConfig)

    dry_run: bool = False
    overwrite: bool = False

    @field_validator("loop_start", "loop_end")
    @classmethod
    def check_timestamp(cls, value: str) -> str:
        parse_timestamp(value)
        return value

    @model_validator(mode="after")
    def check_paths(self) -> Self:
        if self.output_path is not None and self.output_path == self.input_path:
            raise ValueError("output_path must differ from input_path")
        return self

    @property
    def loop_start_s(self) -> float:
        return parse_timestamp(self.loop_start)

    @property
    def loop_end_s(self) -> float:
        return parse_timestamp(self.loop_end)
