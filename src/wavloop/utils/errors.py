"""Exceptions raised by wavloop."""


class WavloopError(Exception):
    """Base exception for wavloop errors"""
    pass


class WaveReadError(WavloopError, OSError):
    """Raised when a WAVE file is too short or its data chunk is truncated"""
    pass


class WaveWriteError(WavloopError, OSError):
    """Raised when the extended file cannot be created or fully written"""
    pass


class DegenerateLoopError(WavloopError, ValueError):
    """Raised when the loop segment is empty and can never extend the audio"""
    pass


class LoopConfigError(WavloopError, ValueError):
    """Raised when the loop search cannot run with the given stream layout"""
    pass
