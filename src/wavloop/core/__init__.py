"""Core module."""
from wavloop.core.analyzer import inspect_wave
from wavloop.core.extender import extend_wave

__all__ = ["inspect_wave", "extend_wave"]
