"""Loop detection and planning module."""
from wavloop.dsp.loop.finder import find_loop_points
from wavloop.dsp.loop.planner import plan_duration

__all__ = [
    "find_loop_points",
    "plan_duration",
]
