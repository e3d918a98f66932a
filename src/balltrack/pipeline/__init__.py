from balltrack.pipeline.render import DrawCommands, draw
from balltrack.pipeline.scheduler import (
    FrameScheduler,
    SchedulerState,
    TickAction,
    TickReport,
)

__all__ = [
    "DrawCommands",
    "FrameScheduler",
    "SchedulerState",
    "TickAction",
    "TickReport",
    "draw",
]
