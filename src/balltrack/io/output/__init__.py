from balltrack.io.output.display import DisplayCommand, DisplaySink
from balltrack.io.output.events import JsonEventSink

__all__ = ["DisplayCommand", "DisplaySink", "JsonEventSink"]
