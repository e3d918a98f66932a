from balltrack.io.ingest.base import FrameSource
from balltrack.io.ingest.opencv_ingest import OpenCVFrameSource

__all__ = ["FrameSource", "OpenCVFrameSource"]
