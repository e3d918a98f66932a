class BalltrackError(RuntimeError):
    """Base class for balltrack errors."""


class MalformedPredictionError(BalltrackError):
    """Raised when a prediction array has an unexpected shape or content."""


class PredictorUnavailable(BalltrackError):
    """Raised when a requested predictor cannot run in this environment."""


class ModelLoadError(BalltrackError):
    """Raised when model files are missing or unsupported."""


class ConfigError(BalltrackError, ValueError):
    """Raised when a configuration value is out of range."""


class SourceUnavailable(BalltrackError):
    """Raised when a frame source cannot be opened."""
