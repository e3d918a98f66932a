from balltrack.monitoring.logging import configure_logging, session_logger
from balltrack.monitoring.metrics import MetricsSnapshot, RuntimeMetrics
from balltrack.monitoring.stats import PeriodicStatsLogger, RuntimeIdentity

__all__ = [
    "configure_logging",
    "session_logger",
    "MetricsSnapshot",
    "RuntimeMetrics",
    "PeriodicStatsLogger",
    "RuntimeIdentity",
]
