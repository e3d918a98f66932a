from balltrack.config.loader import load_runtime_config, runtime_config_to_dict
from balltrack.config.models import RuntimeConfig

__all__ = ["RuntimeConfig", "load_runtime_config", "runtime_config_to_dict"]
