from .config import AppConfig, PlacementConfig, read_env
from .logging_config import configure_logging

__all__ = ["AppConfig", "PlacementConfig", "configure_logging", "read_env"]
