# file: agentstudio/agentstudio/config/__init__.py
from .config import StudioConfig, load_config

__all__ = [
    "StudioConfig",
    "load_config",
]
