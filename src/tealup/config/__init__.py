"""Configuration loading for tealup."""

from tealup.config.loader import load_config
from tealup.config.models import TealupConfig

__all__ = ["load_config", "TealupConfig"]
