"""Configuration."""

from .settings import Settings, default_data_dir

__all__ = [
    "Settings",
    "default_data_dir",
]
