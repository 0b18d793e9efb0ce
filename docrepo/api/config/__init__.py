"""Configuration models."""

from .DocRepoConfig import DocRepoConfig
from .LogConfig import LogConfig

__all__ = ["DocRepoConfig", "LogConfig"]
