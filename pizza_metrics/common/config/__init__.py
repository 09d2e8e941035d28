"""Configuration for the metrics pipeline."""

from .config import Config

__all__ = ["Config"]
