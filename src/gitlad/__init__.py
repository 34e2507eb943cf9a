"""Forge integration core for the gitlad git porcelain."""

from .exceptions import GitladError

__version__ = "0.1.0"

__all__ = ["GitladError", "__version__"]
