"""Command line interface for celsweep."""

from .main import app

__all__ = ["app"]
