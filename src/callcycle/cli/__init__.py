"""Command-line interface for callcycle."""

from .main import main

__all__ = ["main"]
