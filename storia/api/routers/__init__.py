"""API routers for Storia."""

from . import generation

__all__ = ["generation"]
