"""Mockfinity backend package."""

from .backend import Backend
from .constants import APP_NAME
from .models import GeneratedImage

__all__ = ["Backend", "GeneratedImage", "APP_NAME"]
