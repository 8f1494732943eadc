"""Route group exports."""

from . import data, health, notifications

__all__ = ["health", "notifications", "data"]
