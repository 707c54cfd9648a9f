"""Terminal presentation for MediaMuse."""

from .console import ConsoleView

__all__ = ["ConsoleView"]
