"""Desktop user interface."""

from .tkinter_app import SwarDesktopApp, describe_progress, describe_session

__all__ = ["SwarDesktopApp", "describe_progress", "describe_session"]
