"""Persistence adapters."""

from .care_repository import CareRepository

__all__ = ["CareRepository"]
