"""Application layer orchestration."""

from .care_service import CareService
from .playback_controller import PlaybackController
from .players import DailyListeningPlayer, HeroBackgroundPlayer, RagaExplorerPlayer
from .ports import (
    MountTarget,
    PlayerAttachError,
    PlayerBackend,
    PlayerHandle,
    PlayerListener,
    Scheduler,
)

__all__ = [
    "CareService",
    "DailyListeningPlayer",
    "HeroBackgroundPlayer",
    "MountTarget",
    "PlaybackController",
    "PlayerAttachError",
    "PlayerBackend",
    "PlayerHandle",
    "PlayerListener",
    "RagaExplorerPlayer",
    "Scheduler",
]
