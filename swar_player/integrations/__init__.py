"""External player integrations."""

from .player_library import PlayerLibrary, Subscription, get_player_library, reset_player_library
from .vlc_player import VlcPlayerBackend, VlcPlayerHandle, resolve_media_uri

__all__ = [
    "PlayerLibrary",
    "Subscription",
    "VlcPlayerBackend",
    "VlcPlayerHandle",
    "get_player_library",
    "reset_player_library",
    "resolve_media_uri",
]
