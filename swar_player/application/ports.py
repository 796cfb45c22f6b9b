"""Application-level ports for the external media player and timers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Protocol

from ..domain.playback import PlayerState


@dataclass(frozen=True)
class MountTarget:
    """Surface a player attaches to; audio-only when no native window is given."""

    name: str
    window_id: int | None = None


class Scheduler(Protocol):
    """Cooperative timer source; a Tk widget satisfies this protocol."""

    def after(self, ms: int, func: Callable[[], None]) -> Any: ...

    def after_cancel(self, id: Any) -> None: ...


class PlayerListener(Protocol):
    """Receives notifications from an attached player, in emission order."""

    def on_ready(self) -> None: ...

    def on_state_change(self, state: PlayerState) -> None: ...

    def on_error(self, code: object) -> None: ...


class PlayerHandle(Protocol):
    """One attached player instance owned by a single controller."""

    def play(self) -> None: ...

    def pause(self) -> None: ...

    def mute(self) -> None: ...

    def unmute(self) -> None: ...

    def seek_to(self, seconds: float) -> None: ...

    def load_media(self, media_ref: str) -> None: ...

    def get_current_position_seconds(self) -> float: ...

    def get_duration_seconds(self) -> float: ...

    def destroy(self) -> None: ...


class PlayerBackend(Protocol):
    """The loaded player library: attaches independent handles to mount targets."""

    def attach(
        self,
        mount_target: Any,
        media_ref: str,
        options: dict[str, Any],
        listener: PlayerListener,
    ) -> PlayerHandle: ...


class PlayerAttachError(RuntimeError):
    """Raised when a player cannot be bound to its mount target."""
