"""Playback session data model shared by the controller and hosting views."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterator


class PlaybackState(str, Enum):
    """Controller-side state of one playback session."""

    UNSTARTED = "unstarted"
    READY = "ready"
    PLAYING = "playing"
    PAUSED = "paused"
    ENDED = "ended"
    ERROR = "error"


class PlayerState(int, Enum):
    """State codes reported by the external player's change notifications."""

    UNSTARTED = -1
    ENDED = 0
    PLAYING = 1
    PAUSED = 2
    BUFFERING = 3
    CUED = 5


# Once attached, a session accepts seeks in any of these states.
SEEKABLE_STATES = frozenset(
    {PlaybackState.READY, PlaybackState.PLAYING, PlaybackState.PAUSED, PlaybackState.ENDED}
)


@dataclass(frozen=True)
class LoopWindow:
    start_seconds: float
    end_seconds: float

    def __post_init__(self) -> None:
        if self.start_seconds < 0:
            raise ValueError("Loop window start must not be negative.")
        if self.end_seconds <= self.start_seconds:
            raise ValueError("Loop window end must be greater than its start.")

    def contains(self, position_seconds: float) -> bool:
        return self.start_seconds <= position_seconds < self.end_seconds


@dataclass(frozen=True)
class PlaybackConfig:
    initial_media_ref: str
    autoplay: bool = False
    muted: bool = False
    loop_window: LoopWindow | None = None
    poll_interval_ms: int = 100
    show_controls: bool = False
    autoplay_on_switch: bool = True


@dataclass
class PlaybackSession:
    media_ref: str
    state: PlaybackState = PlaybackState.UNSTARTED
    position_seconds: float = 0.0
    duration_seconds: float = 0.0
    is_muted: bool = False
    loop_window: LoopWindow | None = None

    def progress_fraction(self) -> float:
        if self.duration_seconds <= 0:
            return 0.0
        return max(0.0, min(1.0, self.position_seconds / self.duration_seconds))

    def copy(self) -> "PlaybackSession":
        return replace(self)


@dataclass(frozen=True)
class ProgressEntry:
    position_seconds: float = 0.0
    duration_seconds: float = 0.0

    @property
    def fraction(self) -> float:
        if self.duration_seconds <= 0:
            return 0.0
        return max(0.0, min(1.0, self.position_seconds / self.duration_seconds))


@dataclass
class ProgressCache:
    """Last observed position and duration per media item.

    Entries are never evicted; the set of playable items is a small fixed
    catalogue.
    """

    _entries: dict[str, ProgressEntry] = field(default_factory=dict)

    def get(self, media_ref: str) -> ProgressEntry | None:
        return self._entries.get(media_ref)

    def ensure(self, media_ref: str) -> ProgressEntry:
        entry = self._entries.get(media_ref)
        if entry is None:
            entry = ProgressEntry()
            self._entries[media_ref] = entry
        return entry

    def record(self, media_ref: str, position_seconds: float, duration_seconds: float) -> ProgressEntry:
        previous = self._entries.get(media_ref)
        if duration_seconds <= 0 and previous is not None:
            duration_seconds = previous.duration_seconds
        entry = ProgressEntry(
            position_seconds=max(0.0, float(position_seconds)),
            duration_seconds=max(0.0, float(duration_seconds)),
        )
        self._entries[media_ref] = entry
        return entry

    def items(self) -> Iterator[tuple[str, ProgressEntry]]:
        return iter(list(self._entries.items()))

    def __contains__(self, media_ref: object) -> bool:
        return media_ref in self._entries

    def __len__(self) -> int:
        return len(self._entries)
