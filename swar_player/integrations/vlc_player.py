"""libVLC player backend bound to mount targets of the desktop UI."""

from __future__ import annotations

import logging
import os
import queue
import sys
from typing import Any

from ..application.ports import MountTarget, PlayerAttachError, PlayerListener, Scheduler
from ..config import DEFAULT_WATCH_URL
from ..domain.playback import PlayerState

try:
    import vlc as _vlc
except Exception:  # pragma: no cover - dependency optional at import time
    _vlc = None

logger = logging.getLogger(__name__)

_EVENT_PUMP_MS = 50


def resolve_media_uri(media_ref: str, watch_url: str = DEFAULT_WATCH_URL) -> str:
    """Map a media ref to something libVLC can open.

    Absolute paths and URLs pass through; bare tokens are video ids.
    """
    value = str(media_ref or "").strip()
    if not value:
        raise ValueError("Media reference is empty.")
    if "://" in value or os.path.isabs(value):
        return value
    return f"{watch_url}{value}"


class VlcPlayerBackend:
    """Loaded libVLC instance shared by every attached handle."""

    def __init__(
        self,
        scheduler: Scheduler,
        *,
        vlc_module=None,
        platform_name: str | None = None,
        watch_url: str = DEFAULT_WATCH_URL,
        pump_interval_ms: int = _EVENT_PUMP_MS,
        logger_instance=None,
    ) -> None:
        self._vlc = vlc_module if vlc_module is not None else _vlc
        if self._vlc is None:
            raise RuntimeError("python-vlc is not available")
        self.scheduler = scheduler
        self.platform_name = platform_name if platform_name is not None else sys.platform
        self.watch_url = watch_url
        self.pump_interval_ms = max(10, int(pump_interval_ms))
        self.logger = logger_instance or logger
        args = ["--no-xlib"] if str(self.platform_name).startswith("linux") else []
        self.instance = self._vlc.Instance(args)
        if self.instance is None:
            raise RuntimeError("libVLC instance could not be created.")

    @property
    def vlc(self):
        return self._vlc

    def attach(
        self,
        mount_target: MountTarget | None,
        media_ref: str,
        options: dict[str, Any],
        listener: PlayerListener,
    ) -> "VlcPlayerHandle":
        if mount_target is None or not getattr(mount_target, "name", ""):
            raise PlayerAttachError("Mount target is missing.")
        return VlcPlayerHandle(self, mount_target, media_ref, dict(options or {}), listener)

    def media_uri(self, media_ref: str) -> str:
        return resolve_media_uri(media_ref, self.watch_url)

    def release(self) -> None:
        try:
            self.instance.release()
        except Exception:
            self.logger.exception("Failed to release libVLC instance")


class VlcPlayerHandle:
    """One libVLC media player attached to a mount target.

    libVLC raises its events on an internal thread. They are queued here and
    delivered to the listener from the scheduler, in the order VLC emitted
    them.
    """

    def __init__(
        self,
        backend: VlcPlayerBackend,
        mount_target: MountTarget,
        media_ref: str,
        options: dict[str, Any],
        listener: PlayerListener,
    ) -> None:
        self._backend = backend
        self._vlc = backend.vlc
        self.logger = backend.logger
        self.mount_target = mount_target
        self.listener = listener
        self.start_seconds = float(options.get("start_seconds") or 0.0)
        self.player = backend.instance.media_player_new()
        self.media = None
        self.media_ref = ""
        self._events: queue.SimpleQueue[tuple[str, Any]] = queue.SimpleQueue()
        self._attached_events: list[Any] = []
        self._pump_job: Any = None
        self._ready_sent = False
        self._destroyed = False
        self._bind_window(mount_target.window_id)
        self._attach_events()
        self.load_media(media_ref)
        if options.get("muted"):
            self.mute()
        self._schedule_pump()

    # Commands

    def play(self) -> None:
        if self._destroyed:
            return
        rc = int(self.player.play())
        if rc == -1:
            raise RuntimeError("VLC failed to start playback.")

    def pause(self) -> None:
        if self._destroyed:
            return
        self.player.set_pause(1)

    def mute(self) -> None:
        if not self._destroyed:
            self.player.audio_set_mute(True)

    def unmute(self) -> None:
        if not self._destroyed:
            self.player.audio_set_mute(False)

    def seek_to(self, seconds: float) -> None:
        if self._destroyed:
            return
        self.player.set_time(int(max(0.0, float(seconds)) * 1000.0))

    def load_media(self, media_ref: str) -> None:
        if self._destroyed:
            return
        uri = self._backend.media_uri(media_ref)
        self._release_media()
        media = self._backend.instance.media_new(uri)
        if self.start_seconds > 0 and not self.media_ref:
            media.add_option(f":start-time={self.start_seconds:.3f}")
        self.player.set_media(media)
        self.media = media
        self.media_ref = str(media_ref)
        self.logger.debug("VLC media loaded: target=%s uri=%s", self.mount_target.name, uri)

    def get_current_position_seconds(self) -> float:
        current_ms = int(self.player.get_time() or 0)
        return max(0, current_ms) / 1000.0

    def get_duration_seconds(self) -> float:
        length_ms = int(self.player.get_length() or 0)
        return max(0, length_ms) / 1000.0

    def destroy(self) -> None:
        if self._destroyed:
            return
        self._destroyed = True
        if self._pump_job is not None:
            try:
                self._backend.scheduler.after_cancel(self._pump_job)
            except Exception:
                self.logger.debug("VLC event pump already cancelled", exc_info=True)
            self._pump_job = None
        self._detach_events()
        try:
            self.player.stop()
        except Exception:
            self.logger.exception("Failed to stop VLC player")
        self._release_media()
        try:
            self.player.release()
        except Exception:
            self.logger.exception("Failed to release VLC player")

    # Internals

    def _bind_window(self, window_id: int | None) -> None:
        if window_id is None:
            return
        platform_name = str(self._backend.platform_name)
        if platform_name.startswith("win"):
            self.player.set_hwnd(int(window_id))
        elif platform_name == "darwin":
            self.player.set_nsobject(int(window_id))
        else:
            self.player.set_xwindow(int(window_id))

    def _attach_events(self) -> None:
        event_type = self._vlc.EventType
        mapping = (
            (event_type.MediaPlayerPlaying, ("state", PlayerState.PLAYING)),
            (event_type.MediaPlayerPaused, ("state", PlayerState.PAUSED)),
            (event_type.MediaPlayerEndReached, ("state", PlayerState.ENDED)),
            (event_type.MediaPlayerEncounteredError, ("error", "vlc")),
        )
        manager = self.player.event_manager()
        for vlc_event, payload in mapping:
            manager.event_attach(vlc_event, self._enqueue, payload)
            self._attached_events.append(vlc_event)

    def _detach_events(self) -> None:
        try:
            manager = self.player.event_manager()
        except Exception:
            self.logger.exception("Failed to access VLC event manager")
            return
        for vlc_event in self._attached_events:
            try:
                manager.event_detach(vlc_event)
            except Exception:
                self.logger.debug("VLC event already detached: %s", vlc_event, exc_info=True)
        self._attached_events = []

    def _enqueue(self, _event, payload: tuple[str, Any]) -> None:
        self._events.put(payload)

    def _schedule_pump(self) -> None:
        if self._destroyed:
            return
        self._pump_job = self._backend.scheduler.after(self._backend.pump_interval_ms, self._pump)

    def _pump(self) -> None:
        self._pump_job = None
        if self._destroyed:
            return
        try:
            if not self._ready_sent:
                self._ready_sent = True
                self.listener.on_ready()
            self._drain_events()
        finally:
            self._schedule_pump()

    def _drain_events(self) -> None:
        while not self._destroyed:
            try:
                kind, value = self._events.get_nowait()
            except queue.Empty:
                break
            if kind == "error":
                self.listener.on_error(value)
            elif value == PlayerState.ENDED and self._follow_subitem():
                continue
            else:
                self.listener.on_state_change(value)

    def _follow_subitem(self) -> bool:
        """Play the resolved stream when VLC expanded a page URL into a subitem."""
        media = self.media
        if media is None:
            return False
        try:
            subitems = media.subitems()
        except Exception:
            return False
        if subitems is None or subitems.count() <= 0:
            return False
        stream = subitems.item_at_index(0)
        if stream is None:
            return False
        self.player.set_media(stream)
        self._release_media()
        self.media = stream
        try:
            self.play()
        except Exception:
            self.logger.exception("Failed to play resolved VLC stream: target=%s", self.mount_target.name)
            self.listener.on_error("vlc")
        return True

    def _release_media(self) -> None:
        if self.media is None:
            return
        try:
            self.media.release()
        except Exception:
            self.logger.debug("Failed to release VLC media", exc_info=True)
        self.media = None
