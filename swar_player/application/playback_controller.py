"""Playback controller driving one attached external player."""

from __future__ import annotations

import functools
import logging
import math
from typing import Any, Callable

from ..domain.playback import (
    SEEKABLE_STATES,
    PlaybackConfig,
    PlaybackSession,
    PlaybackState,
    PlayerState,
    ProgressCache,
)
from .ports import PlayerBackend, PlayerHandle, Scheduler

logger = logging.getLogger(__name__)

SessionListener = Callable[[PlaybackSession], None]


class PlaybackController:
    """Mediates play/pause/mute/seek/switch intent and an asynchronous player.

    Commands are fire-and-forget. Play and pause update the local state
    optimistically; the player's own state notifications reconcile it.
    Progress is polled only while playing, through a single timer armed on
    the scheduler. When a loop window is configured every tick clamps
    playback into it with a corrective seek.
    """

    def __init__(
        self,
        mount_target: Any,
        config: PlaybackConfig,
        *,
        library,
        scheduler: Scheduler,
        progress_cache: ProgressCache | None = None,
        logger_instance=None,
    ) -> None:
        self.mount_target = mount_target
        self.config = config
        self.library = library
        self.scheduler = scheduler
        self.progress_cache = progress_cache
        self.logger = logger_instance or logger
        self._session = PlaybackSession(
            media_ref=config.initial_media_ref,
            is_muted=bool(config.muted),
            loop_window=config.loop_window,
        )
        self._handle: PlayerHandle | None = None
        self._subscription = None
        self._listeners: list[SessionListener] = []
        self._poll_job: Any = None
        self._poll_generation = 0
        self._loop_seek_pending = False
        self._mounted = False
        self._acquired = False
        self._live = True

    @property
    def session(self) -> PlaybackSession:
        return self._session.copy()

    @property
    def state(self) -> PlaybackState:
        return self._session.state

    @property
    def media_ref(self) -> str:
        return self._session.media_ref

    @property
    def is_live(self) -> bool:
        return self._live

    @property
    def is_polling(self) -> bool:
        return self._poll_job is not None

    def add_listener(self, callback: SessionListener) -> Callable[[], None]:
        self._listeners.append(callback)

        def remove() -> None:
            try:
                self._listeners.remove(callback)
            except ValueError:
                pass

        return remove

    # Lifecycle

    def mount(self) -> None:
        if not self._live or self._mounted:
            return
        self._mounted = True
        self._subscription = self.library.when_ready(self._attach, self._on_library_failed)

    def teardown(self) -> None:
        if not self._live:
            return
        self._live = False
        self._stop_polling()
        if self._subscription is not None:
            self._subscription.cancel()
            self._subscription = None
        handle = self._handle
        self._handle = None
        if handle is not None:
            try:
                handle.destroy()
            except Exception:
                self.logger.exception("Failed to destroy player: media=%s", self._session.media_ref)
        if self._acquired:
            self._acquired = False
            self.library.release()
        self._listeners.clear()
        self.logger.debug("Playback session torn down: media=%s", self._session.media_ref)

    def _attach(self, backend: PlayerBackend) -> None:
        self._subscription = None
        if not self._live:
            return
        if self.mount_target is None:
            self._fail("Mount target is missing")
            return
        window = self._session.loop_window
        options = {
            "autoplay": bool(self.config.autoplay),
            "muted": bool(self._session.is_muted),
            "controls": bool(self.config.show_controls),
            "start_seconds": window.start_seconds if window is not None else 0.0,
        }
        try:
            handle = backend.attach(self.mount_target, self._session.media_ref, options, self)
        except Exception:
            self.logger.exception("Failed to attach player: target=%s", self.mount_target)
            self._fail("Attach failed")
            return
        self._handle = handle
        self.library.acquire()
        self._acquired = True

    def _on_library_failed(self, error: BaseException) -> None:
        self._subscription = None
        if self._live:
            self._fail(f"Player library unavailable: {error}")

    def _fail(self, reason: str) -> None:
        self._stop_polling()
        self._session.state = PlaybackState.ERROR
        self.logger.error("Playback session failed: media=%s reason=%s", self._session.media_ref, reason)
        self._notify()

    # Player notifications

    def on_ready(self) -> None:
        if not self._live or self._handle is None:
            return
        if self._session.state != PlaybackState.UNSTARTED:
            return
        self._session.state = PlaybackState.READY
        self._session.duration_seconds = self._read_duration()
        if self._session.is_muted:
            self._command("mute", self._handle.mute)
        if self.config.autoplay:
            self._request_play()
        if self._session.loop_window is not None:
            self._enforce_loop_window(self._read_position())
        self.logger.info(
            "Player ready: media=%s duration=%.1f autoplay=%s",
            self._session.media_ref,
            self._session.duration_seconds,
            self.config.autoplay,
        )
        self._notify()

    def on_state_change(self, state: PlayerState | int) -> None:
        if not self._live or self._handle is None:
            return
        try:
            player_state = PlayerState(state)
        except ValueError:
            self.logger.debug("Ignoring unknown player state: %s", state)
            return
        current = self._session.state
        if current in (PlaybackState.UNSTARTED, PlaybackState.ERROR):
            return
        if player_state == PlayerState.PLAYING:
            self._session.state = PlaybackState.PLAYING
            self._start_polling()
        elif player_state == PlayerState.PAUSED:
            self._stop_polling()
            self._session.state = PlaybackState.PAUSED
        elif player_state == PlayerState.ENDED:
            if current not in (PlaybackState.PLAYING, PlaybackState.PAUSED):
                return
            self._on_ended()
        else:
            return
        self._notify()

    def on_error(self, code: object) -> None:
        if not self._live:
            return
        self._fail(f"player error {code}")

    def _on_ended(self) -> None:
        self._stop_polling()
        self._session.state = PlaybackState.ENDED
        window = self._session.loop_window
        if window is None:
            if self._session.duration_seconds > 0:
                self._session.position_seconds = self._session.duration_seconds
                self._record_progress(self._session.media_ref)
            return
        # The interval check may already have a seek to the same start in flight.
        self._command("loop seek", self._handle.seek_to, window.start_seconds)
        self._loop_seek_pending = True
        self._session.position_seconds = window.start_seconds
        self._command("play", self._handle.play)
        self._session.state = PlaybackState.PLAYING
        self._start_polling()

    # User intent

    def toggle_play_pause(self) -> None:
        if not self._live or self._handle is None:
            return
        state = self._session.state
        if state == PlaybackState.PLAYING:
            self._request_pause()
        elif state in (PlaybackState.READY, PlaybackState.PAUSED, PlaybackState.ENDED):
            self._request_play()
        else:
            return
        self._notify()

    def toggle_mute(self) -> None:
        if not self._live or self._session.state == PlaybackState.ERROR:
            return
        self._session.is_muted = not self._session.is_muted
        if self._handle is not None:
            if self._session.is_muted:
                self._command("mute", self._handle.mute)
            else:
                self._command("unmute", self._handle.unmute)
        self._notify()

    def seek_fraction(self, fraction: float) -> None:
        """Seek to ``fraction`` of the known duration; out-of-range values are clamped."""
        if not self._live or self._handle is None:
            return
        if self._session.state not in SEEKABLE_STATES or self._session.duration_seconds <= 0:
            return
        try:
            value = float(fraction)
        except (TypeError, ValueError):
            return
        if math.isnan(value):
            return
        value = min(1.0, max(0.0, value))
        target = value * self._session.duration_seconds
        self._command("seek", self._handle.seek_to, target)
        self._session.position_seconds = target
        self._loop_seek_pending = False
        self._record_progress(self._session.media_ref)
        self._notify()

    def switch_media(self, media_ref: str) -> None:
        if not self._live or self._handle is None:
            return
        if self._session.state in (PlaybackState.UNSTARTED, PlaybackState.ERROR):
            return
        target = str(media_ref or "").strip()
        if not target:
            return
        if target == self._session.media_ref:
            self.toggle_play_pause()
            return
        previous = self._session.media_ref
        self._stop_polling()
        self._command("load media", self._handle.load_media, target)
        self._session.media_ref = target
        self._session.position_seconds = 0.0
        self._session.duration_seconds = 0.0
        self._session.state = PlaybackState.READY
        self._loop_seek_pending = False
        if self.config.autoplay_on_switch:
            self._request_play()
        self.logger.info("Switched media: %s -> %s", previous, target)
        self._notify()

    def _request_play(self) -> None:
        self._command("play", self._handle.play)
        self._session.state = PlaybackState.PLAYING
        if self.progress_cache is not None:
            self.progress_cache.ensure(self._session.media_ref)

    def _request_pause(self) -> None:
        self._command("pause", self._handle.pause)
        self._stop_polling()
        self._session.state = PlaybackState.PAUSED

    # Polling

    def _start_polling(self) -> None:
        if self._poll_job is not None or not self._live:
            return
        self._poll_generation += 1
        callback = functools.partial(
            self._on_poll_tick,
            self._poll_generation,
            self._session.media_ref,
        )
        self._poll_job = self.scheduler.after(int(self.config.poll_interval_ms), callback)

    def _stop_polling(self) -> None:
        self._poll_generation += 1
        job = self._poll_job
        self._poll_job = None
        if job is None:
            return
        try:
            self.scheduler.after_cancel(job)
        except Exception:
            self.logger.debug("Poll timer already cancelled", exc_info=True)

    def _on_poll_tick(self, generation: int, media_ref: str) -> None:
        if generation != self._poll_generation:
            return
        self._poll_job = None
        if not self._live or self._handle is None:
            return
        if self._session.state != PlaybackState.PLAYING:
            return
        if media_ref != self._session.media_ref:
            self.logger.debug("Discarding poll tick for previous media: %s", media_ref)
            return
        duration = self._read_duration()
        if duration > 0:
            self._session.duration_seconds = duration
        position = self._read_position()
        if self._session.duration_seconds > 0:
            position = min(position, self._session.duration_seconds)
        self._session.position_seconds = position
        self._enforce_loop_window(position)
        self._record_progress(media_ref)
        self._notify()
        if self._live and self._session.state == PlaybackState.PLAYING:
            self._start_polling()

    def _enforce_loop_window(self, position: float) -> bool:
        window = self._session.loop_window
        if window is None or self._handle is None:
            return False
        if window.contains(position):
            self._loop_seek_pending = False
            return False
        self._session.position_seconds = window.start_seconds
        if self._loop_seek_pending:
            # Previous corrective seek not applied yet; skip one re-issue.
            self._loop_seek_pending = False
            return False
        self._command("loop seek", self._handle.seek_to, window.start_seconds)
        self._loop_seek_pending = True
        return True

    # Helpers

    def _read_position(self) -> float:
        try:
            value = float(self._handle.get_current_position_seconds())
        except Exception:
            self.logger.exception("Failed to read player position")
            return self._session.position_seconds
        if math.isnan(value):
            return self._session.position_seconds
        return max(0.0, value)

    def _read_duration(self) -> float:
        try:
            value = float(self._handle.get_duration_seconds())
        except Exception:
            self.logger.exception("Failed to read player duration")
            return self._session.duration_seconds
        if math.isnan(value) or value <= 0:
            return self._session.duration_seconds
        return value

    def _record_progress(self, media_ref: str) -> None:
        if self.progress_cache is None:
            return
        self.progress_cache.record(
            media_ref,
            self._session.position_seconds,
            self._session.duration_seconds,
        )

    def _command(self, action: str, func: Callable[..., Any], *args: Any) -> bool:
        try:
            func(*args)
        except Exception:
            self.logger.exception("Player command failed: %s media=%s", action, self._session.media_ref)
            return False
        return True

    def _notify(self) -> None:
        if not self._listeners:
            return
        snapshot = self._session.copy()
        for callback in list(self._listeners):
            try:
                callback(snapshot)
            except Exception:
                self.logger.exception("Playback listener failed")
