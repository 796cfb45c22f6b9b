"""Hosting views that configure the playback controller for each surface."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable

from ..config import AppConfig
from ..domain.playback import LoopWindow, PlaybackConfig, PlaybackState, ProgressCache, ProgressEntry
from ..domain.ragas import (
    DEFAULT_RAGA_ID,
    RAGA_MEDIA,
    DailySession,
    daily_session_for,
    media_ref_for,
)
from .playback_controller import PlaybackController, SessionListener
from .ports import Scheduler

logger = logging.getLogger(__name__)


class _HostedPlayer:
    """Mount/unmount symmetry shared by every hosting view."""

    def __init__(self, controller: PlaybackController | None) -> None:
        self.controller = controller
        self._unsubscribe: Callable[[], None] | None = None

    @property
    def available(self) -> bool:
        return self.controller is not None

    @property
    def state(self) -> PlaybackState:
        if self.controller is None:
            return PlaybackState.ERROR
        return self.controller.state

    def mount(self) -> None:
        if self.controller is not None:
            self.controller.mount()

    def unmount(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        if self.controller is not None:
            self.controller.teardown()

    def on_change(self, callback: SessionListener) -> None:
        if self.controller is None:
            return
        if self._unsubscribe is not None:
            self._unsubscribe()
        self._unsubscribe = self.controller.add_listener(callback)

    def toggle_play_pause(self) -> None:
        if self.controller is not None:
            self.controller.toggle_play_pause()

    def toggle_mute(self) -> None:
        if self.controller is not None:
            self.controller.toggle_mute()

    def __enter__(self):
        self.mount()
        return self

    def __exit__(self, *_exc_info) -> None:
        self.unmount()


class HeroBackgroundPlayer(_HostedPlayer):
    """Background clip that keeps replaying one fixed segment."""

    def __init__(
        self,
        mount_target: Any,
        *,
        library,
        scheduler: Scheduler,
        config: AppConfig | None = None,
        logger_instance=None,
    ) -> None:
        media_ref = config.hero_media_ref if config is not None else "iDSoI-z6qaY"
        window = LoopWindow(
            config.hero_loop_start if config is not None else 20.0,
            config.hero_loop_end if config is not None else 40.0,
        )
        playback_config = PlaybackConfig(
            initial_media_ref=media_ref,
            autoplay=True,
            muted=False,
            loop_window=window,
            poll_interval_ms=config.loop_poll_ms if config is not None else 500,
            show_controls=False,
        )
        super().__init__(
            PlaybackController(
                mount_target,
                playback_config,
                library=library,
                scheduler=scheduler,
                logger_instance=logger_instance,
            )
        )


class DailyListeningPlayer(_HostedPlayer):
    """Single track player for the raga that matches the time of day."""

    def __init__(
        self,
        mount_target: Any,
        *,
        library,
        scheduler: Scheduler,
        config: AppConfig | None = None,
        now: datetime | None = None,
        logger_instance=None,
    ) -> None:
        self.logger = logger_instance or logger
        self.session_key, self.daily_session = daily_session_for(now)
        media_ref = media_ref_for(self.daily_session.raga_id)
        controller = None
        if media_ref is None:
            self.logger.warning("No playable media for daily raga: %s", self.daily_session.raga_id)
        else:
            controller = PlaybackController(
                mount_target,
                PlaybackConfig(
                    initial_media_ref=media_ref,
                    autoplay=False,
                    poll_interval_ms=config.progress_poll_ms if config is not None else 100,
                ),
                library=library,
                scheduler=scheduler,
                logger_instance=logger_instance,
            )
        super().__init__(controller)

    @property
    def session(self) -> DailySession:
        return self.daily_session

    def seek(self, fraction: float) -> None:
        if self.controller is not None:
            self.controller.seek_fraction(fraction)


class RagaExplorerPlayer(_HostedPlayer):
    """Switchable player over the raga catalogue with per-raga progress."""

    def __init__(
        self,
        mount_target: Any,
        *,
        library,
        scheduler: Scheduler,
        config: AppConfig | None = None,
        autoplay_raga_id: str | None = None,
        logger_instance=None,
    ) -> None:
        self.logger = logger_instance or logger
        self.scheduler = scheduler
        self.progress = ProgressCache()
        self.autoplay_raga_id = autoplay_raga_id
        self.autoplay_delay_ms = config.raga_autoplay_delay_ms if config is not None else 1000
        self._autoplay_job: Any = None
        self._autoplay_armed = bool(autoplay_raga_id)
        controller = PlaybackController(
            mount_target,
            PlaybackConfig(
                initial_media_ref=media_ref_for(DEFAULT_RAGA_ID) or "",
                autoplay=False,
                poll_interval_ms=config.progress_poll_ms if config is not None else 100,
            ),
            library=library,
            scheduler=scheduler,
            progress_cache=self.progress,
            logger_instance=logger_instance,
        )
        super().__init__(controller)
        self._remove_ready_hook = controller.add_listener(self._on_session_change)

    @property
    def playing_raga_id(self) -> str | None:
        """Raga currently playing, or None when nothing is audible."""
        if self.controller.state != PlaybackState.PLAYING:
            return None
        return self.raga_for_media(self.controller.media_ref)

    @staticmethod
    def raga_for_media(media_ref: str) -> str | None:
        for raga_id, value in RAGA_MEDIA.items():
            if value == media_ref:
                return raga_id
        return None

    def play_raga(self, raga_id: str) -> bool:
        media_ref = media_ref_for(raga_id)
        if media_ref is None:
            self.logger.info("Raga has no audio available: %s", raga_id)
            return False
        if self.controller.state in (PlaybackState.UNSTARTED, PlaybackState.ERROR):
            self.logger.info("Player not ready yet: raga=%s", raga_id)
            return False
        self.controller.switch_media(media_ref)
        return True

    def seek(self, raga_id: str, fraction: float) -> bool:
        media_ref = media_ref_for(raga_id)
        if media_ref is None or media_ref != self.controller.media_ref:
            return False
        entry = self.progress.get(media_ref)
        if entry is None or entry.duration_seconds <= 0:
            return False
        self.controller.seek_fraction(fraction)
        return True

    def progress_for(self, raga_id: str) -> ProgressEntry | None:
        media_ref = media_ref_for(raga_id)
        if media_ref is None:
            return None
        return self.progress.get(media_ref)

    def progress_view(self, raga_id: str) -> ProgressEntry:
        """Live position for the loaded raga, last cached progress for any other."""
        media_ref = media_ref_for(raga_id)
        if media_ref is None:
            return ProgressEntry()
        state = self.controller.state
        if media_ref == self.controller.media_ref and state not in (PlaybackState.UNSTARTED, PlaybackState.ERROR):
            session = self.controller.session
            return ProgressEntry(session.position_seconds, session.duration_seconds)
        return self.progress.get(media_ref) or ProgressEntry()

    def unmount(self) -> None:
        if self._autoplay_job is not None:
            try:
                self.scheduler.after_cancel(self._autoplay_job)
            except Exception:
                self.logger.debug("Autoplay timer already cancelled", exc_info=True)
            self._autoplay_job = None
        self._autoplay_armed = False
        if self._remove_ready_hook is not None:
            self._remove_ready_hook()
            self._remove_ready_hook = None
        super().unmount()

    def _on_session_change(self, session) -> None:
        if not self._autoplay_armed or session.state != PlaybackState.READY:
            return
        self._autoplay_armed = False
        self._autoplay_job = self.scheduler.after(self.autoplay_delay_ms, self._run_autoplay)

    def _run_autoplay(self) -> None:
        self._autoplay_job = None
        if self.controller.is_live and self.autoplay_raga_id:
            self.logger.info("Auto-playing raga: %s", self.autoplay_raga_id)
            self.play_raga(self.autoplay_raga_id)
