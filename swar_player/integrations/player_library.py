"""Process-wide, load-once access to the external player library."""

from __future__ import annotations

import logging
from typing import Any, Callable

from ..application.ports import PlayerBackend, Scheduler

logger = logging.getLogger(__name__)

ReadyCallback = Callable[[PlayerBackend], None]
FailedCallback = Callable[[BaseException], None]

STATUS_IDLE = "idle"
STATUS_LOADING = "loading"
STATUS_READY = "ready"
STATUS_FAILED = "failed"


class Subscription:
    """Handle for one pending ready-callback registration."""

    def __init__(self, library: "PlayerLibrary", on_ready: ReadyCallback, on_failed: FailedCallback | None) -> None:
        self._library = library
        self.on_ready = on_ready
        self.on_failed = on_failed
        self.active = True

    def cancel(self) -> None:
        if not self.active:
            return
        self.active = False
        self._library._discard(self)


class PlayerLibrary:
    """Loads the player backend at most once and fans the ready signal out.

    Every mounting view registers its own subscription, so several views can
    wait on the same load without overwriting each other's callback. Each
    view still attaches its own player handle once the backend is ready.
    """

    def __init__(
        self,
        factory: Callable[[], PlayerBackend],
        *,
        scheduler: Scheduler,
        logger_instance=None,
    ) -> None:
        self._factory = factory
        self._scheduler = scheduler
        self.logger = logger_instance or logger
        self.status = STATUS_IDLE
        self.backend: PlayerBackend | None = None
        self.load_error: BaseException | None = None
        self.active_handles = 0
        self._subscribers: list[Subscription] = []

    @property
    def pending_subscribers(self) -> int:
        return len(self._subscribers)

    def when_ready(
        self,
        on_ready: ReadyCallback,
        on_failed: FailedCallback | None = None,
    ) -> Subscription:
        subscription = Subscription(self, on_ready, on_failed)
        if self.status == STATUS_READY:
            subscription.active = False
            on_ready(self.backend)  # type: ignore[arg-type]
            return subscription
        if self.status == STATUS_FAILED:
            subscription.active = False
            if on_failed is not None:
                on_failed(self.load_error)  # type: ignore[arg-type]
            return subscription
        self._subscribers.append(subscription)
        if self.status == STATUS_IDLE:
            self.status = STATUS_LOADING
            self.logger.debug("Player library load scheduled")
            self._scheduler.after(0, self._load)
        return subscription

    def acquire(self) -> int:
        self.active_handles += 1
        return self.active_handles

    def release(self) -> int:
        self.active_handles = max(0, self.active_handles - 1)
        return self.active_handles

    def _discard(self, subscription: Subscription) -> None:
        try:
            self._subscribers.remove(subscription)
        except ValueError:
            pass

    def _load(self) -> None:
        if self.status != STATUS_LOADING:
            return
        try:
            backend = self._factory()
        except Exception as exc:
            self.logger.exception("Failed to load player library")
            self.status = STATUS_FAILED
            self.load_error = exc
            self._notify_failed(exc)
            return
        self.backend = backend
        self.status = STATUS_READY
        self.logger.info("Player library ready: subscribers=%s", len(self._subscribers))
        self._notify_ready(backend)

    def _drain(self) -> list[Subscription]:
        subscribers = [item for item in self._subscribers if item.active]
        self._subscribers = []
        for subscription in subscribers:
            subscription.active = False
        return subscribers

    def _notify_ready(self, backend: PlayerBackend) -> None:
        for subscription in self._drain():
            try:
                subscription.on_ready(backend)
            except Exception:
                self.logger.exception("Player ready subscriber failed")

    def _notify_failed(self, error: BaseException) -> None:
        for subscription in self._drain():
            if subscription.on_failed is None:
                continue
            try:
                subscription.on_failed(error)
            except Exception:
                self.logger.exception("Player failure subscriber failed")


_shared_library: PlayerLibrary | None = None


def get_player_library(
    factory: Callable[[], PlayerBackend] | None = None,
    scheduler: Scheduler | None = None,
    **kwargs: Any,
) -> PlayerLibrary:
    """Return the process-wide library, creating it on first use."""
    global _shared_library
    if _shared_library is None:
        if factory is None or scheduler is None:
            raise RuntimeError("Player library is not initialized.")
        _shared_library = PlayerLibrary(factory, scheduler=scheduler, **kwargs)
    return _shared_library


def reset_player_library() -> None:
    global _shared_library
    _shared_library = None
