"""Shared fakes for the playback tests.

The manual scheduler stands in for ``tk.Misc.after`` with virtual time, and
the recording backend stands in for libVLC so controller behaviour can be
driven notification by notification.
"""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from swar_player.integrations.player_library import PlayerLibrary, reset_player_library


class ManualScheduler:
    def __init__(self):
        self.now = 0
        self.jobs = {}
        self.cancelled = []
        self._counter = 0

    def after(self, ms, func):
        self._counter += 1
        job_id = f"after#{self._counter}"
        self.jobs[job_id] = (self.now + int(ms), self._counter, func)
        return job_id

    def after_cancel(self, job_id):
        self.cancelled.append(job_id)
        self.jobs.pop(job_id, None)

    @property
    def pending(self):
        return len(self.jobs)

    def callback_for(self, job_id):
        return self.jobs[job_id][2]

    def advance(self, ms):
        target = self.now + int(ms)
        while True:
            due = [(entry[0], entry[1], job_id) for job_id, entry in self.jobs.items() if entry[0] <= target]
            if not due:
                break
            when, _order, job_id = min(due)
            _when, _seq, func = self.jobs.pop(job_id)
            self.now = when
            func()
        self.now = target

    def run_pending(self):
        self.advance(0)


class FakePlayerHandle:
    def __init__(self, media_ref, options, listener, *, position=0.0, duration=0.0):
        self.media_ref = media_ref
        self.options = dict(options)
        self.listener = listener
        self.position = position
        self.duration = duration
        self.commands = []
        self.fail_on = set()
        self.destroy_calls = 0

    def _record(self, name, *args):
        self.commands.append((name, *args))
        if name in self.fail_on:
            raise RuntimeError(f"{name} failed")

    def play(self):
        self._record("play")

    def pause(self):
        self._record("pause")

    def mute(self):
        self._record("mute")

    def unmute(self):
        self._record("unmute")

    def seek_to(self, seconds):
        self._record("seek_to", seconds)

    def load_media(self, media_ref):
        self._record("load_media", media_ref)
        self.media_ref = media_ref

    def get_current_position_seconds(self):
        return self.position

    def get_duration_seconds(self):
        return self.duration

    def destroy(self):
        self.destroy_calls += 1
        self._record("destroy")

    @property
    def seeks(self):
        return [command[1] for command in self.commands if command[0] == "seek_to"]

    def names(self):
        return [command[0] for command in self.commands]

    def emit_ready(self):
        self.listener.on_ready()

    def emit_state(self, state):
        self.listener.on_state_change(state)

    def emit_error(self, code=150):
        self.listener.on_error(code)


class FakeBackend:
    def __init__(self, *, position=0.0, duration=0.0):
        self.position = position
        self.duration = duration
        self.attached = []
        self.handles = []
        self.attach_error = None

    def attach(self, mount_target, media_ref, options, listener):
        self.attached.append((mount_target, media_ref, dict(options)))
        if self.attach_error is not None:
            raise self.attach_error
        handle = FakePlayerHandle(
            media_ref,
            options,
            listener,
            position=self.position,
            duration=self.duration,
        )
        self.handles.append(handle)
        return handle

    @property
    def handle(self):
        return self.handles[-1]


class RecordingLogger:
    def __init__(self):
        self.debugs = []
        self.infos = []
        self.warnings = []
        self.errors = []
        self.exceptions = []

    def debug(self, message, *args, **_kwargs):
        self.debugs.append(message % args if args else message)

    def info(self, message, *args, **_kwargs):
        self.infos.append(message % args if args else message)

    def warning(self, message, *args, **_kwargs):
        self.warnings.append(message % args if args else message)

    def error(self, message, *args, **_kwargs):
        self.errors.append(message % args if args else message)

    def exception(self, message, *args, **_kwargs):
        self.exceptions.append(message % args if args else message)


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def recording_logger():
    return RecordingLogger()


@pytest.fixture
def player_env(scheduler, recording_logger):
    backend = FakeBackend(duration=180.0)
    factory_calls = []

    def factory():
        factory_calls.append(True)
        return backend

    library = PlayerLibrary(factory, scheduler=scheduler, logger_instance=recording_logger)
    return SimpleNamespace(
        scheduler=scheduler,
        backend=backend,
        library=library,
        logger=recording_logger,
        factory_calls=factory_calls,
    )


@pytest.fixture(autouse=True)
def _reset_shared_library():
    reset_player_library()
    yield
    reset_player_library()
