from types import SimpleNamespace

import pytest

pytest.importorskip("tkinter")

import app
from swar_player import main as app_main


class _Logger:
    def __init__(self):
        self.infos = []

    def info(self, message, *args):
        self.infos.append(message % args if args else message)


def test_launch_respects_skip_flag(monkeypatch):
    logger = _Logger()
    monkeypatch.setattr(app, "load_config", lambda: SimpleNamespace(skip_app_init=True))
    monkeypatch.setattr(app, "setup_logging", lambda _config: logger)

    def _no_window():
        raise AssertionError("window must not be created")

    monkeypatch.setattr(app.tk, "Tk", _no_window)

    app.launch([])

    assert logger.infos == ["SWAR_SKIP_APP_INIT enabled; launch skipped"]


def test_launch_wires_services_into_desktop_app(monkeypatch):
    logger = _Logger()
    config = SimpleNamespace(skip_app_init=False, log_file="run.log")
    root = object()
    calls = {}

    class _DesktopApp:
        def __init__(self, cfg, services, *, logger_instance, owner_id, root):
            calls["init"] = (cfg, services, logger_instance, owner_id, root)

        def launch(self):
            calls["launched"] = True

    def _services(*, config, logger, scheduler):
        calls["services"] = (config, logger, scheduler)
        return "services"

    monkeypatch.setattr(app, "load_config", lambda: config)
    monkeypatch.setattr(app, "setup_logging", lambda _config: logger)
    monkeypatch.setattr(app.tk, "Tk", lambda: root)
    monkeypatch.setattr(app, "initialize_app_services", _services)
    monkeypatch.setattr(app, "SwarDesktopApp", _DesktopApp)
    monkeypatch.setattr(app.atexit, "register", lambda func: calls.setdefault("atexit", func))

    app.launch(["--owner", "meera"])

    assert calls["services"] == (config, logger, root)
    assert calls["init"] == (config, "services", logger, "meera", root)
    assert calls["launched"] is True
    assert calls["atexit"] is app.reset_player_library
    assert logger.infos == ["Launching desktop app: owner=meera log_file=run.log"]


def test_module_main_forwards_arguments_to_launch(monkeypatch):
    called = []
    monkeypatch.setattr(app, "launch", called.append)
    monkeypatch.setattr(app_main.sys, "argv", ["swar-player", "--owner", "ravi"])

    app_main.main()
    app_main.main(["--owner", "meera"])

    assert called == [["--owner", "ravi"], ["--owner", "meera"]]
