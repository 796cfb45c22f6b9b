"""Desktop entrypoint for the House of Swar player."""

from __future__ import annotations

import argparse
import atexit
import tkinter as tk

from swar_player.application.bootstrap import initialize_app_services
from swar_player.config import load_config
from swar_player.integrations.player_library import reset_player_library
from swar_player.logging_config import setup_logging
from swar_player.ui.tkinter_app import SwarDesktopApp


def _parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="House of Swar desktop player")
    parser.add_argument("--owner", default="guest", help="Profile id used for instrument care records.")
    return parser.parse_args(argv)


def launch(argv=None) -> None:
    args = _parse_args(argv)
    config = load_config()
    logger = setup_logging(config)
    if config.skip_app_init:
        logger.info("SWAR_SKIP_APP_INIT enabled; launch skipped")
        return
    root = tk.Tk()
    services = initialize_app_services(config=config, logger=logger, scheduler=root)
    atexit.register(reset_player_library)
    desktop_app = SwarDesktopApp(
        config,
        services,
        logger_instance=logger,
        owner_id=args.owner,
        root=root,
    )
    logger.info("Launching desktop app: owner=%s log_file=%s", args.owner, config.log_file)
    desktop_app.launch()


if __name__ == "__main__":
    launch()
