"""Application bootstrap assembly for player library and storage services."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..config import AppConfig
from ..integrations.player_library import PlayerLibrary, get_player_library
from ..integrations.vlc_player import VlcPlayerBackend
from ..storage.care_repository import CareRepository
from .care_service import CareService
from .ports import Scheduler


@dataclass(frozen=True)
class AppServices:
    player_library: PlayerLibrary
    care_repository: CareRepository
    care_service: CareService


def initialize_app_services(
    *,
    config: AppConfig,
    logger,
    scheduler: Scheduler,
    vlc_module: Any = None,
) -> AppServices:
    def load_backend() -> VlcPlayerBackend:
        logger.info("Loading libVLC player backend")
        return VlcPlayerBackend(
            scheduler,
            vlc_module=vlc_module,
            watch_url=config.media_watch_url,
            logger_instance=logger,
        )

    player_library = get_player_library(load_backend, scheduler, logger_instance=logger)
    care_repository = CareRepository(config.care_db_path, logger)
    care_service = CareService(care_repository, logger)
    return AppServices(
        player_library=player_library,
        care_repository=care_repository,
        care_service=care_service,
    )
