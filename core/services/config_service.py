# =============================================================================
# core/services/config_service.py - Portal Config & Sector Settings
# =============================================================================
# The portal keeps two JSON documents in global_config:
#   row 1 - portal configuration (titles, links, lecture schedules, ...)
#   row 2 - sector list (names, icons, sort policy)
# =============================================================================

import logging
from typing import Any

from pydantic import ValidationError

from app.exceptions import SectorNotFoundError
from core.models.config import GlobalConfig
from core.models.content import DEFAULT_SECTORS, Sector
from core.models.schedule import LectureRule
from lib.schedule import parse_rules
from lib.supabase_client import CONFIG_ROW_ID, SECTORS_ROW_ID, SupabaseClient

logger = logging.getLogger(__name__)


class ConfigService:
    """
    Service for the global configuration documents.

    Reads never fail on a missing row: an unset config is {} and an unset
    sector list falls back to the built-in sectors.
    """

    # -------------------------------------------------------------------------
    # Portal Config
    # -------------------------------------------------------------------------

    @staticmethod
    def get_config() -> dict[str, Any]:
        """Raw portal config document ({} when never saved)."""
        document = SupabaseClient.fetch_config_document(CONFIG_ROW_ID)
        return document if isinstance(document, dict) else {}

    @staticmethod
    def save_config(document: dict[str, Any]) -> dict[str, Any]:
        """
        Validate and store the portal config.

        Raises:
            pydantic.ValidationError: If a typed field (e.g. a lecture rule) is invalid
        """
        config = GlobalConfig.model_validate(document)
        row = config.to_row()
        SupabaseClient.save_config_document(CONFIG_ROW_ID, row)
        logger.info(f"Saved portal config ({len(config.schedules)} lecture rules)")
        return row

    @staticmethod
    def get_lecture_rules() -> list[LectureRule]:
        """Lecture rules from the portal config, malformed entries skipped."""
        return parse_rules(ConfigService.get_config().get("schedules"))

    # -------------------------------------------------------------------------
    # Sectors
    # -------------------------------------------------------------------------

    @staticmethod
    def get_sectors() -> list[Sector]:
        """Configured sectors, or the defaults when none are saved."""
        document = SupabaseClient.fetch_config_document(SECTORS_ROW_ID)
        raw_sectors = document if isinstance(document, list) and document else DEFAULT_SECTORS

        sectors = []
        for raw in raw_sectors:
            try:
                sectors.append(Sector.model_validate(raw))
            except ValidationError as e:
                logger.warning(f"Skipping malformed sector {raw!r}: {e}")
        return sectors

    @staticmethod
    def get_sector(sector_id: str) -> Sector:
        """
        Look up one sector.

        Raises:
            SectorNotFoundError: If no configured sector has this id
        """
        for sector in ConfigService.get_sectors():
            if sector.id == sector_id:
                return sector
        raise SectorNotFoundError(sector_id)

    @staticmethod
    def save_sectors(sectors: list[Sector]) -> list[dict[str, Any]]:
        """Replace the sector list."""
        rows = [sector.to_row() for sector in sectors]
        SupabaseClient.save_config_document(SECTORS_ROW_ID, rows)
        logger.info(f"Saved {len(rows)} sectors")
        return rows
