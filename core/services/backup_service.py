# =============================================================================
# core/services/backup_service.py - Full Backup Export / Restore
# =============================================================================

import logging
from datetime import datetime, timezone
from typing import Any

from lib.supabase_client import CONFIG_ROW_ID, SECTORS_ROW_ID, SupabaseClient
from lib.utils import strip_client_fields

logger = logging.getLogger(__name__)

BACKUP_VERSION = "2.1"
BACKUP_TABLES = ("items", "global_config", "visitor_logs", "drive_registry")


def _config_documents(value: Any) -> dict[int, Any]:
    """
    Map global_config row ids to their documents.

    Accepts the exported list of rows, a single row, or a bare config
    object. Rows without an id are taken as the config row.
    """
    if value is None:
        return {}
    rows = value if isinstance(value, list) else [value]
    documents = {}
    for row in rows:
        if isinstance(row, dict) and "config" in row:
            documents[row.get("id", CONFIG_ROW_ID)] = row["config"]
        elif row:
            documents[CONFIG_ROW_ID] = row
    return documents


class BackupService:
    """Dump and restore the portal's tables as one JSON document."""

    @staticmethod
    def export_backup() -> dict[str, Any]:
        client = SupabaseClient.get_client()
        data = {}
        for table in BACKUP_TABLES:
            response = client.table(table).select("*").execute()
            data[table] = response.data or []
        data["global_config"] = sorted(data["global_config"], key=lambda row: row.get("id", 0))

        logger.info(f"Exported backup ({len(data['items'])} items)")
        return {
            "data": data,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": BACKUP_VERSION,
        }

    @staticmethod
    def import_backup(data: dict[str, Any]) -> dict[str, int]:
        """
        Restore a backup's data section.

        Items are upserted by id (client-side flags removed). The config
        document and the sector list replace the stored ones. Visitor logs
        are not restored.

        Returns:
            Count of restored rows per section
        """
        client = SupabaseClient.get_client()
        restored = {}

        items = data.get("items")
        if isinstance(items, list) and items:
            clean_items = [strip_client_fields(item) for item in items if isinstance(item, dict)]
            client.table("items").upsert(clean_items).execute()
            restored["items"] = len(clean_items)

        documents = _config_documents(data.get("global_config"))
        config = documents.get(CONFIG_ROW_ID)
        if config:
            SupabaseClient.save_config_document(CONFIG_ROW_ID, config)
            restored["global_config"] = 1

        sectors = data.get("sectors") or documents.get(SECTORS_ROW_ID)
        if sectors:
            SupabaseClient.save_config_document(SECTORS_ROW_ID, sectors)
            restored["sectors"] = len(sectors)

        registry = data.get("drive_registry")
        if isinstance(registry, list) and registry:
            client.table("drive_registry").upsert(registry).execute()
            restored["drive_registry"] = len(registry)

        logger.info(f"Restored backup: {restored}")
        return restored
