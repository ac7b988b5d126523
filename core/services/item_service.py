# =============================================================================
# core/services/item_service.py - Content Item Business Logic
# =============================================================================
# Handles item CRUD, the per-sector display view, and persisting manual
# order. Separates HTTP concerns from database/business logic; ordering and
# schedule rules themselves live in lib/ordering.py and lib/schedule.py.
# =============================================================================

import logging
import uuid
from datetime import date, datetime
from typing import Any

from app.config import settings
from app.exceptions import InvalidItemError, ItemNotFoundError, ReorderCommitError
from core.models.content import ContentItem, OrderUpdate, Sector, SortPolicy
from core.models.notification import PushPayload
from core.models.schedule import Batch
from core.services.audit_service import AuditService
from core.services.config_service import ConfigService
from core.services.notification_service import NotificationService
from lib.ordering import (
    build_order_updates,
    compute_display_order,
    filter_items,
    normalize_item_date,
    reorder,
)
from lib.schedule import LECTURES_SECTOR, build_virtual_lectures, is_virtual_item
from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.utils import safe_url, sanitize_html, sanitize_text, strip_client_fields

logger = logging.getLogger(__name__)

LINK_FIELDS = ("fileUrl", "image")


def _clean_links(payload: dict[str, Any]) -> dict[str, Any]:
    """Validated link fields present in the payload, stored unescaped."""
    links = {}
    for field in LINK_FIELDS:
        if field in payload:
            try:
                links[field] = safe_url(payload[field])
            except ValueError as e:
                raise InvalidItemError(field, str(e))
    return links


def _to_items(rows: list[dict[str, Any]]) -> list[ContentItem]:
    items = []
    for row in rows:
        try:
            items.append(ContentItem.model_validate(row))
        except ValueError as e:
            logger.warning(f"Skipping malformed item {row.get('id')}: {e}")
    return items


class ItemService:
    """
    Service for content item operations.

    Provides a clean interface between API routes and database.
    """

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @staticmethod
    def list_items(sector: str | None = None) -> list[dict[str, Any]]:
        """All items in storage order (order_index asc, date desc)."""
        return SupabaseClient.fetch_items(sector=sector)

    @staticmethod
    def get_item(item_id: str) -> dict[str, Any]:
        """
        Raises:
            ItemNotFoundError: If the item doesn't exist
        """
        item = SupabaseClient.fetch_item(item_id)
        if not item:
            raise ItemNotFoundError(item_id)
        return item

    @staticmethod
    def sector_view(
        sector_id: str,
        search: str | None = None,
        date_filter: str | None = None,
        subject: str | None = None,
        pinned_only: bool = False,
        batch: Batch | None = None,
        today: date | None = None,
    ) -> tuple[Sector, list[ContentItem]]:
        """
        Items of a sector, filtered and in display order.

        The lectures sector also gets today's scheduled lectures as pinned
        virtual posts, unless a real post already covers them.

        Returns:
            Tuple of (sector, ordered items)

        Raises:
            SectorNotFoundError: If the sector isn't configured
        """
        sector = ConfigService.get_sector(sector_id)
        items = _to_items(SupabaseClient.fetch_items(sector=sector_id))

        if sector_id == LECTURES_SECTOR:
            virtual = build_virtual_lectures(
                ConfigService.get_lecture_rules(),
                batch,
                today or date.today(),
                existing_items=items,
                enforce_date_range=settings.ENFORCE_LECTURE_DATE_RANGE,
            )
            items = virtual + items

        filtered = filter_items(
            items,
            search=search,
            date_filter=date_filter,
            subject=subject,
            pinned_only=pinned_only,
        )
        return sector, compute_display_order(filtered, sector.sort_order)

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    @staticmethod
    def create_item(
        payload: dict[str, Any],
        username: str,
        ip: str | None = None,
    ) -> dict[str, Any]:
        """
        Publish a new item.

        Text fields are sanitized, the item starts at order_index 0, an
        attached file is recorded in the drive registry, and subscribers
        are notified in the background.

        Returns:
            The stored item row
        """
        client = SupabaseClient.get_client()

        clean = strip_client_fields(payload, "created_at")
        clean["id"] = clean.get("id") or str(uuid.uuid4())
        clean["title"] = sanitize_text(clean.get("title"))
        clean["content"] = sanitize_html(clean.get("content"))
        clean["subject"] = sanitize_text(clean.get("subject") or "General")
        clean["author"] = sanitize_text(clean.get("author") or "Admin")
        clean.update(_clean_links(clean))
        clean["date"] = normalize_item_date(clean.get("date")) or datetime.now().strftime("%Y.%m.%d")
        clean["order_index"] = 0

        row = ContentItem.model_validate(clean).to_row()

        try:
            response = client.table("items").insert(row).execute()
        except Exception as e:
            logger.error(f"Failed to create item: {e}")
            raise

        if not response.data:
            raise SupabaseClientError(
                message="Insert returned no data",
                code="CREATE_ITEM_FAILED",
                suggestion="Check the items table permissions for the service key",
            )
        item = response.data[0]
        logger.info(f"Created item {item['id']} in sector {item.get('sector')}")

        if item.get("fileUrl"):
            ItemService._register_drive_file(item, username)

        AuditService.log_action(username, "CREATE_ITEM", f"Created item {item.get('title')}", ip)

        NotificationService.enqueue_broadcast(PushPayload(
            title=f"New Post: {item.get('title')}",
            body=f"Sector: {item.get('sector')} | Subject: {item.get('subject')}",
            data={"url": f"/?item={item['id']}"},
        ))

        return item

    @staticmethod
    def _register_drive_file(item: dict[str, Any], username: str) -> None:
        client = SupabaseClient.get_client()
        try:
            client.table("drive_registry").insert({
                "item_id": item["id"],
                "drive_url": item["fileUrl"],
                "file_name": item.get("title"),
                "added_by": username,
            }).execute()
        except Exception as e:
            logger.warning(f"Failed to register file for item {item['id']}: {e}")

    @staticmethod
    def update_item(item_id: str, payload: dict[str, Any]) -> dict[str, Any]:
        """
        Apply a partial update to an item.

        The id can't be changed; text fields are sanitized when present.

        Raises:
            InvalidItemError: If a link field isn't an http(s) URL
            ItemNotFoundError: If no row matched
        """
        client = SupabaseClient.get_client()

        update_data = strip_client_fields(payload, "created_at", "id")
        for field in ("title", "subject", "author"):
            if field in update_data:
                update_data[field] = sanitize_text(update_data[field])
        if "content" in update_data:
            update_data["content"] = sanitize_html(update_data["content"])
        update_data.update(_clean_links(update_data))
        if "date" in update_data:
            update_data["date"] = normalize_item_date(update_data["date"])

        if not update_data:
            return ItemService.get_item(item_id)

        try:
            response = client.table("items").update(update_data).eq("id", item_id).execute()
        except Exception as e:
            logger.error(f"Failed to update item {item_id}: {e}")
            raise

        if not response.data:
            raise ItemNotFoundError(item_id)

        logger.info(f"Updated item {item_id}")
        return response.data[0]

    @staticmethod
    def delete_item(item_id: str) -> None:
        """
        Raises:
            ItemNotFoundError: If no row matched
        """
        client = SupabaseClient.get_client()

        try:
            response = client.table("items").delete().eq("id", item_id).execute()
        except Exception as e:
            logger.error(f"Failed to delete item {item_id}: {e}")
            raise

        if not response.data:
            raise ItemNotFoundError(item_id)
        logger.info(f"Deleted item {item_id}")

    # -------------------------------------------------------------------------
    # Manual Order
    # -------------------------------------------------------------------------

    @staticmethod
    def commit_order(updates: list[OrderUpdate]) -> int:
        """
        Persist a reorder batch.

        Only order_index is written. Every row is attempted; if any row
        fails or no longer exists the whole commit is reported as failed,
        so callers never treat a partially applied order as saved.
        Concurrent commits on the same sector are last-write-wins.

        Returns:
            Number of rows updated

        Raises:
            ReorderCommitError: If any update failed
        """
        client = SupabaseClient.get_client()
        failed: list[str] = []
        errors: list[str] = []

        for update in updates:
            if is_virtual_item(update.id):
                continue
            try:
                response = (
                    client.table("items")
                    .update({"order_index": update.order_index})
                    .eq("id", update.id)
                    .execute()
                )
                if not response.data:
                    failed.append(update.id)
                    errors.append(f"{update.id}: not found")
            except Exception as e:
                failed.append(update.id)
                errors.append(f"{update.id}: {e}")

        if failed:
            logger.error(f"Reorder commit failed for {len(failed)}/{len(updates)} items")
            raise ReorderCommitError("; ".join(errors[:5]), failed_ids=failed)

        applied = len(updates) - sum(1 for update in updates if is_virtual_item(update.id))
        logger.info(f"Committed order for {applied} items")
        return applied

    @staticmethod
    def move_item(sector_id: str, moved_id: str, target_id: str) -> tuple[bool, list[ContentItem]]:
        """
        Drag one item onto another inside a sector and persist the result.

        Works on the sector's full display order (no view filters), so the
        committed positions cover every item of the sector.

        Returns:
            Tuple of (whether anything was committed, resulting order)

        Raises:
            SectorNotFoundError: If the sector isn't configured
            ReorderCommitError: If persisting the new order failed
        """
        sector = ConfigService.get_sector(sector_id)
        items = _to_items(SupabaseClient.fetch_items(sector=sector_id))
        current = compute_display_order(items, sector.sort_order)

        if sector.sort_order != SortPolicy.MANUAL:
            logger.info(f"Ignoring reorder in sector {sector_id}: policy is {sector.sort_order.value}")
            return False, current

        moved = reorder(current, moved_id, target_id, sector.sort_order)
        if [item.id for item in moved] == [item.id for item in current]:
            return False, current

        ItemService.commit_order(build_order_updates(moved))
        return True, moved
