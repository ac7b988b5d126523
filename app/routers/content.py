# =============================================================================
# app/routers/content.py - Public Content Endpoints
# =============================================================================
# Read-only views used by the portal SPA: site config, sectors, and items.
# =============================================================================

import logging
from datetime import date
from typing import Annotated, Any

from fastapi import APIRouter, Path, Query
from pydantic import BaseModel

from core.models.content import SortPolicy
from core.models.schedule import Batch
from core.services.config_service import ConfigService
from core.services.item_service import ItemService

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Response Models
# =============================================================================

class SectorItemsResponse(BaseModel):
    """A sector's items in display order."""
    sector: str
    sort_order: SortPolicy
    count: int
    items: list[dict[str, Any]]


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/config")
async def get_config() -> dict[str, Any]:
    """Portal configuration document ({} when never saved)."""
    return ConfigService.get_config()


@router.get("/sectors")
async def get_sectors() -> list[dict[str, Any]]:
    """Configured sectors, falling back to the built-in list."""
    return [sector.to_row() for sector in ConfigService.get_sectors()]


@router.get("/items")
async def get_items() -> list[dict[str, Any]]:
    """Every item, ordered by order_index then newest date."""
    return ItemService.list_items()


@router.get("/sectors/{sector_id}/items", response_model=SectorItemsResponse)
async def get_sector_items(
    sector_id: Annotated[str, Path(description="Sector ID")],
    search: Annotated[str | None, Query(description="Match title or content")] = None,
    date_filter: Annotated[str | None, Query(alias="date", description="YYYY-MM-DD or YYYY.MM.DD")] = None,
    subject: Annotated[str | None, Query(description="Exact subject")] = None,
    pinned_only: Annotated[bool, Query(description="Only pinned items")] = False,
    batch: Annotated[Batch | None, Query(description="Batch for scheduled lectures")] = None,
):
    """
    Items of one sector, filtered and ordered by the sector's sort policy.

    Pinned items always come first. For the lectures sector today's
    scheduled lectures are included as virtual pinned posts.
    """
    sector, items = ItemService.sector_view(
        sector_id,
        search=search,
        date_filter=date_filter,
        subject=subject,
        pinned_only=pinned_only,
        batch=batch,
        today=date.today(),
    )
    return SectorItemsResponse(
        sector=sector.id,
        sort_order=sector.sort_order,
        count=len(items),
        items=[item.to_row() for item in items],
    )
