# =============================================================================
# lib/ordering.py - Sector Display Order & Manual Reordering
# =============================================================================
# Pure functions that decide the order a sector's items are displayed in,
# and the drag-and-drop move used when a sector is in manual mode.
#
# Ordering rules (applied as successive tie-breaks):
#   1. Pinned items first, whatever the policy
#   2. manual       -> order_index ascending
#   3. alphabetical -> natural title order
#   4. newest/oldest (and manual ties) -> parsed date, then title
#
# Usage:
#   from lib.ordering import compute_display_order, reorder, build_order_updates
#
#   ordered = compute_display_order(items, SortPolicy.MANUAL)
#   moved = reorder(ordered, moved_id="c", target_id="a")
#   updates = build_order_updates(moved)   # persist with ItemService.commit_order
# =============================================================================

from __future__ import annotations

import logging
import re
import unicodedata
from datetime import date, datetime
from typing import Any, Sequence, TypeVar

from core.models.content import ContentItem, OrderUpdate, SortPolicy

logger = logging.getLogger(__name__)

T = TypeVar("T")

_DIGITS = re.compile(r"(\d+)")


# =============================================================================
# Comparison Keys
# =============================================================================

def natural_key(text: str | None) -> list[tuple[int, int, str]]:
    """
    Build a case- and accent-insensitive, numeric-aware sort key.

    Digit runs compare by value and sort before letters, so
    "Lecture 2" < "Lecture 10" and "Résumé" == "resume".

    Example:
        sorted(["Item 10", "item 2"], key=natural_key)  # ["item 2", "Item 10"]
    """
    if not text:
        return []

    decomposed = unicodedata.normalize("NFKD", text)
    folded = "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()

    key: list[tuple[int, int, str]] = []
    for chunk in _DIGITS.split(folded):
        if not chunk:
            continue
        if chunk.isdigit():
            key.append((0, int(chunk), ""))
        else:
            key.append((1, 0, chunk))
    return key


def parse_item_date(value: str | None) -> int:
    """
    Convert an item date to a comparable day number.

    Accepts YYYY.MM.DD (stored form) and YYYY-MM-DD, with or without a
    trailing time component. Anything unparsable is 0, the oldest
    possible value.
    """
    if not value:
        return 0

    normalized = value.strip().replace(".", "-")
    try:
        return datetime.strptime(normalized[:10], "%Y-%m-%d").toordinal()
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(normalized).toordinal()
    except ValueError:
        logger.debug(f"Unparsable item date treated as oldest: {value!r}")
        return 0


def _sort_key(item: ContentItem, policy: SortPolicy) -> tuple[Any, ...]:
    pinned_rank = 0 if item.is_pinned else 1
    title = natural_key(item.title)

    if policy == SortPolicy.ALPHABETICAL:
        return (pinned_rank, title)

    day = parse_item_date(item.date)
    if policy == SortPolicy.OLDEST:
        return (pinned_rank, day, title)
    if policy == SortPolicy.MANUAL:
        # Ties on order_index fall back to newest-first
        return (pinned_rank, item.order_index, -day, title)
    return (pinned_rank, -day, title)


# =============================================================================
# Display Order
# =============================================================================

def compute_display_order(
    items: Sequence[ContentItem],
    sort_policy: SortPolicy | str | None,
) -> list[ContentItem]:
    """
    Order a sector's items for display.

    The sort is stable and pure: the input is not mutated, no item is
    dropped or duplicated, and the same input always yields the same
    output. Unknown or missing policies behave as newest.

    Args:
        items: Items of a single sector (already filtered by the caller)
        sort_policy: The sector's sortOrder

    Returns:
        A new list in display order
    """
    policy = SortPolicy.parse(sort_policy)
    return sorted(items, key=lambda item: _sort_key(item, policy))


# =============================================================================
# Manual Reordering
# =============================================================================

def _item_id(item: Any) -> str:
    if isinstance(item, dict):
        return str(item.get("id"))
    return str(getattr(item, "id"))


def reorder(
    current_order: Sequence[T],
    moved_id: str,
    target_id: str,
    sort_policy: SortPolicy | str | None = SortPolicy.MANUAL,
) -> list[T]:
    """
    Move one item onto another's position (drag-and-drop "insert at").

    The moved item is removed, then inserted at the index the target had
    before the removal, so dragging down places it after the target and
    dragging up places it before.

    No-op (an equal copy is returned) when the policy isn't manual, when
    an item is dropped onto itself, or when either id is unknown.

    Args:
        current_order: Items in their current display order
        moved_id: Item being dragged
        target_id: Item it was dropped on
        sort_policy: The sector's sortOrder

    Returns:
        A new list; the input is never mutated
    """
    result = list(current_order)

    if SortPolicy.parse(sort_policy) != SortPolicy.MANUAL:
        logger.debug("Ignoring reorder: sector is not in manual mode")
        return result

    if moved_id == target_id:
        return result

    ids = [_item_id(item) for item in result]
    if moved_id not in ids or target_id not in ids:
        logger.debug(f"Ignoring reorder: unknown id ({moved_id} -> {target_id})")
        return result

    current_index = ids.index(moved_id)
    target_index = ids.index(target_id)

    moved = result.pop(current_index)
    result.insert(target_index, moved)
    return result


def build_order_updates(ordered: Sequence[Any]) -> list[OrderUpdate]:
    """
    Map a display order to the positions to persist.

    Every item gets its index in the list, so committing the result and
    re-sorting in manual mode reproduces the same order.
    """
    return [
        OrderUpdate(id=_item_id(item), order_index=index)
        for index, item in enumerate(ordered)
    ]


# =============================================================================
# Filtering
# =============================================================================

def normalize_item_date(value: str | None) -> str:
    """Normalize a date to the stored dot-separated form."""
    return (value or "").strip().replace("-", ".")


def filter_items(
    items: Sequence[ContentItem],
    search: str | None = None,
    date_filter: str | date | None = None,
    subject: str | None = None,
    pinned_only: bool = False,
) -> list[ContentItem]:
    """
    Apply the sector view filters.

    Filtering is independent of ordering and keeps the input order.

    Args:
        items: Items to filter
        search: Case-insensitive substring matched against title and content
        date_filter: Exact date, in either YYYY.MM.DD or YYYY-MM-DD form
        subject: Exact subject ("General" matches items without one)
        pinned_only: Keep only pinned items
    """
    needle = (search or "").lower()
    if isinstance(date_filter, date):
        date_filter = date_filter.isoformat()
    wanted_date = normalize_item_date(date_filter) if date_filter else ""

    result = []
    for item in items:
        if needle and needle not in item.title.lower() and needle not in item.content.lower():
            continue
        if wanted_date and normalize_item_date(item.date) != wanted_date:
            continue
        if subject and (item.subject or "General") != subject:
            continue
        if pinned_only and not item.is_pinned:
            continue
        result.append(item)
    return result
