# =============================================================================
# lib/schedule.py - Lecture Schedule Resolution
# =============================================================================
# Turns the flat list of recurring lecture rules stored in the portal config
# into:
#   - today's lectures for a batch (resolve_today)
#   - the full weekly timetable for a batch (resolve_week)
#   - pinned "virtual" posts injected into the lectures sector
#     (build_virtual_lectures)
#
# All functions are pure: they read their inputs and return new objects.
#
# Usage:
#   from lib.schedule import parse_rules, resolve_today, resolve_week
#
#   rules = parse_rules(config.get("schedules"))
#   today = resolve_today(rules, Batch.AICS, date.today())
#   week = resolve_week(rules, Batch.AICS)
# =============================================================================

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Iterable, Sequence

from pydantic import ValidationError

from core.models.content import ContentItem, ItemType
from core.models.schedule import WEEKDAYS, Batch, LectureRule

logger = logging.getLogger(__name__)

LECTURES_SECTOR = "lectures"
VIRTUAL_PREFIX = "virtual-"


def parse_rules(raw_rules: Iterable[dict[str, Any] | LectureRule] | None) -> list[LectureRule]:
    """
    Validate stored rules, skipping malformed entries.

    One broken rule in the config must not take the whole timetable down,
    so invalid entries are logged and dropped.
    """
    rules: list[LectureRule] = []
    for raw in raw_rules or []:
        if isinstance(raw, LectureRule):
            rules.append(raw)
            continue
        try:
            rules.append(LectureRule.model_validate(raw))
        except ValidationError as e:
            logger.warning(f"Skipping malformed lecture rule {raw.get('id') if isinstance(raw, dict) else raw!r}: {e}")
    return rules


def weekday_name(day: date) -> str:
    """English weekday name, independent of the process locale."""
    return WEEKDAYS[day.weekday()]


def _matches_batch(rule: LectureRule, batch: Batch | str | None) -> bool:
    if batch is None or rule.batch is None:
        return True
    return rule.batch == Batch(batch)


def _within_date_range(rule: LectureRule, day: date) -> bool:
    if rule.start_date and day < rule.start_date:
        return False
    if rule.end_date and day > rule.end_date:
        return False
    return True


def _start_time_key(rule: LectureRule) -> tuple[bool, str]:
    # HH:mm is fixed width, so string order is time order; missing times go last
    return (rule.start_time is None, rule.start_time or "")


def rules_for_weekday(
    rules: Sequence[LectureRule],
    batch: Batch | str | None,
    weekday: str,
) -> list[LectureRule]:
    """Active, batch-matching rules recurring on a weekday, by start time."""
    matching = [
        rule for rule in rules
        if rule.is_active
        and _matches_batch(rule, batch)
        and weekday in rule.weekdays
    ]
    return sorted(matching, key=_start_time_key)


def resolve_today(
    rules: Sequence[LectureRule],
    batch: Batch | str | None,
    today: date | datetime,
    enforce_date_range: bool = True,
) -> list[LectureRule]:
    """
    Lectures scheduled on a given day for a batch.

    A rule matches when it is active, its batch matches (rules without a
    batch match every batch), and the day's weekday is one of its days.
    With enforce_date_range, rules whose startDate/endDate exclude the
    day are dropped as well.

    Args:
        rules: Parsed lecture rules
        batch: Requested batch, or None for every batch
        today: Reference date
        enforce_date_range: Apply startDate/endDate bounds

    Returns:
        Matching rules ordered by startTime
    """
    if isinstance(today, datetime):
        today = today.date()

    todays = rules_for_weekday(rules, batch, weekday_name(today))
    if enforce_date_range:
        todays = [rule for rule in todays if _within_date_range(rule, today)]
    return todays


def resolve_week(
    rules: Sequence[LectureRule],
    batch: Batch | str | None,
) -> dict[str, list[LectureRule]]:
    """
    Weekly timetable for a batch.

    Always returns all seven weekdays, Monday first, with an empty list
    for days that have nothing scheduled.
    """
    return {day: rules_for_weekday(rules, batch, day) for day in WEEKDAYS}


def build_virtual_lectures(
    rules: Sequence[LectureRule],
    batch: Batch | str | None,
    today: date | datetime,
    existing_items: Sequence[ContentItem] = (),
    enforce_date_range: bool = True,
) -> list[ContentItem]:
    """
    Project today's lectures as pinned posts for the lectures sector.

    A lecture is skipped when a real post already covers it: same date,
    same subject, and a title containing the lecture subject.
    """
    if isinstance(today, datetime):
        today = today.date()
    today_str = today.strftime("%Y.%m.%d")

    virtual: list[ContentItem] = []
    for rule in resolve_today(rules, batch, today, enforce_date_range=enforce_date_range):
        already_posted = any(
            item.date.replace("-", ".") == today_str
            and item.subject == rule.subject
            and rule.subject in item.title
            for item in existing_items
        )
        if already_posted:
            continue

        start = rule.start_time or "TBA"
        virtual.append(ContentItem(
            id=f"{VIRTUAL_PREFIX}{rule.id}",
            title=rule.subject,
            content=rule.custom_message or f"Scheduled Lecture at {start}.",
            date=today_str,
            type=ItemType.VIDEO,
            sector=LECTURES_SECTOR,
            subject=rule.subject or "General",
            isPinned=True,
            author="Scheduler",
            fileUrl=rule.link,
            image=rule.image,
        ))
    return virtual


def is_virtual_item(item_id: str) -> bool:
    """Virtual lecture posts exist only in responses and can't be edited or reordered."""
    return item_id.startswith(VIRTUAL_PREFIX)
