# =============================================================================
# tests/test_schedule.py - Lecture Schedule Tests
# =============================================================================
# This module contains tests for:
# - Rule parsing (legacy dayOfWeek, blank form values, malformed entries)
# - Today's lectures per batch and date range
# - The weekly timetable
# - Virtual lecture posts for the lectures sector
# =============================================================================

from datetime import date, datetime

import pytest

from core.models.schedule import WEEKDAYS, Batch
from lib.schedule import (
    build_virtual_lectures,
    is_virtual_item,
    parse_rules,
    resolve_today,
    resolve_week,
    weekday_name,
)
from tests.conftest import make_item

MONDAY = date(2024, 1, 8)
WEDNESDAY = date(2024, 1, 10)
FRIDAY = date(2024, 1, 12)
SUNDAY = date(2024, 1, 14)


def ids(rules):
    return [rule.id for rule in rules]


@pytest.fixture
def rules(sample_rules):
    return parse_rules(sample_rules)


# =============================================================================
# Parsing Tests
# =============================================================================

class TestParseRules:
    """Test lecture rule validation."""

    def test_parses_all_valid_rules(self, rules):
        assert ids(rules) == ["os", "ml", "seminar", "legacy", "off"]

    def test_skips_malformed_rules(self):
        raw = [
            {"id": "ok", "subject": "Math", "days": ["Monday"]},
            {"subject": "No id"},
            {"id": "bad-batch", "batch": "XYZ"},
        ]
        assert ids(parse_rules(raw)) == ["ok"]

    def test_none_config(self):
        assert parse_rules(None) == []

    def test_legacy_day_of_week(self, rules):
        legacy = next(rule for rule in rules if rule.id == "legacy")
        assert legacy.weekdays == ["Friday"]

    def test_days_take_precedence_over_legacy_field(self):
        [rule] = parse_rules([{"id": "r", "days": ["Tuesday"], "dayOfWeek": "Monday"}])
        assert rule.weekdays == ["Tuesday"]

    def test_blank_form_values_become_none(self):
        [rule] = parse_rules([{"id": "r", "batch": "", "startDate": "", "startTime": ""}])
        assert rule.batch is None
        assert rule.start_date is None
        assert rule.start_time is None

    def test_rule_without_days_is_never_scheduled(self):
        [rule] = parse_rules([{"id": "r", "subject": "Nowhere"}])
        assert rule.weekdays == []
        week = resolve_week([rule], None)
        assert all(day == [] for day in week.values())


class TestWeekdayName:

    def test_monday_first(self):
        assert weekday_name(MONDAY) == "Monday"
        assert weekday_name(SUNDAY) == "Sunday"
        assert WEEKDAYS[0] == "Monday"


# =============================================================================
# Today Tests
# =============================================================================

class TestResolveToday:
    """Test today's lectures."""

    def test_batch_filter_and_time_order(self, rules):
        assert ids(resolve_today(rules, Batch.AICS, MONDAY)) == ["seminar", "os"]
        assert ids(resolve_today(rules, "CSDA", MONDAY)) == ["seminar", "ml"]

    def test_no_batch_returns_everything(self, rules):
        assert ids(resolve_today(rules, None, MONDAY)) == ["seminar", "ml", "os"]

    def test_inactive_rules_excluded(self, rules):
        assert "off" not in ids(resolve_today(rules, Batch.AICS, MONDAY))

    def test_other_weekday(self, rules):
        assert ids(resolve_today(rules, Batch.AICS, WEDNESDAY)) == ["os"]
        assert ids(resolve_today(rules, Batch.AICS, FRIDAY)) == ["legacy"]
        assert resolve_today(rules, Batch.AICS, SUNDAY) == []

    def test_accepts_datetime(self, rules):
        assert ids(resolve_today(rules, Batch.AICS, datetime(2024, 1, 8, 23, 59))) == ["seminar", "os"]

    def test_date_range_enforced(self):
        rules = parse_rules([
            {"id": "future", "days": ["Monday"], "startDate": "2024-02-01"},
            {"id": "ended", "days": ["Monday"], "endDate": "2024-01-01"},
            {"id": "current", "days": ["Monday"], "startDate": "2024-01-08", "endDate": "2024-01-08"},
        ])
        assert ids(resolve_today(rules, None, MONDAY)) == ["current"]

    def test_date_range_can_be_ignored(self):
        rules = parse_rules([{"id": "future", "days": ["Monday"], "startDate": "2024-02-01"}])
        assert ids(resolve_today(rules, None, MONDAY, enforce_date_range=False)) == ["future"]

    def test_rules_without_start_time_sort_last(self):
        rules = parse_rules([
            {"id": "untimed", "days": ["Monday"]},
            {"id": "late", "days": ["Monday"], "startTime": "16:00"},
            {"id": "early", "days": ["Monday"], "startTime": "08:30"},
        ])
        assert ids(resolve_today(rules, None, MONDAY)) == ["early", "late", "untimed"]


# =============================================================================
# Week Tests
# =============================================================================

class TestResolveWeek:
    """Test the weekly timetable."""

    def test_always_seven_days_monday_first(self, rules):
        week = resolve_week(rules, Batch.AICS)
        assert list(week.keys()) == list(WEEKDAYS)

    def test_days_for_batch(self, rules):
        week = resolve_week(rules, Batch.AICS)
        assert ids(week["Monday"]) == ["seminar", "os"]
        assert ids(week["Wednesday"]) == ["os"]
        assert ids(week["Friday"]) == ["legacy"]
        assert week["Tuesday"] == []
        assert week["Sunday"] == []

    def test_empty_rules(self):
        week = resolve_week([], Batch.CSDA)
        assert len(week) == 7
        assert all(lectures == [] for lectures in week.values())

    def test_week_ignores_date_range(self):
        rules = parse_rules([{"id": "future", "days": ["Monday"], "startDate": "2099-01-01"}])
        assert ids(resolve_week(rules, None)["Monday"]) == ["future"]


# =============================================================================
# Virtual Lecture Tests
# =============================================================================

class TestBuildVirtualLectures:
    """Test pinned lecture posts injected into the lectures sector."""

    def test_builds_pinned_posts(self, rules):
        posts = build_virtual_lectures(rules, Batch.AICS, MONDAY)

        assert [post.id for post in posts] == ["virtual-seminar", "virtual-os"]
        os_post = posts[1]
        assert os_post.is_pinned
        assert os_post.title == "Operating Systems"
        assert os_post.date == "2024.01.08"
        assert os_post.sector == "lectures"
        assert os_post.author == "Scheduler"
        assert os_post.file_url == "https://meet.example.com/os"
        assert os_post.content == "Scheduled Lecture at 10:00."

    def test_custom_message(self):
        rules = parse_rules([{"id": "r", "subject": "AI", "days": ["Monday"], "customMessage": "Room 4"}])
        [post] = build_virtual_lectures(rules, None, MONDAY)
        assert post.content == "Room 4"

    def test_skips_lecture_already_posted(self, rules):
        existing = [
            make_item(
                "real",
                title="Operating Systems - week 2 recording",
                subject="Operating Systems",
                date="2024-01-08",
                sector="lectures",
            )
        ]
        posts = build_virtual_lectures(rules, Batch.AICS, MONDAY, existing_items=existing)
        assert [post.id for post in posts] == ["virtual-seminar"]

    def test_post_on_other_day_does_not_suppress(self, rules):
        existing = [
            make_item("real", title="Operating Systems", subject="Operating Systems", date="2024.01.01")
        ]
        posts = build_virtual_lectures(rules, Batch.AICS, MONDAY, existing_items=existing)
        assert "virtual-os" in [post.id for post in posts]

    def test_is_virtual_item(self):
        assert is_virtual_item("virtual-os")
        assert not is_virtual_item("8f0c-1234")
