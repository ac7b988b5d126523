# =============================================================================
# tests/test_ordering.py - Sort & Reorder Engine Tests
# =============================================================================
# This module contains tests for:
# - Natural title keys and date parsing
# - Display order for every sort policy
# - Drag-and-drop reorder and the positions it persists
# - Sector view filters
# =============================================================================

import random

import pytest

from core.models.content import SortPolicy
from lib.ordering import (
    build_order_updates,
    compute_display_order,
    filter_items,
    natural_key,
    parse_item_date,
    reorder,
)
from tests.conftest import make_item


def ids(items):
    return [item.id for item in items]


# =============================================================================
# Key Tests
# =============================================================================

class TestNaturalKey:
    """Test numeric-aware, case-insensitive title keys."""

    def test_numbers_compare_by_value(self):
        titles = ["Item 10", "Item 2", "Item 1"]
        assert sorted(titles, key=natural_key) == ["Item 1", "Item 2", "Item 10"]

    def test_case_insensitive(self):
        assert natural_key("LECTURE") == natural_key("lecture")

    def test_accents_ignored(self):
        assert natural_key("Résumé") == natural_key("resume")

    def test_empty_title(self):
        assert natural_key("") == []
        assert natural_key(None) == []


class TestParseItemDate:
    """Test item date parsing."""

    def test_dot_and_dash_forms_are_equal(self):
        assert parse_item_date("2024.03.05") == parse_item_date("2024-03-05")

    def test_later_date_is_larger(self):
        assert parse_item_date("2024.03.06") > parse_item_date("2024.03.05")

    def test_time_component_ignored(self):
        assert parse_item_date("2024-03-05T10:00:00") == parse_item_date("2024.03.05")

    @pytest.mark.parametrize("value", ["", None, "someday", "2024.13.45"])
    def test_unparsable_is_zero(self, value):
        assert parse_item_date(value) == 0


# =============================================================================
# Display Order Tests
# =============================================================================

class TestComputeDisplayOrder:
    """Test ordering per sort policy."""

    def test_newest(self, sample_items):
        result = compute_display_order(sample_items, SortPolicy.NEWEST)
        assert ids(result) == ["c", "b", "d", "a", "e"]

    def test_oldest(self, sample_items):
        result = compute_display_order(sample_items, SortPolicy.OLDEST)
        assert ids(result) == ["c", "e", "a", "d", "b"]

    def test_alphabetical_is_numeric_aware(self, sample_items):
        result = compute_display_order(sample_items, "alphabetical")
        assert ids(result) == ["c", "e", "d", "b", "a"]

    def test_manual_uses_order_index(self):
        items = [
            make_item("x", date="2024.01.03", order_index=2),
            make_item("y", date="2024.01.01", order_index=0),
            make_item("z", date="2024.01.02", order_index=1),
        ]
        result = compute_display_order(items, SortPolicy.MANUAL)
        assert ids(result) == ["y", "z", "x"]

    def test_manual_ties_fall_back_to_newest(self):
        items = [
            make_item("old", date="2024.01.01", order_index=0),
            make_item("new", date="2024.02.01", order_index=0),
        ]
        result = compute_display_order(items, SortPolicy.MANUAL)
        assert ids(result) == ["new", "old"]

    @pytest.mark.parametrize("policy", list(SortPolicy))
    def test_pinned_items_form_a_prefix(self, sample_items, policy):
        result = compute_display_order(sample_items, policy)
        pinned_flags = [item.is_pinned for item in result]
        first_unpinned = pinned_flags.index(False)
        assert all(pinned_flags[:first_unpinned])
        assert not any(pinned_flags[first_unpinned:])

    @pytest.mark.parametrize("policy", list(SortPolicy))
    def test_deterministic_and_pure(self, sample_items, policy):
        original = list(sample_items)
        shuffled = list(sample_items)
        random.Random(7).shuffle(shuffled)

        first = compute_display_order(sample_items, policy)
        second = compute_display_order(sample_items, policy)

        assert ids(first) == ids(second)
        assert sorted(ids(first)) == sorted(ids(original))
        assert ids(sample_items) == ids(original)
        assert ids(compute_display_order(shuffled, policy)) == ids(first)

    def test_newest_is_reverse_of_oldest_for_distinct_dates(self):
        items = [
            make_item("p", date="2024.05.01"),
            make_item("q", date="2024.01.15"),
            make_item("r", date="2024.03.10"),
        ]
        newest = compute_display_order(items, SortPolicy.NEWEST)
        oldest = compute_display_order(items, SortPolicy.OLDEST)
        assert ids(newest) == list(reversed(ids(oldest)))

    @pytest.mark.parametrize("policy", [None, "", "random"])
    def test_unknown_policy_behaves_as_newest(self, sample_items, policy):
        expected = compute_display_order(sample_items, SortPolicy.NEWEST)
        assert ids(compute_display_order(sample_items, policy)) == ids(expected)

    def test_empty_sector(self):
        assert compute_display_order([], SortPolicy.MANUAL) == []


# =============================================================================
# Reorder Tests
# =============================================================================

class TestReorder:
    """Test drag-and-drop moves."""

    @pytest.fixture
    def ordered(self):
        return [make_item(item_id) for item_id in ["a", "b", "c", "d"]]

    def test_drag_down_lands_after_target(self, ordered):
        result = reorder(ordered, "a", "c")
        assert ids(result) == ["b", "c", "a", "d"]

    def test_drag_up_lands_before_target(self, ordered):
        result = reorder(ordered, "d", "b")
        assert ids(result) == ["a", "d", "b", "c"]

    def test_input_not_mutated(self, ordered):
        reorder(ordered, "a", "d")
        assert ids(ordered) == ["a", "b", "c", "d"]

    def test_same_id_is_noop(self, ordered):
        assert ids(reorder(ordered, "b", "b")) == ["a", "b", "c", "d"]

    def test_unknown_id_is_noop(self, ordered):
        assert ids(reorder(ordered, "missing", "b")) == ["a", "b", "c", "d"]
        assert ids(reorder(ordered, "a", "missing")) == ["a", "b", "c", "d"]

    @pytest.mark.parametrize("policy", [SortPolicy.NEWEST, SortPolicy.OLDEST, SortPolicy.ALPHABETICAL])
    def test_noop_outside_manual_mode(self, ordered, policy):
        assert ids(reorder(ordered, "a", "c", policy)) == ["a", "b", "c", "d"]

    def test_works_on_plain_dicts(self):
        rows = [{"id": "a"}, {"id": "b"}, {"id": "c"}]
        assert [row["id"] for row in reorder(rows, "c", "a")] == ["c", "a", "b"]


class TestBuildOrderUpdates:
    """Test the positions persisted after a move."""

    def test_indexes_follow_list_position(self):
        items = [make_item("b"), make_item("a")]
        updates = build_order_updates(items)
        assert [(u.id, u.order_index) for u in updates] == [("b", 0), ("a", 1)]

    def test_manual_round_trip(self):
        items = [
            make_item("a", order_index=0, date="2024.01.04"),
            make_item("b", order_index=1, date="2024.01.03"),
            make_item("c", order_index=2, date="2024.01.02"),
            make_item("d", order_index=3, date="2024.01.01"),
        ]
        moved = reorder(compute_display_order(items, SortPolicy.MANUAL), "d", "a")

        positions = {u.id: u.order_index for u in build_order_updates(moved)}
        committed = [item.model_copy(update={"order_index": positions[item.id]}) for item in items]

        assert ids(compute_display_order(committed, SortPolicy.MANUAL)) == ids(moved)
        assert ids(moved) == ["d", "a", "b", "c"]


# =============================================================================
# Filter Tests
# =============================================================================

class TestFilterItems:
    """Test sector view filters."""

    def test_search_matches_title_and_content(self):
        items = [
            make_item("t", title="Midterm results"),
            make_item("c", title="Notice", content="The MIDTERM room changed"),
            make_item("n", title="Other"),
        ]
        assert ids(filter_items(items, search="midterm")) == ["t", "c"]

    def test_search_ignores_subject(self):
        items = [make_item("s", title="Week 3", subject="Midterm prep")]
        assert filter_items(items, search="midterm") == []

    def test_date_filter_accepts_either_separator(self, sample_items):
        assert ids(filter_items(sample_items, date_filter="2024-03-03")) == ["d"]
        assert ids(filter_items(sample_items, date_filter="2024.03.05")) == ["b"]

    def test_subject_filter(self):
        items = [
            make_item("x", subject="Algorithms"),
            make_item("y"),
        ]
        assert ids(filter_items(items, subject="General")) == ["y"]
        assert ids(filter_items(items, subject="Algorithms")) == ["x"]

    def test_pinned_only(self, sample_items):
        assert ids(filter_items(sample_items, pinned_only=True)) == ["c"]

    def test_no_filters_keeps_input_order(self, sample_items):
        assert ids(filter_items(sample_items)) == ids(sample_items)
