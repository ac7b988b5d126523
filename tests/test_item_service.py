# =============================================================================
# tests/test_item_service.py - Item Service Tests
# =============================================================================
# This module contains tests for:
# - Item creation (sanitization, defaults, side effects)
# - Reorder commits and their failure reporting
# - Server-side sector moves
# - The sector view (filters, virtual lectures)
#
# Tests use mocked Supabase responses to avoid database calls.
# =============================================================================

from datetime import date
from unittest.mock import patch

import pytest

from app.exceptions import InvalidItemError, ItemNotFoundError, ReorderCommitError, SectorNotFoundError
from core.models.content import OrderUpdate, Sector, SortPolicy
from core.services.item_service import ItemService
from tests.conftest import supabase_response


def ids(items):
    return [item.id for item in items]


@pytest.fixture
def quiet_side_effects():
    """Silence audit logging and push broadcast during writes."""
    with patch("core.services.item_service.AuditService.log_action") as audit, \
            patch("core.services.item_service.NotificationService.enqueue_broadcast") as push:
        yield audit, push


# =============================================================================
# Create / Update / Delete
# =============================================================================

class TestCreateItem:
    """Test publishing a new item."""

    def test_sanitizes_and_defaults(self, mock_client, quiet_side_effects):
        mock_client.table.return_value.insert.return_value.execute.return_value = supabase_response([
            {"id": "new-1", "title": "Quiz", "sector": "announcements"}
        ])

        ItemService.create_item(
            {
                "title": "<b>Quiz</b>",
                "content": "<p>See <b>notes</b></p><script>alert(1)</script>",
                "sector": "announcements",
                "date": "2024-03-05",
                "order_index": 9,
                "isUnread": True,
                "likes": 4,
            },
            username="admin",
        )

        row = inserted_row(mock_client)
        assert row["title"] == "Quiz"
        assert row["content"] == "<p>See <b>notes</b></p>"
        assert row["order_index"] == 0
        assert row["subject"] == "General"
        assert row["author"] == "Admin"
        assert row["date"] == "2024.03.05"
        assert row["id"]
        assert "isUnread" not in row
        assert "likes" not in row

    def test_triggers_audit_and_push(self, mock_client, quiet_side_effects):
        audit, push = quiet_side_effects
        mock_client.table.return_value.insert.return_value.execute.return_value = supabase_response([
            {"id": "new-1", "title": "Quiz", "sector": "announcements", "subject": "Math"}
        ])

        item = ItemService.create_item({"title": "Quiz", "sector": "announcements"}, username="alice")

        assert item["id"] == "new-1"
        audit.assert_called_once()
        assert audit.call_args.args[:2] == ("alice", "CREATE_ITEM")
        payload = push.call_args.args[0]
        assert payload.title == "New Post: Quiz"
        assert payload.body == "Sector: announcements | Subject: Math"
        assert payload.data == {"url": "/?item=new-1"}

    def test_registers_attached_file(self, mock_client, quiet_side_effects):
        mock_client.table.return_value.insert.return_value.execute.return_value = supabase_response([
            {"id": "new-1", "title": "Notes", "fileUrl": "https://files.example.com/n.pdf"}
        ])

        ItemService.create_item({"title": "Notes", "fileUrl": "https://files.example.com/n.pdf"}, username="alice")

        tables = [call.args[0] for call in mock_client.table.call_args_list]
        assert tables == ["items", "drive_registry"]

    def test_keeps_ampersands_and_links(self, mock_client, quiet_side_effects):
        link = "https://drive.google.com/file?id=1&usp=sharing"
        mock_client.table.return_value.insert.return_value.execute.return_value = supabase_response([
            {"id": "new-1", "title": "Q&A", "fileUrl": link}
        ])

        ItemService.create_item({"title": "Q&A", "subject": "R&D", "fileUrl": link}, username="alice")

        row = inserted_row(mock_client)
        assert row["title"] == "Q&A"
        assert row["subject"] == "R&D"
        assert row["fileUrl"] == link

    def test_rejects_script_links(self, mock_client, quiet_side_effects):
        with pytest.raises(InvalidItemError) as exc_info:
            ItemService.create_item({"title": "x", "fileUrl": "javascript:alert(1)"}, username="alice")

        assert exc_info.value.status_code == 400
        assert exc_info.value.details == {"field": "fileUrl"}
        mock_client.table.return_value.insert.assert_not_called()


def inserted_row(mock_client):
    return mock_client.table.return_value.insert.call_args.args[0]


class TestUpdateDelete:

    def test_update_strips_protected_fields(self, mock_client):
        update = mock_client.table.return_value.update
        update.return_value.eq.return_value.execute.return_value = supabase_response([{"id": "a"}])

        ItemService.update_item("a", {"id": "b", "created_at": "x", "isLiked": True, "title": "<i>T</i>"})

        sent = update.call_args.args[0]
        assert sent == {"title": "T"}
        update.return_value.eq.assert_called_once_with("id", "a")

    def test_update_is_idempotent(self, mock_client):
        update = mock_client.table.return_value.update
        update.return_value.eq.return_value.execute.return_value = supabase_response([{"id": "a"}])
        payload = {"title": "Q&A a < b", "content": '<p>R&D <a href="https://x.example/?a=1&b=2">link</a></p>'}

        ItemService.update_item("a", payload)
        first = update.call_args.args[0]
        ItemService.update_item("a", dict(first))
        second = update.call_args.args[0]

        assert first == second
        assert first["title"].startswith("Q&A")
        assert "&amp;" not in first["content"]

    def test_update_missing_item(self, mock_client):
        update = mock_client.table.return_value.update
        update.return_value.eq.return_value.execute.return_value = supabase_response([])

        with pytest.raises(ItemNotFoundError):
            ItemService.update_item("ghost", {"title": "T"})

    def test_delete_missing_item(self, mock_client):
        delete = mock_client.table.return_value.delete
        delete.return_value.eq.return_value.execute.return_value = supabase_response([])

        with pytest.raises(ItemNotFoundError):
            ItemService.delete_item("ghost")


# =============================================================================
# Reorder Commit
# =============================================================================

class TestCommitOrder:
    """Test persisting manual order."""

    def test_writes_only_order_index(self, mock_client):
        update = mock_client.table.return_value.update
        update.return_value.eq.return_value.execute.return_value = supabase_response([{"id": "x"}])

        count = ItemService.commit_order([
            OrderUpdate(id="a", order_index=0),
            OrderUpdate(id="b", order_index=1),
        ])

        assert count == 2
        assert [call.args[0] for call in update.call_args_list] == [{"order_index": 0}, {"order_index": 1}]
        assert [call.args for call in update.return_value.eq.call_args_list] == [("id", "a"), ("id", "b")]

    def test_failure_is_reported(self, mock_client):
        update = mock_client.table.return_value.update
        update.return_value.eq.return_value.execute.side_effect = [
            supabase_response([{"id": "a"}]),
            RuntimeError("connection reset"),
            supabase_response([]),
        ]

        with pytest.raises(ReorderCommitError) as exc_info:
            ItemService.commit_order([
                OrderUpdate(id="a", order_index=0),
                OrderUpdate(id="b", order_index=1),
                OrderUpdate(id="c", order_index=2),
            ])

        assert exc_info.value.status_code == 502
        assert exc_info.value.details["failed_ids"] == ["b", "c"]

    def test_virtual_items_skipped(self, mock_client):
        update = mock_client.table.return_value.update
        update.return_value.eq.return_value.execute.return_value = supabase_response([{"id": "a"}])

        count = ItemService.commit_order([
            OrderUpdate(id="virtual-os", order_index=0),
            OrderUpdate(id="a", order_index=1),
        ])

        assert count == 1
        update.assert_called_once_with({"order_index": 1})


# =============================================================================
# Sector Move
# =============================================================================

ROWS = [
    {"id": "a", "title": "A", "date": "2024.01.03", "order_index": 0},
    {"id": "b", "title": "B", "date": "2024.01.02", "order_index": 1},
    {"id": "c", "title": "C", "date": "2024.01.01", "order_index": 2},
]


class TestMoveItem:
    """Test server-side drag-and-drop."""

    def _patch(self, policy):
        sector = Sector(id="books", sortOrder=policy)
        return (
            patch("core.services.item_service.ConfigService.get_sector", return_value=sector),
            patch("core.services.item_service.SupabaseClient.fetch_items", return_value=ROWS),
            patch.object(ItemService, "commit_order"),
        )

    def test_manual_move_commits_new_order(self):
        get_sector, fetch, commit = self._patch(SortPolicy.MANUAL)
        with get_sector, fetch, commit as commit_mock:
            changed, ordered = ItemService.move_item("books", "c", "a")

        assert changed is True
        assert ids(ordered) == ["c", "a", "b"]
        updates = commit_mock.call_args.args[0]
        assert [(u.id, u.order_index) for u in updates] == [("c", 0), ("a", 1), ("b", 2)]

    def test_noop_when_not_manual(self):
        get_sector, fetch, commit = self._patch(SortPolicy.NEWEST)
        with get_sector, fetch, commit as commit_mock:
            changed, ordered = ItemService.move_item("books", "c", "a")

        assert changed is False
        assert ids(ordered) == ["a", "b", "c"]
        commit_mock.assert_not_called()

    def test_noop_for_unknown_item(self):
        get_sector, fetch, commit = self._patch(SortPolicy.MANUAL)
        with get_sector, fetch, commit as commit_mock:
            changed, _ = ItemService.move_item("books", "ghost", "a")

        assert changed is False
        commit_mock.assert_not_called()

    def test_unknown_sector(self):
        with patch("core.services.item_service.ConfigService.get_sector", side_effect=SectorNotFoundError("nope")):
            with pytest.raises(SectorNotFoundError):
                ItemService.move_item("nope", "a", "b")


# =============================================================================
# Sector View
# =============================================================================

class TestSectorView:
    """Test the public sector view."""

    def test_filters_then_orders(self):
        rows = [
            {"id": "old", "title": "Quiz 1", "date": "2024.01.01"},
            {"id": "new", "title": "Quiz 2", "date": "2024.02.01"},
            {"id": "other", "title": "Holiday", "date": "2024.03.01"},
            {"id": "pin", "title": "Quiz rules", "date": "2023.12.01", "isPinned": True},
        ]
        with patch("core.services.item_service.ConfigService.get_sector", return_value=Sector(id="announcements")), \
                patch("core.services.item_service.SupabaseClient.fetch_items", return_value=rows):
            sector, items = ItemService.sector_view("announcements", search="quiz")

        assert sector.id == "announcements"
        assert ids(items) == ["pin", "new", "old"]

    def test_lectures_sector_gets_virtual_posts(self):
        rules = [
            {"id": "os", "subject": "Operating Systems", "batch": "AICS", "days": ["Monday"], "startTime": "10:00"},
        ]
        rows = [{"id": "rec", "title": "Recording", "date": "2024.01.05", "sector": "lectures"}]
        with patch("core.services.item_service.ConfigService.get_sector", return_value=Sector(id="lectures")), \
                patch("core.services.item_service.SupabaseClient.fetch_items", return_value=rows), \
                patch("core.services.config_service.ConfigService.get_config", return_value={"schedules": rules}):
            _, items = ItemService.sector_view("lectures", batch="AICS", today=date(2024, 1, 8))

        assert ids(items) == ["virtual-os", "rec"]
        assert items[0].is_pinned

    def test_malformed_rows_skipped(self):
        rows = [{"id": "ok", "title": "Fine"}, {"title": "no id"}]
        with patch("core.services.item_service.ConfigService.get_sector", return_value=Sector(id="books")), \
                patch("core.services.item_service.SupabaseClient.fetch_items", return_value=rows):
            _, items = ItemService.sector_view("books")

        assert ids(items) == ["ok"]
