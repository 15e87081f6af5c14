"""Tests for the generic entity CRUD layer with mocked Supabase."""

from unittest.mock import MagicMock, patch

import pytest

from interview_engine.db.entities import (
    EntityKind,
    delete_rows,
    get_row,
    insert_rows,
    list_rows,
    soft_delete_row,
    update_row,
    upsert_rows,
)


@pytest.fixture
def mock_supabase():
    """Mock Supabase client."""
    with patch("interview_engine.db.entities.get_supabase") as mock:
        yield mock.return_value


def _response(data):
    mock_response = MagicMock()
    mock_response.data = data
    return mock_response


class TestListRows:
    def test_soft_delete_kind_filters_deleted(self, mock_supabase):
        query = mock_supabase.table.return_value.select.return_value
        query.eq.return_value = query
        query.execute.return_value = _response([{"id": 1}])

        result = list_rows(EntityKind.INTERVIEWS, {"company_id": "c1"})

        assert result == [{"id": 1}]
        mock_supabase.table.assert_called_once_with("interviews")
        query.eq.assert_any_call("company_id", "c1")
        query.eq.assert_any_call("is_deleted", False)

    def test_include_deleted(self, mock_supabase):
        query = mock_supabase.table.return_value.select.return_value
        query.eq.return_value = query
        query.execute.return_value = _response([])

        list_rows(EntityKind.INTERVIEWS, {"id": 3}, include_deleted=True)

        query.eq.assert_called_once_with("id", 3)

    def test_list_and_null_filters(self, mock_supabase):
        query = mock_supabase.table.return_value.select.return_value
        query.in_.return_value = query
        query.is_.return_value = query
        query.order.return_value = query
        query.execute.return_value = _response(None)

        result = list_rows(
            EntityKind.INTERVIEW_RESPONSE_ROLES,
            {"interview_response_id": [1, 2], "role_id": None},
            order_by="id",
        )

        assert result == []
        query.in_.assert_called_once_with("interview_response_id", [1, 2])
        query.is_.assert_called_once_with("role_id", "null")
        query.order.assert_called_once_with("id", desc=False)

    def test_descending_order(self, mock_supabase):
        query = mock_supabase.table.return_value.select.return_value
        query.eq.return_value = query
        query.order.return_value = query
        query.execute.return_value = _response([{"id": 2}, {"id": 1}])

        result = list_rows(EntityKind.INTERVIEWS, {"company_id": "c"}, order_by="id", descending=True)

        assert [r["id"] for r in result] == [2, 1]
        query.order.assert_called_once_with("id", desc=True)

    def test_empty_in_filter_skips_query(self, mock_supabase):
        assert list_rows(EntityKind.ROLES, {"id": []}) == []
        mock_supabase.table.assert_not_called()

    def test_error_propagates(self, mock_supabase):
        mock_supabase.table.return_value.select.side_effect = Exception("boom")

        with pytest.raises(Exception, match="boom"):
            list_rows(EntityKind.CONTACTS)


class TestGetRow:
    def test_missing_row(self, mock_supabase):
        query = mock_supabase.table.return_value.select.return_value
        query.eq.return_value = query
        query.execute.return_value = _response([])

        assert get_row(EntityKind.CONTACTS, 5) is None


class TestWrites:
    def test_insert_rows(self, mock_supabase):
        rows = [{"interview_id": 1, "role_id": 10}]
        mock_supabase.table.return_value.insert.return_value.execute.return_value = _response(
            [{"id": 7, **rows[0]}]
        )

        result = insert_rows(EntityKind.INTERVIEW_ROLES, rows)

        assert result == [{"id": 7, "interview_id": 1, "role_id": 10}]
        mock_supabase.table.return_value.insert.assert_called_once_with(rows)

    def test_insert_nothing(self, mock_supabase):
        assert insert_rows(EntityKind.INTERVIEW_ROLES, []) == []
        mock_supabase.table.assert_not_called()

    def test_insert_without_returned_data_raises(self, mock_supabase):
        mock_supabase.table.return_value.insert.return_value.execute.return_value = _response([])

        with pytest.raises(RuntimeError):
            insert_rows(EntityKind.INTERVIEWS, [{"name": "x"}])

    def test_upsert_passes_conflict_columns(self, mock_supabase):
        mock_supabase.table.return_value.upsert.return_value.execute.return_value = _response([{"id": 1}])

        upsert_rows(
            EntityKind.INTERVIEW_QUESTION_PART_RESPONSES,
            [{"interview_response_id": 1, "question_part_id": 2}],
            on_conflict="interview_response_id,question_part_id",
        )

        mock_supabase.table.return_value.upsert.assert_called_once_with(
            [{"interview_response_id": 1, "question_part_id": 2}],
            on_conflict="interview_response_id,question_part_id",
        )

    def test_update_row(self, mock_supabase):
        query = mock_supabase.table.return_value.update.return_value
        query.eq.return_value = query
        query.execute.return_value = _response([{"id": 4, "status": "completed"}])

        result = update_row(EntityKind.INTERVIEWS, 4, {"status": "completed"})

        assert result == {"id": 4, "status": "completed"}
        mock_supabase.table.return_value.update.assert_called_once_with({"status": "completed"})
        query.eq.assert_called_once_with("id", 4)

    def test_delete_requires_filters(self, mock_supabase):
        with pytest.raises(ValueError):
            delete_rows(EntityKind.INTERVIEW_RESPONSES, {})

    def test_delete_rows(self, mock_supabase):
        query = mock_supabase.table.return_value.delete.return_value
        query.eq.return_value = query

        delete_rows(EntityKind.INTERVIEW_RESPONSES, {"interview_id": 9})

        query.eq.assert_called_once_with("interview_id", 9)
        query.execute.assert_called_once()

    def test_soft_delete_sets_flag(self, mock_supabase):
        query = mock_supabase.table.return_value.update.return_value
        query.eq.return_value = query
        query.execute.return_value = _response([{"id": 2, "is_deleted": True}])

        soft_delete_row(EntityKind.INTERVIEW_RESPONSE_ACTIONS, 2)

        patch_arg = mock_supabase.table.return_value.update.call_args[0][0]
        assert patch_arg["is_deleted"] is True
        assert "deleted_at" in patch_arg

    def test_soft_delete_unsupported_kind(self, mock_supabase):
        with pytest.raises(ValueError):
            soft_delete_row(EntityKind.INTERVIEW_RESPONSES, 2)
