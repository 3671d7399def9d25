"""Tests for delete functionality in the TUI."""

from unittest.mock import Mock, PropertyMock, patch

import pytest

from helpers import node
from threadview.tui.screens.comments_screen import CommentsScreen
from threadview.tui.screens.confirm_delete_modal import ConfirmDeleteModal


@pytest.fixture
def screen():
    comments_screen = CommentsScreen(Mock())
    comments_screen.query_one = Mock(return_value=Mock())
    comments_screen.load_comments = Mock()
    comments_screen.notify = Mock()
    return comments_screen


class TestConfirmDeleteModal:
    """Test cases for ConfirmDeleteModal."""

    def test_modal_initialization(self):
        modal = ConfirmDeleteModal("Delete comment 1 and all nested replies?", "hello")
        assert modal.prompt == "Delete comment 1 and all nested replies?"
        assert modal.preview == "hello"

    def test_modal_stores_full_preview(self):
        """Truncation happens in compose() when rendering."""
        long_text = "x" * 150
        modal = ConfirmDeleteModal("Delete?", long_text)
        assert modal.preview == long_text


class TestCommentsScreenDelete:
    def test_delete_without_selection_warns(self, screen):
        screen.query_one.return_value.selected_comment = None
        screen.action_delete_comment()
        screen.notify.assert_called_once_with("No comment selected", severity="warning")

    def test_delete_pushes_confirmation_modal(self, screen):
        screen.query_one.return_value.selected_comment = node(5, "Al", "doomed")
        with patch.object(CommentsScreen, "app", new_callable=PropertyMock) as mock_app:
            screen.action_delete_comment()
            modal, callback = mock_app.return_value.push_screen.call_args.args

        assert isinstance(modal, ConfirmDeleteModal)
        assert modal.prompt == "Delete comment 5 and all nested replies?"
        assert modal.preview == "doomed"
        screen.session.client.delete_comment.assert_not_called()

    def test_confirmation_answer_goes_to_session(self, screen):
        """The modal callback hands the answer to the session callback."""
        screen.query_one.return_value.selected_comment = node(5, "Al", "doomed")
        screen.resolve_confirmation = Mock()
        with patch.object(CommentsScreen, "app", new_callable=PropertyMock) as mock_app:
            screen.action_delete_comment()
            _, callback = mock_app.return_value.push_screen.call_args.args

        callback(False)
        on_result, confirmed = screen.resolve_confirmation.call_args.args
        assert confirmed is False

        # Declining is silent: nothing is deleted, nothing is reloaded
        on_result(False)
        screen.session.client.delete_comment.assert_not_called()
        screen.session.client.list_forest.assert_not_called()
