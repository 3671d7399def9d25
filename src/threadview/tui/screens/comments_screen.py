import logging
from functools import partial
from typing import TYPE_CHECKING, Callable, Optional, Tuple

from textual import work
from textual.app import ComposeResult
from textual.containers import Container
from textual.screen import Screen
from textual.widgets import Footer, Header, Input, Static

from threadview.core.client import CommentsClient
from threadview.core.models import SORT_KEYS, SORT_LABELS
from threadview.core.session import CommentsSession, DisplayModel, Severity, ViewHost
from threadview.core.utils import escape_markup
from threadview.core.view_state import LIMIT_CHOICES
from threadview.tui.components.comment_tree import CommentTree
from threadview.tui.screens.comment_modal import CommentModal
from threadview.tui.screens.confirm_delete_modal import ConfirmDeleteModal
from threadview.tui.screens.help_modal import HelpModal

if TYPE_CHECKING:
    from threadview.core.models import CommentNode

logger = logging.getLogger(__name__)


class ScreenHost(ViewHost):
    """Adapts ``CommentsScreen`` to the session's host interface.

    The session calls in from worker threads; every drawing call is
    marshalled back onto the app thread. ``confirm`` is only reached from
    key actions, which already run on the app thread.
    """

    def __init__(self, screen: "CommentsScreen"):
        self.screen = screen

    def show_loading(self, text: str) -> None:
        self.screen.app.call_from_thread(self.screen.show_loading, text)

    def show_comments(self, display: DisplayModel) -> None:
        self.screen.app.call_from_thread(self.screen.display_comments, display)

    def clear_comments(self) -> None:
        self.screen.app.call_from_thread(self.screen.clear_comments)

    def notify(self, message: str, severity: Severity, timeout: float) -> None:
        self.screen.app.call_from_thread(
            self.screen.notify, escape_markup(message), severity=severity, timeout=timeout
        )

    def confirm(self, prompt: str, on_result: Callable[[bool], None]) -> None:
        selected = self.screen.selected_comment
        preview = selected.content if selected is not None else ""
        self.screen.app.push_screen(
            ConfirmDeleteModal(prompt, preview), partial(self.screen.resolve_confirmation, on_result)
        )


class CommentsScreen(Screen):
    """Main screen: caption, search box and the comment tree."""

    BINDINGS = [
        ("n", "new_comment", "New"),
        ("r", "reply", "Reply"),
        ("t", "open_thread", "Thread"),
        ("d", "delete_comment", "Delete"),
        ("delete", "delete_comment", "Delete"),
        ("left_square_bracket", "previous_page", "Prev"),
        ("right_square_bracket", "next_page", "Next"),
        ("s", "toggle_sort", "Sort"),
        ("l", "cycle_limit", "Limit"),
        ("slash", "focus_search", "Search"),
        ("escape", "show_pages", "Pages"),
        ("f5", "refresh", "Reload"),
        ("q", "quit", "Quit"),
        ("?", "help", "Help"),
    ]

    def __init__(self, client: CommentsClient):
        super().__init__()
        self.session = CommentsSession(client, ScreenHost(self))

    def compose(self) -> ComposeResult:
        """Create child widgets for the comments screen."""
        yield Header(show_clock=True)
        yield Container(
            Input(
                id="search-input",
                placeholder="Search author or content (Enter to search, empty to clear)",
            ),
            Static("", id="caption"),
            CommentTree(id="comment-tree"),
            Static("", id="preferences"),
            id="content",
        )
        yield Footer()

    def on_mount(self) -> None:
        """Initialize the screen when mounted."""
        self._update_preferences()
        self.query_one(CommentTree).focus()
        self.load_comments()

    @work(exclusive=True, thread=True)
    def load_comments(self) -> None:
        """Run a session refresh in a background thread."""
        self.session.refresh()

    @work(thread=True)
    def submit_comment(self, parent_id: Optional[int], author: str, content: str) -> None:
        """Create a comment in a background thread."""
        self.session.create_comment(parent_id, author, content)

    @work(thread=True)
    def resolve_confirmation(self, on_result: Callable[[bool], None], confirmed: Optional[bool]) -> None:
        """Deliver a confirmation answer off the app thread."""
        on_result(bool(confirmed))

    # ------------------------------------------------------------------
    # Drawing (app thread)
    # ------------------------------------------------------------------

    def show_loading(self, text: str) -> None:
        self.query_one(CommentTree).show_message(text)

    def display_comments(self, display: DisplayModel) -> None:
        self.query_one(CommentTree).show_forest(display.forest)
        self.query_one("#caption", Static).update(escape_markup(display.caption))
        self._update_preferences()

    def clear_comments(self) -> None:
        self.query_one(CommentTree).clear()

    def _update_preferences(self) -> None:
        state = self.session.state
        self.query_one("#preferences", Static).update(
            f"Sort: {SORT_LABELS[state.sort]} · Page size: {state.limit}"
        )

    @property
    def selected_comment(self) -> Optional["CommentNode"]:
        return self.query_one(CommentTree).selected_comment

    def _require_selection(self) -> Optional["CommentNode"]:
        comment = self.selected_comment
        if comment is None:
            self.notify("No comment selected", severity="warning")
        return comment

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Run a search from the search box."""
        if event.input.id != "search-input":
            return
        self.session.open_search(event.value)
        if self.session.state.mode != "search":
            event.input.value = ""
        self.query_one(CommentTree).focus()
        self.load_comments()

    def action_focus_search(self) -> None:
        self.query_one("#search-input", Input).focus()

    def action_show_pages(self) -> None:
        """Return to the paged list from a thread or search."""
        self.query_one("#search-input", Input).value = ""
        self.query_one(CommentTree).focus()
        self.session.show_pages()
        self.load_comments()

    def action_next_page(self) -> None:
        self.session.next_page()
        self.load_comments()

    def action_previous_page(self) -> None:
        self.session.previous_page()
        self.load_comments()

    def action_toggle_sort(self) -> None:
        current = SORT_KEYS.index(self.session.state.sort)
        self.session.set_sort(SORT_KEYS[(current + 1) % len(SORT_KEYS)])
        self.load_comments()

    def action_cycle_limit(self) -> None:
        limit = self.session.state.limit
        larger = [choice for choice in LIMIT_CHOICES if choice > limit]
        self.session.set_limit(larger[0] if larger else LIMIT_CHOICES[0])
        self.load_comments()

    def action_open_thread(self) -> None:
        comment = self._require_selection()
        if comment is None:
            return
        self.session.open_thread(comment.id)
        self.load_comments()

    def action_refresh(self) -> None:
        self.load_comments()

    def action_new_comment(self) -> None:
        self.app.push_screen(CommentModal(), partial(self.on_comment_written, None))

    def action_reply(self) -> None:
        comment = self._require_selection()
        if comment is None:
            return
        self.app.push_screen(CommentModal(comment.id), partial(self.on_comment_written, comment.id))

    def on_comment_written(self, parent_id: Optional[int], result: Optional[Tuple[str, str]]) -> None:
        """Callback after the comment modal closes."""
        if result is None:
            return
        author, content = result
        self.submit_comment(parent_id, author, content)

    def action_delete_comment(self) -> None:
        comment = self._require_selection()
        if comment is None:
            return
        self.session.request_delete(comment.id)

    def action_help(self) -> None:
        """Show help screen."""
        self.app.push_screen(HelpModal())

    def action_quit(self) -> None:
        """Quit the application."""
        self.app.exit()
