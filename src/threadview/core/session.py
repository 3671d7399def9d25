"""Render/sync orchestration for the comment view.

``CommentsSession`` owns the view state, turns it into fetches through the
client, and hands display models and notifications to a ``ViewHost``. It is
the only place where service failures become user-visible messages.
"""

import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from functools import partial
from typing import Callable, Literal, Optional

from threadview.core import view_state
from threadview.core.client import CommentServiceError, CommentsClient
from threadview.core.filtering import count_nodes, filter_forest
from threadview.core.models import Forest, NewComment, SortKey, ViewMode
from threadview.core.view_state import ViewState

logger = logging.getLogger(__name__)

Severity = Literal["information", "warning", "error"]

# Seconds a transient notification stays on screen
NOTIFICATION_TIMEOUT = 4.0


@dataclass(frozen=True)
class DisplayModel:
    """What the host should show after a successful refresh."""

    forest: Forest
    caption: str
    mode: ViewMode

    @property
    def is_empty(self) -> bool:
        return not self.forest


class ViewHost(ABC):
    """Rendering surface the session drives.

    Implementations decide how to draw; the session decides what.
    """

    @abstractmethod
    def show_loading(self, text: str) -> None:
        """Replace the comment area with a transient loading message."""

    @abstractmethod
    def show_comments(self, display: DisplayModel) -> None:
        """Draw a forest and its status caption."""

    @abstractmethod
    def clear_comments(self) -> None:
        """Empty the comment area after a failed load."""

    @abstractmethod
    def notify(self, message: str, severity: Severity, timeout: float) -> None:
        """Show a transient notification."""

    @abstractmethod
    def confirm(self, prompt: str, on_result: Callable[[bool], None]) -> None:
        """Ask the user to confirm, reporting the answer through ``on_result``.

        The answer may arrive later; declining must call ``on_result(False)``
        or not call it at all.
        """


def build_caption(state: ViewState, forest: Forest) -> str:
    """Status caption for a rendered view."""
    if state.mode == "thread":
        return f"Thread {state.thread_parent_id}"
    if state.mode == "search":
        return f'Search: "{state.search_query}" — {count_nodes(forest)} results'
    return f"Page {state.page}"


class CommentsSession:
    """Session context for one browsing session.

    Transition methods only update state; the host calls ``refresh()`` after
    them. Each refresh is tagged with a sequence number and a completion that
    is no longer the newest one issued is dropped, so a slow response can
    never overwrite the view of a later interaction.
    """

    def __init__(
        self,
        client: CommentsClient,
        host: ViewHost,
        state: Optional[ViewState] = None,
    ):
        self.client = client
        self.host = host
        self._state = state or ViewState()
        self._sequence = 0
        self._lock = threading.Lock()

    @property
    def state(self) -> ViewState:
        return self._state

    def _apply(self, new_state: ViewState) -> ViewState:
        if new_state != self._state:
            logger.debug(f"View state {self._state} -> {new_state}")
        self._state = new_state
        return new_state

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def set_sort(self, sort: SortKey) -> ViewState:
        return self._apply(view_state.set_sort(self._state, sort))

    def set_limit(self, limit: int) -> ViewState:
        return self._apply(view_state.set_limit(self._state, limit))

    def go_to_page(self, page: int) -> ViewState:
        return self._apply(view_state.go_to_page(self._state, page))

    def next_page(self) -> ViewState:
        return self._apply(view_state.next_page(self._state))

    def previous_page(self) -> ViewState:
        return self._apply(view_state.previous_page(self._state))

    def open_search(self, query: str) -> ViewState:
        return self._apply(view_state.open_search(self._state, query))

    def open_thread(self, comment_id: int) -> ViewState:
        return self._apply(view_state.open_thread(self._state, comment_id))

    def show_pages(self) -> ViewState:
        return self._apply(view_state.show_pages(self._state))

    # ------------------------------------------------------------------
    # Fetch and render
    # ------------------------------------------------------------------

    def _issue(self) -> int:
        with self._lock:
            self._sequence += 1
            return self._sequence

    def _is_current(self, sequence: int) -> bool:
        # Caller holds self._lock
        return sequence == self._sequence

    def refresh(self) -> Optional[DisplayModel]:
        """Fetch and display the current view.

        The staleness check and the render happen under one lock, so a
        refresh issued meanwhile waits and always renders last.

        Returns:
            The display model shown, or None if the fetch failed or a newer
            refresh superseded this one.
        """
        sequence = self._issue()
        state = self._state
        fetch = view_state.fetch_request(state)

        self.host.show_loading("Loading thread..." if state.mode == "thread" else "Loading...")

        try:
            forest = self.client.list_forest(fetch)
        except CommentServiceError as e:
            with self._lock:
                if not self._is_current(sequence):
                    logger.debug(f"Dropping failed refresh #{sequence}: superseded")
                    return None
                logger.error(f"Failed to load comments for {state}: {e.message}")
                self.host.clear_comments()
                self.host.notify(e.message, "error", NOTIFICATION_TIMEOUT)
            return None

        if state.mode == "search":
            forest = filter_forest(forest, state.search_query or "")
        display = DisplayModel(forest=forest, caption=build_caption(state, forest), mode=state.mode)

        with self._lock:
            if not self._is_current(sequence):
                logger.debug(f"Dropping stale refresh #{sequence} for {state}")
                return None
            self.host.show_comments(display)
        return display

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create_comment(self, parent_id: Optional[int], author: str, content: str) -> bool:
        """Create a top-level comment or a reply, then reload the current view.

        Top-level comments are validated locally: author and content must be
        non-blank. Replies are left to the service to validate.

        Returns:
            True if the comment was created.
        """
        if parent_id is None:
            author = author.strip()
            content = content.strip()
            if not author:
                self.host.notify("Author is required", "warning", NOTIFICATION_TIMEOUT)
                return False
            if not content:
                self.host.notify("Content is required", "warning", NOTIFICATION_TIMEOUT)
                return False

        comment = NewComment(parent_id=parent_id, author=author, content=content)
        try:
            new_id = self.client.create_comment(comment)
        except CommentServiceError as e:
            logger.error(f"Failed to create comment (parent={parent_id}): {e.message}")
            self.host.notify(e.message, "error", NOTIFICATION_TIMEOUT)
            return False

        logger.info(f"Created comment {new_id} (parent={parent_id})")
        self.host.notify(
            "Reply added" if comment.is_reply else "Comment added",
            "information",
            NOTIFICATION_TIMEOUT,
        )
        self._apply(view_state.notify_mutation_completed(self._state))
        self.refresh()
        return True

    def request_delete(self, comment_id: int) -> None:
        """Ask the host to confirm, then delete ``comment_id`` and its replies."""
        self.host.confirm(
            f"Delete comment {comment_id} and all nested replies?",
            partial(self._on_delete_confirmed, comment_id),
        )

    def _on_delete_confirmed(self, comment_id: int, confirmed: bool) -> None:
        if not confirmed:
            logger.debug(f"Delete of comment {comment_id} declined")
            return
        self.delete_comment(comment_id)

    def delete_comment(self, comment_id: int) -> bool:
        """Delete a comment without asking, then reload the current view.

        Returns:
            True if the comment was deleted.
        """
        try:
            self.client.delete_comment(comment_id)
        except CommentServiceError as e:
            logger.error(f"Failed to delete comment {comment_id}: {e.message}")
            self.host.notify(e.message, "error", NOTIFICATION_TIMEOUT)
            return False

        logger.info(f"Deleted comment {comment_id}")
        self.host.notify("Deleted", "information", NOTIFICATION_TIMEOUT)
        self._apply(view_state.notify_mutation_completed(self._state))
        self.refresh()
        return True
