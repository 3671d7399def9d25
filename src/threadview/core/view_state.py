"""Browsing-mode state machine for the comment view.

Transitions are pure functions from a ``ViewState`` to a new ``ViewState``;
``fetch_request`` derives the query the current state needs.
"""

from dataclasses import dataclass, replace
from typing import Dict, Optional, Union

from threadview.core.models import DEFAULT_SORT, SORT_KEYS, SortKey, ViewMode

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
# Search scans one wide window; the service caps limit at 100
SEARCH_WINDOW = 100
LIMIT_CHOICES: tuple[int, ...] = (5, 10, 20, 50, 100)


@dataclass(frozen=True)
class ViewState:
    """Current browsing mode and its parameters.

    Attributes:
        mode: Which of paged, thread or search governs the next fetch
        page: Page number, meaningful in paged mode only
        limit: Page size, kept as a preference across mode switches
        sort: Sort key, kept as a preference across mode switches
        thread_parent_id: Root of the open thread, set only in thread mode
        search_query: Trimmed search text, set only in search mode
    """

    mode: ViewMode = "paged"
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT
    sort: SortKey = DEFAULT_SORT
    thread_parent_id: Optional[int] = None
    search_query: Optional[str] = None

    def __post_init__(self):
        """Validate state invariants."""
        if self.page < 1:
            raise ValueError("page must be positive")
        if self.limit < 1:
            raise ValueError("limit must be positive")
        if self.sort not in SORT_KEYS:
            raise ValueError(f"sort must be one of {list(SORT_KEYS)}")
        if (self.mode == "thread") != (self.thread_parent_id is not None):
            raise ValueError("thread_parent_id is set exactly in thread mode")
        if self.mode == "search":
            if not self.search_query or not self.search_query.strip():
                raise ValueError("search mode requires a non-blank query")
        elif self.search_query is not None:
            raise ValueError("search_query is set only in search mode")


@dataclass(frozen=True)
class FetchRequest:
    """Parameters for one list request against the comment collection."""

    page: Optional[int] = None
    limit: Optional[int] = None
    sort: Optional[SortKey] = None
    parent_id: Optional[int] = None

    def query_params(self) -> Dict[str, Union[int, str]]:
        params: Dict[str, Union[int, str]] = {}
        if self.parent_id is not None:
            params["parent"] = self.parent_id
        if self.page is not None:
            params["page"] = self.page
        if self.limit is not None:
            params["limit"] = self.limit
        if self.sort is not None:
            params["sort"] = self.sort
        return params


def _paged(state: ViewState, page: int = DEFAULT_PAGE) -> ViewState:
    return ViewState(mode="paged", page=page, limit=state.limit, sort=state.sort)


def set_sort(state: ViewState, sort: SortKey) -> ViewState:
    """Change the sort key; the mode is unchanged."""
    return replace(state, sort=sort)


def set_limit(state: ViewState, limit: int) -> ViewState:
    """Change the page size and go back to page 1.

    The old page boundary means nothing under a different page size.
    """
    if limit < 1:
        raise ValueError("limit must be positive")
    return replace(state, limit=limit, page=DEFAULT_PAGE)


def go_to_page(state: ViewState, page: int) -> ViewState:
    """Move to ``page`` (clamped to 1) in paged mode.

    Thread and search views have no pages, so this is a no-op there. No upper
    bound is enforced; a page past the end simply comes back empty.
    """
    if state.mode != "paged":
        return state
    return replace(state, page=max(DEFAULT_PAGE, page))


def next_page(state: ViewState) -> ViewState:
    return go_to_page(state, state.page + 1)


def previous_page(state: ViewState) -> ViewState:
    return go_to_page(state, state.page - 1)


def open_search(state: ViewState, query: str) -> ViewState:
    """Enter search mode for a non-blank query.

    A blank query means no search: paged mode is left untouched, and search
    or thread mode returns to page 1.
    """
    query = query.strip()
    if not query:
        if state.mode == "paged":
            return state
        return _paged(state)
    return ViewState(mode="search", limit=state.limit, sort=state.sort, search_query=query)


def open_thread(state: ViewState, comment_id: int) -> ViewState:
    """Show the subtree rooted at ``comment_id``, replacing any open thread."""
    return ViewState(mode="thread", limit=state.limit, sort=state.sort, thread_parent_id=comment_id)


def show_pages(state: ViewState) -> ViewState:
    """Leave thread or search mode for page 1 of the paged list."""
    return _paged(state)


def notify_mutation_completed(state: ViewState) -> ViewState:
    """A completed mutation refetches the current view; the state is kept."""
    return state


def fetch_request(state: ViewState) -> FetchRequest:
    """Derive the list request for the current state."""
    if state.mode == "thread":
        return FetchRequest(parent_id=state.thread_parent_id, sort=state.sort)
    if state.mode == "search":
        return FetchRequest(page=DEFAULT_PAGE, limit=SEARCH_WINDOW, sort=state.sort)
    return FetchRequest(page=state.page, limit=state.limit, sort=state.sort)
