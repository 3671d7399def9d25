"""Test doubles shared across the suite."""

import json
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional

import httpx

from threadview.core.client import CommentsClient
from threadview.core.models import CommentNode
from threadview.core.session import DisplayModel, ViewHost


def node(id: int, author: str, content: str, children=None, parent_id=None) -> CommentNode:
    return CommentNode(
        id=id,
        parent_id=parent_id,
        author=author,
        content=content,
        created_at=datetime(2024, 1, 1, 12, 0, 0) + timedelta(minutes=id),
        children=children or [],
    )


class RecordingHost(ViewHost):
    """ViewHost that records every call for assertions."""

    def __init__(self, confirm_answer: Optional[bool] = True):
        self.calls: List[tuple] = []
        self.displays: List[DisplayModel] = []
        self.notifications: List[tuple] = []
        self.confirm_answer = confirm_answer
        self.pending_confirmation: Optional[Callable[[bool], None]] = None

    def show_loading(self, text: str) -> None:
        self.calls.append(("loading", text))

    def show_comments(self, display: DisplayModel) -> None:
        self.calls.append(("show", display.caption))
        self.displays.append(display)

    def clear_comments(self) -> None:
        self.calls.append(("clear",))

    def notify(self, message: str, severity: str, timeout: float) -> None:
        self.calls.append(("notify", message, severity))
        self.notifications.append((message, severity, timeout))

    def confirm(self, prompt: str, on_result: Callable[[bool], None]) -> None:
        self.calls.append(("confirm", prompt))
        if self.confirm_answer is None:
            # Leave the question open; the test answers later
            self.pending_confirmation = on_result
            return
        on_result(self.confirm_answer)


class FakeCommentService:
    """In-memory comment service speaking the /api/v1/comments protocol."""

    MAX_LIMIT = 100

    def __init__(self):
        self.rows: Dict[int, Dict[str, Any]] = {}
        self.next_id = 1
        self.clock = datetime(2024, 1, 1, 12, 0, 0)
        self.requests: List[httpx.Request] = []

    def _tree(self, row: Dict[str, Any]) -> Dict[str, Any]:
        children = sorted(
            (r for r in self.rows.values() if r["parent_id"] == row["id"]),
            key=lambda r: r["created_at"],
        )
        return {**row, "children": [self._tree(c) for c in children]}

    def _ok(self, result: Any) -> httpx.Response:
        return httpx.Response(200, json={"result": result})

    def _error(self, status: int, message: str) -> httpx.Response:
        return httpx.Response(status, json={"error": message})

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        params = request.url.params

        if request.method == "GET" and path == "/api/v1/comments":
            if "parent" in params:
                row = self.rows.get(int(params["parent"]))
                return self._ok([self._tree(row)] if row else None)
            page = int(params.get("page", 1))
            limit = min(int(params.get("limit", 20)), self.MAX_LIMIT)
            roots = sorted(
                (r for r in self.rows.values() if r["parent_id"] is None),
                key=lambda r: r["created_at"],
                reverse=params.get("sort", "created_at_desc") == "created_at_desc",
            )
            window = roots[(page - 1) * limit : page * limit]
            # The service answers an empty page with a null result
            return self._ok([self._tree(r) for r in window] or None)

        if request.method == "POST" and path == "/api/v1/comments":
            body = json.loads(request.content)
            if not body.get("author", "").strip():
                return self._error(400, "author is empty")
            if not body.get("content", "").strip():
                return self._error(400, "content is empty")
            parent_id = body.get("parent_id")
            if parent_id is not None and parent_id not in self.rows:
                return self._error(404, "parent comment not found")
            self.clock += timedelta(seconds=1)
            comment_id = self.next_id
            self.next_id += 1
            self.rows[comment_id] = {
                "id": comment_id,
                "parent_id": parent_id,
                "author": body["author"],
                "content": body["content"],
                "created_at": self.clock.isoformat(),
            }
            return self._ok(comment_id)

        if request.method == "DELETE" and path.startswith("/api/v1/comments/"):
            comment_id = int(path.rsplit("/", 1)[1])
            if comment_id not in self.rows:
                return self._error(404, "comment not found")
            doomed = [comment_id]
            while doomed:
                current = doomed.pop()
                self.rows.pop(current, None)
                doomed.extend(r["id"] for r in list(self.rows.values()) if r["parent_id"] == current)
            return self._ok("deleted")

        return self._error(404, "not found")


def make_client(handler: Callable[[httpx.Request], httpx.Response]) -> CommentsClient:
    """Client whose every request is answered by ``handler``."""
    http = httpx.Client(base_url="http://comments.test", transport=httpx.MockTransport(handler))
    return CommentsClient("http://comments.test", http_client=http)
