from typing import Optional, Tuple

from textual.app import ComposeResult
from textual.containers import Container
from textual.screen import ModalScreen
from textual.widgets import Static

from threadview.tui.components.comment_form import CommentForm


class CommentModal(ModalScreen[Optional[Tuple[str, str]]]):
    """Modal form for a new comment or a reply.

    Dismisses with ``(author, content)`` on send and ``None`` on cancel.
    """

    def __init__(self, parent_id: Optional[int] = None):
        super().__init__()
        self.parent_id = parent_id

    @property
    def title_text(self) -> str:
        if self.parent_id is None:
            return "New Comment"
        return f"Reply to #{self.parent_id}"

    def compose(self) -> ComposeResult:
        """Create child widgets for the comment modal."""
        yield Container(
            Static(self.title_text, id="modal-header"),
            CommentForm(
                on_save_callback=self.handle_save,
                on_cancel_callback=self.handle_cancel,
            ),
            id="modal-content",
        )

    def handle_save(self, author: str, content: str) -> None:
        self.dismiss((author, content))

    def handle_cancel(self) -> None:
        self.dismiss(None)
