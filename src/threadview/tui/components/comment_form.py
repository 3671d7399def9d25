from typing import Callable, Optional

from textual.app import ComposeResult
from textual.containers import Container, Horizontal
from textual.widgets import Button, Input, Rule, TextArea


class CommentForm(Container):
    """Form for writing a comment or a reply.

    Validation is left to the session so replies and top-level comments
    follow the same rules everywhere.

    Args:
        on_save_callback: Called with (author, content) when save is triggered
        on_cancel_callback: Called when cancel is triggered
    """

    BINDINGS = [
        ("ctrl+s", "save", "Save"),
        ("escape", "cancel", "Cancel"),
    ]

    def __init__(
        self,
        on_save_callback: Optional[Callable[[str, str], None]] = None,
        on_cancel_callback: Optional[Callable[[], None]] = None,
    ):
        super().__init__()
        self.on_save_callback = on_save_callback
        self.on_cancel_callback = on_cancel_callback

    def compose(self) -> ComposeResult:
        """Create child widgets for the form."""
        yield Container(
            Input(id="author", placeholder="Name"),
            Rule(line_style="dashed", classes="divider"),
            TextArea(id="comment-content"),
            Horizontal(
                Button("Send", variant="success", compact=True, flat=True, id="save-btn"),
                Button("Cancel", variant="error", compact=True, flat=True, id="cancel-btn"),
                id="button-row",
            ),
            id="comment-form",
        )

    def on_mount(self) -> None:
        self.query_one(Input).focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button presses."""
        if event.button.id == "save-btn":
            self.action_save()
        elif event.button.id == "cancel-btn":
            self.action_cancel()

    def action_save(self) -> None:
        author = self.query_one(Input).value
        content = self.query_one(TextArea).text
        if self.on_save_callback:
            self.on_save_callback(author, content)

    def action_cancel(self) -> None:
        if self.on_cancel_callback:
            self.on_cancel_callback()
