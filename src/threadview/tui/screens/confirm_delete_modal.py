from textual.app import ComposeResult
from textual.containers import Container, Horizontal
from textual.screen import ModalScreen
from textual.widgets import Button, Static

from threadview.core.utils import escape_markup, truncate


class ConfirmDeleteModal(ModalScreen[bool]):
    """Modal dialog for confirming comment deletion."""

    BINDINGS = [
        ("escape", "cancel", "Cancel"),
    ]

    def __init__(self, prompt: str, preview: str = ""):
        """Initialize with the confirmation prompt.

        Args:
            prompt: Question shown to the user.
            preview: Comment text shown under the prompt (truncated for display).
        """
        super().__init__()
        self.prompt = prompt
        self.preview = preview

    def compose(self) -> ComposeResult:
        """Create child widgets for the confirmation modal."""
        yield Container(
            Static(escape_markup(self.prompt), id="modal-header"),
            Static(escape_markup(truncate(self.preview)), id="comment-preview"),
            Static("⚠️  This action cannot be undone", id="delete-warning"),
            Horizontal(
                Button("Cancel", variant="primary", id="cancel-btn"),
                Button("Delete", variant="error", id="delete-btn"),
                id="button-row",
            ),
            id="confirm-delete-modal",
        )

    def on_mount(self) -> None:
        """Focus the cancel button so Enter never deletes by accident."""
        self.query_one("#cancel-btn", Button).focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button presses."""
        if event.button.id == "delete-btn":
            self.dismiss(True)
        elif event.button.id == "cancel-btn":
            self.action_cancel()

    def action_cancel(self) -> None:
        """Cancel and close the modal."""
        self.dismiss(False)
