from textual.app import ComposeResult
from textual.containers import Container
from textual.screen import ModalScreen
from textual.widgets import Markdown


class HelpModal(ModalScreen):
    """Help screen displaying keyboard shortcuts and usage information."""

    BINDINGS = [
        ("escape", "close", "Close"),
    ]

    def compose(self) -> ComposeResult:
        """Create child widgets for the help screen."""
        help_text = """# Threadview - Help

## Keyboard Shortcuts

### Browsing
- **[ / ]**: Previous / next page
- **s**: Toggle sort (newest / oldest first)
- **l**: Cycle page size
- **t**: Open the selected comment as a thread
- **/**: Search author and content
- **Escape**: Back to the paged list
- **F5**: Reload the current view

### Comments
- **n**: New top-level comment
- **r**: Reply to the selected comment
- **d/Delete**: Delete the selected comment and its replies

### Comment Form
- **Ctrl+S**: Send
- **Escape**: Cancel

## Search

Search fetches one window of 100 threads under the current sort order and
keeps every comment whose author or content contains the query, together
with the replies leading to it. An empty query returns to the paged list.

## Troubleshooting

- Set THREADVIEW_API_URL in your environment or .env file
- Check log files in .threadview/logs/{session_id}/tui/session.log
"""
        yield Container(Markdown(help_text, id="help-content"), id="help-modal")

    def action_close(self) -> None:
        """Close the help screen."""
        self.dismiss()
