from importlib.resources import files
from typing import Optional

from textual.app import App

from threadview.core.client import CommentsClient
from threadview.core.utils import make_session_id, setup_logger
from threadview.tui.screens.comments_screen import CommentsScreen
from threadview.tui.screens.help_modal import HelpModal


class ThreadviewApp(App):
    """Main threadview TUI application."""

    TITLE = "Threadview"

    BINDINGS = [
        ("q", "quit", "Quit"),
        ("?", "help", "Help"),
    ]

    def __init__(self, client: Optional[CommentsClient] = None):
        """Initialize app and load CSS from package resources.

        Args:
            client: Service client; built from THREADVIEW_* settings if omitted
        """
        super().__init__()
        self.CSS = files("threadview.tui").joinpath("threadview.tcss").read_text()
        self.client = client or CommentsClient.from_env()

    def on_mount(self) -> None:
        """Initialize application on mount."""
        tui_logger = setup_logger(make_session_id(), "tui", detached_mode=True)
        tui_logger.info(f"Threadview TUI started against {self.client.base_url}")

        self.push_screen(CommentsScreen(self.client))

    def on_unmount(self) -> None:
        self.client.close()

    def action_help(self) -> None:
        """Show help screen."""
        self.push_screen(HelpModal())
