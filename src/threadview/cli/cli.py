"""Threadview CLI - TUI-first comment browser."""

from typing import Callable, List, Optional

import typer
from dotenv import load_dotenv

from threadview import __version__
from threadview.core.client import CommentsClient
from threadview.core.models import SORT_KEYS, CommentNode, Forest
from threadview.core.session import CommentsSession, DisplayModel, Severity, ViewHost
from threadview.core.utils import format_timestamp, make_session_id, setup_logger
from threadview.core.view_state import DEFAULT_LIMIT, ViewState

# Load environment variables
load_dotenv()

app = typer.Typer(
    invoke_without_command=True,
    no_args_is_help=False,
    help="Threadview CLI - browse and manage threaded comments",
)


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        typer.echo(f"Threadview CLI version {__version__}")
        raise typer.Exit()


def format_forest(forest: Forest, indent: str = "  ") -> List[str]:
    """Render a forest as indented text lines, replies under their parent."""
    lines: List[str] = []

    def walk(comment: CommentNode, depth: int) -> None:
        pad = indent * depth
        stamp = format_timestamp(comment.created_at)
        lines.append(f"{pad}#{comment.id} {comment.author or '—'}" + (f" · {stamp}" if stamp else ""))
        for text_line in comment.content.splitlines() or [""]:
            lines.append(f"{pad}{indent}{text_line}")
        for child in comment.children:
            walk(child, depth + 1)

    for root in forest:
        walk(root, 0)
    return lines


class EchoHost(ViewHost):
    """Prints session output to the terminal."""

    def __init__(self, assume_yes: bool = False):
        self.assume_yes = assume_yes
        self.failed = False

    def show_loading(self, text: str) -> None:
        pass

    def show_comments(self, display: DisplayModel) -> None:
        if display.is_empty:
            typer.echo("No comments")
        for line in format_forest(display.forest):
            typer.echo(line)
        typer.echo(f"-- {display.caption}")

    def clear_comments(self) -> None:
        pass

    def notify(self, message: str, severity: Severity, timeout: float) -> None:
        if severity == "information":
            typer.echo(message)
            return
        self.failed = True
        typer.echo(f"Error: {message}", err=True)

    def confirm(self, prompt: str, on_result: Callable[[bool], None]) -> None:
        on_result(self.assume_yes or typer.confirm(prompt, default=False))


def _open_session(state: Optional[ViewState] = None, assume_yes: bool = False) -> CommentsSession:
    try:
        client = CommentsClient.from_env()
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    return CommentsSession(client, EchoHost(assume_yes=assume_yes), state)


def _run(session: CommentsSession, operation: Callable[[], object]) -> None:
    """Run one session operation and map host failures to exit code 1."""
    try:
        operation()
    finally:
        session.client.close()
    host = session.host
    if isinstance(host, EchoHost) and host.failed:
        raise typer.Exit(1)


def _check_sort(sort: str) -> str:
    if sort not in SORT_KEYS:
        raise typer.BadParameter(f"sort must be one of: {', '.join(SORT_KEYS)}")
    return sort


@app.callback()
def main(
    ctx: typer.Context,
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
):
    """Main entry point. Launches TUI if no subcommand provided."""
    if ctx.invoked_subcommand is None:
        tui()


@app.command()
def tui():
    """Launch the interactive comment browser."""
    from threadview.tui.app import ThreadviewApp

    try:
        ThreadviewApp().run()
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command("list")
def list_comments(
    page: int = typer.Option(1, "--page", "-p", min=1, help="Page number"),
    limit: int = typer.Option(DEFAULT_LIMIT, "--limit", "-l", min=1, help="Threads per page"),
    sort: str = typer.Option(SORT_KEYS[0], "--sort", "-s", callback=_check_sort, help="Sort key"),
):
    """List one page of top-level comments with their replies.

    Example:
        threadview list --page 2 --limit 20 --sort created_at_asc
    """
    setup_logger(make_session_id(), "cli", detached_mode=True)
    session = _open_session(ViewState(page=page, limit=limit, sort=sort))
    _run(session, session.refresh)


@app.command()
def thread(
    comment_id: int,
    sort: str = typer.Option(SORT_KEYS[0], "--sort", "-s", callback=_check_sort, help="Sort key"),
):
    """Show the thread rooted at COMMENT_ID.

    Example:
        threadview thread 42
    """
    setup_logger(make_session_id(), "cli", detached_mode=True)
    session = _open_session(ViewState(sort=sort))
    session.open_thread(comment_id)
    _run(session, session.refresh)


@app.command()
def search(
    query: str,
    sort: str = typer.Option(SORT_KEYS[0], "--sort", "-s", callback=_check_sort, help="Sort key"),
):
    """Search author and content across the newest threads.

    Example:
        threadview search needle
    """
    setup_logger(make_session_id(), "cli", detached_mode=True)
    session = _open_session(ViewState(sort=sort))
    session.open_search(query)
    _run(session, session.refresh)


@app.command()
def create(author: str, content: str):
    """Create a top-level comment.

    Example:
        threadview create Al "hi there"
    """
    setup_logger(make_session_id(), "cli", detached_mode=True)
    session = _open_session()
    _run(session, lambda: session.create_comment(None, author, content))


@app.command()
def reply(parent_id: int, author: str, content: str):
    """Reply to the comment PARENT_ID.

    Example:
        threadview reply 1 Bo "re"
    """
    setup_logger(make_session_id(), "cli", detached_mode=True)
    session = _open_session()
    session.open_thread(parent_id)
    _run(session, lambda: session.create_comment(parent_id, author, content))


@app.command()
def delete(
    comment_id: int,
    yes: bool = typer.Option(False, "--yes", "-y", help="Delete without asking"),
):
    """Delete a comment and all of its replies.

    Example:
        threadview delete 42 --yes
    """
    setup_logger(make_session_id(), "cli", detached_mode=True)
    session = _open_session(assume_yes=yes)
    _run(session, lambda: session.request_delete(comment_id))


if __name__ == "__main__":
    app()
