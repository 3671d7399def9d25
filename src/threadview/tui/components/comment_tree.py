"""Tree widget rendering a comment forest."""

from typing import Optional

from textual.widgets import Tree
from textual.widgets.tree import TreeNode

from threadview.core.models import CommentNode, Forest
from threadview.core.utils import escape_markup, format_timestamp


def comment_label(comment: CommentNode) -> str:
    """Build the markup label for one comment row.

    Author and content are user text and are escaped before they are
    embedded in markup.
    """
    author = escape_markup(comment.author) if comment.author else "—"
    timestamp = format_timestamp(comment.created_at)
    content = escape_markup(" ".join(comment.content.split()))
    return f"[b]{author}[/b] [dim]#{comment.id} · {timestamp}[/dim]  {content}"


class CommentTree(Tree[Optional[CommentNode]]):
    """Expandable tree of comments and their nested replies."""

    def __init__(self, **kwargs):
        super().__init__("Comments", **kwargs)
        self.show_root = False
        self.guide_depth = 3

    def show_message(self, text: str) -> None:
        """Replace the tree with a single informational row."""
        self.clear()
        self.root.add_leaf(f"[dim]{escape_markup(text)}[/dim]", data=None)
        self.root.expand()

    def show_forest(self, forest: Forest) -> None:
        """Replace the tree contents with ``forest``, fully expanded."""
        self.clear()
        if not forest:
            self.show_message("No comments")
            return
        for comment in forest:
            self._add_comment(self.root, comment)
        self.root.expand()

    def _add_comment(self, parent: TreeNode[Optional[CommentNode]], comment: CommentNode) -> None:
        if not comment.children:
            parent.add_leaf(comment_label(comment), data=comment)
            return
        branch = parent.add(comment_label(comment), data=comment, expand=True)
        for child in comment.children:
            self._add_comment(branch, child)

    @property
    def selected_comment(self) -> Optional[CommentNode]:
        """The comment under the cursor, if the cursor is on a comment row."""
        node = self.cursor_node
        return node.data if node is not None else None
