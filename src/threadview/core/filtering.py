"""Ancestor-preserving search over a fetched comment forest."""

from typing import Optional

from threadview.core.models import CommentNode, Forest


def filter_forest(forest: Forest, query: str) -> Forest:
    """Prune ``forest`` to the comments matching ``query``.

    A comment is kept when its author or content contains the query
    (case-insensitive) or when any of its replies is kept, so every match
    stays reachable through its ancestors. Kept comments are new values
    whose children are only the kept replies; the input is never modified.
    A blank query returns ``forest`` itself.
    """
    needle = query.strip().lower()
    if not needle:
        return forest

    def filter_node(node: CommentNode) -> Optional[CommentNode]:
        # Children first: the parent's fate depends on theirs
        kept_children = [kept for kept in map(filter_node, node.children) if kept is not None]
        if kept_children or node.matches(needle):
            return node.model_copy(update={"children": kept_children})
        return None

    return [kept for kept in map(filter_node, forest) if kept is not None]


def count_nodes(forest: Forest) -> int:
    """Count every comment in the forest, replies included."""
    return sum(1 + count_nodes(node.children) for node in forest)
