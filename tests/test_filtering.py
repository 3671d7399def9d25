"""Tests for the ancestor-preserving forest filter."""

from threadview.core.filtering import count_nodes, filter_forest


def ids(forest):
    """Flatten a forest to ids in depth-first order."""
    out = []

    def walk(comment):
        out.append(comment.id)
        for child in comment.children:
            walk(child)

    for root in forest:
        walk(root)
    return out


def test_blank_query_returns_forest_itself(wide_forest):
    """Empty and whitespace queries short-circuit to the input forest."""
    assert filter_forest(wide_forest, "") is wide_forest
    assert filter_forest(wide_forest, "   ") is wide_forest


def test_search_across_depth(search_forest):
    """A match on a reply keeps its root with only that reply."""
    result = filter_forest(search_forest, "needle")

    assert len(result) == 1
    root = result[0]
    assert (root.author, root.content) == ("Al", "x")
    assert len(root.children) == 1
    assert (root.children[0].author, root.children[0].content) == ("Zo", "needle")


def test_no_match_returns_empty_forest(search_forest):
    assert filter_forest(search_forest, "missing") == []


def test_ancestors_of_deep_match_are_kept(wide_forest):
    """Every ancestor of a matching reply is present with the same id."""
    result = filter_forest(wide_forest, "needle")
    kept = ids(result)
    assert 3 in kept
    assert 2 in kept
    assert 1 in kept


def test_unmatched_branches_are_pruned(wide_forest):
    """Siblings with no match below them are dropped without hiding others."""
    result = filter_forest(wide_forest, "needle")
    kept = ids(result)

    assert 4 not in kept
    assert 5 not in kept
    assert 8 not in kept
    # Thread 6 matches on its author; its non-matching reply is pruned
    assert 6 in kept
    assert 7 not in kept
    assert kept == [1, 2, 3, 6]


def test_root_order_preserved(wide_forest):
    result = filter_forest(wide_forest, "o")
    assert [root.id for root in result] == [1, 6, 8]


def test_kept_ancestor_keeps_its_own_fields(wide_forest):
    """A node kept only for its descendants is otherwise unchanged."""
    original = wide_forest[0]
    kept = filter_forest(wide_forest, "deep")[0]
    assert kept.id == original.id
    assert kept.author == original.author
    assert kept.content == original.content
    assert kept.created_at == original.created_at
    assert kept is not original


def test_filter_does_not_modify_input(wide_forest):
    """Filtering twice gives equal results and leaves the input intact."""
    before = [root.model_dump() for root in wide_forest]

    first = filter_forest(wide_forest, "needle")
    second = filter_forest(wide_forest, "needle")

    assert [root.model_dump() for root in wide_forest] == before
    assert first == second
    assert len(wide_forest[0].children) == 2


def test_query_is_trimmed_and_case_insensitive(search_forest):
    assert ids(filter_forest(search_forest, "  NEEDLE ")) == [1, 2]


def test_count_nodes_counts_every_depth(wide_forest):
    assert count_nodes(wide_forest) == 8
    assert count_nodes([]) == 0


def test_count_matches_filtered_forest(wide_forest):
    assert count_nodes(filter_forest(wide_forest, "needle")) == 4
