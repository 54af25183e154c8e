"""Unit tests for the comment forest builder."""

from portal.domain.model import Comment, CommentForest
from portal.domain.service import build_forest
from portal.domain.service.depth_policy import MAX_DEPTH
from portal.domain.value import CommentId
from tests.conftest import make_comment


def _rendered_depths(forest: CommentForest) -> dict[CommentId, int]:
    depths: dict[CommentId, int] = {}

    def visit(comment: Comment, depth: int) -> None:
        depths[comment.id] = depth
        for reply in comment.replies:
            visit(reply, depth + 1)

    for root in forest.roots:
        visit(root, 0)
    return depths


def _structure(forest: CommentForest) -> set[tuple[CommentId, CommentId | None]]:
    """(comment, rendered parent) pairs, independent of sibling order."""
    pairs: set[tuple[CommentId, CommentId | None]] = set()

    def visit(comment: Comment, parent: CommentId | None) -> None:
        pairs.add((comment.id, parent))
        for reply in comment.replies:
            visit(reply, comment.id)

    for root in forest.roots:
        visit(root, None)
    return pairs


def _chain(length: int) -> list[Comment]:
    return [make_comment(1)] + [
        make_comment(i, parent_id=i - 1) for i in range(2, length + 1)
    ]


class TestBuildForest:
    """Tests for build_forest."""

    def test_nests_replies_under_parents(self):
        """Replies attach to their parents in input order."""
        forest = build_forest(
            [
                make_comment(1),
                make_comment(2, parent_id=1),
                make_comment(3, parent_id=1),
                make_comment(4),
            ]
        )

        assert [c.id for c in forest.roots] == [1, 4]
        assert [c.id for c in forest.roots[0].replies] == [2, 3]

    def test_flattens_beyond_max_depth(self):
        """A reply that would sit below MAX_DEPTH is placed at the root level."""
        forest = build_forest(_chain(5))

        assert [c.id for c in forest.roots] == [1, 4, 5]
        assert forest.find(CommentId(3)).replies == ()
        assert _rendered_depths(forest)[CommentId(3)] == MAX_DEPTH

    def test_depth_bound_holds(self):
        """No comment renders deeper than MAX_DEPTH and nothing hangs below it."""
        comments = _chain(8) + [
            make_comment(20, parent_id=2),
            make_comment(21, parent_id=20),
            make_comment(22, parent_id=21),
            make_comment(23, parent_id=7),
        ]

        forest = build_forest(comments)
        depths = _rendered_depths(forest)

        assert set(depths) == {c.id for c in comments}
        assert max(depths.values()) <= MAX_DEPTH
        for comment in forest.walk():
            if depths[comment.id] == MAX_DEPTH:
                assert comment.replies == ()

    def test_missing_parent_goes_to_root(self):
        forest = build_forest([make_comment(1), make_comment(2, parent_id=99)])

        assert [c.id for c in forest.roots] == [1, 2]

    def test_cycle_is_placed_at_root_without_raising(self):
        """Comments in a parent cycle are shown at the root level."""
        forest = build_forest(
            [
                make_comment(1, parent_id=2),
                make_comment(2, parent_id=1),
                make_comment(3),
            ]
        )

        assert {c.id for c in forest.roots} == {1, 2, 3}

    def test_building_twice_is_identical(self):
        comments = _chain(5) + [make_comment(10, parent_id=1)]

        assert build_forest(comments) == build_forest(comments)

    def test_permutation_yields_same_structure(self):
        """Attachment does not depend on input order."""
        comments = _chain(6) + [
            make_comment(10, parent_id=1),
            make_comment(11, parent_id=10),
        ]

        forward = build_forest(comments)
        backward = build_forest(list(reversed(comments)))

        assert _structure(forward) == _structure(backward)

    def test_rebuilding_from_flattened_forest_is_stable(self):
        forest = build_forest(_chain(5))

        assert _structure(build_forest(forest.flatten())) == _structure(forest)

    def test_empty_input(self):
        assert build_forest([]) == CommentForest.empty()
