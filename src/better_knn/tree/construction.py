"""Building a ball tree from a collection of elements."""

import logging
import typing

from better_knn.metrics import Space
from better_knn.tree.ball_tree import BallTree
from better_knn.tree.models import Internal
from better_knn.tree.models import InvalidArgumentError
from better_knn.tree.models import Leaf
from better_knn.tree.models import Node

logger = logging.getLogger(__name__)


class _Join(typing.NamedTuple):
    """Marks where the two most recently built subtrees become one ball."""

    center: typing.Any
    radius: float


def _farthest[T](points: list[T], point: T, distance: typing.Callable[[T, T], float]) -> T:
    """The element of `points` farthest from `point`, the first one on ties."""
    return max(points, key=lambda p: distance(p, point))


def _build_root[T](
    points: list[T],
    distance: typing.Callable[[T, T], float],
    midpoint: typing.Callable[[T, T], T],
) -> Node:
    """Partition `points` into a tree of balls.

    Subsets are split on an explicit stack rather than by recursion, since a
    badly spread input can make the tree as deep as the input is long.
    """
    pending: list[list[T] | _Join] = [points]
    built: list[Node] = []

    while pending:
        task = pending.pop()

        if isinstance(task, _Join):
            right = built.pop()
            left = built.pop()
            built.append(Internal(center=task.center, radius=task.radius, left=left, right=right))
            continue

        first = task[0]
        if all(p == first for p in task):
            built.append(Leaf(point=first, multiplicity=len(task)))
            continue

        # Two passes of farthest-point search approximate a diameter of the subset.
        a = _farthest(task, first, distance)
        b = _farthest(task, a, distance)

        near_a: list[T] = []
        near_b: list[T] = []
        for p in task:
            if distance(p, a) < distance(p, b):
                near_a.append(p)
            else:
                near_b.append(p)

        if not near_a or not near_b:
            raise InvalidArgumentError(
                "Could not split distinct elements; the distance function must be "
                "zero only between equal elements.",
            )

        center = midpoint(a, b)
        radius = max(distance(center, p) for p in task)

        # The left subtree is finished first and so sits below the right one on `built`.
        pending.append(_Join(center, float(radius)))
        pending.append(near_b)
        pending.append(near_a)

    (root,) = built
    return root


def build[T](
    elements: typing.Iterable[T],
    distance: typing.Callable[[T, T], float],
    midpoint: typing.Callable[[T, T], T],
) -> BallTree[T]:
    """Build a ball tree over `elements`.

    Args:
        elements: The elements to index. Equal elements are stored once, in a
            leaf that counts them.
        distance: A metric on the elements.
        midpoint: Returns an element between its two arguments.

    Returns:
        The built tree.

    Raises:
        InvalidArgumentError: If `elements` is empty, or if `distance` is
            zero between two unequal elements.
    """
    points = list(elements)
    if not points:
        raise InvalidArgumentError("Point list cannot be empty.")

    root = _build_root(points, distance, midpoint)
    logger.debug(f"Built ball tree over {len(points)} elements, root is a {type(root).__name__}")

    return BallTree(root=root, distance=distance, midpoint=midpoint, size=len(points))


def build_from_space[T](elements: typing.Iterable[T], space: Space[T]) -> BallTree[T]:
    """Build a ball tree using the functions of `space`."""
    return build(elements, space.distance, space.midpoint)


__all__ = ["build", "build_from_space"]
