"""Best-first k-nearest-neighbor search over a ball tree.

Regions of the tree wait in a binary heap keyed by the smallest distance any
of their elements could have from the query point. A leaf's key is exact, so
when a leaf reaches the top of the heap no pending region can hold anything
closer, and its element is emitted. The search stops as soon as `k` elements
have been emitted or the heap runs dry.
"""

import concurrent.futures
import heapq
import itertools
import typing

from better_knn.tree.models import Internal
from better_knn.tree.models import InvalidArgumentError
from better_knn.tree.models import Leaf
from better_knn.tree.models import Neighbor
from better_knn.tree.models import Node

if typing.TYPE_CHECKING:
    from better_knn.tree.ball_tree import BallTree


def closest_distance[T](node: Node, point: T, distance: typing.Callable[[T, T], float]) -> float:
    """Lower bound on the distance from `point` to any element under `node`."""
    match node:
        case Leaf():
            return distance(point, node.point)
        case Internal():
            return max(0.0, distance(point, node.center) - node.radius)
        case _:
            raise TypeError(f"Unknown node type: {type(node).__name__}")


def farthest_distance[T](node: Node, point: T, distance: typing.Callable[[T, T], float]) -> float:
    """Upper bound on the distance from `point` to any element under `node`."""
    match node:
        case Leaf():
            return distance(point, node.point)
        case Internal():
            return distance(point, node.center) + node.radius
        case _:
            raise TypeError(f"Unknown node type: {type(node).__name__}")


def _best_first[T](tree: "BallTree[T]", k: int, point: T) -> typing.Iterator[Neighbor[T]]:
    distance = tree.distance
    # Equal bounds fall back to insertion order, so nodes are never compared.
    order = itertools.count()
    heap: list[tuple[float, int, Node]] = [(closest_distance(tree.root, point, distance), next(order), tree.root)]

    emitted = 0
    while emitted < k and heap:
        bound, _, node = heapq.heappop(heap)
        match node:
            case Leaf(point=representative, multiplicity=multiplicity):
                count = min(k - emitted, multiplicity)
                for _ in range(count):
                    yield Neighbor(representative, bound)
                emitted += count
            case Internal(left=left, right=right):
                heapq.heappush(heap, (closest_distance(left, point, distance), next(order), left))
                heapq.heappush(heap, (closest_distance(right, point, distance), next(order), right))


def iter_neighbors[T](tree: "BallTree[T]", k: int, point: T) -> typing.Iterator[Neighbor[T]]:
    """Lazily yield the `k` nearest neighbors of `point`.

    Neighbors come out in the order the search reaches them. Distances never
    decrease along the way, but the order among equidistant elements is not
    part of the contract.

    Args:
        tree: The tree to search.
        k: The number of neighbors wanted. Fewer are yielded if the tree holds
            fewer than `k` elements.
        point: The query point.

    Raises:
        InvalidArgumentError: If `k` is negative.
    """
    if k < 0:
        raise InvalidArgumentError(f"k must be non-negative, got {k}")
    return _best_first(tree, k, point)


def query[T](tree: "BallTree[T]", k: int, point: T) -> list[T]:
    """The `k` elements of `tree` closest to `point`.

    An element that occurs several times in the input may be returned several
    times. The result has `min(k, len(tree))` entries.
    """
    return [neighbor.point for neighbor in iter_neighbors(tree, k, point)]


def query_many[T](
    tree: "BallTree[T]",
    k: int,
    points: typing.Iterable[T],
    *,
    max_workers: int | None = None,
) -> list[list[T]]:
    """Run `query` for each of `points` on a thread pool.

    Returns:
        One result list per query point, in the order of `points`.
    """
    if k < 0:
        raise InvalidArgumentError(f"k must be non-negative, got {k}")
    with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as executor:
        return list(executor.map(lambda p: query(tree, k, p), points))


__all__ = ["closest_distance", "farthest_distance", "iter_neighbors", "query", "query_many"]
