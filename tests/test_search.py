import threading

import pytest
from hypothesis import given
from hypothesis import strategies

from better_knn.comparisons import LinearScan
from better_knn.metrics import Metric
from better_knn.metrics import euclidean
from better_knn.metrics import midpoint
from better_knn.tree import Internal
from better_knn.tree import InvalidArgumentError
from better_knn.tree import Leaf
from better_knn.tree import build
from better_knn.tree import build_from_space
from better_knn.tree import iter_neighbors
from better_knn.tree import query
from better_knn.tree import query_many
from better_knn.tree.search import closest_distance
from better_knn.tree.search import farthest_distance

coordinates = strategies.integers(min_value=-20, max_value=20).map(float)
points_2d = strategies.tuples(coordinates, coordinates)
point_lists = strategies.lists(points_2d, min_size=1, max_size=60)
metrics = strategies.sampled_from(list(Metric))


def test_duplicates_are_returned_first():
    tree = build([(0.0, 0.0), (0.0, 0.0), (10.0, 10.0)], euclidean, midpoint)
    assert query(tree, 2, (0.0, 0.0)) == [(0.0, 0.0), (0.0, 0.0)]


def test_unit_square(unit_square, space):
    tree = build_from_space(unit_square, space)
    assert query(tree, 1, (0.1, 0.1)) == [(0.0, 0.0)]
    assert tree.k_nearest(1, (0.9, 0.2)) == [(1.0, 0.0)]


def test_zero_neighbors(unit_square, space):
    tree = build_from_space(unit_square, space)
    assert query(tree, 0, (0.5, 0.5)) == []
    assert list(iter_neighbors(tree, 0, (0.5, 0.5))) == []


def test_negative_k_is_rejected(unit_square, space):
    tree = build_from_space(unit_square, space)
    with pytest.raises(InvalidArgumentError):
        query(tree, -1, (0.5, 0.5))
    with pytest.raises(InvalidArgumentError):
        iter_neighbors(tree, -1, (0.5, 0.5))


def test_saturation(unit_square, space):
    tree = build_from_space([*unit_square, (0.0, 0.0)], space)
    result = query(tree, 100, (0.5, 0.5))
    assert sorted(result) == sorted([*unit_square, (0.0, 0.0)])


def test_all_equal_input():
    tree = build([(2.0, 2.0)] * 5, euclidean, midpoint)
    assert isinstance(tree.root, Leaf)
    for k in range(6):
        assert query(tree, k, (100.0, -3.0)) == [(2.0, 2.0)] * k
    assert query(tree, 9, (0.0, 0.0)) == [(2.0, 2.0)] * 5


def test_neighbors_carry_exact_distances(unit_square, space):
    tree = build_from_space(unit_square, space)
    neighbors = list(tree.neighbors(4, (0.0, 0.0)))
    assert [n.distance for n in neighbors] == pytest.approx([0.0, 1.0, 1.0, 2.0**0.5])
    assert neighbors[0].point == (0.0, 0.0)
    assert neighbors[-1].point == (1.0, 1.0)


def test_iter_neighbors_is_lazy(unit_square):
    calls = []

    def counting(a, b):
        calls.append((a, b))
        return euclidean(a, b)

    tree = build(unit_square, counting, midpoint)
    calls.clear()
    neighbors = iter_neighbors(tree, 4, (0.0, 0.0))
    assert calls == []
    first = next(neighbors)
    assert first.point == (0.0, 0.0)
    assert calls


def test_bounds(unit_square, space):
    tree = build_from_space(unit_square, space)
    root = tree.root
    assert isinstance(root, Internal)
    inside = (0.5, 0.5)
    assert closest_distance(root, inside, space.distance) == 0.0
    far = (10.0, 0.5)
    lower = closest_distance(root, far, space.distance)
    upper = farthest_distance(root, far, space.distance)
    assert lower == pytest.approx(space.distance(far, root.center) - root.radius)
    assert upper == pytest.approx(space.distance(far, root.center) + root.radius)
    for p in unit_square:
        assert lower <= space.distance(far, p) <= upper

    leaf = Leaf(point=(1.0, 1.0), multiplicity=3)
    assert closest_distance(leaf, (4.0, 5.0), space.distance) == pytest.approx(5.0)
    assert farthest_distance(leaf, (4.0, 5.0), space.distance) == pytest.approx(5.0)


@given(
    points=point_lists,
    query_point=points_2d,
    k=strategies.integers(min_value=0, max_value=70),
    metric=metrics,
)
def test_matches_linear_scan(points, query_point, k, metric):
    space = metric.space()
    tree = build_from_space(points, space)
    baseline = LinearScan(items=points, distance=space.distance)

    found = list(iter_neighbors(tree, k, query_point))
    expected = baseline.neighbors(k, query_point)

    assert len(found) == min(k, len(points))
    assert sorted(n.distance for n in found) == [n.distance for n in expected]
    for n in found:
        assert n.point in points
        assert n.distance == space.distance(query_point, n.point)
    # Best-first order never moves away from the query point.
    distances = [n.distance for n in found]
    assert distances == sorted(distances)


@given(points=point_lists, query_point=points_2d)
def test_multiplicities_are_respected(points, query_point):
    tree = build(points, euclidean, midpoint)
    result = query(tree, len(points), query_point)
    assert sorted(result) == sorted(points)


def test_query_many_matches_sequential_queries(space):
    points = [(float(x), float(y)) for x in range(-10, 11) for y in range(-10, 11, 3)]
    tree = build_from_space(points, space)
    queries = [(x / 3.0, -x / 7.0) for x in range(-30, 30)]
    expected = [query(tree, 5, q) for q in queries]
    assert query_many(tree, 5, queries, max_workers=8) == expected
    with pytest.raises(InvalidArgumentError):
        query_many(tree, -2, queries)


def test_tree_is_shared_between_threads(space):
    points = [(float(i % 17), float(i % 5)) for i in range(200)]
    tree = build_from_space(points, space)
    root = tree.root
    expected = query(tree, 7, (3.3, 2.2))
    errors = []

    def worker():
        for _ in range(20):
            if query(tree, 7, (3.3, 2.2)) != expected:
                errors.append("mismatch")

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert tree.root is root
