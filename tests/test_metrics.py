import math

import pytest

from better_knn.metrics import FunctionSpace
from better_knn.metrics import Metric
from better_knn.metrics import chebyshev
from better_knn.metrics import euclidean
from better_knn.metrics import manhattan
from better_knn.metrics import midpoint


def test_distances():
    a = (0.0, 0.0)
    b = (3.0, -4.0)
    assert euclidean(a, b) == pytest.approx(5.0)
    assert manhattan(a, b) == pytest.approx(7.0)
    assert chebyshev(a, b) == pytest.approx(4.0)
    for fn in (euclidean, manhattan, chebyshev):
        assert fn(a, a) == 0.0
        assert fn(a, b) == fn(b, a)
        assert isinstance(fn(a, b), float)


def test_midpoint_is_coordinate_average():
    mid = midpoint((0.0, 0.0), (10.0, 10.0))
    assert mid == (5.0, 5.0)
    assert all(isinstance(c, float) for c in mid)
    assert midpoint((1, 2, 3), (3, 2, 1)) == (2.0, 2.0, 2.0)


@pytest.mark.parametrize("name", ["euclidean", "EUCLIDEAN", "Manhattan", "chebyshev"])
def test_from_name(name):
    metric = Metric.from_name(name)
    assert metric.value == name.lower()


def test_from_name_unknown():
    with pytest.raises(ValueError, match="Unknown metric name"):
        Metric.from_name("hamming")


def test_space():
    space = Metric.Euclidean.space()
    assert isinstance(space, FunctionSpace)
    assert space.distance((0.0, 0.0), (1.0, 1.0)) == pytest.approx(math.sqrt(2.0))
    assert space.midpoint((0.0, 0.0), (1.0, 1.0)) == (0.5, 0.5)
    assert Metric.Chebyshev.space().distance is chebyshev
