import pathlib

import numpy
import pytest

from better_knn.metrics import Metric


@pytest.fixture()
def space():
    return Metric.Euclidean.space()


@pytest.fixture()
def unit_square():
    return [(0.0, 0.0), (1.0, 0.0), (0.0, 1.0), (1.0, 1.0)]


@pytest.fixture()
def grid_path(tmp_path: pathlib.Path) -> pathlib.Path:
    """A 5x5 integer grid saved as a .npy file."""
    xs, ys = numpy.meshgrid(numpy.arange(5), numpy.arange(5))
    data = numpy.stack([xs.ravel(), ys.ravel()], axis=1).astype(numpy.float64)
    path = tmp_path / "grid.npy"
    numpy.save(path, data)
    return path
