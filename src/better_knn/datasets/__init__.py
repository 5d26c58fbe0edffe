"""Helpers for reading point sets from disk."""

import pathlib

import numpy

from better_knn.metrics import Point


def read_array(path: pathlib.Path, rng: numpy.random.Generator | None = None) -> numpy.ndarray:
    """Read a 2-d array of points, one per row.

    Arguments:
        path: A `.npy` file, or a comma-separated `.csv` file without a header.
        rng: A random number generator for shuffling the rows. If None, no shuffling is done.

    Returns:
        The points as a float64 array of shape `(n, dim)`.
    """
    if not path.exists():
        raise FileNotFoundError(f"Dataset file not found: {path}")

    if path.suffix == ".npy":
        data = numpy.load(path)
    elif path.suffix == ".csv":
        data = numpy.loadtxt(path, delimiter=",", ndmin=2)
    else:
        raise ValueError(f"Unsupported file type: {path.suffix}. Expected .npy or .csv")

    if data.ndim != 2:  # noqa: PLR2004
        raise ValueError(f"Expected a 2-d array of points, got shape {data.shape} from {path}")

    data = data.astype(numpy.float64, copy=False)
    if rng is not None:
        rng.shuffle(data)
    return data


def to_points(data: numpy.ndarray) -> list[Point]:
    """Convert the rows of a 2-d array to point tuples."""
    return [tuple(float(c) for c in row) for row in data]


def read_points(path: pathlib.Path, rng: numpy.random.Generator | None = None) -> list[Point]:
    """Read a list of points from a `.npy` or `.csv` file. See `read_array`."""
    return to_points(read_array(path, rng))


def parse_point(text: str) -> Point:
    """Parse a point written as comma-separated coordinates, e.g. `0.5,0.5`."""
    try:
        return tuple(float(c) for c in text.split(","))
    except ValueError as e:
        raise ValueError(f"Could not parse point: {text!r}") from e


__all__ = ["parse_point", "read_array", "read_points", "to_points"]
