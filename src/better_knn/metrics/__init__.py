"""Distance and midpoint functions for the elements stored in a ball tree.

A ball tree only ever touches its elements through two functions: a distance,
which must be a metric (symmetric, non-negative, zero only between equal
elements, and obeying the triangle inequality), and a midpoint, which returns
an element lying "between" two others. Everything in this module is a
ready-made pair of such functions for points given as tuples of floats.
"""

import enum
import typing

import numpy
import pydantic

Point = tuple[float, ...]
"""A point in a real vector space."""

T = typing.TypeVar("T")


class Space[E](typing.Protocol):
    """The capability a ball tree needs from its element type."""

    def distance(self, a: E, b: E) -> float:
        """Distance between two elements."""
        ...

    def midpoint(self, a: E, b: E) -> E:
        """An element between `a` and `b`."""
        ...


class FunctionSpace(pydantic.BaseModel, typing.Generic[T]):
    """A `Space` made from a pair of plain functions."""

    model_config = pydantic.ConfigDict(frozen=True)

    distance: typing.Callable[[T, T], float]
    midpoint: typing.Callable[[T, T], T]


def euclidean(a: Point, b: Point) -> float:
    """L2 distance between two points."""
    return float(numpy.linalg.norm(numpy.subtract(a, b, dtype=numpy.float64)))


def manhattan(a: Point, b: Point) -> float:
    """L1 distance between two points."""
    return float(numpy.abs(numpy.subtract(a, b, dtype=numpy.float64)).sum())


def chebyshev(a: Point, b: Point) -> float:
    """L-infinity distance between two points."""
    return float(numpy.max(numpy.abs(numpy.subtract(a, b, dtype=numpy.float64)), initial=0.0))


def midpoint(a: Point, b: Point) -> Point:
    """Coordinate-wise average of two points."""
    mid = (numpy.asarray(a, dtype=numpy.float64) + numpy.asarray(b, dtype=numpy.float64)) / 2.0
    return tuple(float(c) for c in mid)


class Metric(enum.StrEnum):
    """Enum of the distance metrics shipped for `Point` data."""

    Euclidean = "euclidean"
    Manhattan = "manhattan"
    Chebyshev = "chebyshev"

    def distance(self) -> typing.Callable[[Point, Point], float]:
        """Get the distance function for the metric."""
        if self == Metric.Euclidean:
            return euclidean
        if self == Metric.Manhattan:
            return manhattan
        if self == Metric.Chebyshev:
            return chebyshev
        raise ValueError(f"Unknown metric: {self.value}")

    def space(self) -> FunctionSpace[Point]:
        """Get the distance and midpoint functions for the metric.

        All of these metrics are induced by a norm, so the coordinate-wise
        average is a valid midpoint for each of them.
        """
        return FunctionSpace(distance=self.distance(), midpoint=midpoint)

    @staticmethod
    def from_name(name: str) -> "Metric":
        """Get the Metric enum member from its name."""
        name = name.lower()
        for metric in Metric:
            if metric.value == name:
                return metric
        raise ValueError(f"Unknown metric name: {name}")


__all__ = [
    "FunctionSpace",
    "Metric",
    "Point",
    "Space",
    "chebyshev",
    "euclidean",
    "manhattan",
    "midpoint",
]
