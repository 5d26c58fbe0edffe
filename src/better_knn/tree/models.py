"""Nodes of a ball tree and the lookup interface shared by the search structures."""

import typing

import pydantic

T = typing.TypeVar("T")


class InvalidArgumentError(ValueError):
    """Raised when a ball tree is built or queried with unusable arguments."""


class Leaf(pydantic.BaseModel, typing.Generic[T]):
    """A leaf holding one element and the number of equal elements collapsed into it."""

    model_config = pydantic.ConfigDict(frozen=True)

    point: T
    multiplicity: int = pydantic.Field(ge=1)


class Internal(pydantic.BaseModel, typing.Generic[T]):
    """A ball with two children.

    Every element below this node lies within `radius` of `center`. The center
    is a computed midpoint and need not be one of the elements.
    """

    model_config = pydantic.ConfigDict(frozen=True)

    center: T
    radius: float = pydantic.Field(ge=0.0)
    left: "Node"
    right: "Node"


Node = Leaf | Internal
"""A node of a ball tree. There are exactly two kinds."""

Internal.model_rebuild()


class Neighbor(typing.NamedTuple, typing.Generic[T]):
    """An element found by a search and its distance from the query point."""

    point: T
    distance: float


class NearestNeighborLookup[E](typing.Protocol):
    """A structure answering exact k-nearest-neighbor queries."""

    def k_nearest(self, k: int, point: E) -> list[E]:
        """The `k` elements closest to `point`, in no guaranteed order."""
        ...

    def neighbors(self, k: int, point: E) -> typing.Iterable[Neighbor[E]]:
        """The `k` elements closest to `point`, with their distances."""
        ...


__all__ = ["Internal", "InvalidArgumentError", "Leaf", "NearestNeighborLookup", "Neighbor", "Node"]
