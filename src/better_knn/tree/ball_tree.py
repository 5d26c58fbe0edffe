"""The immutable ball tree returned by the builder."""

import typing

import pydantic

from better_knn.tree import search
from better_knn.tree.models import Neighbor
from better_knn.tree.models import Node

T = typing.TypeVar("T")


class BallTree(pydantic.BaseModel, typing.Generic[T]):
    """A built ball tree together with the functions it was built with.

    Instances are frozen and are never mutated by a search, so a single tree
    may be shared between threads.
    """

    model_config = pydantic.ConfigDict(frozen=True)

    root: Node
    distance: typing.Callable[[T, T], float]
    midpoint: typing.Callable[[T, T], T]
    size: int = pydantic.Field(ge=1)

    def __len__(self) -> int:
        return self.size

    def k_nearest(self, k: int, point: T) -> list[T]:
        """The `k` elements closest to `point`, in no guaranteed order."""
        return search.query(self, k, point)

    def neighbors(self, k: int, point: T) -> typing.Iterator[Neighbor[T]]:
        """The `k` elements closest to `point`, with their distances."""
        return search.iter_neighbors(self, k, point)


__all__ = ["BallTree"]
