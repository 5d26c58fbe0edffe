"""Per-node properties of a ball tree, tabulated for inspection."""

# pyright: reportUnknownMemberType=false

import pathlib
import typing

import pandas
import typer

from better_knn.datasets import read_points
from better_knn.metrics import Metric
from better_knn.tree.ball_tree import BallTree
from better_knn.tree.construction import build_from_space
from better_knn.tree.models import Internal
from better_knn.tree.models import Leaf
from better_knn.tree.models import Node
from better_knn.utils import configure_logging

COLUMNS = [
    "depth",
    "cardinality",
    "radius",
    "is_leaf",
    "multiplicity",
]
"""Columns of the table produced by `tree_properties`."""


def walk(tree: BallTree) -> typing.Iterator[tuple[int, Node]]:
    """Yield `(depth, node)` for every node, parents before their children, left before right."""
    stack: list[tuple[int, Node]] = [(0, tree.root)]
    while stack:
        depth, node = stack.pop()
        yield depth, node
        if isinstance(node, Internal):
            stack.append((depth + 1, node.right))
            stack.append((depth + 1, node.left))


def leaves[T](tree: BallTree[T]) -> typing.Iterator[Leaf[T]]:
    """Yield the leaves of the tree from left to right."""
    for _, node in walk(tree):
        if isinstance(node, Leaf):
            yield node


def tree_properties(tree: BallTree) -> pandas.DataFrame:
    """Tabulate depth, cardinality and radius for every node of the tree.

    The cardinality of a node counts duplicates, so the root's cardinality is
    `len(tree)`. Leaves have a radius of zero.
    """
    nodes = list(walk(tree))

    # Children come after their parents, so a reverse pass sees them first.
    cardinalities: dict[int, int] = {}
    for _, node in reversed(nodes):
        match node:
            case Leaf():
                cardinalities[id(node)] = node.multiplicity
            case Internal():
                cardinalities[id(node)] = cardinalities[id(node.left)] + cardinalities[id(node.right)]

    rows = []
    for depth, node in nodes:
        is_leaf = isinstance(node, Leaf)
        rows.append(
            {
                "depth": depth,
                "cardinality": cardinalities[id(node)],
                "radius": 0.0 if is_leaf else node.radius,
                "is_leaf": is_leaf,
                "multiplicity": node.multiplicity if is_leaf else 0,
            },
        )

    return pandas.DataFrame(rows, columns=COLUMNS)


def properties(
    inp_path: pathlib.Path = typer.Option(  # noqa: B008
        ...,
        "-i",
        "--inp-path",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        resolve_path=True,
        help="A .npy or .csv file with one point per row.",
    ),
    out_path: pathlib.Path = typer.Option(  # noqa: B008
        ...,
        "-o",
        "--out-path",
        file_okay=True,
        dir_okay=False,
        writable=True,
        resolve_path=True,
        help="Path of the csv file to write the node properties to.",
    ),
    metric: Metric = typer.Option(  # noqa: B008
        Metric.Euclidean,
        "-m",
        "--metric",
        case_sensitive=False,
        help="Distance metric to build the tree with.",
    ),
    log_level: str = typer.Option(
        "INFO",
        "--log-level",
        envvar="BETTER_KNN_LOG_LEVEL",
        help="Logging level.",
    ),
) -> None:
    """Write the depth, cardinality and radius of every node of a ball tree to a csv file."""
    logger = configure_logging("better_knn", level=log_level)

    points = read_points(inp_path)
    logger.info(f"Read {len(points)} points from {inp_path}")

    tree = build_from_space(points, metric.space())
    tree_props = tree_properties(tree)
    tree_props.to_csv(out_path, index=False)
    typer.echo(f"Wrote {len(tree_props)} nodes to {out_path}")

    # Summarise the radii of the internal nodes at each depth
    internal = tree_props[~tree_props["is_leaf"]]
    if internal.empty:
        typer.echo("The tree is a single leaf.")
        return
    summary = internal.groupby("depth").agg(
        count=("radius", "count"),
        min=("radius", "min"),
        median=("radius", "median"),
        max=("radius", "max"),
        mean_cardinality=("cardinality", "mean"),
    )
    typer.echo(f"Internal nodes by depth:\n{summary}")


__all__ = ["COLUMNS", "leaves", "properties", "tree_properties", "walk"]
