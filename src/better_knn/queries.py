"""Answering a single k-nearest-neighbor query from the command line."""

import pathlib

import typer

from better_knn.comparisons import LinearScan
from better_knn.datasets import parse_point
from better_knn.datasets import read_points
from better_knn.metrics import Metric
from better_knn.tree import build_from_space
from better_knn.utils import configure_logging


def search(
    inp_path: pathlib.Path = typer.Option(  # noqa: B008
        ...,
        "-i",
        "--inp-path",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        resolve_path=True,
        help="A .npy or .csv file with the points to index, one per row.",
    ),
    query: str = typer.Option(
        ...,
        "-q",
        "--query",
        help="The query point as comma-separated coordinates, e.g. 0.5,0.5",
    ),
    k: int = typer.Option(
        10,
        "-k",
        "--num-neighbors",
        min=0,
        help="Number of nearest neighbors to retrieve",
    ),
    metric: Metric = typer.Option(  # noqa: B008
        Metric.Euclidean,
        "-m",
        "--metric",
        case_sensitive=False,
        help="Distance metric to search with.",
    ),
    check: bool = typer.Option(  # noqa: FBT001
        False,  # noqa: FBT003
        "-c",
        "--check",
        help="Also run a linear scan and fail if it finds different neighbors.",
    ),
    log_level: str = typer.Option(
        "INFO",
        "--log-level",
        envvar="BETTER_KNN_LOG_LEVEL",
        help="Logging level.",
    ),
) -> None:
    """Print the k nearest neighbors of a point, closest first."""
    logger = configure_logging("better_knn", level=log_level)

    point = parse_point(query)
    points = read_points(inp_path)
    logger.info(f"Read {len(points)} points from {inp_path}")

    dim = len(points[0]) if points else len(point)
    if len(point) != dim:
        raise typer.BadParameter(f"Query has {len(point)} coordinates, the data has {dim}", param_hint="--query")

    space = metric.space()
    tree = build_from_space(points, space)
    neighbors = sorted(tree.neighbors(k, point), key=lambda n: n.distance)

    if check:
        expected = [n.distance for n in LinearScan(items=points, distance=space.distance).neighbors(k, point)]
        if [n.distance for n in neighbors] != expected:
            raise ValueError("Ball tree and linear scan found different neighbor distances")
        logger.info("Linear scan agrees with the ball tree.")

    for neighbor in neighbors:
        typer.echo(f"{neighbor.point}\t{neighbor.distance:.6f}")


__all__ = ["search"]
