"""Comparing ball-tree search against a linear scan over all elements."""

import heapq
import os
import pathlib
import time
import typing

import numpy
import pydantic
import typer
from tqdm import tqdm

from better_knn.datasets import read_points
from better_knn.metrics import Metric
from better_knn.metrics import Point
from better_knn.tree import InvalidArgumentError
from better_knn.tree import NearestNeighborLookup
from better_knn.tree import Neighbor
from better_knn.tree import build_from_space
from better_knn.utils import configure_logging

T = typing.TypeVar("T")


class LinearScan(pydantic.BaseModel, typing.Generic[T]):
    """Brute-force nearest neighbors: measure every element, keep the closest."""

    model_config = pydantic.ConfigDict(frozen=True)

    items: list[T]
    distance: typing.Callable[[T, T], float]

    def __len__(self) -> int:
        return len(self.items)

    def neighbors(self, k: int, point: T) -> list[Neighbor[T]]:
        """The `k` elements closest to `point`, sorted by distance."""
        if k < 0:
            raise InvalidArgumentError(f"k must be non-negative, got {k}")
        measured = (Neighbor(p, self.distance(point, p)) for p in self.items)
        return heapq.nsmallest(k, measured, key=lambda n: n.distance)

    def k_nearest(self, k: int, point: T) -> list[T]:
        """The `k` elements closest to `point`, sorted by distance."""
        return [neighbor.point for neighbor in self.neighbors(k, point)]


def sorted_distances[T](lookup: NearestNeighborLookup[T], queries: list[T], k: int) -> numpy.ndarray:
    """Run a query for each point and collect the sorted neighbor distances, one row per query."""
    rows = [sorted(n.distance for n in lookup.neighbors(k, q)) for q in queries]
    return numpy.asarray(rows, dtype=numpy.float64)


def _measure(
    lookup: NearestNeighborLookup[Point],
    queries: list[Point],
    k: int,
    measurement_time: float,
) -> tuple[numpy.ndarray, float]:
    """Repeat the queries until `measurement_time` has elapsed; return the distances and the time per run."""
    start_time = time.perf_counter()
    distances = sorted_distances(lookup, queries, k)
    num_runs = 1
    while time.perf_counter() - start_time < measurement_time:
        distances = sorted_distances(lookup, queries, k)
        num_runs += 1
    total_time = time.perf_counter() - start_time
    return distances, total_time / num_runs


def linear_scan(  # noqa: PLR0913
    train_path: pathlib.Path = typer.Option(  # noqa: B008
        ...,
        "-i",
        "--train-path",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        resolve_path=True,
        help="A .npy or .csv file with the points to index, one per row.",
    ),
    test_path: pathlib.Path = typer.Option(  # noqa: B008
        ...,
        "-q",
        "--test-path",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        resolve_path=True,
        help="A .npy or .csv file with the query points, one per row.",
    ),
    out_dir: pathlib.Path | None = typer.Option(  # noqa: B008
        None,
        "-o",
        "--out-dir",
        file_okay=False,
        dir_okay=True,
        writable=True,
        resolve_path=True,
        help="Directory to save results",
    ),
    log_dir: pathlib.Path | None = typer.Option(  # noqa: B008
        None,
        "-l",
        "--log-dir",
        file_okay=False,
        dir_okay=True,
        writable=True,
        resolve_path=True,
        help="Directory to save logs",
    ),
    metric: Metric = typer.Option(  # noqa: B008
        Metric.Euclidean,
        "-m",
        "--metric",
        case_sensitive=False,
        help="Distance metric to search with.",
    ),
    seed: int | None = typer.Option(
        None,
        "-s",
        "--seed",
        help="Random seed for shuffling the indexed points",
    ),
    k: int = typer.Option(
        10,
        "-k",
        "--num-neighbors",
        min=0,
        help="Number of nearest neighbors to retrieve",
    ),
    measurement_time: float = typer.Option(
        5.0,
        "-t",
        "--measurement-time",
        help="The minimum time (in seconds) to run each search algorithm.",
    ),
    log_level: str = typer.Option(
        "INFO",
        "--log-level",
        envvar="BETTER_KNN_LOG_LEVEL",
        help="Logging level.",
    ),
) -> None:
    """Times ball-tree search against a linear scan and checks that both find the same neighbors."""
    typer.echo("Running linear-scan comparison...")
    inp_dir = train_path.parent

    if out_dir is None:
        # Check if `inp_dir` is writable
        if not os.access(inp_dir, os.W_OK):
            raise PermissionError(f"Cannot write to directory: {inp_dir}")
        out_dir = inp_dir / "linear_scan_results"
    out_dir.mkdir(parents=False, exist_ok=True)

    if log_dir is None:
        if not os.access(inp_dir, os.W_OK):
            raise PermissionError(f"Cannot write to directory: {inp_dir}")
        log_dir = inp_dir / "linear_scan_logs"
    log_dir.mkdir(parents=False, exist_ok=True)

    logger = configure_logging("better_knn", level=log_level, file_path=log_dir / "linear_scan.log")
    logger.info("-" * 120)  # Separator line in log file

    rng = None
    if seed is not None:
        rng = numpy.random.default_rng(seed)
        logger.info(f"Using random seed: {seed}")

    train_data = read_points(train_path, rng)
    test_data = read_points(test_path)
    logger.info(f"Indexing {len(train_data)} points, {len(test_data)} queries, metric: {metric.value}")

    space = metric.space()
    start_time = time.perf_counter()
    tree = build_from_space(train_data, space)
    logger.info(f"Built ball tree in {time.perf_counter() - start_time:.6f} seconds.")

    lookups: dict[str, NearestNeighborLookup[Point]] = {
        "ball_tree": tree,
        "linear_scan": LinearScan(items=train_data, distance=space.distance),
    }
    results: dict[str, numpy.ndarray] = {}
    for name, lookup in tqdm(lookups.items(), total=len(lookups)):
        logger.info(f"Starting {name} search...")
        distances, time_per_run = _measure(lookup, test_data, k, measurement_time)
        throughput = len(test_data) / time_per_run if time_per_run > 0 else float("inf")
        logger.info(f"{name}: {time_per_run:.6f} seconds per run, {throughput:.2e} queries/second.")
        results[name] = distances

    if not numpy.array_equal(results["ball_tree"], results["linear_scan"]):
        raise ValueError("Ball tree and linear scan found different neighbor distances")
    logger.info("Ball tree and linear scan agree on all queries.")

    stem = train_path.stem
    for name, distances in results.items():
        out_path = out_dir / f"{stem}_{name}_distances.npy"
        numpy.save(out_path, distances)
        logger.info(f"Saved distances to: {out_path}")
    logger.info("Linear-scan comparison complete.")


__all__ = ["LinearScan", "linear_scan", "sorted_distances"]
