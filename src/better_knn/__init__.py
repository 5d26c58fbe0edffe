"""Exact k-nearest-neighbor search in arbitrary metric spaces with ball trees."""

import typer

from . import comparisons
from . import datasets
from . import metrics
from . import queries
from . import tree
from . import utils
from .metrics import Metric
from .tree import BallTree
from .tree import InvalidArgumentError
from .tree import build
from .tree import query
from .tree import query_many

app = typer.Typer()
app.command()(queries.search)
app.add_typer(tree.app, name="tree")
app.add_typer(comparisons.app, name="comparisons")

__all__ = [
    "BallTree",
    "InvalidArgumentError",
    "Metric",
    "app",
    "build",
    "comparisons",
    "datasets",
    "metrics",
    "queries",
    "query",
    "query_many",
    "tree",
    "utils",
]
