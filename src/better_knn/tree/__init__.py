"""Ball trees: construction, exact k-nearest-neighbor search, and inspection."""

import typer

from . import ball_tree
from . import construction
from . import models
from . import properties
from . import search
from .ball_tree import BallTree
from .construction import build
from .construction import build_from_space
from .models import Internal
from .models import InvalidArgumentError
from .models import Leaf
from .models import NearestNeighborLookup
from .models import Neighbor
from .models import Node
from .search import iter_neighbors
from .search import query
from .search import query_many

app = typer.Typer()
app.command()(properties.properties)

__all__ = [
    "BallTree",
    "Internal",
    "InvalidArgumentError",
    "Leaf",
    "NearestNeighborLookup",
    "Neighbor",
    "Node",
    "app",
    "ball_tree",
    "build",
    "build_from_space",
    "construction",
    "iter_neighbors",
    "models",
    "properties",
    "query",
    "query_many",
    "search",
]
