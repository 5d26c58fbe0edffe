"""Running a linear scan for comparison against ball-tree search."""

import typer

from . import linear_scan
from .linear_scan import LinearScan

app = typer.Typer()
app.command()(linear_scan.linear_scan)

__all__ = ["LinearScan", "app", "linear_scan"]
