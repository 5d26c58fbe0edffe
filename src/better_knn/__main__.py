"""CLI for the package."""

from better_knn import app

if __name__ == "__main__":
    app()
