"""Analysis, SQLite-backed record stores and periodic Delaunay neighbour lists for 2D cell simulations."""

__version__ = "0.1.0"