"""Schema discovery and read-only query gateway for Postgres."""

__version__ = "0.1.0"
