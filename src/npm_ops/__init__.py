"""npm-ops: run npm from build pipelines."""

__version__ = "0.1.0"
