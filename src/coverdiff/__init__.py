"""coverdiff: package-by-package Go coverage deltas for pull requests."""

__version__ = "0.3.0"
