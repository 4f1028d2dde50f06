"""Coverage adapters producing ``Profile`` models."""

from coverdiff.adapters.coverage.base import CoverageAdapter, FormatError
from coverdiff.adapters.coverage.go_cover_adapter import (
    GoCoverAdapter,
    load_cover_profile,
    parse_cover_profile,
)

__all__ = [
    "CoverageAdapter",
    "FormatError",
    "GoCoverAdapter",
    "load_cover_profile",
    "parse_cover_profile",
]
