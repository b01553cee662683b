"""Database repository helpers."""

from repositories.perfs_repository import STANDARD_PERF_KEY, PerfsRepository

__all__ = ["PerfsRepository", "STANDARD_PERF_KEY"]
