"""Convenience exports for ORM models."""

from .prefetch_run import PrefetchRunState

__all__ = ["PrefetchRunState"]
