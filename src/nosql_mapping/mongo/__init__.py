"""MongoDB compilation and document mapping."""

from __future__ import annotations

from .mapper import DocumentEntityMapper
from .query_builder import MongoQueryBuilder

__all__ = [
    "DocumentEntityMapper",
    "MongoQueryBuilder",
]
