"""Chunked storage over size-constrained key/value backends"""

from .chunked import ChunkedCache, ChunkedProperties

__all__ = ["ChunkedCache", "ChunkedProperties"]
