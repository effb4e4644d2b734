"""Retrieval cache backends for per-gene protein data snapshots."""

from pathlib import Path

from protein_lollipop.persistence.base import (
    RetrievalCache,
    result_from_dict,
    result_to_dict,
)
from protein_lollipop.persistence.duckdb_store import DuckDBCache
from protein_lollipop.persistence.json_store import JsonSnapshotCache

CACHE_BACKENDS = {
    "json": JsonSnapshotCache,
    "duckdb": DuckDBCache,
}


def open_cache(cache_dir: Path | str, backend: str = "json") -> RetrievalCache:
    """
    Create the retrieval cache for a directory.

    Args:
        cache_dir: Cache root directory (created on first write)
        backend: "json" (one snapshot file per gene) or "duckdb"

    Raises:
        ValueError: If backend is not recognised
    """
    try:
        cache_cls = CACHE_BACKENDS[backend]
    except KeyError:
        raise ValueError(
            f"Unknown cache backend {backend!r}; expected one of {sorted(CACHE_BACKENDS)}"
        ) from None
    return cache_cls(cache_dir)


__all__ = [
    "CACHE_BACKENDS",
    "DuckDBCache",
    "JsonSnapshotCache",
    "RetrievalCache",
    "open_cache",
    "result_from_dict",
    "result_to_dict",
]
