"""Retrieval cache interface and snapshot serialization."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional

from protein_lollipop.uniprot.models import (
    DOMAIN_SCHEMA,
    PTM_SCHEMA,
    RetrievalResult,
    frame_from_rows,
)


class RetrievalCache(ABC):
    """
    Per-gene store of RetrievalResult snapshots rooted at a directory.

    Entries never expire; each put fully replaces the previous entry for
    that gene. get() never touches the network.
    """

    def __init__(self, cache_dir: Path | str):
        self.cache_dir = Path(cache_dir)

    @abstractmethod
    def get(self, gene_symbol: str) -> Optional[RetrievalResult]:
        """Return the cached result for a gene, or None if there is none."""

    @abstractmethod
    def put(self, gene_symbol: str, result: RetrievalResult) -> None:
        """Store a result, replacing any existing entry for the gene."""

    @abstractmethod
    def clear(self) -> int:
        """Remove every entry. Returns the number of entries removed."""

    def contains(self, gene_symbol: str) -> bool:
        return self.get(gene_symbol) is not None


def result_to_dict(gene_symbol: str, result: RetrievalResult) -> dict[str, Any]:
    """Serialize a RetrievalResult to plain JSON-compatible types."""
    return {
        "gene_symbol": gene_symbol,
        "protein_length": result.protein_length,
        "domains": result.domains.to_dicts(),
        "ptms": result.ptms.to_dicts(),
    }


def result_from_dict(payload: dict[str, Any]) -> RetrievalResult:
    """
    Rebuild a RetrievalResult from result_to_dict output.

    Raises:
        ValueError: If protein_length is not an integer or None
        TypeError: If table rows are not dicts of the expected types
    """
    protein_length = payload.get("protein_length")
    if protein_length is not None and (
        isinstance(protein_length, bool) or not isinstance(protein_length, int)
    ):
        raise ValueError(f"Invalid cached protein_length: {protein_length!r}")

    return RetrievalResult(
        domains=frame_from_rows(payload.get("domains") or [], DOMAIN_SCHEMA),
        ptms=frame_from_rows(payload.get("ptms") or [], PTM_SCHEMA),
        protein_length=protein_length,
    )
