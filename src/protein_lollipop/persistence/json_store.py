"""JSON snapshot cache: one file per gene symbol."""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

import polars as pl

from protein_lollipop.persistence.base import (
    RetrievalCache,
    result_from_dict,
    result_to_dict,
)
from protein_lollipop.uniprot.models import RetrievalResult

logger = logging.getLogger(__name__)

SNAPSHOT_SUFFIX = "_protein_data.json"


class JsonSnapshotCache(RetrievalCache):
    """
    Stores each gene as {gene_symbol}_protein_data.json under cache_dir.

    Writes go to a temporary file that is then renamed over the snapshot, so
    concurrent writers resolve to last-writer-wins and readers never see a
    half-written file.
    """

    def path_for(self, gene_symbol: str) -> Path:
        """
        Snapshot file path for a gene.

        Raises:
            ValueError: If the symbol would address a path outside cache_dir
        """
        if gene_symbol in ("", ".", "..") or Path(gene_symbol).name != gene_symbol:
            raise ValueError(f"Gene symbol {gene_symbol!r} cannot be used as a cache key")
        return self.cache_dir / f"{gene_symbol}{SNAPSHOT_SUFFIX}"

    def get(self, gene_symbol: str) -> Optional[RetrievalResult]:
        path = self.path_for(gene_symbol)
        if not path.exists():
            return None

        try:
            with open(path, "r") as f:
                payload = json.load(f)
            return result_from_dict(payload)
        except (OSError, ValueError, TypeError, AttributeError, pl.exceptions.PolarsError) as e:
            logger.warning(f"Ignoring unreadable cache entry {path}: {e}")
            return None

    def put(self, gene_symbol: str, result: RetrievalResult) -> None:
        path = self.path_for(gene_symbol)
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        content = json.dumps(result_to_dict(gene_symbol, result), indent=2)

        fd, tmp_name = tempfile.mkstemp(dir=self.cache_dir, suffix=".tmp")
        try:
            with os.fdopen(fd, "w") as f:
                f.write(content)
            os.replace(tmp_name, path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        logger.debug(f"Cached protein data for {gene_symbol} to {path}")

    def clear(self) -> int:
        if not self.cache_dir.exists():
            return 0

        removed = 0
        for path in self.cache_dir.glob(f"*{SNAPSHOT_SUFFIX}"):
            path.unlink()
            removed += 1

        logger.info(f"Removed {removed} cached snapshots from {self.cache_dir}")
        return removed
