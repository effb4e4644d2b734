"""DuckDB-backed retrieval cache holding every gene in one database file."""

import logging
from pathlib import Path
from typing import Optional

import duckdb
import polars as pl

from protein_lollipop.persistence.base import RetrievalCache
from protein_lollipop.uniprot.models import (
    DOMAIN_SCHEMA,
    PTM_SCHEMA,
    RetrievalResult,
)

logger = logging.getLogger(__name__)

DUCKDB_FILENAME = "protein_data.duckdb"


class DuckDBCache(RetrievalCache):
    """
    Embedded DuckDB store for retrieval snapshots.

    One row per gene in cached_proteins plus the gene's domain and PTM rows,
    keyed by gene symbol. A put replaces all three inside one transaction.
    """

    def __init__(self, cache_dir: Path | str):
        """
        Initialize DuckDBCache.

        Args:
            cache_dir: Directory holding protein_data.duckdb. Nothing is
                       created until the first put.
        """
        super().__init__(cache_dir)
        self.db_path = self.cache_dir / DUCKDB_FILENAME

    def _connect(self) -> duckdb.DuckDBPyConnection:
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        conn = duckdb.connect(str(self.db_path))
        conn.execute("""
            CREATE TABLE IF NOT EXISTS cached_proteins (
                gene_symbol VARCHAR PRIMARY KEY,
                protein_length BIGINT,
                cached_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)
        conn.execute("""
            CREATE TABLE IF NOT EXISTS cached_domains (
                cache_key VARCHAR,
                row_index BIGINT,
                gene VARCHAR,
                domain_name VARCHAR,
                "start" BIGINT,
                "end" BIGINT
            )
        """)
        conn.execute("""
            CREATE TABLE IF NOT EXISTS cached_ptms (
                cache_key VARCHAR,
                row_index BIGINT,
                gene VARCHAR,
                ptm_type VARCHAR,
                position BIGINT,
                description VARCHAR
            )
        """)
        return conn

    def get(self, gene_symbol: str) -> Optional[RetrievalResult]:
        if not self.db_path.exists():
            return None

        try:
            with duckdb.connect(str(self.db_path), read_only=True) as conn:
                row = conn.execute(
                    "SELECT protein_length FROM cached_proteins WHERE gene_symbol = ?",
                    [gene_symbol],
                ).fetchone()
                if row is None:
                    return None

                domains = conn.execute(
                    """
                    SELECT gene, domain_name, "start", "end"
                    FROM cached_domains
                    WHERE cache_key = ?
                    ORDER BY row_index
                    """,
                    [gene_symbol],
                ).pl()
                ptms = conn.execute(
                    """
                    SELECT gene, ptm_type, position, description
                    FROM cached_ptms
                    WHERE cache_key = ?
                    ORDER BY row_index
                    """,
                    [gene_symbol],
                ).pl()
        except duckdb.Error as e:
            logger.warning(f"Ignoring unreadable cache entry for {gene_symbol}: {e}")
            return None

        return RetrievalResult(
            domains=domains.select([pl.col(c).cast(t) for c, t in DOMAIN_SCHEMA.items()]),
            ptms=ptms.select([pl.col(c).cast(t) for c, t in PTM_SCHEMA.items()]),
            protein_length=row[0],
        )

    def put(self, gene_symbol: str, result: RetrievalResult) -> None:
        domain_rows = [
            (gene_symbol, i, *row)
            for i, row in enumerate(result.domains.select(list(DOMAIN_SCHEMA)).iter_rows())
        ]
        ptm_rows = [
            (gene_symbol, i, *row)
            for i, row in enumerate(result.ptms.select(list(PTM_SCHEMA)).iter_rows())
        ]

        with self._connect() as conn:
            conn.execute("BEGIN TRANSACTION")
            try:
                conn.execute("DELETE FROM cached_domains WHERE cache_key = ?", [gene_symbol])
                conn.execute("DELETE FROM cached_ptms WHERE cache_key = ?", [gene_symbol])
                if domain_rows:
                    conn.executemany(
                        "INSERT INTO cached_domains VALUES (?, ?, ?, ?, ?, ?)",
                        domain_rows,
                    )
                if ptm_rows:
                    conn.executemany(
                        "INSERT INTO cached_ptms VALUES (?, ?, ?, ?, ?, ?)",
                        ptm_rows,
                    )
                conn.execute("""
                    INSERT OR REPLACE INTO cached_proteins (gene_symbol, protein_length, cached_at)
                    VALUES (?, ?, CURRENT_TIMESTAMP)
                """, [gene_symbol, result.protein_length])
                conn.execute("COMMIT")
            except duckdb.Error:
                conn.execute("ROLLBACK")
                raise

        logger.debug(f"Cached protein data for {gene_symbol} in {self.db_path}")

    def clear(self) -> int:
        if not self.db_path.exists():
            return 0

        with self._connect() as conn:
            removed = conn.execute("SELECT COUNT(*) FROM cached_proteins").fetchone()[0]
            conn.execute("DELETE FROM cached_domains")
            conn.execute("DELETE FROM cached_ptms")
            conn.execute("DELETE FROM cached_proteins")

        logger.info(f"Removed {removed} cached genes from {self.db_path}")
        return removed
