"""Best-effort retrieval of domains, PTMs and protein length for a gene.

Combines the UniProt client, the feature extractors and the retrieval cache:

    cache lookup -> resolve accession -> fetch entry -> extract domains
    -> extract PTMs -> cache write

Every failure is logged and degraded rather than raised. Protein length comes
from the fetched entry and never depends on extraction succeeding, so a
caller that only needs length and variant positions can always plot once the
entry itself was fetched.
"""

from pathlib import Path
from typing import Callable, Optional

import polars as pl
import structlog

from protein_lollipop.config.schema import LollipopConfig
from protein_lollipop.persistence import RetrievalCache, open_cache
from protein_lollipop.uniprot.fetch import UniProtClient
from protein_lollipop.uniprot.models import (
    ProteinRecord,
    RetrievalResult,
    empty_domain_frame,
    empty_ptm_frame,
)
from protein_lollipop.uniprot.transform import extract_domains, extract_ptms

logger = structlog.get_logger()

Extractor = Callable[[ProteinRecord, str], pl.DataFrame]


def _extract_isolated(
    category: str,
    extractor: Extractor,
    record: ProteinRecord,
    gene_symbol: str,
    empty: Callable[[], pl.DataFrame],
) -> pl.DataFrame:
    """Run one extractor; any exception yields an empty table for that category only."""
    try:
        return extractor(record, gene_symbol)
    except Exception as e:
        logger.warning(
            "feature_extraction_failed",
            category=category,
            gene_symbol=gene_symbol,
            error=f"{type(e).__name__}: {e}",
        )
        return empty()


class ProteinDataRetriever:
    """
    Retrieves protein data for gene symbols, consulting a cache first.

    The retriever itself never raises: unresolvable genes and failed
    fetches return RetrievalResult with protein_length=None.
    """

    def __init__(
        self,
        client: UniProtClient,
        cache: Optional[RetrievalCache] = None,
        organism: str = "human",
    ):
        """
        Args:
            client: UniProtClient used for resolution and entry fetches
            cache: Optional retrieval cache (None disables caching)
            organism: Organism name passed to accession resolution
        """
        self.client = client
        self.cache = cache
        self.organism = organism

    @classmethod
    def from_config(
        cls,
        config: LollipopConfig,
        use_cache: bool = True,
    ) -> "ProteinDataRetriever":
        """Build client and cache from configuration."""
        cache = open_cache(config.cache_dir, config.cache_backend) if use_cache else None
        return cls(
            client=UniProtClient.from_config(config),
            cache=cache,
            organism=config.api.organism,
        )

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> "ProteinDataRetriever":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _cached(self, gene_symbol: str) -> Optional[RetrievalResult]:
        if self.cache is None:
            return None
        try:
            return self.cache.get(gene_symbol)
        except Exception as e:
            logger.warning("cache_read_failed", gene_symbol=gene_symbol, error=str(e))
            return None

    def _store(self, gene_symbol: str, result: RetrievalResult) -> None:
        if self.cache is None:
            return
        try:
            self.cache.put(gene_symbol, result)
            logger.info("protein_data_cached", gene_symbol=gene_symbol)
        except Exception as e:
            logger.warning("cache_write_failed", gene_symbol=gene_symbol, error=str(e))

    def _fetch_record(self, gene_symbol: str) -> Optional[ProteinRecord]:
        """Resolve and fetch the UniProt entry; None on any failure."""
        try:
            accession = self.client.resolve_accession(gene_symbol, self.organism)
        except Exception as e:
            logger.warning("accession_resolution_error", gene_symbol=gene_symbol, error=str(e))
            return None

        if accession is None:
            logger.warning("uniprot_entry_not_found", gene_symbol=gene_symbol)
            return None

        try:
            record = self.client.fetch_protein_record(accession)
        except Exception as e:
            logger.warning(
                "protein_record_error",
                gene_symbol=gene_symbol,
                accession=accession,
                error=str(e),
            )
            return None

        if record is None:
            logger.warning(
                "protein_record_unavailable",
                gene_symbol=gene_symbol,
                accession=accession,
            )
        return record

    def retrieve(self, gene_symbol: str) -> RetrievalResult:
        """Retrieve domains, PTMs and protein length for a gene.

        Args:
            gene_symbol: HUGO gene symbol

        Returns:
            RetrievalResult; protein_length is None only when the UniProt
            entry could not be resolved or fetched
        """
        cached = self._cached(gene_symbol)
        if cached is not None:
            logger.info("protein_data_cache_hit", gene_symbol=gene_symbol)
            return cached

        logger.info("protein_data_fetch_start", gene_symbol=gene_symbol)

        record = self._fetch_record(gene_symbol)
        if record is None:
            return RetrievalResult()

        domains = _extract_isolated(
            "domains", extract_domains, record, gene_symbol, empty_domain_frame
        )
        ptms = _extract_isolated(
            "ptms", extract_ptms, record, gene_symbol, empty_ptm_frame
        )

        result = RetrievalResult(
            domains=domains,
            ptms=ptms,
            protein_length=record.protein_length,
        )

        logger.info(
            "protein_data_fetch_complete",
            gene_symbol=gene_symbol,
            accession=record.accession,
            protein_length=record.protein_length,
            domain_count=domains.height,
            ptm_count=ptms.height,
        )

        self._store(gene_symbol, result)
        return result


def retrieve(
    gene_symbol: str,
    cache_dir: Optional[Path | str] = None,
    *,
    client: Optional[UniProtClient] = None,
    cache: Optional[RetrievalCache] = None,
    organism: str = "human",
    cache_backend: str = "json",
) -> RetrievalResult:
    """Retrieve protein data for one gene (see ProteinDataRetriever.retrieve).

    Args:
        gene_symbol: HUGO gene symbol
        cache_dir: Cache root; None disables caching unless cache is given
        client: UniProtClient to use (a default one is created and closed)
        cache: Explicit cache instance, takes precedence over cache_dir
        organism: Organism name for accession resolution
        cache_backend: Backend used when opening cache_dir; an unknown
                       backend is logged and caching is skipped

    Returns:
        RetrievalResult
    """
    if cache is None and cache_dir is not None:
        try:
            cache = open_cache(cache_dir, cache_backend)
        except ValueError as e:
            logger.warning("cache_unavailable", cache_dir=str(cache_dir), error=str(e))

    if client is not None:
        return ProteinDataRetriever(client, cache, organism).retrieve(gene_symbol)

    with UniProtClient() as default_client:
        return ProteinDataRetriever(default_client, cache, organism).retrieve(gene_symbol)
