"""Fetch canonical protein records from the UniProt REST API."""

from typing import Any, Optional

import httpx
import structlog
from pydantic import ValidationError
from tenacity import (
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from protein_lollipop.config.schema import LollipopConfig
from protein_lollipop.uniprot.models import ProteinRecord

logger = structlog.get_logger()

# UniProt REST API base URL
UNIPROT_API_BASE = "https://rest.uniprot.org"


def _is_retryable(exc: BaseException) -> bool:
    """Transport errors, rate limiting and server errors are worth another try."""
    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        return status == 429 or status >= 500
    return isinstance(exc, httpx.TransportError)


class UniProtClient:
    """
    Minimal UniProt client for gene symbol lookup and entry retrieval.

    Every failure mode (unknown gene, non-2xx status, network outage,
    malformed JSON, schema drift) is logged and reported as None so callers
    can keep going with partial information.
    """

    def __init__(
        self,
        base_url: str = UNIPROT_API_BASE,
        timeout_seconds: float = 30.0,
        max_retries: int = 1,
        backoff_seconds: float = 1.0,
        http_client: Optional[httpx.Client] = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: UniProt REST API base URL
            timeout_seconds: Request timeout in seconds
            max_retries: Maximum attempts per request (1 = no retry)
            backoff_seconds: Exponential backoff multiplier between attempts
            http_client: Pre-built httpx.Client (tests inject a MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.max_retries = max_retries
        self.backoff_seconds = backoff_seconds

        self._owns_client = http_client is None
        self._client = http_client or httpx.Client(
            timeout=timeout_seconds,
            follow_redirects=True,
        )

    @classmethod
    def from_config(cls, config: LollipopConfig) -> "UniProtClient":
        """Create client from the api section of a LollipopConfig."""
        return cls(
            base_url=config.api.base_url,
            timeout_seconds=config.api.timeout_seconds,
            max_retries=config.api.max_retries,
            backoff_seconds=config.api.backoff_seconds,
        )

    def close(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "UniProtClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _create_retry_decorator(self):
        """Create retry decorator with exponential backoff."""
        return retry(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(multiplier=self.backoff_seconds, max=30),
            retry=retry_if_exception(_is_retryable),
            reraise=True,
        )

    def _get_json(self, url: str, params: Optional[dict[str, Any]] = None) -> Any:
        """
        GET a URL and decode its JSON body.

        Raises:
            httpx.HTTPStatusError: On non-2xx status after retries
            httpx.TransportError: On network failure after retries
            ValueError: If the body is not valid JSON
        """
        @self._create_retry_decorator()
        def _get_with_retry() -> httpx.Response:
            response = self._client.get(url, params=params)
            if response.status_code == 429:
                logger.warning("uniprot_rate_limited", url=url)
            response.raise_for_status()
            return response

        return _get_with_retry().json()

    def resolve_accession(
        self,
        gene_symbol: str,
        organism: str = "human",
    ) -> Optional[str]:
        """Resolve a gene symbol to its top-ranked reviewed UniProt accession.

        Args:
            gene_symbol: HUGO gene symbol (e.g. "BRCA1")
            organism: Organism name for the query filter

        Returns:
            UniProt accession, or None if nothing matched or the request failed
        """
        if not gene_symbol:
            logger.warning("uniprot_empty_gene_symbol")
            return None

        url = f"{self.base_url}/uniprotkb/search"
        params = {
            "query": f"gene:{gene_symbol} AND organism_name:{organism} AND reviewed:true",
            "format": "json",
            "size": 1,
        }

        try:
            data = self._get_json(url, params=params)
        except httpx.HTTPStatusError as e:
            logger.warning(
                "uniprot_search_failed",
                gene_symbol=gene_symbol,
                status_code=e.response.status_code,
            )
            return None
        except httpx.HTTPError as e:
            logger.warning(
                "uniprot_search_error",
                gene_symbol=gene_symbol,
                error=str(e),
            )
            return None
        except ValueError as e:
            logger.warning(
                "uniprot_search_malformed_response",
                gene_symbol=gene_symbol,
                error=str(e),
            )
            return None

        results = data.get("results") if isinstance(data, dict) else None
        if not isinstance(results, list) or not results:
            logger.warning(
                "uniprot_accession_not_found",
                gene_symbol=gene_symbol,
                organism=organism,
            )
            return None

        top_hit = results[0]
        accession = top_hit.get("primaryAccession") if isinstance(top_hit, dict) else None
        if not accession:
            logger.warning("uniprot_result_missing_accession", gene_symbol=gene_symbol)
            return None

        logger.info(
            "uniprot_accession_resolved",
            gene_symbol=gene_symbol,
            accession=accession,
        )
        return accession

    def fetch_protein_record(self, accession: Optional[str]) -> Optional[ProteinRecord]:
        """Fetch the full UniProt entry for an accession.

        Args:
            accession: UniProt accession (None short-circuits to None)

        Returns:
            ProteinRecord with length, gene name, sequence and the raw
            feature list, or None if the request failed or the entry has no
            usable sequence length
        """
        if accession is None:
            return None

        url = f"{self.base_url}/uniprotkb/{accession}.json"

        try:
            data = self._get_json(url)
        except httpx.HTTPStatusError as e:
            logger.warning(
                "uniprot_entry_failed",
                accession=accession,
                status_code=e.response.status_code,
            )
            return None
        except httpx.HTTPError as e:
            logger.warning("uniprot_entry_error", accession=accession, error=str(e))
            return None
        except ValueError as e:
            logger.warning(
                "uniprot_entry_malformed_response",
                accession=accession,
                error=str(e),
            )
            return None

        if not isinstance(data, dict):
            logger.warning("uniprot_entry_malformed_response", accession=accession)
            return None

        sequence = data.get("sequence")
        if not isinstance(sequence, dict):
            sequence = {}
        sequence_value = sequence.get("value")

        try:
            record = ProteinRecord(
                accession=accession,
                gene_name=_first_gene_name(data.get("genes")),
                protein_length=sequence.get("length"),
                sequence=sequence_value if isinstance(sequence_value, str) else None,
                features=data.get("features"),
            )
        except ValidationError as e:
            logger.warning(
                "uniprot_entry_invalid",
                accession=accession,
                error=str(e),
            )
            return None

        logger.info(
            "uniprot_entry_fetched",
            accession=accession,
            protein_length=record.protein_length,
            feature_count=len(record.features) if isinstance(record.features, list) else 0,
        )
        return record

    def get_protein_length(
        self,
        gene_symbol: str,
        organism: str = "human",
    ) -> Optional[int]:
        """Resolve a gene symbol and return only its protein length."""
        record = self.fetch_protein_record(self.resolve_accession(gene_symbol, organism))
        if record is None:
            return None
        return record.protein_length


def _first_gene_name(genes: Any) -> Optional[str]:
    """Extract genes[0].geneName.value, tolerating any missing level."""
    if not isinstance(genes, list) or not genes:
        return None
    first = genes[0]
    if not isinstance(first, dict):
        return None
    gene_name = first.get("geneName")
    if not isinstance(gene_name, dict):
        return None
    value = gene_name.get("value")
    return value if isinstance(value, str) else None
