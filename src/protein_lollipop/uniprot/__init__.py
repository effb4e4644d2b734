"""UniProt protein metadata layer.

Resolves gene symbols to canonical accessions, fetches entries, and
extracts the domain and PTM tables drawn on lollipop plots.
"""

from protein_lollipop.uniprot.models import (
    DOMAIN_FEATURE_TYPES,
    DOMAIN_SCHEMA,
    PTM_FEATURE_TYPES,
    PTM_SCHEMA,
    DomainRecord,
    PTMRecord,
    PTMType,
    ProteinRecord,
    RetrievalResult,
    empty_domain_frame,
    empty_ptm_frame,
)
from protein_lollipop.uniprot.fetch import UNIPROT_API_BASE, UniProtClient
from protein_lollipop.uniprot.transform import (
    categorize_ptm,
    extract_domains,
    extract_ptms,
)

__all__ = [
    "DOMAIN_FEATURE_TYPES",
    "DOMAIN_SCHEMA",
    "PTM_FEATURE_TYPES",
    "PTM_SCHEMA",
    "DomainRecord",
    "PTMRecord",
    "PTMType",
    "ProteinRecord",
    "RetrievalResult",
    "empty_domain_frame",
    "empty_ptm_frame",
    "UNIPROT_API_BASE",
    "UniProtClient",
    "categorize_ptm",
    "extract_domains",
    "extract_ptms",
]
