"""Data models for UniProt protein records and extracted feature tables."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import polars as pl
from pydantic import BaseModel, ConfigDict, Field

# UniProt feature types drawn as domain rectangles
DOMAIN_FEATURE_TYPES = [
    "Domain",
    "Region",
    "Repeat",
    "Zinc finger",
    "DNA binding",
]

# UniProt feature types drawn as PTM markers
PTM_FEATURE_TYPES = [
    "Modified residue",
    "Cross-link",
    "Glycosylation",
    "Lipidation",
    "Disulfide bond",
]

# Placeholder name for domain features without a description
DEFAULT_DOMAIN_NAME = "Domain"

DOMAIN_SCHEMA = {
    "gene": pl.Utf8,
    "domain_name": pl.Utf8,
    "start": pl.Int64,
    "end": pl.Int64,
}

PTM_SCHEMA = {
    "gene": pl.Utf8,
    "ptm_type": pl.Utf8,
    "position": pl.Int64,
    "description": pl.Utf8,
}


class PTMType(str, Enum):
    """Coarse PTM categories used for marker shapes."""

    PHOSPHORYLATION = "Phosphorylation"
    ACETYLATION = "Acetylation"
    METHYLATION = "Methylation"
    UBIQUITINATION = "Ubiquitination"
    GLYCOSYLATION = "Glycosylation"
    OTHER = "Other"


# Description keywords, checked in order; first match wins.
# UniProt descriptions are free text, so this is a heuristic.
PTM_CATEGORY_KEYWORDS = [
    ("phospho", PTMType.PHOSPHORYLATION),
    ("acetyl", PTMType.ACETYLATION),
    ("methyl", PTMType.METHYLATION),
    ("ubiquitin", PTMType.UBIQUITINATION),
    ("glyc", PTMType.GLYCOSYLATION),
]


class ProteinRecord(BaseModel):
    """Canonical UniProt entry for one gene.

    Attributes:
        accession: UniProt primary accession
        gene_name: Gene name reported by UniProt (None if absent)
        protein_length: Sequence length in amino acids
        sequence: Amino acid sequence (None if absent)
        features: Raw UniProt feature list, unvalidated
    """

    model_config = ConfigDict(frozen=True)

    accession: str
    gene_name: str | None = None
    protein_length: int = Field(..., ge=1)
    sequence: str | None = None
    features: Any = None


class DomainRecord(BaseModel):
    """Single row of the domains table."""

    gene: str
    domain_name: str
    start: int = Field(..., ge=1)
    end: int = Field(..., ge=1)


class PTMRecord(BaseModel):
    """Single row of the PTMs table."""

    gene: str
    ptm_type: PTMType
    position: int = Field(..., ge=1)
    description: str = ""


def empty_domain_frame() -> pl.DataFrame:
    """Domains table with no rows."""
    return pl.DataFrame(schema=DOMAIN_SCHEMA)


def empty_ptm_frame() -> pl.DataFrame:
    """PTMs table with no rows."""
    return pl.DataFrame(schema=PTM_SCHEMA)


def frame_from_rows(rows: list[dict], schema: dict) -> pl.DataFrame:
    """Build a DataFrame with a fixed schema from row dicts (may be empty)."""
    return pl.DataFrame(
        {column: [row.get(column) for row in rows] for column in schema},
        schema=schema,
    )


@dataclass(eq=False)
class RetrievalResult:
    """Best-effort protein data for one gene.

    Attributes:
        domains: Domains table (DOMAIN_SCHEMA), possibly empty
        ptms: PTMs table (PTM_SCHEMA), possibly empty
        protein_length: Length in amino acids, None when retrieval failed

    Only a missing protein_length makes the result unusable for plotting;
    empty tables are a normal outcome.
    """

    domains: pl.DataFrame = field(default_factory=empty_domain_frame)
    ptms: pl.DataFrame = field(default_factory=empty_ptm_frame)
    protein_length: int | None = None

    @property
    def has_protein_length(self) -> bool:
        return self.protein_length is not None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RetrievalResult):
            return NotImplemented
        return (
            self.protein_length == other.protein_length
            and self.domains.equals(other.domains)
            and self.ptms.equals(other.ptms)
        )
