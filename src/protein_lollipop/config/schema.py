"""Pydantic models for lollipop plotting configuration."""

import hashlib
import json
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator


class APIConfig(BaseModel):
    """Configuration for the UniProt client."""

    base_url: str = Field(
        default="https://rest.uniprot.org",
        description="UniProt REST API base URL",
    )
    organism: str = Field(
        default="human",
        description="Organism name used when resolving gene symbols",
    )
    timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Request timeout in seconds",
    )
    max_retries: int = Field(
        default=1,
        ge=1,
        le=10,
        description="Maximum attempts per request (1 = no retry)",
    )
    backoff_seconds: float = Field(
        default=1.0,
        ge=0,
        description="Exponential backoff multiplier between attempts",
    )


class PlotConfig(BaseModel):
    """Figure dimensions for rendered plots."""

    width: float = Field(default=14.0, gt=0, description="Figure width in inches")
    height: float = Field(default=10.0, gt=0, description="Figure height in inches")
    dpi: int = Field(default=300, ge=50, le=1200, description="Output resolution")


class FilterConfig(BaseModel):
    """Variant filters applied by batch processing."""

    impacts: list[str] | None = Field(
        default=None,
        description="Impacts to keep (None keeps all)",
    )
    max_allele_frequency: float = Field(
        default=1.0,
        ge=0.0,
        le=1.0,
        description="Maximum allele frequency to keep (1.0 = no filter)",
    )
    exclude_reference_genotype: bool = Field(
        default=True,
        description="Drop variants with genotype 0/0",
    )

    @field_validator("impacts")
    @classmethod
    def normalize_impacts(cls, v: list[str] | None) -> list[str] | None:
        """Upper-case impact names so HIGH/high compare equal."""
        if v is None:
            return v
        return [impact.upper() for impact in v]


class LollipopConfig(BaseModel):
    """Main configuration."""

    cache_dir: Path = Field(
        default=Path(".lollipop_cache"),
        description="Directory for per-gene protein data snapshots",
    )
    cache_backend: Literal["json", "duckdb"] = Field(
        default="json",
        description="Retrieval cache backend",
    )
    output_dir: Path = Field(
        default=Path("plots"),
        description="Directory for rendered plots",
    )
    auto_retrieve: bool = Field(
        default=True,
        description="Fetch missing domains, PTMs and protein length from UniProt",
    )
    api: APIConfig = Field(default_factory=APIConfig)
    plot: PlotConfig = Field(default_factory=PlotConfig)
    filters: FilterConfig = Field(default_factory=FilterConfig)

    def config_hash(self) -> str:
        """
        Compute SHA-256 hash of the configuration.

        Returns a deterministic hash based on all config values, recorded in
        batch summaries so runs can be matched to their settings.
        """
        config_dict = self.model_dump(mode="python")
        config_json = json.dumps(
            config_dict,
            sort_keys=True,
            default=str,
        )
        return hashlib.sha256(config_json.encode()).hexdigest()
