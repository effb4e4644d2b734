"""Extract domain and PTM tables from raw UniProt feature lists."""

from typing import Any, Optional

import polars as pl
import structlog

from protein_lollipop.uniprot.models import (
    DEFAULT_DOMAIN_NAME,
    DOMAIN_FEATURE_TYPES,
    DOMAIN_SCHEMA,
    PTM_CATEGORY_KEYWORDS,
    PTM_FEATURE_TYPES,
    PTM_SCHEMA,
    DomainRecord,
    PTMRecord,
    PTMType,
    ProteinRecord,
    empty_domain_frame,
    empty_ptm_frame,
    frame_from_rows,
)

logger = structlog.get_logger()


def _feature_list(record: Optional[ProteinRecord], category: str) -> list:
    """Return the record's features if they are list-shaped, else an empty list."""
    features = getattr(record, "features", None) if record is not None else None
    if features is None:
        return []
    if not isinstance(features, list):
        logger.warning(
            "feature_list_not_tabular",
            category=category,
            accession=getattr(record, "accession", None),
            feature_type=type(features).__name__,
        )
        return []
    return features


def _matching_features(features: list, feature_types: list[str]) -> list[dict]:
    """Keep dict features whose type is in feature_types."""
    return [
        feature for feature in features
        if isinstance(feature, dict) and feature.get("type") in feature_types
    ]


def _location_value(feature: dict, key: str) -> Optional[int]:
    """Read feature["location"][key]["value"] as a positive int.

    Returns None for any missing level or a value that is not a whole
    number >= 1 (UniProt uses e.g. {"modifier": "UNKNOWN"} with no value).
    """
    location = feature.get("location")
    if not isinstance(location, dict):
        return None
    point = location.get(key)
    if not isinstance(point, dict):
        return None
    value: Any = point.get("value")

    if isinstance(value, bool):
        return None
    if isinstance(value, float):
        if not value.is_integer():
            return None
        value = int(value)
    elif isinstance(value, str):
        if not value.strip().isdigit():
            return None
        value = int(value.strip())
    elif not isinstance(value, int):
        return None

    return value if value >= 1 else None


def _description(feature: dict) -> Optional[str]:
    description = feature.get("description")
    if isinstance(description, str) and description:
        return description
    return None


def categorize_ptm(description: Optional[str]) -> PTMType:
    """Map a free-text UniProt PTM description to a coarse category.

    Case-insensitive substring match against PTM_CATEGORY_KEYWORDS in order;
    the first keyword found wins. Anything unmatched is Other.
    """
    if not description:
        return PTMType.OTHER
    lowered = description.lower()
    for keyword, category in PTM_CATEGORY_KEYWORDS:
        if keyword in lowered:
            return category
    return PTMType.OTHER


def extract_domains(record: Optional[ProteinRecord], gene_symbol: str) -> pl.DataFrame:
    """Extract domain-like features into the domains table.

    Args:
        record: ProteinRecord from UniProtClient.fetch_protein_record (may be None)
        gene_symbol: Gene symbol written to the gene column

    Returns:
        DataFrame with columns gene, domain_name, start, end. Features with a
        missing start or end (or end before start) are dropped; a missing
        description becomes "Domain". Empty if nothing usable was found.
    """
    features = _feature_list(record, "domains")
    matched = _matching_features(features, DOMAIN_FEATURE_TYPES)
    if not matched:
        return empty_domain_frame()

    rows = []
    skipped = 0
    for feature in matched:
        start = _location_value(feature, "start")
        end = _location_value(feature, "end")
        if start is None or end is None or end < start:
            skipped += 1
            continue

        rows.append(DomainRecord(
            gene=gene_symbol,
            domain_name=_description(feature) or DEFAULT_DOMAIN_NAME,
            start=start,
            end=end,
        ).model_dump())

    if skipped:
        logger.debug(
            "domains_missing_boundaries",
            gene_symbol=gene_symbol,
            skipped=skipped,
        )

    return frame_from_rows(rows, DOMAIN_SCHEMA)


def extract_ptms(record: Optional[ProteinRecord], gene_symbol: str) -> pl.DataFrame:
    """Extract modification features into the PTMs table.

    PTMs are point annotations: the position is the feature's start only.

    Args:
        record: ProteinRecord from UniProtClient.fetch_protein_record (may be None)
        gene_symbol: Gene symbol written to the gene column

    Returns:
        DataFrame with columns gene, ptm_type, position, description.
        Features without a start position are dropped. Empty if nothing
        usable was found.
    """
    features = _feature_list(record, "ptms")
    matched = _matching_features(features, PTM_FEATURE_TYPES)
    if not matched:
        return empty_ptm_frame()

    rows = []
    skipped = 0
    for feature in matched:
        position = _location_value(feature, "start")
        if position is None:
            skipped += 1
            continue

        description = _description(feature) or ""
        rows.append(PTMRecord(
            gene=gene_symbol,
            ptm_type=categorize_ptm(description),
            position=position,
            description=description,
        ).model_dump(mode="json"))

    if skipped:
        logger.debug(
            "ptms_missing_position",
            gene_symbol=gene_symbol,
            skipped=skipped,
        )

    return frame_from_rows(rows, PTM_SCHEMA)
