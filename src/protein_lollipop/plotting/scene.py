"""Declarative lollipop scene: geometry and styling, no drawing."""

from dataclasses import dataclass, field
from typing import Optional

import polars as pl

from protein_lollipop.uniprot.models import DEFAULT_DOMAIN_NAME

# VEP impact and consequence colour palette
CONSEQUENCE_COLORS = {
    "HIGH": "#FF0000",
    "MODERATE": "#FFA500",
    "LOW": "#FFFF00",
    "MODIFIER": "#00FF00",
    "frameshift_variant": "#FF0000",
    "stop_gained": "#FF0000",
    "stop_lost": "#FF0000",
    "start_lost": "#FF0000",
    "splice_acceptor_variant": "#FF0000",
    "splice_donor_variant": "#FF0000",
    "missense_variant": "#FFA500",
    "inframe_deletion": "#FFA500",
    "inframe_insertion": "#FFA500",
    "synonymous_variant": "#00AA00",
    "intron_variant": "#87CEEB",
    "5_prime_UTR_variant": "#7FFFD4",
    "3_prime_UTR_variant": "#7FFFD4",
}
FALLBACK_CONSEQUENCE = "MODIFIER"

# Consequences that are always labelled, regardless of count
TRUNCATING_CONSEQUENCES = frozenset({
    "frameshift_variant",
    "stop_gained",
    "stop_lost",
    "start_lost",
    "splice_acceptor_variant",
    "splice_donor_variant",
})

# matplotlib marker codes per PTM type
PTM_MARKERS = {
    "Phosphorylation": "^",
    "Acetylation": "s",
    "Methylation": "D",
    "Ubiquitination": "v",
    "Glycosylation": "o",
    "Other": "X",
}

BACKBONE_COLOR = "#666666"
STEM_COLOR = "#999999"
DOMAIN_COLOR = "steelblue"
PTM_COLOR = "purple"

DOMAIN_Y = -2.0
DOMAIN_HALF_HEIGHT = 0.3
DOMAIN_LABEL_OFFSET = 0.8
PTM_ROW_OFFSET = 1.5
PTM_LABEL_OFFSET = 0.8
PTM_MARKER_SIZE = 4.0
HEAD_SIZE_RANGE = (3.0, 10.0)


@dataclass(frozen=True)
class Segment:
    x0: float
    y0: float
    x1: float
    y1: float
    color: str
    linewidth: float


@dataclass(frozen=True)
class Rect:
    x0: float
    x1: float
    y0: float
    y1: float
    color: str
    alpha: float


@dataclass(frozen=True)
class Marker:
    """A point glyph.

    legend is the legend entry this marker belongs to; group separates the
    consequence legend ("consequence") from the PTM legend ("ptm").
    """
    x: float
    y: float
    shape: str
    color: str
    size: float
    alpha: float
    group: str
    legend: str


@dataclass(frozen=True)
class Label:
    x: float
    y: float
    text: str
    fontsize: float = 8.0
    ha: str = "center"
    bold: bool = False


@dataclass(frozen=True)
class LollipopScene:
    gene_name: str
    protein_length: int
    title: str
    subtitle: str
    x_label: str
    x_range: tuple[float, float]
    segments: tuple[Segment, ...] = field(default_factory=tuple)
    rects: tuple[Rect, ...] = field(default_factory=tuple)
    markers: tuple[Marker, ...] = field(default_factory=tuple)
    labels: tuple[Label, ...] = field(default_factory=tuple)

    def markers_in(self, group: str) -> list[Marker]:
        return [m for m in self.markers if m.group == group]

    @property
    def y_range(self) -> tuple[float, float]:
        ys = [0.0]
        ys.extend(y for s in self.segments for y in (s.y0, s.y1))
        ys.extend(y for r in self.rects for y in (r.y0, r.y1))
        ys.extend(m.y for m in self.markers)
        ys.extend(lab.y for lab in self.labels)
        return min(ys) - 0.5, max(ys) + 1.0


def consequence_color(consequence: Optional[str]) -> str:
    """Palette colour for a consequence; unknown values use the MODIFIER colour."""
    return CONSEQUENCE_COLORS.get(consequence or "", CONSEQUENCE_COLORS[FALLBACK_CONSEQUENCE])


def scale_head_sizes(counts: list[int]) -> list[float]:
    """Linearly map variant counts onto HEAD_SIZE_RANGE.

    A single distinct count maps to the middle of the range.
    """
    low, high = HEAD_SIZE_RANGE
    if not counts:
        return []
    c_min, c_max = min(counts), max(counts)
    if c_min == c_max:
        return [(low + high) / 2] * len(counts)
    return [low + (c - c_min) / (c_max - c_min) * (high - low) for c in counts]


def _rows_for_gene(df: Optional[pl.DataFrame], gene_name: str) -> list[dict]:
    if df is None or df.height == 0 or "gene" not in df.columns:
        return []
    return df.filter(pl.col("gene") == gene_name).to_dicts()


def build_lollipop_scene(
    counts: pl.DataFrame,
    gene_name: str,
    protein_length: int,
    domains: Optional[pl.DataFrame] = None,
    ptms: Optional[pl.DataFrame] = None,
) -> LollipopScene:
    """
    Lay out the lollipop plot for one gene.

    Args:
        counts: Output of count_variants for the gene
        gene_name: Gene symbol; only domains/PTMs for this gene are drawn
        protein_length: Protein length in amino acids (x-axis extent)
        domains: Optional domains table (gene, domain_name, start, end)
        ptms: Optional PTMs table (gene, ptm_type, position, description)

    Returns:
        LollipopScene with the backbone at y=0, domains at y=-2, the PTM row
        below the domains, and one stem plus head per counted variant group
    """
    segments = []
    rects = []
    markers = []
    labels = []

    y_offset = 0.0
    domain_rows = _rows_for_gene(domains, gene_name)
    for domain in domain_rows:
        rects.append(Rect(
            x0=domain["start"],
            x1=domain["end"],
            y0=DOMAIN_Y - DOMAIN_HALF_HEIGHT,
            y1=DOMAIN_Y + DOMAIN_HALF_HEIGHT,
            color=DOMAIN_COLOR,
            alpha=0.6,
        ))
        labels.append(Label(
            x=(domain["start"] + domain["end"]) / 2,
            y=DOMAIN_Y - DOMAIN_LABEL_OFFSET,
            text=domain["domain_name"] or DEFAULT_DOMAIN_NAME,
        ))
    if domain_rows:
        y_offset = -3.0

    ptm_rows = _rows_for_gene(ptms, gene_name)
    if ptm_rows:
        ptm_y = y_offset - PTM_ROW_OFFSET
        for ptm in ptm_rows:
            ptm_type = ptm["ptm_type"] if ptm["ptm_type"] in PTM_MARKERS else "Other"
            markers.append(Marker(
                x=ptm["position"],
                y=ptm_y,
                shape=PTM_MARKERS[ptm_type],
                color=PTM_COLOR,
                size=PTM_MARKER_SIZE,
                alpha=0.7,
                group="ptm",
                legend=ptm_type,
            ))
        labels.append(Label(
            x=0,
            y=ptm_y - PTM_LABEL_OFFSET,
            text="PTMs",
            ha="left",
            bold=True,
        ))

    # Backbone
    segments.append(Segment(0, 0, protein_length, 0, BACKBONE_COLOR, 4.0))

    rows = counts.to_dicts()
    sizes = scale_head_sizes([row["count"] for row in rows])
    for row, size in zip(rows, sizes):
        pos = row["aa_pos"]
        height = row["count"]
        consequence = row["consequence"]
        legend = consequence if consequence in CONSEQUENCE_COLORS else FALLBACK_CONSEQUENCE

        segments.append(Segment(pos, 0, pos, height, STEM_COLOR, 0.8))
        markers.append(Marker(
            x=pos,
            y=height,
            shape="o",
            color=consequence_color(consequence),
            size=size,
            alpha=0.8,
            group="consequence",
            legend=legend,
        ))

        if height > 1 or consequence in TRUNCATING_CONSEQUENCES:
            labels.append(Label(
                x=pos,
                y=height + 0.4,
                text=f"{row['REF'] or ''}{pos}{row['ALT'] or ''}",
            ))

    return LollipopScene(
        gene_name=gene_name,
        protein_length=protein_length,
        title=f"Detailed Lollipop Plot for {gene_name}",
        subtitle=f"Protein length: {protein_length} amino acids",
        x_label="Amino Acid Position",
        x_range=(0, protein_length),
        segments=tuple(segments),
        rects=tuple(rects),
        markers=tuple(markers),
        labels=tuple(labels),
    )
