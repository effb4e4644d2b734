"""Lollipop plot assembly, layout and rendering."""

from protein_lollipop.plotting.assemble import (
    PlotInputs,
    ProteinLengthUnavailableError,
    create_lollipop_plot,
    resolve_plot_inputs,
)
from protein_lollipop.plotting.render import render_scene
from protein_lollipop.plotting.scene import (
    CONSEQUENCE_COLORS,
    PTM_MARKERS,
    Label,
    LollipopScene,
    Marker,
    Rect,
    Segment,
    build_lollipop_scene,
    consequence_color,
)

__all__ = [
    "PlotInputs",
    "ProteinLengthUnavailableError",
    "create_lollipop_plot",
    "resolve_plot_inputs",
    "render_scene",
    "CONSEQUENCE_COLORS",
    "PTM_MARKERS",
    "Label",
    "LollipopScene",
    "Marker",
    "Rect",
    "Segment",
    "build_lollipop_scene",
    "consequence_color",
]
