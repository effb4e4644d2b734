"""Render a LollipopScene to an image file with matplotlib."""

import logging
from pathlib import Path

import matplotlib

# Use Agg backend (non-interactive, safe for headless/CLI use)
matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import seaborn as sns  # noqa: E402
from matplotlib.lines import Line2D  # noqa: E402
from matplotlib.patches import Rectangle  # noqa: E402

from protein_lollipop.plotting.scene import (  # noqa: E402
    CONSEQUENCE_COLORS,
    PTM_COLOR,
    PTM_MARKERS,
    LollipopScene,
)

logger = logging.getLogger(__name__)


def _legend_handles(scene: LollipopScene) -> list[Line2D]:
    handles = []

    consequences = {m.legend for m in scene.markers_in("consequence")}
    for name, color in CONSEQUENCE_COLORS.items():
        if name in consequences:
            handles.append(Line2D(
                [], [], marker="o", linestyle="", color=color,
                markersize=8, label=name,
            ))

    ptm_types = {m.legend for m in scene.markers_in("ptm")}
    for name, shape in PTM_MARKERS.items():
        if name in ptm_types:
            handles.append(Line2D(
                [], [], marker=shape, linestyle="", color=PTM_COLOR,
                markersize=8, label=f"PTM: {name}",
            ))

    return handles


def _draw_scene(fig, ax, scene: LollipopScene) -> None:
    for rect in scene.rects:
        ax.add_patch(Rectangle(
            (rect.x0, rect.y0),
            rect.x1 - rect.x0,
            rect.y1 - rect.y0,
            facecolor=rect.color,
            alpha=rect.alpha,
            edgecolor="none",
        ))

    for seg in scene.segments:
        ax.plot([seg.x0, seg.x1], [seg.y0, seg.y1], color=seg.color,
                linewidth=seg.linewidth, solid_capstyle="butt", zorder=1)

    for marker in scene.markers:
        ax.plot(
            marker.x,
            marker.y,
            marker=marker.shape,
            color=marker.color,
            markersize=marker.size * 2,
            alpha=marker.alpha,
            linestyle="",
            zorder=2,
        )

    for label in scene.labels:
        ax.text(
            label.x,
            label.y,
            label.text,
            fontsize=label.fontsize,
            ha=label.ha,
            va="center",
            fontweight="bold" if label.bold else "normal",
            zorder=3,
        )

    ax.set_xlim(*scene.x_range)
    ax.set_ylim(*scene.y_range)
    ax.set_xlabel(scene.x_label, fontsize=12, fontweight="bold")
    ax.set_ylabel("")
    ax.set_yticks([])
    ax.grid(axis="y", visible=False)
    fig.suptitle(scene.title, fontsize=16, fontweight="bold", x=0.02, ha="left")
    ax.set_title(scene.subtitle, fontsize=12, loc="left")

    handles = _legend_handles(scene)
    if handles:
        ax.legend(handles=handles, loc="center left", bbox_to_anchor=(1.01, 0.5),
                  frameon=False)


def render_scene(
    scene: LollipopScene,
    output_path: Path | str,
    width: float = 14,
    height: float = 10,
    dpi: int = 300,
) -> Path:
    """
    Draw a lollipop scene and save it.

    Args:
        scene: Scene from build_lollipop_scene
        output_path: Destination image path; format follows the suffix
        width: Figure width in inches
        height: Figure height in inches
        dpi: Output resolution

    Returns:
        Path to the saved file
    """
    output_path = Path(output_path)

    sns.set_theme(style="whitegrid", context="paper")

    fig, ax = plt.subplots(figsize=(width, height))
    try:
        _draw_scene(fig, ax, scene)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(output_path, dpi=dpi, bbox_inches="tight")
    finally:
        # Close figure to prevent memory leak across batch runs
        plt.close(fig)

    logger.info(f"Plot saved to: {output_path}")
    return output_path
