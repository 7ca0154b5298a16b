"""Centralized plotting style, sizes and save helpers."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from matplotlib.axes import Axes
from matplotlib.figure import Figure
from matplotlib.ticker import MaxNLocator

OUTPUT_FORMATS: tuple[str, ...] = ("png", "pdf")
FIGURE_DPI = 150


@dataclass(frozen=True)
class StyleConfig:
    TITLE_FONTSIZE: float = 12.0
    LABEL_FONTSIZE: float = 11.0
    TICK_FONTSIZE: float = 10.0
    ANNOTATION_FONTSIZE: float = 9.0
    LINEWIDTH: float = 1.6
    LINEWIDTH_THIN: float = 1.0
    MARKERSIZE: float = 22.0
    GRID_ALPHA: float = 0.25
    POINT_COLOR: str = "#333333"
    GUIDE_COLOR: str = "#888888"
    HIGHLIGHT_COLOR: str = "#d62728"
    BAND_COLOR: str = "#1f77b4"
    FIGSIZE_SINGLE: tuple[float, float] = (6.0, 4.2)
    FIGSIZE_2x2: tuple[float, float] = (10.0, 8.0)


STYLE = StyleConfig()

FIG_SIZES: dict[str, tuple[float, float]] = {
    "single": STYLE.FIGSIZE_SINGLE,
    "wide": (9.0, 4.2),
    "grid_2x2": STYLE.FIGSIZE_2x2,
}

# Line colours for overlaid fits, cycled in order
FIT_COLORS = ("#1f77b4", "#d62728", "#2ca02c", "#ff7f0e", "#9467bd", "#8c564b")
FIT_LINESTYLES = ("-", "--", "-.", ":")


def fig_size(kind: str = "single") -> tuple[float, float]:
    """Return the figure size for a named figure kind."""
    return FIG_SIZES.get(kind, FIG_SIZES["single"])


def clean_axis(ax: Axes, *, grid_axis: str = "both", nbins: int = 6) -> None:
    """Apply consistent ticks, grid and spines to one axis."""
    ax.tick_params(axis="both", which="major", labelsize=STYLE.TICK_FONTSIZE)
    ax.xaxis.set_major_locator(MaxNLocator(nbins=nbins))
    ax.yaxis.set_major_locator(MaxNLocator(nbins=nbins))
    ax.spines["top"].set_visible(False)
    ax.spines["right"].set_visible(False)
    ax.grid(False)
    if grid_axis in {"x", "y", "both"}:
        ax.grid(True, axis=grid_axis, alpha=STYLE.GRID_ALPHA, linestyle=":", linewidth=0.7)


def set_labels(ax: Axes, *, x: str | None = None, y: str | None = None,
               title: str | None = None) -> None:
    if x is not None:
        ax.set_xlabel(x, fontsize=STYLE.LABEL_FONTSIZE)
    if y is not None:
        ax.set_ylabel(y, fontsize=STYLE.LABEL_FONTSIZE)
    if title is not None:
        ax.set_title(title, fontsize=STYLE.TITLE_FONTSIZE)


def save_figure(
    fig: Figure,
    path: str | Path,
    formats: Sequence[str] = OUTPUT_FORMATS,
    dpi: int = FIGURE_DPI,
    *,
    bbox_inches: str = "tight",
) -> Path:
    """
    Save a figure, creating parent directories.

    A path with a suffix is written as given. An extensionless path is
    written once per entry of ``formats``; the first file is returned.
    """
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    if target.suffix:
        fig.savefig(str(target), dpi=dpi, bbox_inches=bbox_inches)
        return target
    if not formats:
        raise ValueError("save_figure: at least one format required for an extensionless path")
    written = []
    for ext in formats:
        out = target.with_suffix(f".{ext}")
        fig.savefig(str(out), dpi=dpi if ext == "png" else None, bbox_inches=bbox_inches)
        written.append(out)
    return written[0]
