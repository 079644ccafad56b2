"""Scene rendering and trace plots."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence, Tuple
import warnings

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.patches import PathPatch
from matplotlib.path import Path as MplPath

from beam_core.beams import BeamSnapshot

SegmentRow = Tuple[np.ndarray, np.ndarray, bool]

BEAM_STYLE = {"edgecolor": (1.0, 0.0, 0.0, 0.7), "facecolor": "none", "linewidth": 3, "capstyle": "round"}


def _save(fig: plt.Figure, outdir: str, name: str) -> str:
    Path(outdir).mkdir(parents=True, exist_ok=True)
    png = Path(outdir) / f"{name}.png"
    pdf = Path(outdir) / f"{name}.pdf"
    fig.savefig(png, dpi=150, bbox_inches="tight")
    try:
        fig.savefig(pdf, bbox_inches="tight")
    except PermissionError:
        warnings.warn(
            f"Could not write '{pdf}' (permission denied). Saved PNG only.",
            RuntimeWarning,
            stacklevel=2,
        )
    plt.close(fig)
    return str(png)


def smooth_path(points: np.ndarray) -> MplPath:
    """Quadratic curve through consecutive midpoints, previous vertex as control.

    Needs at least two points.
    """

    pts = np.asarray(points, dtype=float).reshape(-1, 2)
    if len(pts) < 2:
        raise ValueError("smooth_path needs at least 2 points")
    verts = [pts[0]]
    codes = [MplPath.MOVETO]
    for prev, curr in zip(pts[:-1], pts[1:]):
        verts.extend([prev, 0.5 * (prev + curr)])
        codes.extend([MplPath.CURVE3, MplPath.CURVE3])
    return MplPath(np.array(verts), codes)


def draw_scene(
    ax: plt.Axes,
    segments: Sequence[SegmentRow],
    beams: Sequence[BeamSnapshot],
    width: float,
    height: float,
) -> int:
    """Draw active segments and beam paths; returns the number of beams drawn."""

    ax.set_facecolor("black")
    ax.set_xlim(0, width)
    ax.set_ylim(height, 0)  # canvas y axis points down
    ax.set_aspect("equal")
    for start, end, retired in segments:
        if retired:
            continue
        ax.plot([start[0], end[0]], [start[1], end[1]], color="white", linewidth=2)
    drawn = 0
    for b in beams:
        if len(b.path) < 2:
            continue
        ax.add_patch(PathPatch(smooth_path(b.path), **BEAM_STYLE))
        drawn += 1
    return drawn


def render_scene(
    segments: Sequence[SegmentRow],
    beams: Sequence[BeamSnapshot],
    width: float,
    height: float,
    outdir: str,
    name: str = "scene",
) -> str:
    fig, ax = plt.subplots(figsize=(8, 8 * height / width))
    draw_scene(ax, segments, beams, width, height)
    for b in beams:
        if len(b.hits):
            ax.scatter(b.hits[:, 0], b.hits[:, 1], s=12, color="yellow", zorder=3)
    ax.set_title(f"{name}: {len(beams)} beam(s)")
    return _save(fig, outdir, name)


def bounce_hist(bounce_count: np.ndarray, max_bounces: int, outdir: str) -> str:
    fig, ax = plt.subplots()
    ax.hist(np.asarray(bounce_count, dtype=int), bins=np.arange(max_bounces + 2) - 0.5)
    ax.set_xlabel("bounce count")
    ax.set_title("bounce distribution")
    return _save(fig, outdir, "bounces")
