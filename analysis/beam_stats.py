"""Trace statistics over beam snapshots."""

from __future__ import annotations

from typing import Any, Dict, Sequence

import numpy as np

from beam_core.beams import BeamSnapshot


def path_length(points: np.ndarray) -> float:
    pts = np.asarray(points, dtype=float).reshape(-1, 2)
    if len(pts) < 2:
        return 0.0
    return float(np.sum(np.linalg.norm(np.diff(pts, axis=0), axis=1)))


def bounce_histogram(bounce_count: np.ndarray, max_bounces: int) -> np.ndarray:
    """Counts per bounce value 0..max_bounces."""

    b = np.asarray(bounce_count, dtype=int)
    return np.bincount(np.clip(b, 0, max_bounces), minlength=max_bounces + 1)


def summarize_beams(snapshots: Sequence[BeamSnapshot]) -> Dict[str, Any]:
    bounce = np.array([s.bounce_count for s in snapshots], dtype=int)
    lengths = np.array([path_length(s.path) for s in snapshots], dtype=float)
    return {
        "beam_count": len(snapshots),
        "bounce_dist": {int(k): int(v) for k, v in zip(*np.unique(bounce, return_counts=True))},
        "obstacle_hits": int(sum(len(s.hits) for s in snapshots)),
        "edge_bounces": int(sum(s.edge_bounces for s in snapshots)),
        "mean_path_length": float(lengths.mean()) if len(lengths) else 0.0,
        "max_bounce": int(bounce.max()) if len(bounce) else 0,
    }
