"""Scenario S1: head-on shot at a vertical wall across the canvas midline."""

from __future__ import annotations

import numpy as np

from beam_core.obstacles import ObstacleStore
from scenarios.common import run_scene, wall


def build_scene(x: float = 400.0, height: float = 600.0) -> ObstacleStore:
    store = ObstacleStore()
    wall(store, x, 0.0, x, height)
    return store


def build_sweep_params():
    # 30 frames: one wall hit, the return leg reaches x=0 but not the wall again
    return [
        {"case_id": "s1_x400", "wall_x": 400.0, "frames": 30},
        {"case_id": "s1_x400_full", "wall_x": 400.0, "frames": None},
    ]


def run_case(params):
    store = build_scene(params["wall_x"])
    cfg, snaps = run_scene(store, [(np.array([100.0, 300.0]), np.array([1.0, 0.0]))], params)
    return cfg, store, snaps
