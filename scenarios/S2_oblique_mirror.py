"""Scenario S2: 45 degree mirror, drawn in either endpoint order."""

from __future__ import annotations

import numpy as np

from beam_core.obstacles import ObstacleStore
from scenarios.common import run_scene, wall


def build_scene(reverse: bool = False) -> ObstacleStore:
    store = ObstacleStore()
    p0, p1 = (300.0, 100.0), (500.0, 300.0)
    if reverse:
        p0, p1 = p1, p0
    wall(store, *p0, *p1)
    return store


def build_sweep_params():
    return [
        {"case_id": "s2_fwd", "reverse": False, "frames": 20},
        {"case_id": "s2_rev", "reverse": True, "frames": 20},
    ]


def run_case(params):
    store = build_scene(params["reverse"])
    cfg, snaps = run_scene(store, [(np.array([200.0, 200.0]), np.array([1.0, 0.0]))], params)
    return cfg, store, snaps
