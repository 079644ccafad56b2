"""Scenario S4: an erased wall no longer stops the beam."""

from __future__ import annotations

import numpy as np

from beam_core.obstacles import ObstacleStore
from scenarios.common import run_scene, wall


def build_scene(erase: bool = True) -> ObstacleStore:
    store = ObstacleStore()
    wall(store, 400.0, 100.0, 400.0, 500.0)
    if erase:
        store.erase_at(np.array([402.0, 250.0]))
    return store


def build_sweep_params():
    return [
        {"case_id": "s4_erased", "erase": True, "frames": 40},
        {"case_id": "s4_kept", "erase": False, "frames": 40},
    ]


def run_case(params):
    store = build_scene(params["erase"])
    cfg, snaps = run_scene(store, [(np.array([100.0, 300.0]), np.array([1.0, 0.0]))], params)
    return cfg, store, snaps
