"""Scenario S0: empty canvas, beams bounce off the canvas edges only."""

from __future__ import annotations

import numpy as np

from beam_core.obstacles import ObstacleStore
from scenarios.common import run_scene


def build_scene() -> ObstacleStore:
    return ObstacleStore()


def build_sweep_params():
    return [
        {"case_id": "s0_diag", "direction": [3.0, 4.0], "speed": 20.0},
        {"case_id": "s0_fast", "direction": [1.0, -1.0], "speed": 45.0},
    ]


def run_case(params):
    store = build_scene()
    shots = [(np.array([100.0, 100.0]), np.asarray(params["direction"], dtype=float))]
    cfg, snaps = run_scene(store, shots, params)
    return cfg, store, snaps
