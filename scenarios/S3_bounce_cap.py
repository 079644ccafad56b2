"""Scenario S3: beam trapped between two walls with a small bounce cap."""

from __future__ import annotations

import numpy as np

from beam_core.obstacles import ObstacleStore
from scenarios.common import run_scene, wall


def build_scene(left: float = 300.0, right: float = 500.0, height: float = 600.0) -> ObstacleStore:
    store = ObstacleStore()
    wall(store, left, 0.0, left, height)
    wall(store, right, 0.0, right, height)
    return store


def build_sweep_params():
    return [
        {"case_id": "s3_cap3", "max_bounces": 3},
        {"case_id": "s3_cap20", "max_bounces": 20},
    ]


def run_case(params):
    store = build_scene()
    cfg, snaps = run_scene(store, [(np.array([400.0, 300.0]), np.array([1.0, 0.0]))], params)
    return cfg, store, snaps
