"""Common scenario helpers and the headless frame driver."""

from __future__ import annotations

from dataclasses import fields
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

import numpy as np

from beam_core.beams import BeamSnapshot
from beam_core.obstacles import ObstacleStore
from beam_core.simulation import SimConfig, SimulationState

FRAME_MS = 1000.0 / 60.0


def make_config(params: Mapping[str, Any]) -> SimConfig:
    names = {f.name for f in fields(SimConfig)}
    return SimConfig(**{k: v for k, v in params.items() if k in names})


def wall(store: ObstacleStore, x0: float, y0: float, x1: float, y1: float) -> int:
    return store.add(np.array([x0, y0]), np.array([x1, y1]))


def run_until_idle(
    sim: SimulationState,
    start_ms: float = 0.0,
    frame_ms: float = FRAME_MS,
    max_frames: Optional[int] = None,
    on_frame: Optional[Callable[[int, float], None]] = None,
) -> Tuple[int, List[BeamSnapshot]]:
    """Tick ``sim`` until it is idle or ``max_frames`` ran.

    Returns the frame count and the last snapshot taken of every beam seen,
    in spawn order, so beams that expired along the way are still reported.
    """

    seen: Dict[int, BeamSnapshot] = {}
    for snap in sim.beams:
        seen[snap.beam_id] = snap
    now = start_ms
    frames = 0
    while max_frames is None or frames < max_frames:
        frames += 1
        now += frame_ms
        more = sim.step_all(now)
        for snap in sim.beams:
            seen[snap.beam_id] = snap
        if on_frame is not None:
            on_frame(frames, now)
        if not more:
            break
    return frames, list(seen.values())


def run_scene(
    store: ObstacleStore,
    shots: List[Tuple[np.ndarray, np.ndarray]],
    params: Mapping[str, Any],
) -> Tuple[SimConfig, List[BeamSnapshot]]:
    """Fire ``(origin, direction)`` shots at t=0 and run the case."""

    cfg = make_config(params)
    sim = SimulationState(store, cfg)
    for origin, direction in shots:
        sim.create_beam(origin, direction, now=0.0)
    _, snaps = run_until_idle(sim, max_frames=params.get("frames"))
    return cfg, snaps
