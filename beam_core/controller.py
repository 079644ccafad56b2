"""Click-driven drawing, erasing and beam firing on top of the simulation."""

from __future__ import annotations

from typing import Optional

import numpy as np
from numpy.typing import NDArray

from beam_core.obstacles import ERASE_THRESHOLD, ObstacleStore
from beam_core.simulation import SimulationState

Vector = NDArray[np.float64]

MODES = ("draw", "erase", "laser")


class CanvasController:
    """Turns canvas clicks into obstacle edits and beam spawns.

    ``handle_click`` returns one of ``"pending"``, ``"segment"``, ``"erased"``,
    ``"beam"`` or ``"ignored"``.
    """

    def __init__(self, sim: SimulationState, mode: str = "draw", erase_threshold: float = ERASE_THRESHOLD) -> None:
        self.sim = sim
        self.erase_threshold = erase_threshold
        self.mode = "draw"
        self._pending: Optional[Vector] = None
        self.set_mode(mode)

    @property
    def obstacles(self) -> ObstacleStore:
        return self.sim.obstacles

    @property
    def pending(self) -> Optional[Vector]:
        return None if self._pending is None else self._pending.copy()

    def set_mode(self, mode: str) -> None:
        if mode not in MODES:
            raise ValueError(f"Unsupported mode: {mode}")
        self.mode = mode
        self._pending = None

    def handle_click(self, x: float, y: float, now: float) -> str:
        p = np.array([x, y], dtype=float)
        if self.mode == "erase":
            idx = self.obstacles.erase_at(p, self.erase_threshold)
            return "ignored" if idx is None else "erased"

        if self._pending is None:
            self._pending = p
            return "pending"

        start, self._pending = self._pending, None
        if self.mode == "draw":
            self.obstacles.add(start, p)
            return "segment"
        beam = self.sim.fire(start, p, now)
        return "ignored" if beam is None else "beam"
