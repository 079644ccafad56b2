"""Beam container and read-only snapshots for renderers.

Example:
    >>> import numpy as np
    >>> from beam_core.beams import Beam
    >>> b = Beam.launch(np.array([10.0, 20.0]), np.array([1.0, 0.0]), speed=20.0, created_at=0.0)
    >>> b.snapshot().path.shape
    (1, 2)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

import numpy as np
from numpy.typing import NDArray

from beam_core.geometry import as_point

Vector = NDArray[np.float64]


@dataclass
class Beam:
    position: Vector
    direction: Vector
    speed: float
    created_at: float
    bounce_count: int = 0
    path: List[Vector] = field(default_factory=list)
    hits: List[Vector] = field(default_factory=list)
    edge_bounces: int = 0
    beam_id: int = -1

    @classmethod
    def launch(cls, origin: Vector, direction: Vector, speed: float, created_at: float, beam_id: int = -1) -> "Beam":
        p = as_point(origin).copy()
        return cls(
            position=p,
            direction=as_point(direction).copy(),
            speed=float(speed),
            created_at=float(created_at),
            path=[p.copy()],
            beam_id=beam_id,
        )

    def age(self, now: float) -> float:
        return float(now) - self.created_at

    def snapshot(self) -> "BeamSnapshot":
        path = np.array(self.path, dtype=float).reshape(-1, 2)
        hits = np.array(self.hits, dtype=float).reshape(-1, 2)
        direction = self.direction.copy()
        for arr in (path, hits, direction):
            arr.flags.writeable = False
        return BeamSnapshot(
            path=path,
            hits=hits,
            bounce_count=self.bounce_count,
            edge_bounces=self.edge_bounces,
            created_at=self.created_at,
            beam_id=self.beam_id,
            direction=direction,
        )


@dataclass(frozen=True)
class BeamSnapshot:
    """Detached copy of a beam's trace; arrays are not writeable."""

    path: NDArray[np.float64]
    hits: NDArray[np.float64]
    bounce_count: int
    edge_bounces: int
    created_at: float
    beam_id: int = -1
    direction: NDArray[np.float64] = field(default_factory=lambda: np.full(2, np.nan))

    @property
    def position(self) -> NDArray[np.float64]:
        return self.path[-1]
