"""Per-frame beam advancement, multi-bounce resolution and beam lifecycle.

Example:
    >>> import numpy as np
    >>> from beam_core.obstacles import ObstacleStore
    >>> from beam_core.simulation import SimConfig, SimulationState
    >>> store = ObstacleStore()
    >>> _ = store.add(np.array([400.0, 0.0]), np.array([400.0, 600.0]))
    >>> sim = SimulationState(store, SimConfig())
    >>> _ = sim.create_beam(np.array([380.0, 300.0]), np.array([1.0, 0.0]), now=0.0)
    >>> sim.step_all(16.0)
    True
    >>> beam = sim.beams[0]
    >>> beam.direction.tolist(), beam.bounce_count
    ([-1.0, 0.0], 1)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple
import warnings

import numpy as np
from numpy.typing import NDArray

from beam_core.beams import Beam, BeamSnapshot
from beam_core.geometry import as_point, cross2, line_normal, normalize, ray_segment_intersection, reflect
from beam_core.obstacles import ObstacleStore, Segment

Vector = NDArray[np.float64]

SELF_HIT_EPS = 1e-9


class SubstepLimitWarning(RuntimeWarning):
    """A frame ran out of sub-steps before spending its travel budget."""


@dataclass(frozen=True)
class SimConfig:
    speed: float = 20.0  # distance units per frame
    max_bounces: int = 20
    lifetime_ms: float = 1000.0
    canvas_width: float = 800.0
    canvas_height: float = 600.0
    max_substeps: int = 10

    def __post_init__(self) -> None:
        if self.speed <= 0:
            raise ValueError("speed must be > 0")
        if self.max_bounces < 0:
            raise ValueError("max_bounces must be >= 0")
        if self.lifetime_ms <= 0:
            raise ValueError("lifetime_ms must be > 0")
        if self.canvas_width <= 0 or self.canvas_height <= 0:
            raise ValueError("canvas size must be > 0")
        if self.max_substeps < 1:
            raise ValueError("max_substeps must be >= 1")


def _oriented_normal(direction: Vector, seg: Segment) -> Optional[Vector]:
    n = line_normal(seg.start, seg.end)
    if n is None:
        return None
    if cross2(direction, seg.edge()) > 0:
        n = -n
    return n


def closest_collision(
    position: Vector,
    direction: Vector,
    segments: Sequence[Segment],
    max_distance: float,
) -> Optional[Tuple[Vector, Vector]]:
    """Nearest obstacle hit within ``max_distance`` as ``(point, reflected_direction)``.

    Distance is measured along the (unit) direction.
    """

    best: Optional[Tuple[Vector, Vector]] = None
    best_d = np.inf
    for seg in segments:
        hit = ray_segment_intersection(position, direction, seg.start, seg.end)
        if hit is None:
            continue
        d = float(np.dot(hit - position, direction))
        if d <= SELF_HIT_EPS or d > max_distance or d >= best_d:
            continue
        n = _oriented_normal(direction, seg)
        new_dir = reflect(direction, n) if n is not None else None
        if new_dir is None:
            continue
        best_d = d
        best = (hit, new_dir)
    return best


def _advance_to_edge(beam: Beam, distance: float, cfg: SimConfig) -> None:
    new = beam.position + beam.direction * distance
    bounced = False
    if new[0] < 0 or new[0] > cfg.canvas_width:
        beam.direction[0] *= -1.0
        bounced = True
    if new[1] < 0 or new[1] > cfg.canvas_height:
        beam.direction[1] *= -1.0
        bounced = True
    if bounced:
        # counter is shared with obstacle bounces but saturates at the cap
        beam.bounce_count = min(beam.bounce_count + 1, cfg.max_bounces)
        beam.edge_bounces += 1
        beam.path.append(beam.position.copy())
        new = np.clip(new, [0.0, 0.0], [cfg.canvas_width, cfg.canvas_height])
    beam.position = new


def step_beam(beam: Beam, segments: Sequence[Segment], cfg: SimConfig, now: float) -> bool:
    """Advance one beam by one frame. Returns False once the beam has expired."""

    if beam.age(now) >= cfg.lifetime_ms:
        return False

    remaining = beam.speed
    substeps = 0
    while remaining > 0 and substeps < cfg.max_substeps:
        substeps += 1
        collision = closest_collision(beam.position, beam.direction, segments, remaining)
        if collision is not None and beam.bounce_count < cfg.max_bounces:
            point, new_dir = collision
            remaining -= float(np.linalg.norm(point - beam.position))
            beam.position = point.copy()
            beam.direction = new_dir
            beam.bounce_count += 1
            beam.path.append(point.copy())
            beam.hits.append(point.copy())
        else:
            _advance_to_edge(beam, remaining, cfg)
            remaining = 0.0

    if remaining > 0:
        warnings.warn(
            f"beam created at {beam.created_at:.0f} ms hit the {cfg.max_substeps}-substep limit "
            f"with {remaining:.3f} travel left; resuming next frame",
            SubstepLimitWarning,
            stacklevel=2,
        )

    beam.path.append(beam.position.copy())
    return True


class SimulationState:
    """Active beam set driven by an external scheduler via ``step_all``."""

    def __init__(self, obstacles: ObstacleStore, config: SimConfig | None = None) -> None:
        self.obstacles = obstacles
        self.config = config or SimConfig()
        self._beams: List[Beam] = []
        self._next_id = 0

    @property
    def beams(self) -> Tuple[BeamSnapshot, ...]:
        """Read-only snapshots of the active beams, in spawn order."""

        return tuple(b.snapshot() for b in self._beams)

    @property
    def is_idle(self) -> bool:
        return not self._beams

    def create_beam(self, origin: Vector, direction: Vector, now: float, speed: float | None = None) -> Optional[BeamSnapshot]:
        """Spawn a beam; zero-length directions spawn nothing.

        Returns a snapshot of the new beam, never the live beam.
        """

        if speed is not None and speed <= 0:
            raise ValueError("speed must be > 0")
        unit = normalize(direction)
        if unit is None:
            return None
        beam = Beam.launch(origin, unit, self.config.speed if speed is None else speed, now, beam_id=self._next_id)
        self._next_id += 1
        self._beams.append(beam)
        return beam.snapshot()

    def fire(self, start: Vector, end: Vector, now: float) -> Optional[BeamSnapshot]:
        """Spawn a beam at ``start`` aimed through ``end``."""

        return self.create_beam(start, as_point(end) - as_point(start), now)

    def step_all(self, now: float) -> bool:
        """Run one frame for every beam. Returns True while beams remain."""

        segments = self.obstacles.list_active_segments()
        self._beams = [b for b in self._beams if step_beam(b, segments, self.config, now)]
        return bool(self._beams)

    def clear(self) -> None:
        self._beams = []

    def snapshot(self) -> List[BeamSnapshot]:
        return [b.snapshot() for b in self._beams]
