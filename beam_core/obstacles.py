"""User-drawn obstacle segments and the store that owns them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np
from numpy.typing import NDArray

from beam_core.geometry import as_point, distance_point_to_segment

Vector = NDArray[np.float64]

ERASE_THRESHOLD = 5.0


@dataclass
class Segment:
    """Finite obstacle between two clicked points.

    ``retired`` segments stay in the store so indices remain stable.
    """

    start: Vector
    end: Vector
    retired: bool = False

    def edge(self) -> Vector:
        return self.end - self.start

    def length(self) -> float:
        return float(np.linalg.norm(self.edge()))

    def as_row(self) -> Tuple[float, float, float, float]:
        return float(self.start[0]), float(self.start[1]), float(self.end[0]), float(self.end[1])


class ObstacleStore:
    """Insertion-ordered segment set, mutated only between simulation ticks."""

    def __init__(self) -> None:
        self._segments: List[Segment] = []

    def __len__(self) -> int:
        return len(self._segments)

    def __getitem__(self, index: int) -> Segment:
        return self._segments[index]

    def add(self, start: Vector, end: Vector) -> int:
        self._segments.append(Segment(as_point(start).copy(), as_point(end).copy()))
        return len(self._segments) - 1

    def retire(self, index: int) -> None:
        self._segments[index].retired = True

    def list_active_segments(self) -> List[Segment]:
        return [s for s in self._segments if not s.retired]

    def segment_at(self, point: Vector, threshold: float = ERASE_THRESHOLD) -> Optional[int]:
        """Index of the first active segment whose line passes within ``threshold``."""

        for i, seg in enumerate(self._segments):
            if seg.retired:
                continue
            dist = distance_point_to_segment(point, seg.start, seg.end)
            if dist is not None and dist <= threshold:
                return i
        return None

    def erase_at(self, point: Vector, threshold: float = ERASE_THRESHOLD) -> Optional[int]:
        idx = self.segment_at(point, threshold)
        if idx is not None:
            self.retire(idx)
        return idx

    def snapshot(self) -> List[Tuple[Vector, Vector, bool]]:
        """Copies of every stored segment as ``(start, end, retired)``."""

        return [(s.start.copy(), s.end.copy(), s.retired) for s in self._segments]
