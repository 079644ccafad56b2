import numpy as np
import pytest

from beam_core.controller import CanvasController
from beam_core.obstacles import ObstacleStore
from beam_core.simulation import SimConfig, SimulationState


def _ctl(mode: str = "draw") -> CanvasController:
    return CanvasController(SimulationState(ObstacleStore(), SimConfig()), mode=mode)


def test_retire_keeps_index_but_hides_segment():
    store = ObstacleStore()
    a = store.add(np.array([0.0, 0.0]), np.array([10.0, 0.0]))
    b = store.add(np.array([0.0, 5.0]), np.array([10.0, 5.0]))
    store.retire(a)
    assert len(store) == 2
    assert store[a].retired
    assert [s is store[b] for s in store.list_active_segments()] == [True]
    assert [r for _, _, r in store.snapshot()] == [True, False]


def test_erase_hits_extended_line_past_endpoint():
    store = ObstacleStore()
    store.add(np.array([0.0, 0.0]), np.array([10.0, 0.0]))
    assert store.segment_at(np.array([100.0, 4.0])) == 0
    assert store.segment_at(np.array([5.0, 6.0])) is None
    assert store.erase_at(np.array([5.0, 2.0])) == 0
    # already retired segments are skipped
    assert store.erase_at(np.array([5.0, 2.0])) is None


def test_snapshot_is_a_copy():
    store = ObstacleStore()
    store.add(np.array([0.0, 0.0]), np.array([10.0, 0.0]))
    start, _, _ = store.snapshot()[0]
    start[0] = 99.0
    assert store[0].start[0] == 0.0


def test_draw_mode_two_clicks_make_segment():
    ctl = _ctl("draw")
    assert ctl.handle_click(10.0, 10.0, 0.0) == "pending"
    assert np.allclose(ctl.pending, [10.0, 10.0])
    assert ctl.handle_click(50.0, 10.0, 0.0) == "segment"
    assert ctl.pending is None
    assert len(ctl.obstacles) == 1
    assert np.allclose(ctl.obstacles[0].end, [50.0, 10.0])


def test_laser_mode_fires_and_rejects_zero_length():
    ctl = _ctl("laser")
    ctl.handle_click(100.0, 100.0, 0.0)
    assert ctl.handle_click(100.0, 100.0, 0.0) == "ignored"
    assert ctl.sim.is_idle
    ctl.handle_click(100.0, 100.0, 0.0)
    assert ctl.handle_click(100.0, 150.0, 5.0) == "beam"
    beam = ctl.sim.beams[0]
    assert np.allclose(beam.direction, [0.0, 1.0])
    assert beam.created_at == 5.0


def test_erase_mode_and_mode_switch_clears_pending():
    ctl = _ctl("draw")
    ctl.handle_click(0.0, 0.0, 0.0)
    ctl.handle_click(10.0, 0.0, 0.0)
    ctl.handle_click(3.0, 3.0, 0.0)
    ctl.set_mode("erase")
    assert ctl.pending is None
    assert ctl.handle_click(5.0, 40.0, 0.0) == "ignored"
    assert ctl.handle_click(5.0, 1.0, 0.0) == "erased"
    assert ctl.obstacles.list_active_segments() == []


def test_unknown_mode_rejected():
    with pytest.raises(ValueError):
        _ctl("paint")
