import numpy as np

from beam_core.geometry import distance_point_to_segment, line_normal, normalize, ray_segment_intersection, reflect


def _unit(angle: float) -> np.ndarray:
    return np.array([np.cos(angle), np.sin(angle)])


def test_line_normal_orientation_and_zero_length():
    n = line_normal(np.array([0.0, 0.0]), np.array([0.0, 10.0]))
    assert np.allclose(n, [1.0, 0.0])
    assert line_normal(np.array([3.0, 3.0]), np.array([3.0, 3.0])) is None


def test_reflect_is_unit_and_self_inverse():
    rng = np.random.default_rng(3)
    for a, b in rng.uniform(0.0, 2 * np.pi, size=(50, 2)):
        v, n = _unit(a), _unit(b)
        r = reflect(v, n)
        assert np.isclose(np.linalg.norm(r), 1.0, rtol=0.0, atol=1e-12)
        assert np.allclose(reflect(r, n), v, atol=1e-12)


def test_reflect_renormalizes_non_unit_normal():
    r = reflect(np.array([1.0, -1.0]) / np.sqrt(2), np.array([0.0, 5.0]))
    assert np.allclose(r, np.array([1.0, 1.0]) / np.sqrt(2))
    assert reflect(np.array([1.0, 0.0]), np.array([0.0, 0.0])) is None


def test_head_on_vertical_wall_negates_x_only():
    n = line_normal(np.array([400.0, 0.0]), np.array([400.0, 600.0]))
    r = reflect(np.array([1.0, 0.0]), n)
    assert np.allclose(r, [-1.0, 0.0])
    v = _unit(0.3)
    r = reflect(v, n)
    assert np.isclose(r[0], -v[0]) and np.isclose(r[1], v[1])


def test_intersection_hit_point():
    hit = ray_segment_intersection(np.array([100.0, 300.0]), np.array([1.0, 0.0]), np.array([400.0, 0.0]), np.array([400.0, 600.0]))
    assert np.allclose(hit, [400.0, 300.0])


def test_segment_behind_ray_has_no_intersection():
    hit = ray_segment_intersection(np.array([500.0, 300.0]), np.array([1.0, 0.0]), np.array([400.0, 0.0]), np.array([400.0, 600.0]))
    assert hit is None


def test_parallel_and_degenerate_and_missed_segments():
    o = np.array([0.0, 0.0])
    d = np.array([1.0, 0.0])
    assert ray_segment_intersection(o, d, np.array([0.0, 1.0]), np.array([10.0, 1.0])) is None
    assert ray_segment_intersection(o, d, np.array([5.0, 5.0]), np.array([5.0, 5.0])) is None
    # ray line crosses the extension of the segment, not the segment itself
    assert ray_segment_intersection(o, d, np.array([5.0, 1.0]), np.array([5.0, 3.0])) is None


def test_segment_endpoint_counts_as_hit():
    hit = ray_segment_intersection(np.array([0.0, 0.0]), np.array([1.0, 0.0]), np.array([5.0, 0.0]), np.array([5.0, 4.0]))
    assert np.allclose(hit, [5.0, 0.0])


def test_point_distance_uses_unclamped_line():
    a, b = np.array([0.0, 0.0]), np.array([10.0, 0.0])
    assert np.isclose(distance_point_to_segment(np.array([5.0, 3.0]), a, b), 3.0)
    # far past the end of the segment but on its extended line
    assert np.isclose(distance_point_to_segment(np.array([50.0, 1.0]), a, b), 1.0)
    assert distance_point_to_segment(np.array([1.0, 1.0]), a, a) is None


def test_normalize_zero_vector():
    assert normalize(np.array([0.0, 0.0])) is None
    assert np.allclose(normalize(np.array([3.0, 4.0])), [0.6, 0.8])
