import numpy as np

from analysis.beam_stats import bounce_histogram, path_length, summarize_beams
from scenarios import S3_bounce_cap


def test_path_length_polyline():
    assert np.isclose(path_length(np.array([[0.0, 0.0], [3.0, 4.0], [3.0, 10.0]])), 11.0)
    assert path_length(np.array([[1.0, 1.0]])) == 0.0


def test_bounce_histogram_clips_to_cap():
    h = bounce_histogram(np.array([0, 1, 1, 3, 9]), max_bounces=3)
    assert h.tolist() == [1, 2, 0, 2]


def test_summarize_capped_scenario():
    _, _, snaps = S3_bounce_cap.run_case({"case_id": "t", "max_bounces": 3})
    s = summarize_beams(snaps)
    assert s["beam_count"] == 1
    assert s["obstacle_hits"] == 3
    assert s["max_bounce"] == 3
    assert s["edge_bounces"] >= 1
    assert s["mean_path_length"] > 0.0
