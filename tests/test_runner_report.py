from pathlib import Path

from beam_core.simulation import SimConfig
from beam_io.hdf5_io import load_trace_hdf5
from scenarios.runner import SCENARIO_MODULES, run_all


def test_run_all_writes_report_plots_and_traces(tmp_path: Path):
    h5 = tmp_path / "sweep.h5"
    plots = tmp_path / "plots"
    report = Path(run_all(out_h5=str(h5), out_plot_dir=str(plots)))

    text = report.read_text(encoding="utf-8")
    assert "PASS: No automatic failure checks triggered." in text
    assert (plots / "S1" / "s1_x400" / "scene.png").exists()
    assert (plots / "bounces.png").exists()

    cfg, loaded, _ = load_trace_hdf5(str(h5))
    assert set(loaded) == set(SCENARIO_MODULES)
    assert cfg == SimConfig()


def test_sweep_file_keeps_each_case_config(tmp_path: Path):
    h5 = tmp_path / "sweep.h5"
    run_all(out_h5=str(h5), out_plot_dir=str(tmp_path / "plots"))

    _, loaded, _ = load_trace_hdf5(str(h5))
    assert loaded["S0"]["s0_fast"].config.speed == 45.0
    assert loaded["S0"]["s0_diag"].config.speed == 20.0
    assert loaded["S3"]["s3_cap3"].config.max_bounces == 3
    assert loaded["S3"]["s3_cap20"].config.max_bounces == 20
    assert all(s.bounce_count <= 3 for s in loaded["S3"]["s3_cap3"].beams)
