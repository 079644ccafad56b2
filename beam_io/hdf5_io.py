"""HDF5 export of finished beam traces.

The schema stores multiple scenarios and multiple sweep cases per scenario.

Structure:
    /
      meta                       (attrs: created_at, units)
      config                     (attrs: default SimConfig fields)
      scenarios/{scenario_id}/cases/{case_id}/
          config                 (attrs: SimConfig the case ran with)
          params_json            (scalar utf-8 JSON)
          segments               (S,4) x0,y0,x1,y1
          retired                (S,) bool
          beams/
              path               (B,Lmax,2) nan padded
              path_len           (B,)
              hits               (B,Hmax,2) nan padded
              bounce_count       (B,)
              edge_bounces       (B,)
              created_at         (B,)

Example:
    >>> import numpy as np
    >>> from beam_core.beams import Beam
    >>> from beam_core.simulation import SimConfig
    >>> snap = Beam.launch(np.array([1.0, 2.0]), np.array([1.0, 0.0]), 20.0, 0.0).snapshot()
    >>> payload = {"S0": {"case0": {"params": {"speed": 20}, "segments": np.zeros((0, 4)), "retired": [], "beams": [snap]}}}
    >>> save_trace_hdf5("/tmp/trace_example.h5", SimConfig(), payload)
    >>> cfg, loaded, meta = load_trace_hdf5("/tmp/trace_example.h5")
    >>> list(loaded.keys()), loaded["S0"]["case0"].beams[0].path.shape
    (['S0'], (1, 2))
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from datetime import datetime, timezone
import json
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import h5py
import numpy as np

from beam_core.beams import BeamSnapshot
from beam_core.simulation import SimConfig

_INT_FIELDS = {"max_bounces", "max_substeps"}


@dataclass
class CaseData:
    params: Dict[str, Any]
    segments: np.ndarray
    retired: np.ndarray
    beams: List[BeamSnapshot]
    config: Optional[SimConfig] = None


@dataclass
class Hdf5Meta:
    created_at: str
    units: str


def _json_default(obj: Any) -> Any:
    if isinstance(obj, (np.integer, np.floating, np.bool_)):
        return obj.item()
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    raise TypeError(f"Unsupported JSON type: {type(obj)}")


def _pad_3d_points(rows: Sequence[np.ndarray], pad_value: float = np.nan) -> np.ndarray:
    width = max((len(r) for r in rows), default=0)
    out = np.full((len(rows), width, 2), pad_value, dtype=np.float64)
    for i, row in enumerate(rows):
        out[i, : len(row)] = np.asarray(row, dtype=np.float64).reshape(-1, 2)
    return out


def _as_case(case: CaseData | Mapping[str, Any]) -> CaseData:
    if isinstance(case, CaseData):
        return case
    return CaseData(
        params=dict(case["params"]),
        segments=np.asarray(case["segments"], dtype=np.float64).reshape(-1, 4),
        retired=np.asarray(case["retired"], dtype=bool),
        beams=list(case["beams"]),
        config=case.get("config"),
    )


def _write_config(group: h5py.Group, config: SimConfig) -> None:
    for k, v in asdict(config).items():
        group.attrs[k] = v


def _read_config(group: h5py.Group) -> SimConfig:
    names = {f.name for f in fields(SimConfig)}
    kwargs = {k: (int(v) if k in _INT_FIELDS else float(v)) for k, v in group.attrs.items() if k in names}
    return SimConfig(**kwargs)


def save_trace_hdf5(
    filepath: str,
    config: SimConfig,
    scenarios: Mapping[str, Mapping[str, CaseData | Mapping[str, Any]]],
    units: str = "px",
) -> None:
    """Save beam traces to HDF5 using a fixed schema contract."""

    with h5py.File(filepath, "w") as h5:
        meta = h5.create_group("meta")
        meta.attrs["created_at"] = datetime.now(timezone.utc).isoformat()
        meta.attrs["units"] = units

        _write_config(h5.create_group("config"), config)

        g_scenarios = h5.create_group("scenarios")
        for scenario_id, cases in scenarios.items():
            g_cases = g_scenarios.create_group(str(scenario_id)).create_group("cases")
            for case_id, case in cases.items():
                case_obj = _as_case(case)
                g_case = g_cases.create_group(str(case_id))
                _write_config(g_case.create_group("config"), case_obj.config or config)
                g_case.create_dataset("params_json", data=json.dumps(case_obj.params, default=_json_default))
                g_case.create_dataset("segments", data=np.asarray(case_obj.segments, dtype=np.float64).reshape(-1, 4))
                g_case.create_dataset("retired", data=np.asarray(case_obj.retired, dtype=bool))

                beams = case_obj.beams
                g_beams = g_case.create_group("beams")
                g_beams.create_dataset("path", data=_pad_3d_points([b.path for b in beams]))
                g_beams.create_dataset("path_len", data=np.array([len(b.path) for b in beams], dtype=np.int64))
                g_beams.create_dataset("hits", data=_pad_3d_points([b.hits for b in beams]))
                g_beams.create_dataset("bounce_count", data=np.array([b.bounce_count for b in beams], dtype=np.int32))
                g_beams.create_dataset("edge_bounces", data=np.array([b.edge_bounces for b in beams], dtype=np.int32))
                g_beams.create_dataset("created_at", data=np.array([b.created_at for b in beams], dtype=np.float64))


def _unpad_points(block: np.ndarray, n: int | None = None) -> np.ndarray:
    if n is None:
        keep = np.all(np.isfinite(block), axis=1)
        out = block[keep]
    else:
        out = block[:n]
    out = np.array(out, dtype=np.float64).reshape(-1, 2)
    out.flags.writeable = False
    return out


def load_trace_hdf5(filepath: str) -> Tuple[SimConfig, Dict[str, Dict[str, CaseData]], Hdf5Meta]:
    """Load trace HDF5 and reconstruct cases and beam snapshots."""

    scenarios: Dict[str, Dict[str, CaseData]] = {}
    with h5py.File(filepath, "r") as h5:
        meta = Hdf5Meta(
            created_at=str(h5["meta"].attrs.get("created_at", "")),
            units=str(h5["meta"].attrs.get("units", "px")),
        )
        config = _read_config(h5["config"])

        for scenario_id, g_scenario in h5["scenarios"].items():
            scenarios[scenario_id] = {}
            for case_id, g_case in g_scenario["cases"].items():
                raw = g_case["params_json"][()]
                params = json.loads(raw.decode() if isinstance(raw, bytes) else raw)
                g_beams = g_case["beams"]

                path = np.asarray(g_beams["path"][()], dtype=np.float64)
                path_len = np.asarray(g_beams["path_len"][()], dtype=np.int64)
                hits = np.asarray(g_beams["hits"][()], dtype=np.float64)
                bounce_count = np.asarray(g_beams["bounce_count"][()], dtype=np.int32)
                edge_bounces = np.asarray(g_beams["edge_bounces"][()], dtype=np.int32)
                created_at = np.asarray(g_beams["created_at"][()], dtype=np.float64)

                beams: List[BeamSnapshot] = []
                for i in range(len(path_len)):
                    beams.append(
                        BeamSnapshot(
                            path=_unpad_points(path[i], int(path_len[i])),
                            hits=_unpad_points(hits[i]),
                            bounce_count=int(bounce_count[i]),
                            edge_bounces=int(edge_bounces[i]),
                            created_at=float(created_at[i]),
                        )
                    )

                scenarios[scenario_id][case_id] = CaseData(
                    params=params,
                    segments=np.asarray(g_case["segments"][()], dtype=np.float64).reshape(-1, 4),
                    retired=np.asarray(g_case["retired"][()], dtype=bool),
                    beams=beams,
                    config=_read_config(g_case["config"]) if "config" in g_case else config,
                )

    return config, scenarios, meta


def self_test_roundtrip(filepath: str, atol: float = 1e-12) -> bool:
    """Write->read equivalence self-test on a synthetic two-beam case."""

    rng = np.random.default_rng(7)
    beams = []
    for n_pts, n_hits in ((5, 2), (3, 0)):
        path = rng.uniform(0.0, 600.0, size=(n_pts, 2))
        hits = path[1 : 1 + n_hits].copy()
        beams.append(BeamSnapshot(path=path, hits=hits, bounce_count=n_hits, edge_bounces=0, created_at=float(n_pts)))
    segments = np.array([[400.0, 0.0, 400.0, 600.0], [0.0, 0.0, 10.0, 10.0]])
    case_config = SimConfig(speed=15.0, max_bounces=4)
    payload = {
        "selftest": {
            "case0": CaseData(params={"seed": 7}, segments=segments, retired=np.array([False, True]), beams=beams, config=case_config)
        }
    }
    config = SimConfig()
    save_trace_hdf5(filepath, config, payload)
    config2, scenarios, _ = load_trace_hdf5(filepath)
    case = scenarios["selftest"]["case0"]

    same_paths = all(np.allclose(a.path, b.path, atol=atol) for a, b in zip(beams, case.beams))
    same_hits = all(a.hits.shape == b.hits.shape and np.allclose(a.hits, b.hits, atol=atol) for a, b in zip(beams, case.beams))
    same_counts = [b.bounce_count for b in beams] == [b.bounce_count for b in case.beams]
    return bool(
        config2 == config
        and case.config == case_config
        and len(case.beams) == len(beams)
        and same_paths
        and same_hits
        and same_counts
        and np.allclose(case.segments, segments)
        and case.retired.tolist() == [False, True]
    )
