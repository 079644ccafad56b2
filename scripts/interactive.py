"""Interactive canvas: draw walls, erase them and fire beams with the mouse.

Usage:
    python -m scripts.interactive --width 800 --height 600

Keys: d = draw, e = erase, l = laser, c = clear beams.
"""

from __future__ import annotations

import argparse
import time

import matplotlib.pyplot as plt
from matplotlib.animation import FuncAnimation

from beam_core.controller import CanvasController
from beam_core.obstacles import ObstacleStore
from beam_core.simulation import SimConfig, SimulationState
from plots.beam_plots import draw_scene

KEY_MODES = {"d": "draw", "e": "erase", "l": "laser"}


def _now_ms() -> float:
    return time.monotonic() * 1000.0


def main() -> None:
    parser = argparse.ArgumentParser(description="Interactive laser canvas.")
    parser.add_argument("--width", type=float, default=800.0)
    parser.add_argument("--height", type=float, default=600.0)
    parser.add_argument("--speed", type=float, default=20.0, help="Travel per frame")
    parser.add_argument("--max-bounces", type=int, default=20)
    parser.add_argument("--lifetime-ms", type=float, default=1000.0)
    args = parser.parse_args()

    cfg = SimConfig(
        speed=args.speed,
        max_bounces=args.max_bounces,
        lifetime_ms=args.lifetime_ms,
        canvas_width=args.width,
        canvas_height=args.height,
    )
    sim = SimulationState(ObstacleStore(), cfg)
    ctl = CanvasController(sim)
    fig, ax = plt.subplots(figsize=(8, 8 * cfg.canvas_height / cfg.canvas_width))

    def redraw() -> None:
        ax.clear()
        draw_scene(ax, sim.obstacles.snapshot(), sim.snapshot(), cfg.canvas_width, cfg.canvas_height)
        ax.set_title(f"mode: {ctl.mode}")
        fig.canvas.draw_idle()

    def on_click(event) -> None:
        if event.inaxes is not ax or event.xdata is None:
            return
        ctl.handle_click(event.xdata, event.ydata, _now_ms())
        redraw()

    def on_key(event) -> None:
        if event.key in KEY_MODES:
            ctl.set_mode(KEY_MODES[event.key])
        elif event.key == "c":
            sim.clear()
        redraw()

    def tick(_frame) -> None:
        # step only while beams are alive; the timer keeps running for new shots
        if not sim.is_idle:
            sim.step_all(_now_ms())
            redraw()

    fig.canvas.mpl_connect("button_press_event", on_click)
    fig.canvas.mpl_connect("key_press_event", on_key)
    _anim = FuncAnimation(fig, tick, interval=1000.0 / 60.0, cache_frame_data=False)
    redraw()
    plt.show()


if __name__ == "__main__":
    main()
