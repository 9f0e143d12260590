"""Received-power coverage maps around one sender.

Evaluates a propagation model on a regular grid of receiver positions and
optionally renders the result with the building outlines on top. Intended
for visual sanity checks of the shadowing models, not for the hot path.

Assumptions:
- Grid cells whose centre coincides with the sender report the transmit power.
- Values are dBm; -inf (no power) is clipped to ``floor_dbm`` for plotting.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Sequence

import numpy as np
import matplotlib.pyplot as plt

from .buildings import Building
from .geometry import Point
from .propagation import PropagationModel
from .units import mw_to_dbm


def grid_axes(center: Point, half_size_m: float, step_m: float) -> tuple[np.ndarray, np.ndarray]:
    """Symmetric x/y sample positions around ``center``."""
    if step_m <= 0:
        raise ValueError("step must be positive")
    n = int(np.floor(half_size_m / step_m))
    offsets = np.arange(-n, n + 1) * step_m
    return center.x + offsets, center.y + offsets


def received_power_grid(
    model: PropagationModel,
    sender: Point,
    xs: Sequence[float],
    ys: Sequence[float],
    p_send_mw: float = 20.0,
    frequency_hz: float = 5.89e9,
) -> np.ndarray:
    """Received power in dBm, shape (len(ys), len(xs))."""
    grid = np.zeros((len(ys), len(xs)))
    for iy, y in enumerate(ys):
        for ix, x in enumerate(xs):
            rx = Point(float(x), float(y))
            if rx == sender:
                prec = p_send_mw
            else:
                prec = model.received_power(p_send_mw, frequency_hz, sender, rx)
            grid[iy, ix] = mw_to_dbm(prec)
    return grid


def render_coverage_map(
    grid_dbm: np.ndarray,
    xs: Sequence[float],
    ys: Sequence[float],
    sender: Point,
    buildings: Iterable[Building] = (),
    floor_dbm: float = -110.0,
    title: str = "Received power (dBm)",
    outfile: str | Path = "coverage.png",
) -> Path:
    """Save the grid as a PNG with building outlines and the sender marked."""
    data = np.maximum(grid_dbm, floor_dbm)
    fig, ax = plt.subplots(figsize=(6, 6), dpi=140)
    extent = [float(xs[0]), float(xs[-1]), float(ys[0]), float(ys[-1])]
    im = ax.imshow(data, origin="lower", extent=extent, cmap="turbo")
    fig.colorbar(im, ax=ax)
    for b in buildings:
        for w in b.walls:
            ax.plot([w.from_corner.x, w.to_corner.x], [w.from_corner.y, w.to_corner.y], "k-", lw=1.0)
    ax.scatter([sender.x], [sender.y], c="w", edgecolors="k", s=40, marker="^", label="sender")
    ax.set_title(title)
    ax.set_xlabel("x (m)")
    ax.set_ylabel("y (m)")
    ax.legend(loc="upper right")
    outp = Path(outfile)
    outp.parent.mkdir(parents=True, exist_ok=True)
    fig.tight_layout()
    fig.savefig(outp)
    plt.close(fig)
    return outp
