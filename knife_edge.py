"""Single knife-edge diffraction (W. C. Y. Lee, 1985 approximation).

The Fresnel parameter v places a building corner relative to the direct
sender->receiver line; the loss in dB is a five-branch closed form of v.

The published approximation uses log10. The simulation this model was
calibrated against evaluated the same expressions with the natural
logarithm, which is kept as the default; pass log="log10" for the
reference form.
"""

import math
from typing import Callable, Dict, Literal

from .geometry import Point

LogBase = Literal["ln", "log10"]

LOG_FUNCTIONS: Dict[str, Callable[[float], float]] = {
    "ln": math.log,
    "log10": math.log10,
}


def fresnel_parameter(sender: Point, receiver: Point, corner: Point, wave_length: float) -> float:
    """Knife-edge parameter v for a corner next to the direct path.

    h is the perpendicular distance of the corner from the sender->receiver
    line, ds/dr split the direct path at the foot of that perpendicular.
    """
    dsr = sender.distance_to(receiver)
    if dsr <= 0:
        raise ValueError("receiver must be apart from the sender")
    dsc = sender.distance_to(corner)
    if dsc <= 0:
        # Sender sits on the corner.
        return math.inf
    cos_alpha = ((corner.x - sender.x) * (receiver.x - sender.x)
                 + (corner.y - sender.y) * (receiver.y - sender.y)) / (dsc * dsr)
    alpha = math.acos(max(-1.0, min(1.0, cos_alpha)))
    h = dsc * math.sin(alpha)
    # Signed projection: sqrt(dsc² - h²) for corners ahead of the sender.
    ds = dsc * math.cos(alpha)
    dr = dsr - ds
    if ds <= 0 or dr <= 0:
        # Corner does not project between the link ends; unusable as an edge.
        return math.inf
    return h * math.sqrt((2.0 * (dr + ds)) / (wave_length * dr * ds))


def knife_edge_loss_db(v: float, log: LogBase = "ln") -> float:
    """Diffraction term in dB for parameter v (0 dB for v <= -1)."""
    try:
        lg = LOG_FUNCTIONS[log]
    except KeyError:
        raise ValueError(f"Unknown logarithm {log!r}") from None
    if v <= -1.0:
        return 0.0
    if math.isinf(v):
        return -math.inf
    if v <= 0.0:
        return 20.0 * lg(0.5 - 0.62 * v)
    if v <= 1.0:
        return 20.0 * lg(0.5 * math.exp(-0.95 * v))
    if v <= 2.4:
        v_term = 0.38 - 0.1 * v
        return 20.0 * lg(0.4 - math.sqrt(0.1184 - v_term * v_term))
    return 20.0 * lg(0.225 / v)
