"""Free-space (Friis) utilities.

Every building-aware model falls back to the free-space term when nothing
obstructs the link, and uses `max_range_m` to skip building queries for
links that could not be decoded anyway.
"""

import math

from .units import SPEED_OF_LIGHT, dbm_to_mw

_FOUR_PI = 4.0 * math.pi


def friis_power(p_send: float, frequency_hz: float, distance_m: float) -> float:
    """Uncapped Friis term P λ² / (16 π² d²) in the unit of `p_send`.

    Args:
        p_send: transmit power (linear, e.g. mW)
        frequency_hz: carrier frequency in Hz (> 0)
        distance_m: distance in meters (> 0)
    """
    if distance_m <= 0:
        raise ValueError("distance must be positive")
    if frequency_hz <= 0:
        raise ValueError("frequency must be positive")
    wave_length = SPEED_OF_LIGHT / frequency_hz
    return p_send * wave_length * wave_length / (16.0 * math.pi * math.pi * distance_m * distance_m)


def friis_received_power(p_send: float, frequency_hz: float, distance_m: float) -> float:
    """Friis received power, capped at `p_send` for distances below λ/4π."""
    return min(friis_power(p_send, frequency_hz, distance_m), p_send)


def max_range_m(p_send_mw: float, sensitivity_dbm: float, frequency_hz: float) -> float:
    """Distance at which the free-space received power drops to the sensitivity.

    d_max = λ/(4π) · sqrt(P_send / P_sens), both powers in mW.
    """
    if frequency_hz <= 0:
        raise ValueError("frequency must be positive")
    if p_send_mw <= 0:
        return 0.0
    wave_length = SPEED_OF_LIGHT / frequency_hz
    return wave_length / _FOUR_PI * math.sqrt(p_send_mw / dbm_to_mw(sensitivity_dbm))
