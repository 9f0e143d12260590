"""Power and wave unit helpers shared by the propagation models.

Functions:
- dbm_to_mw: convert an absolute power (or a dB ratio) to linear scale.
- mw_to_dbm: convert linear power back to dBm.
- wavelength_m: carrier wavelength for a frequency.
"""

import math

# Propagation models use the rounded value throughout.
SPEED_OF_LIGHT = 3.0e8  # m/s


def dbm_to_mw(value_dbm: float) -> float:
    """10^(P/10)."""
    return 10.0 ** (value_dbm / 10.0)


def mw_to_dbm(value_mw: float) -> float:
    """10 log10(P); non-positive power maps to -inf."""
    if value_mw <= 0:
        return -math.inf
    return 10.0 * math.log10(value_mw)


def wavelength_m(frequency_hz: float) -> float:
    """Wavelength in meters: λ = c / f."""
    if frequency_hz <= 0:
        raise ValueError("frequency must be positive")
    return SPEED_OF_LIGHT / frequency_hz
