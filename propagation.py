"""Received-power models and selector.

Five interchangeable models share one capability,
``received_power(p_send, frequency_hz, sender, receiver)``, returning power
in the linear unit of ``p_send`` (mW throughout this package):

- free_space: Friis, capped at the transmit power
- two_ray: direct plus ground-reflected ray with Fresnel reflection
- shadow: any building on the direct path blocks the link completely
- penetration: per-wall and per-meter losses through crossed buildings
- diffraction: knife-edge loss at the best visible building corner

The three building-aware models first compare the link length with the
free-space range at the receiver sensitivity and report a value just below
sensitivity when the link is out of range, skipping all building queries.
"""

import logging
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Dict, List, Literal, Optional

from .config import DiffractionParams, PenetrationParams, ShadowingParameters, TwoRayParams
from .fspl import friis_power, friis_received_power, max_range_m
from .geometry import Point
from .knife_edge import LOG_FUNCTIONS, fresnel_parameter, knife_edge_loss_db
from .occlusion import OcclusionEngine
from .units import dbm_to_mw, mw_to_dbm, wavelength_m

logger = logging.getLogger(__name__)

ModelKind = Literal["free_space", "two_ray", "shadow", "penetration", "diffraction"]


def below_sensitivity_mw(sensitivity_dbm: float) -> float:
    """Power reported for blocked or out-of-range links: 1 dB under sensitivity."""
    return dbm_to_mw(sensitivity_dbm - 1.0)


class PropagationModel(ABC):
    kind: ModelKind

    @abstractmethod
    def received_power(self, p_send: float, frequency_hz: float, sender: Point, receiver: Point) -> float:
        """Received power for one link, in the unit of ``p_send``."""

    def received_power_dbm(self, p_send_dbm: float, frequency_hz: float, sender: Point, receiver: Point) -> float:
        return mw_to_dbm(self.received_power(dbm_to_mw(p_send_dbm), frequency_hz, sender, receiver))


class FreeSpaceModel(PropagationModel):
    kind: ModelKind = "free_space"

    def received_power(self, p_send: float, frequency_hz: float, sender: Point, receiver: Point) -> float:
        return friis_received_power(p_send, frequency_hz, sender.distance_to(receiver))


class TwoRayInterferenceModel(PropagationModel):
    """Coherent sum of the direct and the ground-reflected ray.

    The reflection coefficient uses Fresnel's approximation for the grazing
    angle implied by the antenna heights; the received power oscillates
    below the breakpoint distance and falls with d^4 beyond it.
    """

    kind: ModelKind = "two_ray"

    def __init__(self, params: TwoRayParams = TwoRayParams()):
        self.params = params

    def received_power(self, p_send: float, frequency_hz: float, sender: Point, receiver: Point) -> float:
        d = sender.distance_to(receiver)
        if d == 0:
            return p_send
        wave_length = wavelength_m(frequency_hz)
        ht = self.params.tx_height_m
        hr = self.params.rx_height_m
        eps_r = self.params.dielectric_constant

        d_dir = math.sqrt(d * d + (ht - hr) ** 2)
        d_ref = math.sqrt(d * d + (ht + hr) ** 2)
        sin_theta = (ht + hr) / d_ref
        cos_theta = d / d_ref
        root = math.sqrt(eps_r - cos_theta * cos_theta)
        gamma = (sin_theta - root) / (sin_theta + root)

        phi = 2.0 * math.pi / wave_length * (d_dir - d_ref)
        interference = math.sqrt((1.0 + gamma * math.cos(phi)) ** 2 + (gamma * math.sin(phi)) ** 2)
        loss = (4.0 * math.pi * (d / wave_length) / interference) ** 2
        prec = p_send / loss
        logger.debug("two-ray d_dir=%.3f d_ref=%.3f phi=%.4f prec=%g mW", d_dir, d_ref, phi, prec)
        return prec


class _SensitivityModel(PropagationModel):
    """Shared out-of-range short-circuit for the building-aware models."""

    def __init__(self, engine: OcclusionEngine, sensitivity_dbm: float):
        self.engine = engine
        self.sensitivity_dbm = sensitivity_dbm

    def _out_of_range(self, p_send: float, frequency_hz: float, distance_m: float) -> bool:
        r_max = max_range_m(p_send, self.sensitivity_dbm, frequency_hz)
        if r_max < distance_m:
            logger.debug("%s: d=%.2f m beyond r_max=%.2f m", self.kind, distance_m, r_max)
            return True
        return False

    def _shadowed(self) -> float:
        return below_sensitivity_mw(self.sensitivity_dbm)


class ShadowModel(_SensitivityModel):
    """Binary blocking: any building crossing the direct path kills the link."""

    kind: ModelKind = "shadow"

    def is_shadowed(self, sender: Point, receiver: Point) -> bool:
        for bid in self.engine.buildings_near(sender, receiver):
            # Box test first, wall test only on a positive box.
            if self.engine.is_area_between(sender, receiver, bid) and \
                    self.engine.is_building_between(sender, receiver, bid):
                logger.debug("shadow: building %s between %s and %s", bid, sender, receiver)
                return True
        return False

    def received_power(self, p_send: float, frequency_hz: float, sender: Point, receiver: Point) -> float:
        d = sender.distance_to(receiver)
        if d <= 0:
            raise ValueError("distance must be positive")
        if self._out_of_range(p_send, frequency_hz, d) or self.is_shadowed(sender, receiver):
            return self._shadowed()
        return friis_received_power(p_send, frequency_hz, d)


@dataclass(frozen=True)
class PenetrationBudget:
    """Walls crossed and meters travelled inside buildings on the direct path."""
    walls: int = 0
    inside_m: float = 0.0

    def loss_db(self, params: PenetrationParams) -> float:
        return self.walls * params.wall_loss_db + self.inside_m * params.meter_loss_db


class PenetrationModel(_SensitivityModel):
    """Free-space over the outdoor part of the path plus penetration losses.

    Wall crossings of one building are paired in wall order (1st with 2nd,
    3rd with 4th, ...) and each pair contributes its chord to the indoor
    distance. An unpaired last crossing counts as a wall only.
    """

    kind: ModelKind = "penetration"

    def __init__(self, engine: OcclusionEngine, params: PenetrationParams = PenetrationParams()):
        super().__init__(engine, params.sensitivity_dbm)
        self.params = params

    def penetration_budget(self, sender: Point, receiver: Point) -> PenetrationBudget:
        walls = 0
        inside = 0.0
        for bid in self.engine.buildings_near(sender, receiver):
            if not self.engine.is_area_between(sender, receiver, bid):
                continue
            crossings = self.engine.intersections_with_building(sender, receiver, bid)
            walls += len(crossings)
            for first, second in zip(crossings[0::2], crossings[1::2]):
                inside += first.distance_to(second)
        return PenetrationBudget(walls=walls, inside_m=inside)

    def received_power(self, p_send: float, frequency_hz: float, sender: Point, receiver: Point) -> float:
        d = sender.distance_to(receiver)
        if d <= 0:
            raise ValueError("distance must be positive")
        if self._out_of_range(p_send, frequency_hz, d):
            return self._shadowed()

        budget = self.penetration_budget(sender, receiver)
        outdoor = d - budget.inside_m
        free_space = friis_power(p_send, frequency_hz, outdoor) if outdoor > 0 else p_send
        prec = min(free_space / dbm_to_mw(budget.loss_db(self.params)), p_send)
        logger.debug(
            "penetration: d=%.2f walls=%d inside=%.2f prec=%g mW (%.2f dBm)",
            d, budget.walls, budget.inside_m, prec, mw_to_dbm(prec),
        )
        return prec


def dbm_factor(loss_db: float) -> float:
    """Linear factor read the way the calibrated simulation did: 10^(L/10)."""
    return dbm_to_mw(loss_db)


def attenuation_factor(loss_db: float) -> float:
    """Linear factor treating |L| as attenuation; never amplifies."""
    return 10.0 ** (-abs(loss_db) / 10.0)


LOSS_CONVERSIONS: Dict[str, Callable[[float], float]] = {
    "dbm": dbm_factor,
    "attenuation": attenuation_factor,
}


class DiffractionModel(_SensitivityModel):
    """Knife-edge diffraction around the corners of obstructing buildings.

    Buildings passing both the box and the wall test are "between". Their
    visible corners (see OcclusionEngine.diffraction_corners) must also have
    clear sight to both link ends past every other between-building. The
    link loss is the largest knife-edge term among those corners, floored at
    the sensitivity value, applied to the free-space power through the
    configured conversion.
    """

    kind: ModelKind = "diffraction"

    def __init__(self, engine: OcclusionEngine, params: DiffractionParams = DiffractionParams()):
        super().__init__(engine, params.sensitivity_dbm)
        if params.conversion not in LOSS_CONVERSIONS:
            raise ValueError(f"Unknown loss conversion {params.conversion!r}")
        if params.log not in LOG_FUNCTIONS:
            raise ValueError(f"Unknown logarithm {params.log!r}")
        self.params = params
        self.convert = LOSS_CONVERSIONS[params.conversion]

    def between_buildings(self, sender: Point, receiver: Point) -> List[int]:
        return [
            bid for bid in self.engine.buildings_near(sender, receiver)
            if self.engine.is_area_between(sender, receiver, bid)
            and self.engine.is_building_between(sender, receiver, bid)
        ]

    def usable_corners(self, sender: Point, receiver: Point, between: List[int]) -> List[Point]:
        corners: List[Point] = []
        for bid in between:
            for c in self.engine.diffraction_corners(sender, receiver, bid):
                blocked = any(
                    self.engine.is_building_between(sender, c, other)
                    or self.engine.is_building_between(c, receiver, other)
                    for other in between if other != bid
                )
                if not blocked:
                    corners.append(c)
        return corners

    def diffraction_loss_db(self, sender: Point, receiver: Point, corners: List[Point], wave_length: float) -> float:
        ld = self.sensitivity_dbm
        for c in corners:
            v = fresnel_parameter(sender, receiver, c, wave_length)
            ld_v = knife_edge_loss_db(v, log=self.params.log)
            logger.debug("diffraction corner (%.2f, %.2f): v=%.4f loss=%.2f dB", c.x, c.y, v, ld_v)
            ld = max(ld, ld_v)
        return ld

    def received_power(self, p_send: float, frequency_hz: float, sender: Point, receiver: Point) -> float:
        d = sender.distance_to(receiver)
        if d <= 0:
            raise ValueError("distance must be positive")
        if self._out_of_range(p_send, frequency_hz, d):
            return self._shadowed()

        between = self.between_buildings(sender, receiver)
        if not between:
            return friis_received_power(p_send, frequency_hz, d)

        corners = self.usable_corners(sender, receiver, between)
        if not corners:
            logger.debug("diffraction: %d buildings between, no usable corner", len(between))
            return self._shadowed()

        wave_length = wavelength_m(frequency_hz)
        ld = self.diffraction_loss_db(sender, receiver, corners, wave_length)
        free_space = friis_power(p_send, frequency_hz, d)
        prec = min(free_space * self.convert(ld), p_send)
        logger.debug("diffraction: Lfs=%.2f dBm Ld=%.2f dB prec=%.2f dBm",
                     mw_to_dbm(free_space), ld, mw_to_dbm(prec))
        return prec


def build_model(
    kind: str,
    params: Optional[ShadowingParameters] = None,
    engine: Optional[OcclusionEngine] = None,
) -> PropagationModel:
    """Construct the model named by ``kind`` from a parameter set.

    Building-aware models need an OcclusionEngine.
    """
    if params is None:
        params = ShadowingParameters()
    if kind == "free_space":
        return FreeSpaceModel()
    if kind == "two_ray":
        return TwoRayInterferenceModel(params.two_ray)
    if kind in ("shadow", "penetration", "diffraction"):
        if engine is None:
            raise ValueError(f"{kind} model needs an occlusion engine")
        if kind == "shadow":
            return ShadowModel(engine, params.sensitivity_dbm)
        if kind == "penetration":
            return PenetrationModel(engine, params.penetration)
        return DiffractionModel(engine, params.diffraction)
    raise ValueError(f"Unknown propagation model {kind!r}")
