"""Model parameter parsing and defaults.

This module provides:
- Frozen dataclasses for the per-model parameters (two-ray geometry, receiver
  sensitivity, penetration loss factors, diffraction options, map offset).
- A tolerant regex-based parser for omnetpp.ini-style parameter lines such as
  ``**.nic.radio.sensitivity = -85dBm`` so existing simulation configs can be
  reused unchanged.
- A JSON loader for the same structure.

Defaults follow the usual urban V2X setup: 1.5 m antennas over ground with
relative permittivity 4, a -85 dBm receiver, and no map offset.
"""

import json
import re
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class TwoRayParams:
    tx_height_m: float = 1.5
    rx_height_m: float = 1.5
    dielectric_constant: float = 4.0


@dataclass(frozen=True)
class PenetrationParams:
    sensitivity_dbm: float = -85.0
    wall_loss_db: float = 10.0
    meter_loss_db: float = 0.5


@dataclass(frozen=True)
class DiffractionParams:
    sensitivity_dbm: float = -85.0
    # "ln" or "log10" for the knife-edge loss, "dbm" or "attenuation" for
    # turning the selected loss into a linear factor.
    log: str = "ln"
    conversion: str = "dbm"


@dataclass(frozen=True)
class MapParams:
    offset_x: float = 0.0
    offset_y: float = 0.0
    database: Optional[str] = None


@dataclass(frozen=True)
class ShadowingParameters:
    model: str = "free_space"
    sensitivity_dbm: float = -85.0
    two_ray: TwoRayParams = field(default_factory=TwoRayParams)
    penetration: PenetrationParams = field(default_factory=PenetrationParams)
    diffraction: DiffractionParams = field(default_factory=DiffractionParams)
    map: MapParams = field(default_factory=MapParams)


_NUMBER = r"(-?[0-9]+(?:\.[0-9]+)?(?:[eE][-+]?[0-9]+)?)"

_MODEL_ALIASES = {
    "freespace": "free_space",
    "free_space": "free_space",
    "freespacemodel": "free_space",
    "tworay": "two_ray",
    "two_ray": "two_ray",
    "tworayinterferencemodel": "two_ray",
    "shadow": "shadow",
    "shadowpropagationlossmodel": "shadow",
    "penetration": "penetration",
    "penetrationpropagationlossmodel": "penetration",
    "diffraction": "diffraction",
    "diffractionpropagationlossmodel": "diffraction",
}


def normalize_model_name(name: str) -> str:
    key = name.strip().strip('"').lower()
    try:
        return _MODEL_ALIASES[key]
    except KeyError:
        raise ValueError(f"Unknown propagation model {name!r}") from None


def _find_number(text: str, key: str) -> Optional[float]:
    m = re.search(r"^[^#\n]*\b" + key + r"\s*=\s*" + _NUMBER, text, re.IGNORECASE | re.MULTILINE)
    if not m:
        return None
    return float(m.group(1))


def _find_string(text: str, key: str) -> Optional[str]:
    m = re.search(r"^[^#\n]*\b" + key + r"\s*=\s*\"?([^\"\n#]+)\"?", text, re.IGNORECASE | re.MULTILINE)
    if not m:
        return None
    return m.group(1).strip()


def parse_ini_text_to_params(text: str, defaults: Optional[ShadowingParameters] = None) -> ShadowingParameters:
    """Extract model parameters from omnetpp.ini-style text; fall back to defaults.

    Recognised keys (any module path prefix, case-insensitive): sensitivity,
    signalLossFactorWall, signalLossFactorBuilding, TransmiterAntennaHigh,
    ReceiverAntennaHigh, DielectricConstant, offsetx, offsety, database,
    propagationModel, diffractionLog, diffractionConversion. Lines starting
    with '#' are ignored.
    """
    if defaults is None:
        defaults = ShadowingParameters()

    model = defaults.model
    name = _find_string(text, "propagationModel")
    if name:
        model = normalize_model_name(name)

    sens = _find_number(text, "sensitivity")
    if sens is None:
        sens = defaults.sensitivity_dbm

    two_ray = defaults.two_ray
    ht = _find_number(text, "TransmiterAntennaHigh")
    hr = _find_number(text, "ReceiverAntennaHigh")
    eps = _find_number(text, "DielectricConstant")
    two_ray = TwoRayParams(
        tx_height_m=two_ray.tx_height_m if ht is None else ht,
        rx_height_m=two_ray.rx_height_m if hr is None else hr,
        dielectric_constant=two_ray.dielectric_constant if eps is None else eps,
    )

    wall = _find_number(text, "signalLossFactorWall")
    meter = _find_number(text, "signalLossFactorBuilding")
    penetration = PenetrationParams(
        sensitivity_dbm=sens,
        wall_loss_db=defaults.penetration.wall_loss_db if wall is None else wall,
        meter_loss_db=defaults.penetration.meter_loss_db if meter is None else meter,
    )

    diffraction = replace(
        defaults.diffraction,
        sensitivity_dbm=sens,
        log=_find_string(text, "diffractionLog") or defaults.diffraction.log,
        conversion=_find_string(text, "diffractionConversion") or defaults.diffraction.conversion,
    )

    ox = _find_number(text, "offsetx")
    oy = _find_number(text, "offsety")
    map_params = MapParams(
        offset_x=defaults.map.offset_x if ox is None else ox,
        offset_y=defaults.map.offset_y if oy is None else oy,
        database=_find_string(text, "database") or defaults.map.database,
    )

    return ShadowingParameters(
        model=model,
        sensitivity_dbm=sens,
        two_ray=two_ray,
        penetration=penetration,
        diffraction=diffraction,
        map=map_params,
    )


def load_params_from_ini_file(path: str | Path, defaults: Optional[ShadowingParameters] = None) -> ShadowingParameters:
    txt = Path(path).read_text(encoding="utf-8", errors="ignore")
    return parse_ini_text_to_params(txt, defaults)


def params_from_dict(data: Dict[str, Any]) -> ShadowingParameters:
    """Build parameters from a nested dict (the JSON config layout).

    The top-level ``sensitivity_dbm`` is copied into the penetration and
    diffraction blocks unless they set their own.
    """
    sens = float(data.get("sensitivity_dbm", ShadowingParameters.sensitivity_dbm))
    pen = dict(data.get("penetration", {}))
    pen.setdefault("sensitivity_dbm", sens)
    dif = dict(data.get("diffraction", {}))
    dif.setdefault("sensitivity_dbm", sens)
    return ShadowingParameters(
        model=normalize_model_name(str(data.get("model", "free_space"))),
        sensitivity_dbm=sens,
        two_ray=TwoRayParams(**data.get("two_ray", {})),
        penetration=PenetrationParams(**pen),
        diffraction=DiffractionParams(**dif),
        map=MapParams(**data.get("map", {})),
    )


def load_params_from_json_file(path: str | Path) -> ShadowingParameters:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return params_from_dict(data)
