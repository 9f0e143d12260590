"""CLI for single links, link batches and coverage maps.

Usage:
    python -m shadowing.cli --buildings city.json --model diffraction link --sender 0 0 --receiver 100 0
    python -m shadowing.cli --database city.db --ini omnetpp.ini scenario --links links.json
    python -m shadowing.cli --buildings city.json --model shadow coverage --sender 50 50 --out cov.png
"""

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from .buildings import Offset
from .config import (
    ShadowingParameters,
    load_params_from_ini_file,
    load_params_from_json_file,
    normalize_model_name,
)
from .coverage import grid_axes, received_power_grid, render_coverage_map
from .database import open_geometry_database
from .geometry import Point
from .loaders import load_buildings_json, load_links_json
from .occlusion import OcclusionEngine
from .propagation import PropagationModel, build_model
from .scenario import Link, print_table, rows_to_table, run_links
from .sources import InMemoryGeometrySource
from .units import mw_to_dbm


def _load_params(args: argparse.Namespace) -> ShadowingParameters:
    if args.config is not None:
        params = load_params_from_json_file(args.config)
    elif args.ini is not None:
        params = load_params_from_ini_file(args.ini)
    else:
        params = ShadowingParameters()
    return params


def _build(args: argparse.Namespace) -> tuple[PropagationModel, OcclusionEngine, ShadowingParameters]:
    params = _load_params(args)
    kind = normalize_model_name(args.model) if args.model else params.model
    database = args.database or params.map.database
    if args.buildings is not None:
        source = load_buildings_json(args.buildings)
    elif database:
        source = open_geometry_database(str(database))
    else:
        source = InMemoryGeometrySource()
    engine = OcclusionEngine(source, Offset(params.map.offset_x, params.map.offset_y))
    return build_model(kind, params, engine), engine, params


def _cmd_link(args: argparse.Namespace) -> None:
    model, _, _ = _build(args)
    sender = Point(*args.sender)
    receiver = Point(*args.receiver)
    prec = model.received_power(args.p_send_mw, args.frequency, sender, receiver)
    print(f"{model.kind}: {prec:.6g} mW ({mw_to_dbm(prec):.2f} dBm) at d={sender.distance_to(receiver):.1f} m")


def _cmd_scenario(args: argparse.Namespace) -> None:
    model, _, params = _build(args)
    links = load_links_json(args.links)
    rows = run_links(model, links, sensitivity_dbm=params.sensitivity_dbm)
    print_table(rows_to_table(rows))


def _cmd_coverage(args: argparse.Namespace) -> None:
    model, engine, _ = _build(args)
    sender = Point(*args.sender)
    xs, ys = grid_axes(sender, args.half_size, args.step)
    grid = received_power_grid(model, sender, xs, ys, p_send_mw=args.p_send_mw, frequency_hz=args.frequency)
    buildings = [engine.building(bid) for bid in engine.cache.ids()]
    out = render_coverage_map(
        grid, xs, ys, sender,
        buildings=[b for b in buildings if b is not None],
        title=f"{model.kind} received power (dBm)",
        outfile=args.out,
    )
    print(f"Saved coverage map to {out}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Building-aware received power calculations")
    parser.add_argument("--buildings", type=Path, default=None, help="building outlines (JSON)")
    parser.add_argument("--database", type=str, default=None, help="geometry database (SQLite path or URL)")
    parser.add_argument("--config", type=Path, default=None, help="model parameters (JSON)")
    parser.add_argument("--ini", type=Path, default=None, help="model parameters (omnetpp.ini style)")
    parser.add_argument("--model", type=str, default=None,
                        choices=["free_space", "two_ray", "shadow", "penetration", "diffraction"])
    parser.add_argument("--log-level", type=str, default="WARNING")
    sub = parser.add_subparsers(dest="command", required=True)

    p_link = sub.add_parser("link", help="received power of one link")
    p_link.add_argument("--sender", type=float, nargs=2, required=True, metavar=("X", "Y"))
    p_link.add_argument("--receiver", type=float, nargs=2, required=True, metavar=("X", "Y"))
    p_link.add_argument("--frequency", type=float, default=Link.frequency_hz, help="carrier (Hz)")
    p_link.add_argument("--p-send-mw", type=float, default=Link.p_send_mw)
    p_link.set_defaults(func=_cmd_link)

    p_scn = sub.add_parser("scenario", help="evaluate a list of links")
    p_scn.add_argument("--links", type=Path, required=True)
    p_scn.set_defaults(func=_cmd_scenario)

    p_cov = sub.add_parser("coverage", help="render a coverage map around a sender")
    p_cov.add_argument("--sender", type=float, nargs=2, required=True, metavar=("X", "Y"))
    p_cov.add_argument("--half-size", type=float, default=200.0, help="half width of the map (m)")
    p_cov.add_argument("--step", type=float, default=5.0, help="grid step (m)")
    p_cov.add_argument("--frequency", type=float, default=Link.frequency_hz)
    p_cov.add_argument("--p-send-mw", type=float, default=Link.p_send_mw)
    p_cov.add_argument("--out", type=Path, default=Path("coverage.png"))
    p_cov.set_defaults(func=_cmd_coverage)
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")
    args.func(args)


if __name__ == "__main__":
    main()
