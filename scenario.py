"""Link batch runner.

Evaluates one propagation model over a list of links and reports received
power in mW and dBm together with a decodable flag against the receiver
sensitivity. Used by the CLI and handy for quick parameter studies.
"""

from dataclasses import dataclass
from typing import Iterable, List

from .geometry import Point
from .propagation import PropagationModel
from .units import mw_to_dbm


@dataclass(frozen=True)
class Link:
    """One candidate transmission (ephemeral, never stored by the models)."""
    sender: Point
    receiver: Point
    frequency_hz: float = 5.89e9
    p_send_mw: float = 20.0


@dataclass
class LinkResult:
    link: Link
    distance_m: float
    received_mw: float
    received_dbm: float
    decodable: bool


def run_links(model: PropagationModel, links: Iterable[Link], sensitivity_dbm: float = -85.0) -> List[LinkResult]:
    """Compute received power for every link with ``model``.

    A link is decodable when the received power reaches the sensitivity.
    """
    rows: List[LinkResult] = []
    for link in links:
        prec = model.received_power(link.p_send_mw, link.frequency_hz, link.sender, link.receiver)
        prec_dbm = mw_to_dbm(prec)
        rows.append(LinkResult(
            link=link,
            distance_m=link.sender.distance_to(link.receiver),
            received_mw=prec,
            received_dbm=prec_dbm,
            decodable=prec_dbm >= sensitivity_dbm,
        ))
    return rows


def rows_to_table(rows: Iterable[LinkResult]) -> List[List[str]]:
    """Convert results to a simple table (strings) for printing or CSV export."""
    table = [["sender", "receiver", "distance_m", "received_dbm", "decodable"]]
    for r in rows:
        table.append([
            f"({r.link.sender.x:.1f},{r.link.sender.y:.1f})",
            f"({r.link.receiver.x:.1f},{r.link.receiver.y:.1f})",
            f"{r.distance_m:.1f}",
            f"{r.received_dbm:.2f}",
            "yes" if r.decodable else "no",
        ])
    return table


def print_table(table: List[List[str]]) -> None:
    """Pretty-print a simple table to the console."""
    widths = [max(len(row[i]) for row in table) for i in range(len(table[0]))]
    for row in table:
        print("  ".join(cell.ljust(widths[j]) for j, cell in enumerate(row)))
