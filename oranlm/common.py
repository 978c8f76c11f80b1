"""Shared records and helpers for handover logic modules."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

Position = tuple[float, float, float]


@dataclass(frozen=True)
class RsrpMeasurement:
    """One RSRP/RSRQ report from a UE about one cell."""

    rnti: int
    cell_id: int
    rsrp: float
    rsrq: float
    is_serving_cell: bool = False
    component_carrier_id: int = 0


@dataclass
class UeInfo:
    """What is known about a UE at the time a module runs."""

    node_id: int
    cell_id: int
    rnti: int
    position: Position = (0.0, 0.0, 0.0)
    loss: float = 0.0
    rx: int = 0
    tx: int = 0
    rsrp: list[float] = field(default_factory=list)
    mcs: int = 0
    sizetb: int = 0


@dataclass
class EnbInfo:
    """What is known about an eNB at the time a module runs."""

    node_id: int
    cell_id: int
    position: Position = (0.0, 0.0, 0.0)


@dataclass(frozen=True)
class HandoverCommand:
    """Ask the serving eNB to hand a UE over to another cell."""

    target_e2_node_id: int
    target_rnti: int
    target_cell_id: int


def _latest_position(data: Any, node_id: int, now: float) -> Position | None:
    positions = data.node_positions(node_id, 0.0, now)
    if not positions:
        return None
    return positions[max(positions)]


def collect_enb_infos(data: Any, now: float) -> list[EnbInfo]:
    """eNBs for which both the cell ID and a position are known."""
    infos = []
    for enb_id in data.enb_node_ids():
        cell_id = data.enb_cell_info(enb_id)
        if cell_id is None:
            logger.info("Could not find LTE eNB cell info for E2 Node ID = %s", enb_id)
            continue
        position = _latest_position(data, enb_id, now)
        if position is None:
            logger.info("Could not find LTE eNB location for E2 Node ID = %s", enb_id)
            continue
        infos.append(EnbInfo(enb_id, cell_id, position))
    return infos


def collect_ue_infos(data: Any, now: float) -> list[UeInfo]:
    """UEs for which both cell info and a position are known, with app stats."""
    infos = []
    for ue_id in data.ue_node_ids():
        cell_info = data.ue_cell_info(ue_id)
        if cell_info is None:
            logger.info("Could not find LTE UE cell info for E2 Node ID = %s", ue_id)
            continue
        position = _latest_position(data, ue_id, now)
        if position is None:
            logger.info("Could not find LTE UE location for E2 Node ID = %s", ue_id)
            continue
        cell_id, rnti = cell_info
        info = UeInfo(
            node_id=ue_id,
            cell_id=cell_id,
            rnti=rnti,
            position=position,
            loss=data.app_loss(ue_id),
            rx=data.rx(ue_id),
            tx=data.tx(ue_id),
        )
        logger.debug("ue %s loss: %s Tx: %s Rx: %s", ue_id, info.loss, info.tx, info.rx)
        infos.append(info)
    return infos


def total_rx(ue_infos: Iterable[UeInfo]) -> int:
    """Packets received over all UEs."""
    return sum(ue.rx for ue in ue_infos)


def loss_ratio(ue_infos: Sequence[UeInfo]) -> float:
    """Fraction of transmitted packets that were not received; NaN if none were sent."""
    sent = sum(ue.tx for ue in ue_infos)
    received = sum(ue.rx for ue in ue_infos)
    if sent == 0:
        return math.nan
    return (sent - received) / sent


def serving_node_id(ue_info: UeInfo, enb_infos: Iterable[EnbInfo]) -> int | None:
    """Node ID of the eNB whose cell serves the UE (the last match), or None."""
    found = None
    for enb in enb_infos:
        if enb.cell_id == ue_info.cell_id:
            found = enb.node_id
    return found


class LogicModule:
    """Base for modules that look at repository data and issue handovers."""

    def __init__(self, name: str, data: Any) -> None:
        self.name = name
        self.data = data
        self.active = True

    def require_data(self) -> Any:
        """Return the repository, or raise if the module has none."""
        if self.data is None:
            raise RuntimeError(f"Attempting to run LM ({self.name}) with NULL Near-RT RIC")
        return self.data

    def _log_logic(self, text: str) -> None:
        self.require_data().log_logic(self.name, text)

    def issue_handover(self, ue_info: UeInfo, enb_infos: Iterable[EnbInfo], new_cell_id: int) -> HandoverCommand:
        """Build, log and return a handover command moving the UE to ``new_cell_id``."""
        data = self.require_data()
        node_id = serving_node_id(ue_info, enb_infos)
        if node_id is None:
            raise LookupError(f"no known eNB serves cell {ue_info.cell_id}")
        command = HandoverCommand(node_id, ue_info.rnti, new_cell_id)
        data.log_command(self.name, command)
        self._log_logic(
            f"eNB (CellID {new_cell_id}) is different than the currently attached eNB "
            f"(CellID {ue_info.cell_id}). Issuing handover command."
        )
        return command