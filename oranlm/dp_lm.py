"""Handover by dynamic programming over per-cell capacity."""

from __future__ import annotations

import functools
import logging
import math
import os
from collections.abc import Iterable, Sequence
from typing import Any

from .common import (
    EnbInfo,
    HandoverCommand,
    LogicModule,
    UeInfo,
    collect_enb_infos,
    collect_ue_infos,
    loss_ratio,
    serving_node_id,
    total_rx,
)

logger = logging.getLogger(__name__)

NUM_CELLS = 4
CAPACITY = 25
DEMAND = 2
MAX_UES = 20
RATE_WEIGHTS = (
    2.16427, 2.11425, 1.94947, 1.85878, 1.76809, 1.70319, 1.67707, 1.67551,
    1.62342, 1.57133, 1.38448, 1.19542, 1.1548, 1.07061, 1.00457, 1.001,
    0.906763, 0.896566, 0.88637, 0.857012,
)


def _check_cell(cell_id: int) -> None:
    if not 1 <= cell_id <= NUM_CELLS:
        raise ValueError(f"cell ID {cell_id} outside 1..{NUM_CELLS}")


def collect_radio_ue_infos(data: Any, enb_infos: Sequence[EnbInfo], now: float) -> list[UeInfo]:
    """UE records with per-cell RSRP and the MCS and TB size of their serving cell."""
    infos = collect_ue_infos(data, now)
    for ue in infos:
        rsrp = [0.0] * NUM_CELLS
        for m in data.rsrp_rsrq(ue.node_id):
            _check_cell(m.cell_id)
            rsrp[m.cell_id - 1] = m.rsrp
        ue.rsrp = rsrp
        enb_node = serving_node_id(ue, enb_infos)
        if enb_node is not None:
            ue.mcs = data.mcs(enb_node, ue.rnti)
            ue.sizetb = data.sizetb(enb_node, ue.rnti)
        logger.debug(
            "ue %s loss: %s Tx: %s Rx: %s mcs: %s", ue.node_id, ue.loss, ue.tx, ue.rx, ue.mcs
        )
    return infos


def cell_loads(ue_infos: Iterable[UeInfo]) -> list[int]:
    """Number of UEs attached to each cell, cells 1..4 in order."""
    loads = [0] * NUM_CELLS
    for ue in ue_infos:
        _check_cell(ue.cell_id)
        loads[ue.cell_id - 1] += 1
    return loads


def _fmt(value: float) -> str:
    return format(value, "g")


class DpLm(LogicModule):
    """Assigns every UE a cell so that the summed rate-and-load utility is largest."""

    def __init__(self, data: Any, csv_path: str | os.PathLike[str] = "test.csv") -> None:
        super().__init__("MyLmDp", data)
        self.csv_path = csv_path
        self.run_count = 0
        self.throughput_run = 0.0
        self.throughput_total = 0.0
        self.total_loss = 0.0

    def run(self, now: float) -> list[HandoverCommand]:
        """Run once at simulation time ``now``; return the handover commands."""
        self.run_count += 1
        commands: list[HandoverCommand] = []
        if self.active:
            data = self.require_data()
            enb_infos = collect_enb_infos(data, now)
            ue_infos = collect_radio_ue_infos(data, enb_infos, now)
            commands, assignment = self.get_handover_commands(ue_infos, enb_infos)
            received = total_rx(ue_infos)
            self.throughput_run += received
            self.throughput_total += received
            self.total_loss += loss_ratio(ue_infos)
            logger.info(
                "total: %s",
                (self.throughput_total * 1500 * 8 / 1000) / (self.run_count * 5 + 1),
            )
            logger.info("total loss: %s", self.total_loss / self.run_count)
            self.save_data(ue_infos, assignment)
        return commands

    def value(self, rsrp: float, load: int) -> float:
        """Utility of putting a UE with ``rsrp`` on a cell already carrying ``load`` UEs."""
        return RATE_WEIGHTS[0] * (rsrp + 140.0) / 80.0 + math.log2(
            1 - load * DEMAND / CAPACITY
        ) * 0.5

    def solve(self, ue_infos: Sequence[UeInfo]) -> tuple[float, list[int]]:
        """Best total utility and the cell ID (1..4) chosen for each UE in order."""
        if len(ue_infos) > MAX_UES:
            raise ValueError(f"at most {MAX_UES} UEs can be assigned, got {len(ue_infos)}")
        for ue in ue_infos:
            if len(ue.rsrp) < NUM_CELLS:
                raise ValueError(f"UE {ue.node_id} needs RSRP for {NUM_CELLS} cells")
        n = len(ue_infos)

        @functools.lru_cache(maxsize=None)
        def best(j: int, caps: tuple[int, ...]) -> tuple[float, tuple[int, ...]]:
            if j == n:
                return 0.0, ()
            best_value = -math.inf
            best_path: tuple[int, ...] = ()
            for cell, cap in enumerate(caps):
                if cap <= DEMAND:
                    continue
                load = (CAPACITY - cap) // DEMAND
                rest_caps = caps[:cell] + (cap - DEMAND,) + caps[cell + 1:]
                rest_value, rest_path = best(j + 1, rest_caps)
                v = self.value(ue_infos[j].rsrp[cell], load) + rest_value
                if v > best_value:
                    best_value = v
                    best_path = (cell + 1,) + rest_path
            return best_value, best_path

        total, path = best(0, (CAPACITY,) * NUM_CELLS)
        return total, list(path)

    def get_handover_commands(
        self, ue_infos: Sequence[UeInfo], enb_infos: Sequence[EnbInfo]
    ) -> tuple[list[HandoverCommand], list[int]]:
        """Handover commands for UEs whose assigned cell differs, and the assignment."""
        self.require_data()
        total, assignment = self.solve(ue_infos)
        logger.debug("dp value %s assignment %s", total, assignment)
        commands = []
        for ue, new_cell_id in zip(ue_infos, assignment):
            if new_cell_id != ue.cell_id:
                logger.debug("cellId: %s rnti: %s", ue.cell_id, ue.rnti)
                commands.append(self.issue_handover(ue, enb_infos, new_cell_id))
        logger.info("%d handover commands", len(commands))
        return commands, assignment

    def save_data(self, ue_infos: Sequence[UeInfo], assignment: Sequence[int]) -> None:
        """Append one CSV row per UE: cell, RSRPs, cell loads, MCS, TB size, assigned cell."""
        loads = cell_loads(ue_infos)
        load_fields = "".join(f"{load}," for load in loads)
        with open(self.csv_path, "a", encoding="utf-8") as out:
            for ue, assigned in zip(ue_infos, assignment):
                rsrp_fields = "".join(f"{_fmt(r)}," for r in ue.rsrp)
                out.write(
                    f"{ue.cell_id},{rsrp_fields}{load_fields}{int(ue.mcs)},{ue.sizetb},{assigned}\n"
                )