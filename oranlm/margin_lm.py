"""Handover to the strongest cell when it beats the serving cell by a tuned margin."""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Iterable, Sequence
from typing import Any

from .common import (
    EnbInfo,
    HandoverCommand,
    LogicModule,
    RsrpMeasurement,
    UeInfo,
    collect_enb_infos,
    collect_ue_infos,
    loss_ratio,
    total_rx,
)
from .gradient_descent import VanillaGradientDescent

logger = logging.getLogger(__name__)

_PERIOD = 6


class MarginLm(LogicModule):
    """RSRP-margin handover, with the margin tuned every few runs from throughput."""

    def __init__(self, data: Any) -> None:
        super().__init__("MyLm", data)
        self.vgd = VanillaGradientDescent(5.0, 0.01, 0.1)
        self.margin = 5.0
        self.run_count = 0
        self.throughput_run = 0.0
        self.throughput_total = 0.0
        self.total_loss = 0.0
        self.times: list[float] = []

    def run(self, now: float) -> list[HandoverCommand]:
        """Run once at simulation time ``now``; return the handover commands."""
        start = time.perf_counter()
        self.run_count += 1
        commands: list[HandoverCommand] = []
        if self.active:
            data = self.require_data()
            if self.run_count % _PERIOD == 1:
                self.vgd.update_mb()
                self.margin = self.vgd.mb
                logger.info("M: %s", self.margin)
            ue_infos = collect_ue_infos(data, now)
            enb_infos = collect_enb_infos(data, now)
            commands = self.get_handover_commands(ue_infos, enb_infos)
            received = total_rx(ue_infos)
            self.throughput_run += received
            self.throughput_total += received
            self.total_loss += loss_ratio(ue_infos)
            if self.run_count % _PERIOD == 0:
                self.vgd.update_m(self.throughput_run)
                self.throughput_run = 0.0
            logger.info(
                "total: %s",
                (self.throughput_total * 1500 * 8 / 1000) / (self.run_count * 5 + 1),
            )
            logger.info("total loss: %s", self.total_loss / self.run_count)
        elapsed = time.perf_counter() - start
        self.times.append(elapsed)
        logger.info("time: %s average time: %s", elapsed, sum(self.times) / len(self.times))
        return commands

    def select_cell(self, ue_info: UeInfo, measurements: Iterable[RsrpMeasurement]) -> int:
        """Strongest measured cell, unless the serving cell is within the margin of it."""
        best = -math.inf
        new_cell_id = ue_info.cell_id
        current_rsrp = 0.0
        for m in measurements:
            if m.cell_id == ue_info.cell_id:
                current_rsrp = m.rsrp
            self._log_logic(
                f"RSRP from UE with RNTI {m.rnti} in CellID {ue_info.cell_id} "
                f"to eNB with CellID {m.cell_id} is {m.rsrp:.6f}"
            )
            if m.rsrp > best:
                best = m.rsrp
                new_cell_id = m.cell_id
                self._log_logic(f"RSRP to eNB with CellID {m.cell_id} is largest so far")
        if current_rsrp > best - self.margin:
            new_cell_id = ue_info.cell_id
        return new_cell_id

    def get_handover_commands(
        self, ue_infos: Sequence[UeInfo], enb_infos: Sequence[EnbInfo]
    ) -> list[HandoverCommand]:
        """Handover commands for every UE whose selected cell is not its serving cell."""
        data = self.require_data()
        commands = []
        for ue in ue_infos:
            new_cell_id = self.select_cell(ue, data.rsrp_rsrq(ue.node_id))
            if new_cell_id != ue.cell_id:
                commands.append(self.issue_handover(ue, enb_infos, new_cell_id))
        logger.info("total Rx: %s", total_rx(ue_infos))
        return commands