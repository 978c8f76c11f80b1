"""Handover chosen by a learned classifier over RSRP, cell load and TB size."""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Callable, Sequence
from typing import Any

from .common import (
    EnbInfo,
    HandoverCommand,
    LogicModule,
    UeInfo,
    collect_enb_infos,
    loss_ratio,
    total_rx,
)
from .dp_lm import CAPACITY, DEMAND, NUM_CELLS, cell_loads, collect_radio_ue_infos
from .gradient_descent import VanillaGradientDescent

logger = logging.getLogger(__name__)

MAX_TB_SIZE = 2196.0

Model = Callable[[list[float]], Sequence[float]]


def build_features(ue_info: UeInfo, loads: Sequence[int]) -> list[float]:
    """The nine model inputs: normalised RSRP per cell, load per cell, TB size."""
    if len(ue_info.rsrp) < NUM_CELLS:
        raise ValueError(f"UE {ue_info.node_id} needs RSRP for {NUM_CELLS} cells")
    if len(loads) < NUM_CELLS:
        raise ValueError(f"loads for {NUM_CELLS} cells are needed, got {len(loads)}")
    rsrp_features = [(r + 140.0) / 80.0 for r in ue_info.rsrp[:NUM_CELLS]]
    load_features = [load * DEMAND / CAPACITY for load in loads[:NUM_CELLS]]
    return [*rsrp_features, *load_features, ue_info.sizetb / MAX_TB_SIZE]


def softmax(scores: Sequence[float]) -> list[float]:
    """Probabilities proportional to ``exp(score)``."""
    if not scores:
        raise ValueError("softmax of an empty sequence")
    top = max(scores)
    exps = [math.exp(s - top) for s in scores]
    total = sum(exps)
    return [e / total for e in exps]


class MlLm(LogicModule):
    """Hands each UE over to the cell a trained model ranks highest."""

    def __init__(self, model: Model, data: Any) -> None:
        super().__init__("MyLmMl", data)
        self.model = model
        self.vgd = VanillaGradientDescent(0.05, 0.01, 0.1)
        self.margin = 0.05
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
            self.vgd.update_mb()
            self.margin = self.vgd.mb
            logger.info("M: %s", self.margin)
            enb_infos = collect_enb_infos(data, now)
            ue_infos = collect_radio_ue_infos(data, enb_infos, now)
            commands, quality = self.get_handover_commands(ue_infos, enb_infos)
            received = total_rx(ue_infos)
            self.throughput_run += received
            self.throughput_total += received
            self.total_loss += loss_ratio(ue_infos)
            self.vgd.update_m(quality)
            logger.info(
                "total: %s",
                (self.throughput_total * 1500 * 8 / 1000) / (self.run_count * 5 + 1),
            )
            logger.info("total loss: %s", self.total_loss / self.run_count)
        elapsed = time.perf_counter() - start
        self.times.append(elapsed)
        logger.info("time: %s average time: %s", elapsed, sum(self.times) / len(self.times))
        return commands

    def predict_cell(self, ue_info: UeInfo, loads: Sequence[int]) -> int:
        """Cell ID (1-based) with the highest model probability; ties go to the lowest."""
        probabilities = softmax(list(self.model(build_features(ue_info, loads))))
        best = max(range(len(probabilities)), key=probabilities.__getitem__)
        return best + 1

    def get_handover_commands(
        self, ue_infos: Sequence[UeInfo], enb_infos: Sequence[EnbInfo]
    ) -> tuple[list[HandoverCommand], float]:
        """Handover commands for UEs whose predicted cell differs, and the run quality.

        The quality is the mean per-UE quality score, which is always zero per UE;
        with no UEs it is NaN.
        """
        self.require_data()
        loads = cell_loads(ue_infos)
        commands = []
        for ue in ue_infos:
            new_cell_id = self.predict_cell(ue, loads)
            logger.debug("newcellid %s", new_cell_id)
            if new_cell_id != ue.cell_id:
                commands.append(self.issue_handover(ue, enb_infos, new_cell_id))
        logger.info("total Rx: %s", total_rx(ue_infos))
        quality = 0.0 / len(ue_infos) if ue_infos else math.nan
        return commands, quality