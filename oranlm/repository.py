"""An in-memory data repository holding what E2 nodes report."""

from __future__ import annotations

from typing import Any


class InMemoryRepository:
    """Stores UE and eNB reports and the commands and logic logged by modules."""

    def __init__(self) -> None:
        self._ue_cells: dict[int, tuple[int, int]] = {}
        self._enb_cells: dict[int, int] = {}
        self._positions: dict[int, dict[float, tuple[float, float, float]]] = {}
        self._app_stats: dict[int, tuple[float, int, int]] = {}
        self._rsrp: dict[int, list[Any]] = {}
        self._scheduling: dict[tuple[int, int], tuple[int, int]] = {}
        self.commands: list[tuple[str, Any]] = []
        self.logic_log: list[tuple[str, str]] = []

    def add_ue(self, node_id: int, cell_id: int, rnti: int) -> None:
        """Register a UE and the cell and RNTI it is attached with."""
        self._ue_cells[node_id] = (cell_id, rnti)

    def add_enb(self, node_id: int, cell_id: int) -> None:
        """Register an eNB and its cell ID."""
        self._enb_cells[node_id] = cell_id

    def record_position(self, node_id: int, time: float, position: tuple[float, float, float]) -> None:
        """Record the position of a node at a given time."""
        self._positions.setdefault(node_id, {})[time] = position

    def set_app_stats(self, node_id: int, loss: float, rx: int, tx: int) -> None:
        """Set application loss and packet counts for a UE."""
        self._app_stats[node_id] = (loss, rx, tx)

    def add_rsrp(self, node_id: int, measurement: Any) -> None:
        """Add an RSRP/RSRQ measurement reported by a UE."""
        self._rsrp.setdefault(node_id, []).append(measurement)

    def set_scheduling(self, enb_node_id: int, rnti: int, mcs: int, sizetb: int) -> None:
        """Set the downlink MCS and transport block size scheduled for a UE."""
        self._scheduling[(enb_node_id, rnti)] = (mcs, sizetb)

    def ue_node_ids(self) -> list[int]:
        return list(self._ue_cells)

    def enb_node_ids(self) -> list[int]:
        return list(self._enb_cells)

    def ue_cell_info(self, node_id: int) -> tuple[int, int] | None:
        """Return ``(cell_id, rnti)`` for a UE, or None if unknown."""
        return self._ue_cells.get(node_id)

    def enb_cell_info(self, node_id: int) -> int | None:
        """Return the cell ID of an eNB, or None if unknown."""
        return self._enb_cells.get(node_id)

    def node_positions(self, node_id: int, start: float, end: float) -> dict[float, tuple[float, float, float]]:
        """Positions of a node recorded within ``[start, end]``, ordered by time."""
        recorded = self._positions.get(node_id, {})
        return {t: recorded[t] for t in sorted(recorded) if start <= t <= end}

    def app_loss(self, node_id: int) -> float:
        return self._app_stats.get(node_id, (0.0, 0, 0))[0]

    def rx(self, node_id: int) -> int:
        return self._app_stats.get(node_id, (0.0, 0, 0))[1]

    def tx(self, node_id: int) -> int:
        return self._app_stats.get(node_id, (0.0, 0, 0))[2]

    def rsrp_rsrq(self, node_id: int) -> list[Any]:
        return list(self._rsrp.get(node_id, []))

    def mcs(self, enb_node_id: int, rnti: int) -> int:
        return self._scheduling.get((enb_node_id, rnti), (0, 0))[0]

    def sizetb(self, enb_node_id: int, rnti: int) -> int:
        return self._scheduling.get((enb_node_id, rnti), (0, 0))[1]

    def log_command(self, lm_name: str, command: Any) -> None:
        self.commands.append((lm_name, command))

    def log_logic(self, lm_name: str, text: str) -> None:
        self.logic_log.append((lm_name, text))