# oranlm

Logic modules that decide LTE handovers. Each module reads UE and eNB state
from a data repository and returns handover commands for the UEs that should
move to another cell. Progress figures (throughput, loss, timings) are written
through the standard `logging` module, not printed.

## Installing

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

## Modules

- `oranlm.repository.InMemoryRepository` holds what the logic modules read:
  UE cell and RNTI (`add_ue`), eNB cell (`add_enb`), node positions
  (`record_position`), application loss/Rx/Tx (`set_app_stats`), RSRP/RSRQ
  measurements (`add_rsrp`) and per-UE MCS and transport-block size
  (`set_scheduling`). Commands and logic lines logged by modules are kept in
  its `commands` and `logic_log` lists.
- `oranlm.common` has the records `UeInfo`, `EnbInfo`, `RsrpMeasurement` and
  `HandoverCommand`, the `LogicModule` base class, and the helpers
  `collect_ue_infos`, `collect_enb_infos` (only nodes with both cell info and
  a position up to `now` are returned), `total_rx`, `loss_ratio` (NaN when
  nothing was sent) and `serving_node_id`. A module whose repository is
  `None` raises `RuntimeError` when run; setting its `active` attribute to
  `False` makes `run` return no commands.
- `oranlm.gradient_descent.VanillaGradientDescent(m, dx, alpha)` tunes one
  parameter: `update_mb()` sets the probe value `mb = m + dx`, and
  `update_m(tt)` takes a finite-difference step from the last observed value.
  The first non-zero observation only records the value.
- `oranlm.margin_lm.MarginLm(repo)` hands a UE to its strongest measured cell
  unless the serving cell's RSRP is within a margin of it. The margin starts
  at 5 dB; every sixth run it is adjusted by gradient descent on the Rx count
  summed over those runs.
- `oranlm.dp_lm.DpLm(repo, csv_path="test.csv")` assigns all UEs to cells at
  once by dynamic programming. There are four cells (IDs 1 to 4), each with a
  capacity of 25 units, each UE taking 2; a UE's utility on a cell combines
  its RSRP with the cell's current load. At most 20 UEs can be assigned, and a
  cell ID outside 1..4 raises `ValueError`. Every run appends one CSV row per
  UE: serving cell, four RSRP values, four cell loads, MCS, TB size and the
  assigned cell.
- `oranlm.ml_lm.MlLm(model, repo)` builds nine features per UE
  (`build_features`: normalised RSRP for four cells, normalised load for four
  cells, TB size / 2196), passes them to `model`, applies `softmax` to the
  returned scores, and hands the UE to the highest-scoring cell (index + 1).
  `model` is any callable taking a list of floats and returning one score per
  cell.

## Example

```python
from oranlm.common import RsrpMeasurement
from oranlm.margin_lm import MarginLm
from oranlm.repository import InMemoryRepository

repo = InMemoryRepository()
for node_id, cell_id in [(1, 1), (2, 2)]:
    repo.add_enb(node_id, cell_id)
    repo.record_position(node_id, 0.0, (0.0, 0.0, 25.0))

repo.add_ue(10, cell_id=1, rnti=7)
repo.record_position(10, 0.0, (500.0, 400.0, 1.5))
repo.set_app_stats(10, loss=0.0, rx=90, tx=100)
repo.add_rsrp(10, RsrpMeasurement(rnti=7, cell_id=1, rsrp=-110.0, rsrq=-10.0,
                                  is_serving_cell=True))
repo.add_rsrp(10, RsrpMeasurement(rnti=7, cell_id=2, rsrp=-80.0, rsrq=-8.0))

lm = MarginLm(repo)
for command in lm.run(now=5.0):
    print(command)
# HandoverCommand(target_e2_node_id=1, target_rnti=7, target_cell_id=2)
```

`DpLm` and `MlLm` are run the same way, with `run(now)`.

## What it does not do

The package contains only the decision logic and an in-memory repository. It
has no network simulator, no RIC that schedules modules or delivers their
commands, no persistent or database-backed repository, no command-line
program, and no loader for trained models: the model given to `MlLm` must be
supplied as a Python callable.