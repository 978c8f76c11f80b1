import math

import pytest

from oranlm.common import EnbInfo, HandoverCommand, RsrpMeasurement, UeInfo
from oranlm.ml_lm import MlLm, build_features, softmax
from oranlm.repository import InMemoryRepository


def _fixed_model(scores):
    seen = []

    def model(features):
        seen.append(list(features))
        return scores

    model.seen = seen
    return model


def _ue(cell_id=1, rsrp=None, sizetb=0):
    return UeInfo(
        node_id=10,
        cell_id=cell_id,
        rnti=7,
        rsrp=list(rsrp if rsrp is not None else [-100.0, -90.0, -80.0, -70.0]),
        sizetb=sizetb,
    )


def _enbs():
    return [EnbInfo(node_id=100 + c, cell_id=c) for c in range(1, 5)]


def _repository():
    repo = InMemoryRepository()
    for cell in range(1, 5):
        repo.add_enb(100 + cell, cell)
        repo.record_position(100 + cell, 0.0, (0.0, 0.0, 25.0))
    repo.add_ue(1, 1, 7)
    repo.record_position(1, 1.0, (10.0, 10.0, 1.5))
    repo.set_app_stats(1, 0.1, 80, 100)
    for cell, rsrp in zip(range(1, 5), (-100.0, -90.0, -80.0, -70.0)):
        repo.add_rsrp(1, RsrpMeasurement(7, cell, rsrp, -10.0))
    repo.set_scheduling(101, 7, 15, 2196)
    return repo


def test_softmax_sums_to_one_and_keeps_order():
    probs = softmax([0.5, 2.0, -1.0, 1.0])
    assert sum(probs) == pytest.approx(1.0)
    assert probs[1] > probs[3] > probs[0] > probs[2]


def test_softmax_equal_scores_are_uniform():
    assert softmax([3.0, 3.0]) == pytest.approx([0.5, 0.5])


def test_softmax_handles_large_scores():
    probs = softmax([1000.0, 1000.0, 0.0])
    assert all(math.isfinite(p) for p in probs)
    assert probs[0] == pytest.approx(probs[1])


def test_softmax_empty_raises():
    with pytest.raises(ValueError):
        softmax([])


def test_build_features_normalisation():
    ue = _ue(rsrp=[-140.0, -60.0, -140.0, -60.0], sizetb=2196)
    features = build_features(ue, [0, 0, 0, 0])
    assert len(features) == 9
    assert features[:4] == pytest.approx([0.0, 1.0, 0.0, 1.0])
    assert features[4:8] == pytest.approx([0.0, 0.0, 0.0, 0.0])
    assert features[8] == pytest.approx(1.0)


def test_build_features_load_grows_with_load():
    ue = _ue()
    features = build_features(ue, [1, 2, 3, 0])
    assert features[4] < features[5] < features[6]
    assert features[7] == 0.0


def test_build_features_needs_four_rsrp():
    with pytest.raises(ValueError):
        build_features(_ue(rsrp=[-80.0, -90.0]), [0, 0, 0, 0])


def test_predict_cell_picks_highest_score():
    lm = MlLm(_fixed_model([0.1, 0.2, 5.0, 0.3]), InMemoryRepository())
    assert lm.predict_cell(_ue(), [1, 0, 0, 0]) == 3


def test_predict_cell_tie_goes_to_lowest():
    lm = MlLm(_fixed_model([1.0, 2.0, 2.0, 0.0]), InMemoryRepository())
    assert lm.predict_cell(_ue(), [1, 0, 0, 0]) == 2


def test_get_handover_commands_issues_command():
    repo = InMemoryRepository()
    lm = MlLm(_fixed_model([0.0, 0.0, 9.0, 0.0]), repo)
    commands, quality = lm.get_handover_commands([_ue(cell_id=1)], _enbs())
    assert commands == [HandoverCommand(101, 7, 3)]
    assert repo.commands == [("MyLmMl", HandoverCommand(101, 7, 3))]
    assert quality == 0.0


def test_get_handover_commands_no_change_no_command():
    repo = InMemoryRepository()
    lm = MlLm(_fixed_model([9.0, 0.0, 0.0, 0.0]), repo)
    commands, _ = lm.get_handover_commands([_ue(cell_id=1)], _enbs())
    assert commands == []
    assert repo.commands == []


def test_get_handover_commands_empty_quality_is_nan():
    lm = MlLm(_fixed_model([1.0, 0.0, 0.0, 0.0]), InMemoryRepository())
    commands, quality = lm.get_handover_commands([], _enbs())
    assert commands == []
    assert math.isnan(quality)


def test_run_uses_repository_data():
    repo = _repository()
    model = _fixed_model([0.0, 0.0, 0.0, 4.0])
    lm = MlLm(model, repo)
    commands = lm.run(2.0)
    assert commands == [HandoverCommand(101, 7, 4)]
    assert lm.margin == pytest.approx(0.06)
    assert lm.throughput_total == 80
    assert lm.total_loss == pytest.approx(0.2)
    assert len(model.seen) == 1
    assert model.seen[0][8] == pytest.approx(1.0)
    assert len(lm.times) == 1


def test_run_inactive_returns_nothing():
    repo = _repository()
    lm = MlLm(_fixed_model([0.0, 0.0, 0.0, 4.0]), repo)
    lm.active = False
    assert lm.run(2.0) == []
    assert repo.commands == []
    assert lm.run_count == 1


def test_run_without_data_raises():
    lm = MlLm(_fixed_model([1.0, 0.0, 0.0, 0.0]), None)
    with pytest.raises(RuntimeError):
        lm.run(1.0)