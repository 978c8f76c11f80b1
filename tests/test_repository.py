from oranlm.repository import InMemoryRepository


def test_ue_registration_round_trip():
    repo = InMemoryRepository()
    repo.add_ue(3, 2, 9)
    repo.add_ue(1, 1, 4)
    assert repo.ue_node_ids() == [3, 1]
    assert repo.ue_cell_info(3) == (2, 9)
    assert repo.ue_cell_info(99) is None


def test_enb_registration_round_trip():
    repo = InMemoryRepository()
    repo.add_enb(10, 1)
    assert repo.enb_node_ids() == [10]
    assert repo.enb_cell_info(10) == 1
    assert repo.enb_cell_info(11) is None


def test_positions_filtered_and_ordered():
    repo = InMemoryRepository()
    repo.record_position(1, 3.0, (3.0, 0.0, 0.0))
    repo.record_position(1, 1.0, (1.0, 0.0, 0.0))
    repo.record_position(1, 9.0, (9.0, 0.0, 0.0))
    positions = repo.node_positions(1, 0.0, 5.0)
    assert list(positions) == [1.0, 3.0]
    assert positions[3.0] == (3.0, 0.0, 0.0)
    assert repo.node_positions(2, 0.0, 5.0) == {}


def test_app_stats_defaults_and_values():
    repo = InMemoryRepository()
    assert repo.rx(1) == 0 and repo.tx(1) == 0 and repo.app_loss(1) == 0.0
    repo.set_app_stats(1, 0.25, 30, 40)
    assert (repo.app_loss(1), repo.rx(1), repo.tx(1)) == (0.25, 30, 40)


def test_rsrp_measurements_kept_in_order():
    repo = InMemoryRepository()
    repo.add_rsrp(1, "first")
    repo.add_rsrp(1, "second")
    assert repo.rsrp_rsrq(1) == ["first", "second"]
    assert repo.rsrp_rsrq(2) == []


def test_scheduling_round_trip():
    repo = InMemoryRepository()
    assert repo.mcs(10, 4) == 0 and repo.sizetb(10, 4) == 0
    repo.set_scheduling(10, 4, 28, 2196)
    assert repo.mcs(10, 4) == 28
    assert repo.sizetb(10, 4) == 2196


def test_logging_commands_and_logic():
    repo = InMemoryRepository()
    repo.log_command("lm", "cmd")
    repo.log_logic("lm", "text")
    assert repo.commands == [("lm", "cmd")]
    assert repo.logic_log == [("lm", "text")]