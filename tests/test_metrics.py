import threading

import pytest

from tokenvm.metrics import ActionKind, ActionMetrics


def test_counts_start_at_zero():
    m = ActionMetrics()
    assert all(v == 0 for v in m.snapshot().values())
    assert set(m.snapshot()) == set(ActionKind)


def test_increment_one_kind_only():
    m = ActionMetrics()
    m.increment(ActionKind.TRANSFER)
    m.increment(ActionKind.TRANSFER)
    assert m.count(ActionKind.TRANSFER) == 2
    assert m.count(ActionKind.MINT_ASSET) == 0


def test_string_kind_accepted():
    m = ActionMetrics()
    m.increment("fill_order")
    assert m.count(ActionKind.FILL_ORDER) == 1


def test_unknown_kind_rejected():
    m = ActionMetrics()
    with pytest.raises(ValueError):
        m.increment("no_such_action")


def test_snapshot_is_a_copy():
    m = ActionMetrics()
    snap = m.snapshot()
    m.increment(ActionKind.CLOSE_ORDER)
    assert snap[ActionKind.CLOSE_ORDER] == 0
    assert m.snapshot()[ActionKind.CLOSE_ORDER] == 1


def test_metric_names_and_help():
    m = ActionMetrics()
    m.increment(ActionKind.CREATE_ASSET)
    by_name = {kind.metric_name: value for kind, value in m.snapshot().items()}
    assert by_name["actions_create_asset"] == 1
    assert by_name["actions_transfer"] == 0
    helps = {kind.help for kind in m.snapshot()}
    assert "number of transfer actions" in helps
    assert "number of export asset actions" in helps


def test_concurrent_increments_are_counted():
    m = ActionMetrics()

    def work():
        for _ in range(500):
            m.increment(ActionKind.CREATE_ORDER)

    threads = [threading.Thread(target=work) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert m.count(ActionKind.CREATE_ORDER) == 4 * 500