import pytest

from tracker import binder_tracker
from tracker.binder_tracker import BinderTracker, find_transaction_file, resolve

LINES = [
    "  outgoing transaction 11: 0000 from 100:101 to 200:201 code 3 flags 10",
    "  outgoing transaction 12: 0000 from 200:202 to 300:301 code 3 flags 10",
    "  outgoing transaction 13: 0000 from 400:401 to 500:501 code 3 flags 10",
]


@pytest.fixture
def snapshot(tmp_path):
    path = tmp_path / "transactions"
    path.write_text("\n".join(LINES) + "\n")
    return str(path)


def test_resolve_from_file(snapshot):
    assert resolve(snapshot, 100) == [100, 200, 300]
    assert resolve(snapshot, 500) == [500, 400]


def test_resolve_from_lines():
    assert resolve(LINES, 300) == [300, 200, 100]


def test_missing_source_is_no_data(tmp_path):
    assert resolve(str(tmp_path / "missing"), 100) == []


def test_empty_source_is_no_data(tmp_path):
    path = tmp_path / "transactions"
    path.write_text("")
    assert resolve(str(path), 100) == []


def test_zero_endpoint_only(tmp_path):
    path = tmp_path / "transactions"
    path.write_text("... from 0:kernel to 50:x ...\n")
    assert resolve(str(path), 50) == []


def test_self_pair():
    assert resolve(["... from 10:a to 10:a ..."], 10) == [10]


def test_unrelated_pid(snapshot):
    assert resolve(snapshot, 999) == []


def test_calls_do_not_share_results(snapshot):
    tracker = BinderTracker(100, snapshot)

    first = tracker.get_binder_transaction()
    first.append(12345)

    assert tracker.get_binder_transaction() == [100, 200, 300]


def test_bounds_are_passed_through(snapshot):
    assert resolve(snapshot, 100, max_iterations=1) == [100, 200]


def test_first_existing_transaction_file(tmp_path):
    debugfs = tmp_path / "debugfs_transactions"
    debugfs.write_text("\n".join(LINES))

    assert find_transaction_file((str(tmp_path / "missing"), str(debugfs))) == str(debugfs)
    assert find_transaction_file((str(tmp_path / "missing"),)) is None


def test_no_kernel_file(monkeypatch):
    monkeypatch.setattr(binder_tracker, "find_transaction_file", lambda: None)

    assert BinderTracker(100).get_binder_transaction() == []
