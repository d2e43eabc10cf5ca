import json

import pandas as pd
import pytest

from tracker import runner
from tracker.grouping import build_groups
from tracker.preflight import check
from tracker.to_df import TransactionsToDf

SNAPSHOT = """\
  outgoing transaction 11: 0000 from 100:101 to 200:201 code 3 flags 10
  outgoing transaction 12: 0000 from 200:202 to 300:301 code 3 flags 10
  outgoing transaction 14: 0000 from 200:202 to 300:301 code 3 flags 10
  outgoing transaction 13: 0000 from 400:401 to 500:501 code 3 flags 10
"""


@pytest.fixture
def snapshot(tmp_path):
    path = tmp_path / "transactions"
    path.write_text(SNAPSHOT)
    return path


def write_config(tmp_path, snapshot, extra=""):
    path = tmp_path / "config.yaml"
    path.write_text(f"source: {snapshot}\nout: {tmp_path / 'out'}\npids: [100, 500, 999]\n{extra}")
    return str(path)


def test_pairs_to_df_counts_duplicates():
    df = TransactionsToDf([(1, 2), (3, 4), (1, 2)]).pairs_to_df()

    assert df.to_dict('records') == [
        {"from_pid": 1, "to_pid": 2, "count": 2},
        {"from_pid": 3, "to_pid": 4, "count": 1},
    ]


def test_groups_and_result_frames(tmp_path):
    pairs = [(1, 2), (2, 3)]
    converter = TransactionsToDf(pairs)
    groups_df = converter.groups_to_df(build_groups(pairs))
    result_df = converter.result_to_df(1, {1: 0, 2: 1, 3: 2})

    assert groups_df.loc[2, 'size'] == 3
    assert groups_df.loc[2, 'neighbors'] == "2 1 3"
    assert result_df['depth'].to_dict() == {1: 0, 2: 1, 3: 2}

    converter.export_dfs(str(tmp_path))
    assert pd.read_csv(tmp_path / "groups.csv", index_col='pid')['size'].to_dict() == {1: 2, 2: 3, 3: 2}
    assert (tmp_path / "result_1.csv").exists()


def test_preflight(tmp_path, snapshot):
    empty = tmp_path / "empty"
    empty.write_text("proc 12\n")

    assert check(str(snapshot))
    assert not check(str(empty))
    assert not check(str(tmp_path / "missing"))


def test_run(tmp_path, snapshot):
    summary = runner.run(write_config(tmp_path, snapshot))
    out = tmp_path / "out"

    assert summary == {100: [100, 200, 300], 500: [500, 400], 999: []}
    assert json.loads((out / "summary.json").read_text()) == {
        "100": [100, 200, 300], "500": [500, 400], "999": []}
    assert json.loads((out / "100" / "result.json").read_text()) == {
        "pid": 100, "binders": [100, 200, 300], "count": 3}
    assert (out / "pairs.csv").exists()
    assert pd.read_csv(out / "100" / "result_100.csv", index_col='pid')['depth'].to_dict() == {
        100: 0, 200: 1, 300: 2}
    assert not (out / "100" / "group_sizes.png").exists()


def test_run_with_plot(tmp_path, snapshot):
    runner.run(write_config(tmp_path, snapshot, "plot: true\n"))

    assert (tmp_path / "out" / "100" / "group_sizes.png").exists()


def test_run_with_bounds(tmp_path, snapshot):
    summary = runner.run(write_config(tmp_path, snapshot, "resolve:\n  max_iterations: 1\n"))

    assert summary[100] == [100, 200]


def test_run_without_data(tmp_path):
    summary = runner.run(write_config(tmp_path, tmp_path / "missing"))

    assert summary == {100: [], 500: [], 999: []}
    assert json.loads((tmp_path / "out" / "500" / "result.json").read_text())["binders"] == []


def test_run_with_local_capture(tmp_path, snapshot):
    summary = runner.run(write_config(tmp_path, snapshot, "capture: local\n"))

    assert summary[500] == [500, 400]
    assert (tmp_path / "out" / "transactions.txt").read_text() == SNAPSHOT


def test_unreadable_snapshot_fails_preflight(tmp_path, snapshot, monkeypatch):
    from tracker import preflight

    def denied(*args, **kwargs):
        raise PermissionError(13, "Permission denied", str(snapshot))

    monkeypatch.setattr(preflight, "open", denied, raising=False)

    assert not check(str(snapshot))
    summary = runner.run(write_config(tmp_path, snapshot))

    assert summary == {100: [], 500: [], 999: []}
    assert json.loads((tmp_path / "out" / "summary.json").read_text()) == {"100": [], "500": [], "999": []}


def test_run_without_source_uses_kernel_file(tmp_path, snapshot, monkeypatch):
    monkeypatch.setattr(runner, "find_transaction_file", lambda: str(snapshot))
    config = tmp_path / "config.yaml"
    config.write_text(f"out: {tmp_path / 'out'}\npids: [100]\n")

    assert runner.run(str(config)) == {100: [100, 200, 300]}


def test_run_without_source_or_kernel_file(tmp_path, monkeypatch):
    monkeypatch.setattr(runner, "find_transaction_file", lambda: None)
    config = tmp_path / "config.yaml"
    config.write_text(f"out: {tmp_path / 'out'}\npids: [100]\n")

    assert runner.run(str(config)) == {100: []}
