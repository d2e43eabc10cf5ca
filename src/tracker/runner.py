from tracker.binder_tracker import DEFAULT_TRANSACTION_FILE, find_transaction_file
from tracker.capture import capture_device, capture_local
from tracker.closure import resolve_depths
from tracker.errors import SourceUnavailable
from tracker.grouping import build_groups
from tracker.preflight import check
from tracker.to_df import TransactionsToDf
from tracker.transactions import read_transactions
from tracker.visualizer import group_size_plot
from misc.config import load_configuration
from misc.util import create_directory, write_json
import logging
from typing import Any, Dict, List, Optional


def run(config_path: str) -> Dict[int, List[int]]:
    config = load_configuration(config_path)
    out = create_directory(config['out'])
    bounds = config.get('resolve', {})

    snapshot = take_snapshot(config)
    if snapshot is None or not check(snapshot):
        logging.error("No binder transaction data, every PID resolves to nothing")
        summary = {pid: [] for pid in config['pids']}
        for pid in config['pids']:
            write_result(create_directory(f"{out}/{pid}"), pid, [])
        write_json(f"{out}/summary.json", {str(pid): binders for pid, binders in summary.items()})
        return summary

    pairs = read_transactions(snapshot)
    groups = build_groups(pairs)
    logging.info("Parsed %d transactions into %d groups", len(pairs), len(groups))

    converter = TransactionsToDf(pairs)
    converter.pairs_to_df()
    groups_df = converter.groups_to_df(groups)
    converter.export_dfs(out)

    summary: Dict[int, List[int]] = {}
    for pid in config['pids']:
        logging.info("Resolving binder relationships for %d", pid)
        directory = create_directory(f"{out}/{pid}")
        depths = resolve_depths(pid, groups, bounds.get('max_iterations'), bounds.get('deadline'))
        binders = list(depths)
        summary[pid] = binders

        write_result(directory, pid, binders)
        result_df = TransactionsToDf(pairs)
        result_df.result_to_df(pid, depths)
        result_df.export_dfs(directory)

        if config.get('plot') and not groups_df.empty:
            group_size_plot(groups_df, f"{directory}/group_sizes.png", highlight=binders,
                            title=f'Binder neighbor group sizes, related to {pid}')

    write_json(f"{out}/summary.json", {str(pid): binders for pid, binders in summary.items()})
    return summary


def take_snapshot(config: Dict[str, Any]) -> Optional[str]:
    mode = config.get('capture')
    if mode is None:
        return config.get('source') or find_transaction_file()

    snapshot = f"{config['out']}/transactions.txt"
    try:
        if mode == 'device':
            capture_device(snapshot, config.get('serial'), config.get('source', DEFAULT_TRANSACTION_FILE))
        else:
            capture_local(snapshot, config.get('source'))
    except SourceUnavailable as e:
        logging.error("Snapshot capture failed: %s", e)
        return None
    return snapshot


def write_result(directory: str, pid: int, binders: List[int]) -> None:
    write_json(f"{directory}/result.json", {"pid": pid, "binders": binders, "count": len(binders)})
