import logging
import os

from tracker.transactions import is_candidate


def check(snapshot_path):
    return check_exists(snapshot_path) and check_transactions(snapshot_path)


def check_exists(snapshot_path):
    if not os.path.isfile(snapshot_path):
        logging.error("No transaction snapshot found at %s", snapshot_path)
        return False
    return True


def check_transactions(snapshot_path):
    try:
        with open(snapshot_path, 'r', errors='replace') as file:
            if any(is_candidate(line) for line in file):
                return True
    except OSError as e:
        logging.error("Transaction snapshot %s not readable: %s", snapshot_path, e)
        return False
    logging.error("No binder transaction lines in %s", snapshot_path)
    return False
