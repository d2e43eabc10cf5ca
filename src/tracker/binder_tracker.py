"""
Find the processes that are binder communicating with a given pid.

Used by hang diagnostics: when a process stops responding, the processes
it is calling into, directly or through a chain of synchronous binder
calls, are the ones worth dumping alongside it.
"""

import logging
import os
import time
from typing import List, Optional

from tracker.closure import resolve_closure
from tracker.errors import SourceUnavailable
from tracker.grouping import build_groups
from tracker.transactions import read_transactions

DEFAULT_TRANSACTION_FILE = "/d/binder/transactions"
DEBUGFS_TRANSACTION_FILE = "/sys/kernel/debug/binder/transactions"
TRANSACTION_FILES = (DEFAULT_TRANSACTION_FILE, DEBUGFS_TRANSACTION_FILE)


def find_transaction_file(candidates=TRANSACTION_FILES) -> Optional[str]:
    for path in candidates:
        if os.path.exists(path):
            return path
    return None


class BinderTracker:

    def __init__(self, pid: int, source=None, max_iterations: Optional[int] = None,
                 deadline: Optional[float] = None):
        self.check_pid = pid
        self.source = source
        self.max_iterations = max_iterations
        self.deadline = deadline

    def resolve_source(self):
        if self.source is not None:
            return self.source
        return find_transaction_file()

    def get_binder_transaction(self) -> List[int]:
        """Return the pids binder communicating with ``check_pid``.

        An empty list means no relationship was found, which includes the
        case where no transaction data could be read.
        """
        start_time = time.monotonic()
        source = self.resolve_source()
        if source is None:
            logging.error("Binder transaction file does not exist: %s", ", ".join(TRANSACTION_FILES))
            return []

        try:
            pairs = read_transactions(source)
        except SourceUnavailable as e:
            logging.error("No binder transaction data: %s", e)
            return []

        if not pairs:
            logging.error("Can't get any effective binder communication information")
            return []

        groups = build_groups(pairs)
        logging.debug("Binder groups: %d, %s", len(groups), groups)

        binders = resolve_closure(self.check_pid, groups, self.max_iterations, self.deadline)
        if not binders:
            logging.warning("No binders found communicating with %d", self.check_pid)
            return []

        logging.info("Binder pids for %d: size %d, content %s", self.check_pid, len(binders), binders)
        logging.info("Total time is %.1fms", (time.monotonic() - start_time) * 1000)
        return binders


def resolve(source, target_pid: int, **bounds) -> List[int]:
    return BinderTracker(target_pid, source, **bounds).get_binder_transaction()
