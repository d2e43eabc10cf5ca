import logging
import time
from typing import Dict, List, Optional

from tracker.errors import InternalFault
from tracker.grouping import GroupTable


def resolve_depths(target_pid: int, group_table: GroupTable,
                   max_iterations: Optional[int] = None,
                   deadline: Optional[float] = None) -> Dict[int, int]:
    """Breadth-first walk from ``target_pid`` across the neighbor groups.

    Returns every reachable pid mapped to the round it was found in, in
    discovery order. The target maps to 0 when it has a group of its own.
    A bounded or failed walk returns what was found so far.
    """
    found = {}
    if target_pid is None or target_pid <= 0:
        return found

    started = time.monotonic()
    frontier = [target_pid]
    depth = 0
    try:
        while frontier:
            if max_iterations is not None and depth >= max_iterations:
                logging.warning("Stopping binder walk for %d after %d rounds, %d pids found",
                                target_pid, depth, len(found))
                break
            if deadline is not None and time.monotonic() - started > deadline:
                logging.warning("Binder walk for %d exceeded %.2fs, %d pids found",
                                target_pid, deadline, len(found))
                break

            next_frontier = []
            for pid in frontier:
                for member in group_table.get(pid, ()):
                    if member in found:
                        continue
                    logging.info("%d binder communication with: %d", pid, member)
                    # the target sits in its own group and is found in round 0
                    found[member] = depth if member == target_pid else depth + 1
                    next_frontier.append(member)

            frontier = next_frontier
            depth += 1
    except Exception as e:
        fault = InternalFault(f"binder walk for {target_pid} failed: {e}")
        logging.error("%s, returning %d pids found so far", fault, len(found))

    return found


def resolve_closure(target_pid: int, group_table: GroupTable,
                    max_iterations: Optional[int] = None,
                    deadline: Optional[float] = None) -> List[int]:
    return list(resolve_depths(target_pid, group_table, max_iterations, deadline))
