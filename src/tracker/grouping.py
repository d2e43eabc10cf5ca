from typing import Dict, Iterable, List, Sequence, Tuple, Union

GroupTable = Dict[int, List[int]]


def as_records(pairs: Union[Sequence[int], Iterable[Tuple[int, int]]]) -> List[Tuple[int, int]]:
    """Accept either (from, to) tuples or the flat [from, to, from, to, ...] form."""
    pairs = list(pairs)
    if pairs and isinstance(pairs[0], int):
        # a dangling trailing pid has no partner and is dropped
        return list(zip(pairs[0::2], pairs[1::2]))
    return [tuple(pair) for pair in pairs]


def build_groups(pairs) -> GroupTable:
    """Map every pid to its neighbor group.

    A group starts with the pid itself, followed by every pid it was paired
    with, in order of first occurrence. The partner of a ``from`` occurrence
    is the record's ``to`` pid and the other way around.
    """
    groups = {}
    for from_pid, to_pid in as_records(pairs):
        if from_pid <= 0 or to_pid <= 0:
            continue
        for pid, partner in ((from_pid, to_pid), (to_pid, from_pid)):
            if pid not in groups:
                groups[pid] = {pid: None}
            groups[pid][partner] = None

    return {pid: list(members) for pid, members in groups.items()}


def same_groups(first: GroupTable, second: GroupTable) -> bool:
    if first.keys() != second.keys():
        return False
    return all(set(first[pid]) == set(second[pid]) for pid in first)
