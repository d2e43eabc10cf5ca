"""
Reader for kernel binder transaction snapshots.

The kernel exposes active and recent transactions as text, one record per
line, laid out as::

    outgoing transaction 2133: 0000000000000000 from 1234:1240 to 5678:5690 code 3 ...

Only the fixed column layout around the ``from`` token is relied upon: the
token after ``from`` is the source and the token three positions on is the
destination. Any line that does not fit this layout is skipped.
"""

import logging
import os
import re
from typing import Iterable, List, Optional, Tuple

from tracker.errors import MalformedLine, SourceUnavailable

Pair = Tuple[int, int]

FROM_MARKER = "from"
TO_MARKER = "to"
SOURCE_OFFSET = 1
DESTINATION_OFFSET = 3

_NUMERIC = re.compile(r"[0-9]+")


def is_candidate(line: str) -> bool:
    return FROM_MARKER in line and TO_MARKER in line


def _pid_field(token: str) -> str:
    # "1234:com.app" -> "1234"
    return token.split(":")[0]


def parse_fields(line: str) -> Pair:
    """Extract the (from, to) pair of one candidate line.

    Every ``from`` token with room for the destination column is tried in
    turn, and the first one with numeric fields decides the line. Raises
    MalformedLine when none does or when that pair holds a zero pid.
    """
    tokens = line.split()
    reason = "no from token"
    for index, token in enumerate(tokens):
        if token != FROM_MARKER:
            continue
        if index + DESTINATION_OFFSET >= len(tokens):
            reason = "truncated record"
            continue

        first = _pid_field(tokens[index + SOURCE_OFFSET])
        second = _pid_field(tokens[index + DESTINATION_OFFSET])
        if not (_NUMERIC.fullmatch(first) and _NUMERIC.fullmatch(second)):
            reason = "non-numeric pid"
            continue

        from_pid, to_pid = int(first), int(second)
        if from_pid == 0 or to_pid == 0:
            raise MalformedLine(line, "zero pid")
        return from_pid, to_pid

    raise MalformedLine(line, reason)


def parse_line(line: str) -> Optional[Pair]:
    if not is_candidate(line):
        return None
    try:
        return parse_fields(line)
    except MalformedLine as e:
        logging.debug("Skipping line, %s", e)
        return None


def parse_lines(lines: Iterable[str], source="lines") -> List[Pair]:
    """Parse lines until they run out or reading them fails.

    An I/O error while reading is logged and the pairs found so far are kept.
    """
    pairs = []
    try:
        for line in lines:
            pair = parse_line(line)
            if pair is not None:
                logging.debug("A binder communication: %d -> %d", *pair)
                pairs.append(pair)
    except OSError as e:
        logging.error("Parsing %s failed after %d records: %s", source, len(pairs), e)
    return pairs


def read_transactions(source) -> List[Pair]:
    """Parse a transaction snapshot into (from, to) pairs in line order.

    ``source`` is a path or any iterable of lines. A path that is missing
    or cannot be opened raises SourceUnavailable. An I/O error after the
    file is open keeps the pairs read up to that point.
    """
    if not isinstance(source, (str, bytes, os.PathLike)):
        return parse_lines(source)

    logging.info("Reading binder transactions from %s", source)
    try:
        file = open(source, 'r', errors='replace')
    except OSError as e:
        logging.error("Binder transaction file not readable: %s", source)
        raise SourceUnavailable(source, e.strerror or str(e)) from e

    with file:
        return parse_lines(file, source)


def flatten_pairs(pairs: Iterable[Pair]) -> List[int]:
    return [pid for pair in pairs for pid in pair]
