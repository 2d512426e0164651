from typing import Sequence

import structlog

from ctxwatch.models import parse_record

logger = structlog.get_logger()


def find_session_start(lines: "Sequence[str]") -> "int":
    """
    returns the offset right after the last session root, i.e. the
    last record whose parentUuid is explicitly null. Sessions can be
    resumed or forked within one transcript and only the most recent
    root marks the active one. Returns 0 when no root exists.
    """
    start = 0
    for index, line in enumerate(lines):
        record = parse_record(line)
        if record is None:
            continue

        if record.is_session_root:
            start = index + 1

    logger.debug("session_start_found", start=start, lines=len(lines))
    return start
