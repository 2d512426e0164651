from pathlib import Path
from typing import Sequence

import structlog

from ctxwatch.boundary import find_session_start
from ctxwatch.models import UNKNOWN_MODEL, UsageReport, parse_record

logger = structlog.get_logger()


class TranscriptError(Exception):
    """
    raised when a transcript cannot be read at all. Individual
    malformed lines never raise.
    """

    def __init__(self, path: "str | Path", reason: "str") -> "None":
        super().__init__(f"Error reading transcript file {path}: {reason}")
        self.path = str(path)


def load_transcript(path: "str | Path") -> "list[str]":
    """
    reads the whole transcript into memory and returns its non-empty
    lines.
    """
    try:
        content = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.error("transcript_read_error", path=str(path), error=str(e))
        raise TranscriptError(path, str(e)) from e

    lines = [line for line in content.strip().split("\n") if line]
    logger.debug("transcript_loaded", path=str(path), lines=len(lines))
    return lines


def _last_request_lines(lines: "Sequence[str]", start: "int") -> "dict[str, int]":
    """
    maps every requestId of an assistant reply to the index of
    the line it last appears on.
    """
    last_lines: "dict[str, int]" = {}
    for index in range(start, len(lines)):
        record = parse_record(lines[index])
        if record is None or not record.is_assistant_reply:
            continue

        if record.request_id:
            last_lines[record.request_id] = index

    return last_lines


def aggregate_usage(lines: "Sequence[str]", start: "int" = 0) -> "UsageReport":
    """
    reduces the assistant replies from `start` onwards into a
    UsageReport.

    Streaming replies are written several times under the same
    requestId. Only the last revision of each request is counted,
    earlier ones are accumulated separately as skipped. Replies
    without a requestId are always counted.
    """
    last_lines = _last_request_lines(lines, start)
    report = UsageReport()

    for index in range(start, len(lines)):
        record = parse_record(lines[index])
        if record is None or not record.is_assistant_reply:
            continue

        is_last = True
        if record.request_id and record.request_id in last_lines:
            is_last = index == last_lines[record.request_id]

        if not is_last:
            report.entries_skipped += 1
            report.skipped.add(record.usage)
            continue

        report.entries_processed += 1
        report.counted.add(record.usage)
        if record.model and record.model != UNKNOWN_MODEL:
            report.model = record.model

    logger.debug(
        "usage_aggregated",
        start=start,
        processed=report.entries_processed,
        skipped=report.entries_skipped,
        counted_total=report.counted_total,
        realistic_total=report.realistic_total,
        model=report.model,
    )
    return report


def calculate_context_window(path: "str | Path") -> "UsageReport":
    """
    loads a transcript and aggregates the usage of its current
    session. Raises TranscriptError if the file cannot be read.
    """
    lines = load_transcript(path)
    start = find_session_start(lines)
    return aggregate_usage(lines, start)
