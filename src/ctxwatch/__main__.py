import sys

import structlog

from ctxwatch.aggregator import TranscriptError, calculate_context_window
from ctxwatch.cli import parse_args
from ctxwatch.config import Config
from ctxwatch.formatting import render_status_lines
from ctxwatch.hook_input import HookInputError, parse_hook_input
from ctxwatch.limits import get_context_limit
from ctxwatch.logging import setup_logging
from ctxwatch.metrics import MetricsExporter

logger = structlog.get_logger()


def run(config: "Config", raw_input: "str") -> "list[str]":
    """
    computes the status lines for the session described by
    raw_input. Raises HookInputError or TranscriptError on
    structural errors.
    """
    hook_input = parse_hook_input(raw_input)
    structlog.contextvars.bind_contextvars(session_id=hook_input.session_id)

    report = calculate_context_window(hook_input.transcript_path)
    context_limit = get_context_limit(report.model)
    logger.info(
        "context_window_calculated",
        model=report.model,
        used=report.realistic_total,
        limit=context_limit,
    )

    if config.metrics_enabled:
        exporter = MetricsExporter()
        exporter.update(hook_input.session_id, report, context_limit)
        exporter.write(config.metrics_textfile)
        logger.info("metrics_written", path=config.metrics_textfile)

    return render_status_lines(hook_input.session_id, report, context_limit)


def main() -> "None":
    config = parse_args()
    setup_logging(config.log_level)

    try:
        lines = run(config, sys.stdin.read())
    except HookInputError as e:
        raise SystemExit(str(e)) from e
    except TranscriptError as e:
        raise SystemExit(f"Failed to calculate context window: {e}") from e
    except Exception as e:
        logger.exception("unexpected_error")
        raise SystemExit(f"Error: {e}") from e
    finally:
        structlog.contextvars.clear_contextvars()

    for line in lines:
        print(line)


if __name__ == "__main__":
    main()
