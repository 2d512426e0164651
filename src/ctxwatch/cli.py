import argparse

from ctxwatch.config import Config


def parse_args(argv: "list[str] | None" = None) -> "Config":
    parser = argparse.ArgumentParser(
        prog="ctxwatch",
        description=(
            "Context window usage of a session transcript. Reads "
            '{"session_id": ..., "transcript_path": ...} from stdin.'
        ),
    )
    parser.add_argument(
        "--log.level",
        dest="log_level",
        default="warning",
        choices=["debug", "info", "warning", "error"],
        help="Log level (default: warning)",
    )
    parser.add_argument(
        "--metrics.textfile",
        dest="metrics_textfile",
        default=None,
        help="Write Prometheus metrics to this file (default: $CTXWATCH_METRICS_TEXTFILE)",
    )

    args = parser.parse_args(argv)
    config = Config.from_env()
    config.log_level = args.log_level
    if args.metrics_textfile is not None:
        config.metrics_textfile = args.metrics_textfile
    return config
