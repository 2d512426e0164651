from prometheus_client import CollectorRegistry, Gauge, write_to_textfile

from ctxwatch.models import UsageReport, UsageTotals

_SESSION_LABELS = ["session_id", "model"]


def create_session_metrics(registry: "CollectorRegistry") -> "dict[str, Gauge]":
    """
    creates the gauge families describing a session's context usage.
     - context_tokens: realistic token usage of the context window.
     - context_limit_tokens: context window size of the model.
     - context_usage_ratio: context_tokens / context_limit_tokens.
     - messages_processed / messages_skipped: counted and
     superseded assistant replies.
     - tokens: per stream (counted/skipped) and kind breakdown.
    """
    return {
        "context_tokens": Gauge(
            "ctxwatch_context_tokens",
            "Estimated tokens in the context window",
            _SESSION_LABELS,
            registry=registry,
        ),
        "context_limit_tokens": Gauge(
            "ctxwatch_context_limit_tokens",
            "Context window size of the session model",
            _SESSION_LABELS,
            registry=registry,
        ),
        "context_usage_ratio": Gauge(
            "ctxwatch_context_usage_ratio",
            "Fraction of the context window in use",
            _SESSION_LABELS,
            registry=registry,
        ),
        "messages_processed": Gauge(
            "ctxwatch_messages_processed",
            "Assistant replies counted towards the context",
            _SESSION_LABELS,
            registry=registry,
        ),
        "messages_skipped": Gauge(
            "ctxwatch_messages_skipped",
            "Superseded streaming revisions of assistant replies",
            _SESSION_LABELS,
            registry=registry,
        ),
        "tokens": Gauge(
            "ctxwatch_tokens",
            "Token breakdown per stream and kind",
            _SESSION_LABELS + ["stream", "kind"],
            registry=registry,
        ),
    }


class MetricsExporter:
    """
    publishes a UsageReport as Prometheus gauges and writes them in
    the textfile collector format.
    """

    def __init__(self, registry: "CollectorRegistry | None" = None) -> "None":
        # a private registry keeps process metrics out of the textfile
        self._registry: "CollectorRegistry" = registry or CollectorRegistry()
        self._metrics: "dict[str, Gauge]" = create_session_metrics(self._registry)

    @property
    def registry(self) -> "CollectorRegistry":
        return self._registry

    def update(
        self,
        session_id: "str",
        report: "UsageReport",
        context_limit: "int",
    ) -> "None":
        labels = {"session_id": session_id, "model": report.model}
        used = report.realistic_total

        self._metrics["context_tokens"].labels(**labels).set(used)
        self._metrics["context_limit_tokens"].labels(**labels).set(context_limit)
        self._metrics["context_usage_ratio"].labels(**labels).set(
            used / context_limit
        )
        self._metrics["messages_processed"].labels(**labels).set(
            report.entries_processed
        )
        self._metrics["messages_skipped"].labels(**labels).set(report.entries_skipped)

        self._set_breakdown(labels, "counted", report.counted)
        self._set_breakdown(labels, "skipped", report.skipped)

    def _set_breakdown(
        self,
        labels: "dict[str, str]",
        stream: "str",
        totals: "UsageTotals",
    ) -> "None":
        kinds = {
            "input": totals.input,
            "output": totals.output,
            "cache_creation": totals.cache_creation,
            "cache_read": totals.latest_cache_read,
            "ephemeral_5m": totals.ephemeral_5m,
            "ephemeral_1h": totals.ephemeral_1h,
        }
        for kind, value in kinds.items():
            self._metrics["tokens"].labels(**labels, stream=stream, kind=kind).set(
                value
            )

    def write(self, path: "str") -> "None":
        """
        writes all gauges to path. write_to_textfile goes through a
        temporary file so collectors never read a partial file.
        """
        write_to_textfile(path, self._registry)
