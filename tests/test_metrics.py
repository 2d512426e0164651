from pathlib import Path

from prometheus_client import CollectorRegistry

from ctxwatch.metrics import MetricsExporter
from ctxwatch.models import UsageReport, UsageTotals

_LABELS = {"session_id": "s1", "model": "claude-3-opus-20240229"}


def _report() -> "UsageReport":
    return UsageReport(
        counted=UsageTotals(
            input=1_000,
            output=200,
            cache_creation=300,
            ephemeral_5m=300,
            latest_cache_read=500,
        ),
        skipped=UsageTotals(input=100, output=20, cache_creation=50),
        entries_processed=4,
        entries_skipped=2,
        model="claude-3-opus-20240229",
    )


class TestMetricsExporter:
    def test_creates_metric_families(
        self,
        registry: "CollectorRegistry",
    ) -> "None":
        MetricsExporter(registry=registry)
        metric_names = [m.name for m in registry.collect()]
        assert "ctxwatch_context_tokens" in metric_names
        assert "ctxwatch_context_limit_tokens" in metric_names
        assert "ctxwatch_context_usage_ratio" in metric_names
        assert "ctxwatch_messages_processed" in metric_names
        assert "ctxwatch_messages_skipped" in metric_names
        assert "ctxwatch_tokens" in metric_names

    def test_update_sets_gauges(
        self,
        registry: "CollectorRegistry",
    ) -> "None":
        exporter = MetricsExporter(registry=registry)
        exporter.update("s1", _report(), 200_000)

        # 2000 counted + 120 skipped input/output
        assert registry.get_sample_value("ctxwatch_context_tokens", _LABELS) == 2120.0
        assert (
            registry.get_sample_value("ctxwatch_context_limit_tokens", _LABELS)
            == 200_000.0
        )
        assert (
            registry.get_sample_value("ctxwatch_context_usage_ratio", _LABELS)
            == 2120 / 200_000
        )
        assert registry.get_sample_value("ctxwatch_messages_processed", _LABELS) == 4.0
        assert registry.get_sample_value("ctxwatch_messages_skipped", _LABELS) == 2.0

    def test_update_sets_breakdown(
        self,
        registry: "CollectorRegistry",
    ) -> "None":
        exporter = MetricsExporter(registry=registry)
        exporter.update("s1", _report(), 200_000)

        cache_read = registry.get_sample_value(
            "ctxwatch_tokens",
            {**_LABELS, "stream": "counted", "kind": "cache_read"},
        )
        assert cache_read == 500.0

        skipped_cache_creation = registry.get_sample_value(
            "ctxwatch_tokens",
            {**_LABELS, "stream": "skipped", "kind": "cache_creation"},
        )
        assert skipped_cache_creation == 50.0

    def test_write_produces_textfile(
        self,
        registry: "CollectorRegistry",
        tmp_path: "Path",
    ) -> "None":
        exporter = MetricsExporter(registry=registry)
        exporter.update("s1", _report(), 200_000)
        path = tmp_path / "ctxwatch.prom"
        exporter.write(str(path))

        content = path.read_text()
        assert "# TYPE ctxwatch_context_tokens gauge" in content
        assert 'session_id="s1"' in content
