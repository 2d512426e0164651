import os
from dataclasses import dataclass


@dataclass
class Config:
    # logs go to stderr, stdout only carries the status lines
    log_level: "str" = "warning"
    # node_exporter textfile path, empty disables the export
    metrics_textfile: "str" = ""

    @classmethod
    def from_env(cls) -> "Config":
        return cls(
            metrics_textfile=os.environ.get("CTXWATCH_METRICS_TEXTFILE", ""),
        )

    @property
    def metrics_enabled(self) -> "bool":
        return bool(self.metrics_textfile)
