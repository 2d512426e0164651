import json
from pathlib import Path
from typing import Callable

import pytest
from prometheus_client import CollectorRegistry


@pytest.fixture()
def registry() -> "CollectorRegistry":
    """
    fresh Prometheus registry to avoid cross-test state.
    """
    return CollectorRegistry()


def assistant_line(
    request_id: "str | None" = None,
    model: "str | None" = None,
    parent: "object" = "parent-uuid",
    **usage: "object",
) -> "str":
    """
    builds a transcript line for an assistant reply. Pass parent=None
    for a session root.
    """
    message: "dict[str, object]" = {"role": "assistant", "usage": usage}
    if model is not None:
        message["model"] = model
    data: "dict[str, object]" = {
        "type": "assistant",
        "parentUuid": parent,
        "message": message,
    }
    if request_id is not None:
        data["requestId"] = request_id
    return json.dumps(data)


@pytest.fixture()
def write_transcript(tmp_path: "Path") -> "Callable[[list[str]], Path]":
    def _write(lines: "list[str]") -> "Path":
        path = tmp_path / "transcript.jsonl"
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return _write
