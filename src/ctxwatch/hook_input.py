import json
from dataclasses import dataclass


class HookInputError(ValueError):
    """
    raised when the payload read from stdin is empty, is not a JSON
    object, or lacks a required field.
    """


@dataclass(frozen=True, slots=True)
class HookInput:
    """
    HookInput is the payload handed over on stdin by the
    status line hook.
    """

    session_id: "str"
    transcript_path: "str"


def parse_hook_input(raw: "str") -> "HookInput":
    if not raw.strip():
        raise HookInputError("No input provided")

    try:
        data = json.loads(raw)
    except ValueError as e:
        raise HookInputError(f"Invalid JSON input: {e}") from e

    if not isinstance(data, dict):
        raise HookInputError("Input must be a JSON object")

    session_id = data.get("session_id")
    transcript_path = data.get("transcript_path")
    if not session_id or not transcript_path:
        raise HookInputError("Missing session_id or transcript_path in input")

    return HookInput(session_id=str(session_id), transcript_path=str(transcript_path))
