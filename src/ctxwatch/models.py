import json
from dataclasses import dataclass, field

ASSISTANT_KIND = "assistant"
UNKNOWN_MODEL = "unknown"


class _Missing:
    """
    marks a field that is absent from the decoded line, as opposed
    to one explicitly set to null.
    """

    def __repr__(self) -> "str":
        return "MISSING"


MISSING = _Missing()


def _token_count(value: "object") -> "int":
    # bool is an int subclass but never a token count
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return 0


@dataclass(frozen=True, slots=True)
class TokenUsage:
    """
    TokenUsage holds the token counts reported on a single
    assistant reply.
    """

    input_tokens: "int" = 0
    output_tokens: "int" = 0
    cache_creation_input_tokens: "int" = 0
    cache_read_input_tokens: "int" = 0
    # short-lived and long-lived cache-write breakdown
    ephemeral_5m_input_tokens: "int" = 0
    ephemeral_1h_input_tokens: "int" = 0

    @classmethod
    def from_dict(cls, data: "object") -> "TokenUsage":
        if not isinstance(data, dict):
            return cls()

        cache_creation = data.get("cache_creation")
        if not isinstance(cache_creation, dict):
            cache_creation = {}

        return cls(
            input_tokens=_token_count(data.get("input_tokens")),
            output_tokens=_token_count(data.get("output_tokens")),
            cache_creation_input_tokens=_token_count(
                data.get("cache_creation_input_tokens")
            ),
            cache_read_input_tokens=_token_count(data.get("cache_read_input_tokens")),
            ephemeral_5m_input_tokens=_token_count(
                cache_creation.get("ephemeral_5m_input_tokens")
            ),
            ephemeral_1h_input_tokens=_token_count(
                cache_creation.get("ephemeral_1h_input_tokens")
            ),
        )


@dataclass(frozen=True, slots=True)
class Record:
    """
    Record represents one decoded line of a transcript.

    parent_reference keeps the distinction between an absent
    parentUuid (MISSING) and an explicit null (None). Only the
    latter marks a session root.
    """

    kind: "str | None" = None
    parent_reference: "object" = MISSING
    # empty string when the line carries no requestId
    request_id: "str" = ""
    # None unless the line carries a message object
    usage: "TokenUsage | None" = None
    model: "str | None" = None

    @property
    def is_session_root(self) -> "bool":
        return self.parent_reference is None

    @property
    def is_assistant_reply(self) -> "bool":
        return self.kind == ASSISTANT_KIND and self.usage is not None


def parse_record(line: "str") -> "Record | None":
    """
    decodes a raw transcript line. Returns None for anything that is
    not a JSON object, so callers can skip it and keep scanning.
    """
    try:
        data = json.loads(line)
    except ValueError:
        return None

    if not isinstance(data, dict):
        return None

    kind = data.get("type")
    request_id = data.get("requestId")
    message = data.get("message")

    usage: "TokenUsage | None" = None
    model: "str | None" = None
    if isinstance(message, dict):
        usage = TokenUsage.from_dict(message.get("usage"))
        raw_model = message.get("model")
        if isinstance(raw_model, str) and raw_model:
            model = raw_model

    return Record(
        kind=kind if isinstance(kind, str) else None,
        parent_reference=data.get("parentUuid", MISSING),
        request_id=request_id if isinstance(request_id, str) else "",
        usage=usage,
        model=model,
    )


@dataclass(slots=True)
class UsageTotals:
    """
    UsageTotals accumulates token counts for one stream of
    records (counted or skipped).

    Cache-read counts are a point-in-time snapshot, so only the
    latest non-zero value is kept instead of a sum.
    """

    input: "int" = 0
    output: "int" = 0
    cache_creation: "int" = 0
    ephemeral_5m: "int" = 0
    ephemeral_1h: "int" = 0
    latest_cache_read: "int" = 0

    def add(self, usage: "TokenUsage") -> "None":
        self.input += usage.input_tokens
        self.output += usage.output_tokens
        self.cache_creation += usage.cache_creation_input_tokens
        self.ephemeral_5m += usage.ephemeral_5m_input_tokens
        self.ephemeral_1h += usage.ephemeral_1h_input_tokens
        if usage.cache_read_input_tokens > 0:
            self.latest_cache_read = usage.cache_read_input_tokens

    @property
    def total(self) -> "int":
        return self.input + self.cache_creation + self.latest_cache_read + self.output


@dataclass(slots=True)
class UsageReport:
    """
    UsageReport is the outcome of aggregating one session of a
    transcript.
    """

    counted: "UsageTotals" = field(default_factory=UsageTotals)
    skipped: "UsageTotals" = field(default_factory=UsageTotals)
    entries_processed: "int" = 0
    entries_skipped: "int" = 0
    model: "str" = UNKNOWN_MODEL

    @property
    def counted_total(self) -> "int":
        return self.counted.total

    @property
    def skipped_total(self) -> "int":
        return self.skipped.total

    @property
    def realistic_total(self) -> "int":
        """
        deduplicated total plus what superseded revisions cost,
        excluding their cache writes.
        """
        return self.counted_total + (self.skipped_total - self.skipped.cache_creation)
