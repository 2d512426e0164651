from types import MappingProxyType
from typing import Mapping

DEFAULT_CONTEXT_LIMIT = 200_000

# context window sizes in tokens per model
CONTEXT_LIMITS: "Mapping[str, int]" = MappingProxyType(
    {
        "claude-sonnet-4-5-20250929": 1_000_000,
        "claude-haiku-4-5-20250929": 1_000_000,
        "claude-sonnet-4-20250514": 1_000_000,
        "claude-opus-4-1-20250805": 200_000,
        "claude-haiku-4-20250514": 200_000,
        "claude-3-5-sonnet-20241022": 200_000,
        "claude-3-5-haiku-20241022": 200_000,
        "claude-3-opus-20240229": 200_000,
    }
)


def get_context_limit(model: "str") -> "int":
    return CONTEXT_LIMITS.get(model, DEFAULT_CONTEXT_LIMIT)
