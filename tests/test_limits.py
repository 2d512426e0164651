import pytest

from ctxwatch.limits import CONTEXT_LIMITS, DEFAULT_CONTEXT_LIMIT, get_context_limit


class TestGetContextLimit:
    def test_known_model(self) -> "None":
        assert get_context_limit("claude-sonnet-4-20250514") == 1_000_000
        assert get_context_limit("claude-3-opus-20240229") == 200_000

    @pytest.mark.parametrize("model", ["unknown", "", "gpt-4o"])
    def test_unknown_model_falls_back_to_default(self, model: "str") -> "None":
        assert get_context_limit(model) == DEFAULT_CONTEXT_LIMIT == 200_000

    def test_table_is_read_only(self) -> "None":
        with pytest.raises(TypeError):
            CONTEXT_LIMITS["new-model"] = 1  # type: ignore[index]
