from decimal import ROUND_HALF_UP, Decimal

from ctxwatch.models import UsageReport


def _round_half_up(value: "float", exponent: "str") -> "Decimal":
    # Decimal(float) keeps the exact binary value, so ties only round
    # up when the float really sits on the half
    return Decimal(value).quantize(Decimal(exponent), rounding=ROUND_HALF_UP)


def format_token_count(tokens: "int") -> "str":
    """
    renders a token count in abbreviated units, e.g. 1500 -> "1.5K",
    2500000 -> "2.5M". Exactly one million renders as "1M".
    """
    if tokens >= 1_000_000:
        millions = tokens / 1_000_000
        if millions == 1:
            return "1M"
        return f"{_round_half_up(millions, '0.1')}M"

    if tokens >= 1_000:
        return f"{_round_half_up(tokens / 1_000, '0.1')}K"

    return str(tokens)


def usage_percent(used: "int", limit: "int") -> "int":
    return int(_round_half_up(used / limit * 100, "1"))


def render_status_lines(
    session_id: "str",
    report: "UsageReport",
    context_limit: "int",
) -> "list[str]":
    """
    builds the five status lines printed for a session.
    """
    used = report.realistic_total
    percent = usage_percent(used, context_limit)
    return [
        f"Session: {session_id}",
        f"Model: {report.model}",
        f"Context usage: {format_token_count(used)}/"
        f"{format_token_count(context_limit)} tokens ({percent}%)",
        f"Messages processed: {report.entries_processed}",
        f"Messages skipped: {report.entries_skipped}",
    ]
