"""
Trace formatters.

Turn a TraceEnvelope into the strings a console shows:
  - label:     "[svc] Cart.total() @ shop.py:42 in checkout"
  - timer:     "[svc] Cart.total() time"
  - error:     "[svc] Cart.total() raised ValueError('bad sku')"
"""

from typing import Any

from logtrail.records import TraceEnvelope


MAX_VALUE_LENGTH = 200


class TraceFormatter:
    """Default rendering of trace envelopes."""

    def label(self, envelope: TraceEnvelope) -> str:
        text = f"[{envelope.logger}] {envelope.qualname}()"
        if envelope.call_site:
            text = f"{text} @ {envelope.call_site}"
        return text

    def timer(self, envelope: TraceEnvelope) -> str:
        return f"[{envelope.logger}] {envelope.qualname}() time"

    def error(self, envelope: TraceEnvelope) -> str:
        return f"[{envelope.logger}] {envelope.qualname}() raised {envelope.error!r}"


def format_value(v: Any, max_length: int = MAX_VALUE_LENGTH) -> str:
    """Format a value for terminal display. Long reprs are truncated."""
    if isinstance(v, str):
        text = v
    elif isinstance(v, float):
        text = f"{v:.4f}"
    else:
        try:
            text = repr(v)
        except Exception:
            text = f"<{type(v).__name__}>"
    if max_length and len(text) > max_length:
        text = text[: max_length - 3] + "..."
    return text
