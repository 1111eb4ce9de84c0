"""
Trace envelope: everything emitted around one instrumented call.

Built when a traced call starts, filled in as the call progresses, and
discarded once the console has been written to. Never persisted.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class TraceEnvelope:
    logger: str
    owner: str
    method: str
    call_site: str = ""
    args: tuple = ()
    kwargs: dict[str, Any] = field(default_factory=dict)
    elapsed: float | None = None
    result: Any = None
    error: BaseException | None = None
    stack: str = ""

    @property
    def qualname(self) -> str:
        """Owner.method, or just the method name for free functions."""
        return f"{self.owner}.{self.method}" if self.owner else self.method

    @property
    def arguments(self) -> list[Any]:
        """Positional arguments, followed by keyword arguments when present."""
        values: list[Any] = list(self.args)
        if self.kwargs:
            values.append(dict(self.kwargs))
        return values

    @property
    def failed(self) -> bool:
        return self.error is not None
