"""
Console sinks (output destinations).

A console is anything exposing some of: debug, info, warn, error, group,
group_collapsed, group_end, time, time_end. Every method is optional;
loggers look each one up at call time and skip it when absent.

Two concrete sinks ship with the package:
  - TerminalConsole: stdout/stderr with ANSI colors and group indentation
  - RecordingConsole: ring buffer of calls with a live group depth, for
    inspection from tests or an interactive session
"""

import sys
import threading
import time
from collections import deque
from dataclasses import dataclass
from typing import Any

from logtrail.formatters import format_value


def console_call(console: Any, method: str, *args: Any) -> None:
    """
    Invoke `console.<method>(*args)` if the console provides it.

    Absent consoles and absent methods are no-ops. Failures inside the sink
    are contained: diagnostics must never crash the host program.
    """
    if console is None:
        return
    fn = getattr(console, method, None)
    if not callable(fn):
        return
    try:
        fn(*args)
    except Exception:
        # Never let console failure crash the caller
        pass


class ConsoleSink:
    """Base console. Every primitive is a no-op until overridden."""

    def debug(self, message: str, *args: Any) -> None:
        pass

    def info(self, message: str, *args: Any) -> None:
        pass

    def warn(self, message: str, *args: Any) -> None:
        pass

    def error(self, message: str, *args: Any) -> None:
        pass

    def group(self, label: str, *args: Any) -> None:
        pass

    def group_collapsed(self, label: str, *args: Any) -> None:
        self.group(label, *args)

    def group_end(self) -> None:
        pass

    def time(self, label: str) -> None:
        pass

    def time_end(self, label: str) -> None:
        pass


class TerminalConsole(ConsoleSink):
    """
    Writes to stdout/stderr with ANSI color coding.
    error goes to stderr, everything else to stdout. Open groups indent
    their contents by `indent` spaces per level.
    """

    COLORS = {
        "debug": "\033[36m",     # cyan
        "info": "\033[37m",      # white/default
        "warn": "\033[33m",      # yellow
        "error": "\033[31m",     # red
        "group": "\033[1m",      # bold
        "time": "\033[90m",      # gray
    }
    RESET = "\033[0m"

    def __init__(self, color: bool = True, indent: int = 2):
        self.color = color
        self.indent = indent
        self._depth = 0
        self._timers: dict[str, list[float]] = {}

    @property
    def depth(self) -> int:
        return self._depth

    def debug(self, message: str, *args: Any) -> None:
        self._write("debug", message, args)

    def info(self, message: str, *args: Any) -> None:
        self._write("info", message, args)

    def warn(self, message: str, *args: Any) -> None:
        self._write("warn", message, args)

    def error(self, message: str, *args: Any) -> None:
        self._write("error", message, args)

    def group(self, label: str, *args: Any) -> None:
        self._write("group", label, args)
        self._depth += 1

    def group_collapsed(self, label: str, *args: Any) -> None:
        # A terminal cannot collapse; render like an open group
        self.group(label, *args)

    def group_end(self) -> None:
        if self._depth > 0:
            self._depth -= 1

    def time(self, label: str) -> None:
        self._timers.setdefault(label, []).append(time.perf_counter())

    def time_end(self, label: str) -> None:
        started = self._timers.get(label)
        if not started:
            return
        elapsed_ms = (time.perf_counter() - started.pop()) * 1000.0
        if not started:
            del self._timers[label]
        self._write("time", f"{label}: {elapsed_ms:.3f}ms", ())

    def _write(self, kind: str, message: str, args: tuple) -> None:
        parts = [str(message)]
        parts.extend(format_value(a) for a in args)
        line = " " * (self.indent * self._depth) + " ".join(parts)
        if self.color:
            line = f"{self.COLORS.get(kind, '')}{line}{self.RESET}"
        stream = sys.stderr if kind == "error" else sys.stdout
        print(line, file=stream, flush=True)


@dataclass(frozen=True)
class ConsoleCall:
    """One recorded console invocation."""
    method: str
    args: tuple
    depth: int


class RecordingConsole(ConsoleSink):
    """
    Ring buffer of the last N console calls.
    Tracks group depth so callers can check that every group was closed.
    """

    def __init__(self, ring_buffer_size: int = 10000):
        self._buffer: deque[ConsoleCall] = deque(maxlen=ring_buffer_size)
        self._lock = threading.Lock()
        self._depth = 0
        self._max_depth = 0

    def _record(self, method: str, *args: Any) -> None:
        with self._lock:
            self._buffer.append(ConsoleCall(method=method, args=args, depth=self._depth))

    def debug(self, message: str, *args: Any) -> None:
        self._record("debug", message, *args)

    def info(self, message: str, *args: Any) -> None:
        self._record("info", message, *args)

    def warn(self, message: str, *args: Any) -> None:
        self._record("warn", message, *args)

    def error(self, message: str, *args: Any) -> None:
        self._record("error", message, *args)

    def group(self, label: str, *args: Any) -> None:
        self._record("group", label, *args)
        self._open()

    def group_collapsed(self, label: str, *args: Any) -> None:
        self._record("group_collapsed", label, *args)
        self._open()

    def group_end(self) -> None:
        with self._lock:
            self._depth -= 1
        self._record("group_end")

    def time(self, label: str) -> None:
        self._record("time", label)

    def time_end(self, label: str) -> None:
        self._record("time_end", label)

    def _open(self) -> None:
        with self._lock:
            self._depth += 1
            self._max_depth = max(self._max_depth, self._depth)

    @property
    def depth(self) -> int:
        """Currently open groups. Zero when every group was balanced."""
        return self._depth

    @property
    def max_depth(self) -> int:
        return self._max_depth

    @property
    def calls(self) -> list[ConsoleCall]:
        with self._lock:
            return list(self._buffer)

    def get_recent(self, n: int = 100, method: str | None = None) -> list[ConsoleCall]:
        """Get recent calls, optionally filtered by console method name."""
        records = self.calls
        if method:
            records = [c for c in records if c.method == method]
        return records[-n:]

    def methods(self) -> list[str]:
        """Method names of all recorded calls, oldest first."""
        return [c.method for c in self.calls]

    def clear(self) -> None:
        with self._lock:
            self._buffer.clear()
            self._depth = 0
            self._max_depth = 0

    @property
    def count(self) -> int:
        return len(self._buffer)
