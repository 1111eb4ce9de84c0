"""
Log: one named output channel.

Leveled printing with a per-logger floor, a level that reads and writes
through a persisted override store, and instrumentation that wraps
callables with trace groups.

Usage:
    log = registry.log("cart")
    log.info("checkout started", order_id)

    log.attach(cart)                 # trace every method on `cart`
    log.wrap(Cart, "total")          # trace one method, in place

    @log.traced                      # trace by composition
    def price(sku): ...
"""

import functools
import inspect
import time
import traceback
from collections import deque
from types import ModuleType
from typing import Any, Callable

from logtrail.callsite import CallSiteProvider, NullCallSite
from logtrail.config import LoggerOptions
from logtrail.console import console_call
from logtrail.errors import InvalidArgument
from logtrail.formatters import TraceFormatter
from logtrail.levels import Severity, is_enabled, resolve_level
from logtrail.records import TraceEnvelope
from logtrail.store import LevelStore, level_key


# Set on every proxy; holds the name of the logger that traces it.
TRACED_ATTR = "__logtrail_logger__"


class Log:
    """
    A named logger.

    Normally created through LogRegistry.get_or_create(), which supplies the
    console, the override store and the merged options. Constructing one
    directly is fine for tests and one-off scripts.
    """

    def __init__(
        self,
        name: str,
        options: LoggerOptions | None = None,
        console: Any = None,
        store: LevelStore | None = None,
        namespace: str = "logtrail",
        call_site: CallSiteProvider | None = None,
        formatter: TraceFormatter | None = None,
        trace_buffer_size: int = 100,
    ):
        if not name or not isinstance(name, str):
            raise InvalidArgument("provide the name of the log to create or get")
        self.name = name
        self.options = options or LoggerOptions()
        self.level = resolve_level(self.options.level)
        self.console = console
        self.store = store
        self.namespace = namespace
        self.call_site = call_site or NullCallSite()
        self.formatter = formatter or TraceFormatter()
        self._traces: deque[TraceEnvelope] = deque(maxlen=trace_buffer_size)

    def __repr__(self) -> str:
        return f"Log(name={self.name!r}, level={self.get_level()!r})"

    @property
    def key(self) -> str:
        """Override store key: "<namespace>:<name>:level"."""
        return level_key(self.namespace, self.name)

    # ── Level Management ──────────────────────────────────────────

    def set_level(self, level: int | float) -> None:
        """
        Set this logger's floor, writing through to the override store.

        Not validated here: LogRegistry.set_level_all() validates before
        broadcasting, a direct call trusts its caller.
        """
        if self.store is not None:
            self.store.set(self.key, level)
        self.level = level

    def get_level(self) -> int | float:
        """The persisted override if one exists, else the in-memory level."""
        if self.store is not None:
            value = self.store.get(self.key)
            if value is not None:
                return value
        return self.level

    def reset_level(self) -> None:
        """Drop the persisted override; the in-memory level applies again."""
        if self.store is not None:
            self.store.delete(self.key)

    def is_enabled_for(self, severity: int) -> bool:
        return is_enabled(self.get_level(), severity)

    # ── Leveled Printing ──────────────────────────────────────────

    def debug(self, msg: Any, *args: Any) -> None:
        self._print(Severity.DEBUG, "debug", msg, args)

    def info(self, msg: Any, *args: Any) -> None:
        self._print(Severity.INFO, "info", msg, args)

    def warn(self, msg: Any, *args: Any) -> None:
        self._print(Severity.WARN, "warn", msg, args)

    warning = warn

    def error(self, msg: Any, *args: Any) -> None:
        self._print(Severity.ERROR, "error", msg, args)

    def _print(self, severity: Severity, method: str, msg: Any, args: tuple) -> None:
        if not self.is_enabled_for(severity):
            return
        # Only the first extra argument is forwarded, always as a list
        console_call(self.console, method, f"[{self.name}] {msg}", list(args[:1]))

    # ── Instrumentation ───────────────────────────────────────────

    def attach(self, target: Any) -> Any:
        """
        Trace every callable reachable from `target`, in place.

        Walks dicts, lists, tuples, classes, modules and plain instances,
        recursing into nested aggregates. Each object is visited at most
        once per walk. Functions, methods, partials and other callable
        objects are wrapped; classes are not. Dunder names (constructors,
        operators and other protocol hooks) are skipped; a member literally
        named "constructor" is an ordinary name and is traced. Properties and
        routines this logger already traces are left alone.

        Returns `target` for chaining.
        """
        if target is None:
            raise InvalidArgument("provide an object to attach to")
        self._attach(target, set())
        return target

    def _attach(self, target: Any, visited: set[int]) -> None:
        if id(target) in visited:
            return
        visited.add(id(target))

        for key, value in _members(target):
            if _is_aggregate(value):
                self._attach(value, visited)
            elif _is_traceable(value) and not isinstance(target, tuple):
                if self._traces_already(value):
                    continue
                self.wrap(target, key)

    def wrap(self, target: Any, name: Any) -> Callable:
        """
        Replace `target[name]` (dicts, lists) or `target.name` with a traced
        proxy and return the proxy.

        staticmethod and classmethod members of a class keep their binding.

        Raises:
            KeyError / IndexError / AttributeError: the member does not exist.
            InvalidArgument: the member is not callable.
        """
        if isinstance(target, (dict, list)):
            fn = target[name]
            _require_callable(fn, name)
            target[name] = self.trace(fn, owner="", name=str(name))
            return target[name]

        if isinstance(target, type):
            raw = inspect.getattr_static(target, name)
            owner = target.__name__
            if isinstance(raw, staticmethod):
                proxy = self.trace(raw.__func__, owner=owner, name=name)
                setattr(target, name, staticmethod(proxy))
            elif isinstance(raw, classmethod):
                proxy = self.trace(raw.__func__, owner=owner, name=name)
                setattr(target, name, classmethod(proxy))
            else:
                _require_callable(raw, name)
                proxy = self.trace(raw, owner=owner, name=name)
                setattr(target, name, proxy)
            return proxy

        fn = getattr(target, name)
        _require_callable(fn, name)
        if isinstance(target, ModuleType):
            owner = target.__name__
        else:
            owner = type(target).__name__
        proxy = self.trace(fn, owner=owner, name=name)
        setattr(target, name, proxy)
        return proxy

    def trace(self, fn: Callable, owner: str | None = None, name: str | None = None) -> Callable:
        """
        Return a traced proxy for `fn` without touching any object.

        Below DEBUG the proxy is a plain passthrough. At DEBUG each call is
        bracketed by exactly one collapsed group, even when `fn` raises.
        """
        _require_callable(fn, name or fn)
        method = name or getattr(fn, "__name__", type(fn).__name__)
        owner_name = _owner_of(fn) if owner is None else owner

        @functools.wraps(fn)
        def proxy(*args, **kwargs):
            if not self.is_enabled_for(Severity.DEBUG):
                return fn(*args, **kwargs)
            return self._traced_call(fn, owner_name, method, args, kwargs)

        setattr(proxy, TRACED_ATTR, self.name)
        return proxy

    def traced(self, fn: Callable | None = None, *, name: str | None = None):
        """
        Decorator form of trace().

            @log.traced
            def load(path): ...

            @log.traced(name="load_config")
            def load(path): ...
        """
        if fn is None:
            return lambda f: self.trace(f, name=name)
        return self.trace(fn, name=name)

    def _traced_call(self, fn: Callable, owner: str, method: str, args: tuple, kwargs: dict) -> Any:
        console = self.console
        envelope = TraceEnvelope(
            logger=self.name,
            owner=owner,
            method=method,
            call_site=self.call_site.locate(),
            args=args,
            kwargs=kwargs,
        )
        timed = self.options.time
        timer = self.formatter.timer(envelope)

        console_call(console, "group_collapsed", self.formatter.label(envelope))
        closed = False
        try:
            console_call(console, "debug", "arguments", envelope.arguments)
            if timed:
                console_call(console, "time", timer)
            started = time.perf_counter()
            try:
                result = fn(*args, **kwargs)
            except Exception as exc:
                if timed:
                    envelope.elapsed = time.perf_counter() - started
                envelope.error = exc
                envelope.stack = traceback.format_exc()
                self._traces.append(envelope)
                # The group is closed before the failure is reported
                self._close_trace(timer, timed)
                closed = True
                console_call(console, "error", self.formatter.error(envelope), envelope.stack)
                if self.options.errors == "raise":
                    raise
                return None

            if timed:
                envelope.elapsed = time.perf_counter() - started
            envelope.result = result
            self._traces.append(envelope)
            if _truthy(result):
                console_call(console, "info", "return", result)
            return result
        finally:
            if not closed:
                self._close_trace(timer, timed)

    def _close_trace(self, timer: str, timed: bool) -> None:
        if timed:
            console_call(self.console, "time_end", timer)
        console_call(self.console, "group_end")

    def recent_traces(self, n: int = 100) -> list[TraceEnvelope]:
        """Envelopes of the last traced calls, oldest first."""
        return list(self._traces)[-n:]

    def _traces_already(self, fn: Any) -> bool:
        inner = getattr(fn, "__func__", fn)
        return getattr(inner, TRACED_ATTR, None) == self.name


# ── Helpers ───────────────────────────────────────────────────────────

def _is_dunder(name: Any) -> bool:
    return isinstance(name, str) and name.startswith("__") and name.endswith("__")


def _is_routine(value: Any) -> bool:
    return isinstance(value, (staticmethod, classmethod)) or inspect.isroutine(value)


def _is_traceable(value: Any) -> bool:
    return _is_routine(value) or (callable(value) and not isinstance(value, type))


def _is_plain_instance(value: Any) -> bool:
    """Instances of user classes; not classes, modules, callables or our own objects."""
    if isinstance(value, (type, ModuleType)) or callable(value):
        return False
    if not hasattr(value, "__dict__"):
        return False
    module = type(value).__module__ or ""
    if module == "builtins" or module == "logtrail" or module.startswith("logtrail."):
        return False
    return True


def _is_aggregate(value: Any) -> bool:
    return isinstance(value, (dict, list, tuple)) or _is_plain_instance(value)


def _members(target: Any) -> list[tuple[Any, Any]]:
    """Own (name, value) pairs of `target` that attach() should look at."""
    if isinstance(target, dict):
        return [(k, v) for k, v in list(target.items()) if not _is_dunder(k)]
    if isinstance(target, (list, tuple)):
        return list(enumerate(target))
    if isinstance(target, type):
        return [
            (k, v) for k, v in list(vars(target).items())
            if not _is_dunder(k) and _is_routine(v)
        ]
    if isinstance(target, ModuleType):
        return [
            (k, v) for k, v in list(vars(target).items())
            if not _is_dunder(k) and inspect.isfunction(v)
            and v.__module__ == target.__name__
        ]
    if not _is_plain_instance(target):
        return []

    members = [(k, v) for k, v in list(vars(target).items()) if not _is_dunder(k)]
    own = {k for k, _ in members}
    for name in dir(type(target)):
        if _is_dunder(name) or name in own:
            continue
        raw = inspect.getattr_static(target, name, None)
        if _is_routine(raw):
            members.append((name, getattr(target, name)))
    return members


def _owner_of(fn: Callable) -> str:
    bound = getattr(fn, "__self__", None)
    if bound is not None and not isinstance(bound, ModuleType):
        return bound.__name__ if isinstance(bound, type) else type(bound).__name__
    parts = getattr(fn, "__qualname__", "").split(".")
    if len(parts) > 1 and parts[-2] != "<locals>":
        return parts[-2]
    return ""


def _require_callable(fn: Any, name: Any) -> None:
    if not callable(fn):
        raise InvalidArgument(f"'{name}' is not callable and cannot be traced")


def _truthy(value: Any) -> bool:
    try:
        return bool(value)
    except Exception:
        # Ambiguous truth value (arrays, frames): show it
        return True
