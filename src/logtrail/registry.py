"""
Log registry.

Maps logger names to Log instances. One Log per name: the first lookup
creates it (with options merged over the registry defaults), every later
lookup returns the same object and ignores its options.

A registry is an ordinary object. Code that needs "the" shared registry
should receive it explicitly:

    registry = LogRegistry(console=TerminalConsole(), store=MemoryLevelStore())
    cart_log = registry.log("cart", {"level": "INFO"})
    registry.set_level_all(Severity.WARN)
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import ValidationError

from logtrail.callsite import CallSiteProvider, FrameCallSite, NullCallSite
from logtrail.config import ConsoleConfig, LoggerOptions, RegistryConfig, StoreConfig
from logtrail.console import ConsoleSink, RecordingConsole, TerminalConsole
from logtrail.errors import InvalidArgument
from logtrail.levels import level_name, resolve_level
from logtrail.logger import Log
from logtrail.store import JsonFileLevelStore, LevelStore, MemoryLevelStore


class LogRegistry:
    """
    Registry of named loggers sharing one console, one override store and
    one set of default options.
    """

    def __init__(
        self,
        console: Any = None,
        store: LevelStore | None = None,
        namespace: str = "logtrail",
        defaults: LoggerOptions | dict | None = None,
        call_site: CallSiteProvider | None = None,
    ) -> None:
        if not namespace or not isinstance(namespace, str):
            raise InvalidArgument("namespace must be a non-empty string")
        self.console = console
        self.store = store
        self.namespace = namespace
        self.defaults = _validate_options(LoggerOptions(), defaults)
        self.call_site = call_site or NullCallSite()
        self._logs: dict[str, Log] = {}

    # ── Construction from config ──────────────────────────────────

    @classmethod
    def from_config(cls, config: RegistryConfig | dict) -> LogRegistry:
        """Build a registry (console, store, call site, loggers) from config."""
        if not isinstance(config, RegistryConfig):
            try:
                config = RegistryConfig.from_dict(config)
            except ValidationError as exc:
                raise InvalidArgument(f"Invalid registry config: {exc}") from exc

        registry = cls(
            console=_build_console(config.console or ConsoleConfig()),
            store=_build_store(config.store or StoreConfig()),
            namespace=config.namespace,
            defaults=config.defaults,
            call_site=FrameCallSite() if config.call_site else NullCallSite(),
        )
        registry.configure(config)
        return registry

    @classmethod
    def from_yaml(cls, path: str | Path) -> LogRegistry:
        """Load a RegistryConfig from YAML and build a registry from it."""
        try:
            config = RegistryConfig.from_yaml(path)
        except ValidationError as exc:
            raise InvalidArgument(f"Invalid registry config in {path}: {exc}") from exc
        return cls.from_config(config)

    def configure(self, config: RegistryConfig | dict) -> None:
        """
        Apply defaults, pre-declared loggers and an optional broadcast level.

        Console, store and namespace are fixed at construction and are not
        touched here. Loggers that already exist keep their options.
        """
        if not isinstance(config, RegistryConfig):
            try:
                config = RegistryConfig.from_dict(config)
            except ValidationError as exc:
                raise InvalidArgument(f"Invalid registry config: {exc}") from exc

        if "defaults" in config.model_fields_set:
            self.defaults = config.defaults

        for name, options in (config.loggers or {}).items():
            self.get_or_create(name, options)

        if config.level is not None:
            self.set_level_all(config.level)

    # ── Lookup ────────────────────────────────────────────────────

    def get_or_create(self, name: str, options: LoggerOptions | dict | None = None) -> Log:
        """
        Get the logger called `name`, creating it on first use.

        `options` only matter on creation; later lookups ignore them.

        Raises:
            InvalidArgument: empty or non-string name, or invalid options
                for a logger that does not exist yet.
        """
        if not name or not isinstance(name, str):
            raise InvalidArgument("provide the name of the log to create or get")

        existing = self._logs.get(name)
        if existing is not None:
            return existing

        log = Log(
            name,
            options=_validate_options(self.defaults, options),
            console=self.console,
            store=self.store,
            namespace=self.namespace,
            call_site=self.call_site,
        )
        self._logs[name] = log
        return log

    log = get_or_create

    def has(self, name: str) -> bool:
        return name in self._logs

    def names(self) -> list[str]:
        return sorted(self._logs)

    @property
    def count(self) -> int:
        return len(self._logs)

    # ── Level Management ──────────────────────────────────────────

    def set_level_all(self, level: int | float | str) -> None:
        """
        Set the level of every registered logger.

        The level is validated before any logger is touched, so a rejected
        call leaves every logger as it was.

        Raises:
            InvalidArgument: level missing or not numeric.
        """
        resolved = resolve_level(level)
        for log in self._logs.values():
            log.set_level(resolved)

    set_level = set_level_all

    # ── Status ────────────────────────────────────────────────────

    def status(self) -> dict:
        """Current registry state for display."""
        return {
            "namespace": self.namespace,
            "console": type(self.console).__name__ if self.console is not None else None,
            "store": type(self.store).__name__ if self.store is not None else None,
            "defaults": self.defaults.model_dump(),
            "loggers": {
                name: {
                    "level": log.get_level(),
                    "level_name": _safe_level_name(log.get_level()),
                    "time": log.options.time,
                    "errors": log.options.errors,
                    "persisted": self.store is not None and self.store.get(log.key) is not None,
                }
                for name, log in sorted(self._logs.items())
            },
        }


# ── Helpers ───────────────────────────────────────────────────────────

def _validate_options(base: LoggerOptions, options: LoggerOptions | dict | None) -> LoggerOptions:
    try:
        return base.merged(options)
    except ValidationError as exc:
        raise InvalidArgument(f"Invalid logger options: {exc}") from exc


def _safe_level_name(level: Any) -> str:
    try:
        return level_name(level)
    except (TypeError, ValueError):
        return str(level)


def _build_console(cfg: ConsoleConfig) -> ConsoleSink | None:
    if cfg.type == "terminal":
        return TerminalConsole(color=cfg.color, indent=cfg.indent)
    if cfg.type == "recording":
        return RecordingConsole(ring_buffer_size=cfg.ring_buffer_size)
    return None


def _build_store(cfg: StoreConfig) -> LevelStore | None:
    if cfg.type == "memory":
        return MemoryLevelStore()
    if cfg.type == "file":
        return JsonFileLevelStore(cfg.path)
    return None
