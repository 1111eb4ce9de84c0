"""
Pydantic configuration schemas for logtrail.

Everything is optional with sensible defaults: an empty YAML document
builds a working registry (terminal console, in-memory overrides, loggers
at DEBUG with timing on).

Usage:
    config = RegistryConfig.from_yaml("logging.yaml")
    registry = LogRegistry.from_config(config)
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from logtrail.levels import Severity, parse_level


ErrorPolicy = Literal["swallow", "raise"]


# ═══════════════════════════════════════════════════════════════════
#  Per-logger options
# ═══════════════════════════════════════════════════════════════════

class LoggerOptions(BaseModel):
    """
    Options a logger is created with.

    level:  verbosity floor (number, numeric string or level name)
    time:   emit timers around traced calls
    errors: what a traced call does when the wrapped callable raises:
            "swallow" reports the error and returns None,
            "raise" reports the error and re-raises it
    """
    level: int | float = Severity.DEBUG
    time: bool = True
    errors: ErrorPolicy = "swallow"

    @field_validator("level", mode="before")
    @classmethod
    def _resolve_level(cls, value: int | float | str) -> int | float:
        return parse_level(value)

    def merged(self, overrides: LoggerOptions | dict | None) -> LoggerOptions:
        """
        Copy of these options with `overrides` applied on top.
        Only fields the caller explicitly set take part in the merge.
        """
        if overrides is None:
            return self.model_copy()
        if not isinstance(overrides, LoggerOptions):
            overrides = LoggerOptions.model_validate(overrides)
        return self.model_copy(update=overrides.model_dump(exclude_unset=True))


# ═══════════════════════════════════════════════════════════════════
#  Collaborators
# ═══════════════════════════════════════════════════════════════════

class ConsoleConfig(BaseModel):
    type: Literal["terminal", "recording", "none"] = "terminal"
    color: bool = True                     # terminal
    indent: int = 2                        # terminal
    ring_buffer_size: int = 10000          # recording


class StoreConfig(BaseModel):
    type: Literal["memory", "file", "none"] = "memory"
    path: Optional[str] = None             # file

    @model_validator(mode="after")
    def validate_path_required(self) -> StoreConfig:
        if self.type == "file" and not self.path:
            raise ValueError("file store requires 'path'")
        return self


# ═══════════════════════════════════════════════════════════════════
#  Top-Level Registry Config
# ═══════════════════════════════════════════════════════════════════

class RegistryConfig(BaseModel):
    """
    Configuration for a LogRegistry.

    Example:
        namespace: shop
        defaults:
          level: INFO
          time: true
        console:
          type: terminal
          color: false
        store:
          type: file
          path: .logtrail-session.json
        call_site: true
        loggers:
          cart: {level: DEBUG}
          payments: {level: WARN, errors: raise}
        level: WARN        # optional broadcast after loggers exist
    """

    namespace: str = "logtrail"
    defaults: LoggerOptions = Field(default_factory=LoggerOptions)
    console: Optional[ConsoleConfig] = None
    store: Optional[StoreConfig] = None
    call_site: bool = False
    loggers: Optional[dict[str, LoggerOptions]] = None
    level: Optional[int | float] = None

    @field_validator("level", mode="before")
    @classmethod
    def _resolve_level(cls, value: int | float | str | None) -> int | float | None:
        if value is None:
            return None
        return parse_level(value)

    @field_validator("namespace")
    @classmethod
    def _namespace_not_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("namespace must be a non-empty string")
        return value

    @classmethod
    def from_yaml(cls, path: str | Path) -> RegistryConfig:
        """Load and validate from a YAML file."""
        path = Path(path)
        raw = path.read_text(encoding="utf-8")
        return cls.from_yaml_string(raw)

    @classmethod
    def from_yaml_string(cls, yaml_string: str) -> RegistryConfig:
        """Load and validate from a YAML string. An empty document is valid."""
        data = yaml.safe_load(yaml_string) or {}
        return cls.model_validate(data)

    @classmethod
    def from_dict(cls, data: dict) -> RegistryConfig:
        """Load and validate from a dict."""
        return cls.model_validate(data)

    def to_dict(self, exclude_none: bool = True) -> dict:
        return self.model_dump(exclude_none=exclude_none)
