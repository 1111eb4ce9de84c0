"""
logtrail: named loggers with per-logger level floors, plus method tracing.

Not a log shipping library. Output goes to a console sink, synchronously,
for people to read.
"""

from logtrail.errors import InvalidArgument
from logtrail.levels import Severity, is_enabled, level_name, parse_level, resolve_level
from logtrail.console import ConsoleSink, TerminalConsole, RecordingConsole, ConsoleCall
from logtrail.store import LevelStore, MemoryLevelStore, JsonFileLevelStore, level_key
from logtrail.callsite import CallSiteProvider, NullCallSite, FrameCallSite
from logtrail.records import TraceEnvelope
from logtrail.formatters import TraceFormatter
from logtrail.config import LoggerOptions, RegistryConfig, ConsoleConfig, StoreConfig
from logtrail.logger import Log
from logtrail.registry import LogRegistry

__version__ = "0.1.0"

__all__ = [
    "InvalidArgument",
    "Severity",
    "is_enabled",
    "level_name",
    "parse_level",
    "resolve_level",
    "ConsoleSink",
    "TerminalConsole",
    "RecordingConsole",
    "ConsoleCall",
    "LevelStore",
    "MemoryLevelStore",
    "JsonFileLevelStore",
    "level_key",
    "CallSiteProvider",
    "NullCallSite",
    "FrameCallSite",
    "TraceEnvelope",
    "TraceFormatter",
    "LoggerOptions",
    "RegistryConfig",
    "ConsoleConfig",
    "StoreConfig",
    "Log",
    "LogRegistry",
]
