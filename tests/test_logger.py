"""
Tests for Log printing and level management.

Covers:
- Leveled printing: floor filtering, "[name] msg" prefix, forwarded extras
- Missing console / missing console methods
- set_level / get_level read-through and write-through
- reset_level, is_enabled_for, key naming
"""

import pytest

from logtrail.config import LoggerOptions
from logtrail.console import RecordingConsole
from logtrail.errors import InvalidArgument
from logtrail.levels import Severity
from logtrail.logger import Log
from logtrail.store import MemoryLevelStore


@pytest.fixture
def console():
    return RecordingConsole()


@pytest.fixture
def store():
    return MemoryLevelStore()


@pytest.fixture
def log1(console, store):
    log = Log("log1", console=console, store=store)
    log.set_level(Severity.DEBUG)
    return log


# ═══════════════════════════════════════════════════════════════════
#  Construction
# ═══════════════════════════════════════════════════════════════════

class TestLogConstruction:
    def test_defaults(self):
        log = Log("plain")
        assert log.level == Severity.DEBUG
        assert log.options.time is True
        assert log.options.errors == "swallow"

    def test_options_level(self):
        log = Log("quiet", options=LoggerOptions(level="WARN"))
        assert log.level == Severity.WARN

    def test_empty_name_rejected(self):
        with pytest.raises(InvalidArgument):
            Log("")

    def test_key(self):
        assert Log("svc", namespace="shop").key == "shop:svc:level"


# ═══════════════════════════════════════════════════════════════════
#  Leveled printing
# ═══════════════════════════════════════════════════════════════════

class TestLeveledPrinting:
    @pytest.mark.parametrize("method", ["debug", "info", "warn", "error"])
    def test_writes_to_matching_console_method(self, log1, console, method):
        getattr(log1, method)("testing")
        assert console.count == 1
        call = console.calls[0]
        assert call.method == method
        assert call.args == ("[log1] testing", [])

    @pytest.mark.parametrize(
        "method,level",
        [("debug", 2), ("info", 3), ("warn", 4), ("error", 5)],
    )
    def test_dropped_below_floor(self, log1, console, method, level):
        log1.set_level(level)
        getattr(log1, method)("testing")
        assert console.count == 0

    def test_none_suppresses_all(self, log1, console):
        log1.set_level(Severity.NONE)
        log1.debug("a")
        log1.info("b")
        log1.warn("c")
        log1.error("d")
        assert console.count == 0

    def test_only_first_extra_argument_forwarded(self, log1, console):
        log1.info("shown", 1, 2)
        assert console.calls[0].args == ("[log1] shown", [1])

    def test_single_extra_argument(self, log1, console):
        log1.warn("careful", {"k": 1})
        assert console.calls[0].args == ("[log1] careful", [{"k": 1}])

    def test_non_string_message(self, log1, console):
        log1.error(404)
        assert console.calls[0].args[0] == "[log1] 404"

    def test_warning_alias(self, log1, console):
        log1.warning("w")
        assert console.calls[0].method == "warn"

    def test_no_console_is_noop(self, store):
        log = Log("silent", store=store)
        log.error("nobody listens")

    def test_missing_console_method_is_noop(self):
        class ErrorsOnly:
            def __init__(self):
                self.seen = []

            def error(self, *args):
                self.seen.append(args)

        sink = ErrorsOnly()
        log = Log("partial", console=sink)
        log.info("dropped")
        log.error("kept")
        assert sink.seen == [("[partial] kept", [])]

    def test_svc_scenario(self, console):
        svc = Log("svc", options=LoggerOptions(level=Severity.INFO), console=console)
        svc.debug("hidden")
        assert console.count == 0
        svc.info("shown", 1, 2)
        assert console.count == 1
        assert console.calls[0].method == "info"
        assert console.calls[0].args == ("[svc] shown", [1])


# ═══════════════════════════════════════════════════════════════════
#  Level read-through / write-through
# ═══════════════════════════════════════════════════════════════════

class TestLevelPersistence:
    def test_set_level_writes_store(self, log1, store):
        log1.set_level(3)
        assert store.get("logtrail:log1:level") == 3
        assert log1.level == 3

    def test_store_wins_over_memory(self, log1, store):
        store.set(log1.key, Severity.ERROR)
        assert log1.level == Severity.DEBUG
        assert log1.get_level() == Severity.ERROR

    def test_override_outlives_logger_object(self, console, store):
        Log("svc", console=console, store=store).set_level(Severity.ERROR)
        again = Log("svc", console=console, store=store)
        assert again.level == Severity.DEBUG
        assert again.get_level() == Severity.ERROR
        again.info("hidden")
        assert console.count == 0

    def test_no_store_memory_only(self):
        log = Log("mem")
        log.set_level(Severity.WARN)
        assert log.get_level() == Severity.WARN

    def test_reset_level(self, log1, store):
        log1.level = Severity.INFO
        store.set(log1.key, Severity.ERROR)
        log1.reset_level()
        assert log1.get_level() == Severity.INFO

    def test_reset_level_without_store(self):
        log = Log("mem")
        log.reset_level()
        assert log.get_level() == Severity.DEBUG

    def test_direct_set_level_not_validated(self, log1):
        log1.set_level(7)
        assert log1.get_level() == 7

    def test_is_enabled_for(self, log1):
        log1.set_level(Severity.WARN)
        assert log1.is_enabled_for(Severity.ERROR)
        assert not log1.is_enabled_for(Severity.INFO)
