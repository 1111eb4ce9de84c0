"""
Call-site hints for trace labels.

Recovering where an instrumented method was called from depends on what
the interpreter exposes about its stack, so it sits behind a small
capability interface. Providers must never raise: when no location can be
determined they return "".
"""

import inspect
import os
from abc import ABC, abstractmethod


class CallSiteProvider(ABC):
    """Returns a short "file:line in function" hint, or ""."""

    @abstractmethod
    def locate(self) -> str: ...


class NullCallSite(CallSiteProvider):
    """Call-site information unavailable."""

    def locate(self) -> str:
        return ""


class FrameCallSite(CallSiteProvider):
    """
    Walks the interpreter stack to the first frame outside the skipped
    packages (this package by default) and reports its location.
    """

    def __init__(self, skip_packages: tuple[str, ...] = ("logtrail",), full_path: bool = False):
        self.skip_packages = skip_packages
        self.full_path = full_path

    def locate(self) -> str:
        try:
            return self._locate()
        except Exception:
            return ""

    def _locate(self) -> str:
        frame = inspect.currentframe()
        try:
            current = frame
            while current is not None:
                current = current.f_back
                if current is None:
                    break

                module_name = current.f_globals.get("__name__", "")
                if self._skipped(module_name):
                    continue

                filename = current.f_code.co_filename
                if not self.full_path:
                    filename = os.path.basename(filename)
                return f"{filename}:{current.f_lineno} in {current.f_code.co_name}"

            return ""
        finally:
            del frame

    def _skipped(self, module_name: str) -> bool:
        return any(
            module_name == pkg or module_name.startswith(pkg + ".")
            for pkg in self.skip_packages
        )
