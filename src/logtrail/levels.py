"""
Severity scale and the comparison rule used everywhere else.

A logger's level is a floor: a message at severity X prints iff
X >= the logger's current level. NONE sits above every real severity,
so a logger at NONE prints nothing.
"""

import math
from enum import IntEnum

from logtrail.errors import InvalidArgument


class Severity(IntEnum):
    """Ordered verbosity ranks. Lower is more verbose."""
    DEBUG = 1
    INFO = 2
    WARN = 3
    ERROR = 4
    NONE = 9

    @classmethod
    def from_name(cls, name: str) -> "Severity":
        """Resolve a severity from its name, case-insensitive."""
        name_upper = name.strip().upper()
        if name_upper == "WARNING":
            name_upper = "WARN"
        try:
            return cls[name_upper]
        except KeyError:
            raise InvalidArgument(
                f"Unknown level '{name}'. "
                f"Valid levels: {', '.join(m.name for m in cls)}"
            ) from None


# Map for display: level int → name string
LEVEL_NAMES: dict[int, str] = {member.value: member.name for member in Severity}


def level_name(level: int | float) -> str:
    """Get display name for a level value. Falls back to the numeric string."""
    return LEVEL_NAMES.get(level, str(level))


def resolve_level(value: int | float | str | None) -> int | float:
    """
    Validate a numeric level.

    Accepts Severity members, ints, floats and numeric strings ("2",
    "2.5"). Level names are not numbers and are rejected here; config
    files go through parse_level() instead. Known ranks come back as
    Severity members; any other number is returned as-is so custom floors
    such as 5 or 2.5 keep working.

    Raises:
        InvalidArgument: if no level was supplied or it is not numeric.
    """
    if value is None:
        raise InvalidArgument("provide a valid number for the level to set")
    if isinstance(value, bool):
        raise InvalidArgument(f"Expected a numeric level, got {value!r}")
    if isinstance(value, str):
        value = _parse_number(value)
    if isinstance(value, float):
        if math.isnan(value):
            raise InvalidArgument("provide a valid number for the level to set")
        return _as_severity(value) if value.is_integer() else value
    if isinstance(value, int):
        return _as_severity(value)
    raise InvalidArgument(
        f"Expected a numeric level, got {type(value).__name__}"
    )


def parse_level(value: int | float | str | None) -> int | float:
    """
    resolve_level() plus level names ("info", "WARNING"), for config files.
    """
    if isinstance(value, str):
        text = value.strip().upper()
        if text in Severity.__members__ or text == "WARNING":
            return Severity.from_name(text)
    return resolve_level(value)


def is_enabled(current: int | float, severity: int | float) -> bool:
    """True iff a message at `severity` passes a logger floor of `current`."""
    return severity >= current


def _parse_number(text: str) -> int | float:
    text = text.strip()
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        raise InvalidArgument(f"Expected a numeric level, got {text!r}") from None


def _as_severity(value: int | float) -> int | float:
    try:
        return Severity(int(value))
    except ValueError:
        return int(value)
