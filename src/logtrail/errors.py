"""
Error types.

Only contract violations raise. Missing consoles, missing console methods
and missing override stores are degrade-to-no-op paths, not errors.
"""


class InvalidArgument(ValueError):
    """A logger name, level, option set or wrap target was malformed."""
