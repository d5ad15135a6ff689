"""Text helpers for command parsing."""

# The whitespace set of the C locale; Unicode spaces such as U+00A0 are kept.
WHITESPACE = " \t\n\v\f\r"


def trim(s):
    """Return ``s`` without leading and trailing ASCII whitespace."""
    return s.strip(WHITESPACE)