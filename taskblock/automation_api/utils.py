"""Utility functions for the automation bridge."""

# Order matters: backslashes first so later escapes are not doubled.
_SCRIPT_ESCAPES = (
    ("\\", "\\\\"),
    ('"', '\\"'),
    ("'", "\\'"),
    ("\n", "\\n"),
    ("\r", "\\r"),
)


def escape_script_string(text: str) -> str:
    """Escape *text* for embedding in a quoted JavaScript string literal.

    The result is safe between either ``"`` or ``'`` delimiters and the
    literal evaluates back to *text*.
    """
    if not text:
        return ""
    for raw, escaped in _SCRIPT_ESCAPES:
        text = text.replace(raw, escaped)
    return text
