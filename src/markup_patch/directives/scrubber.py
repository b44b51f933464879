# src/markup_patch/directives/scrubber.py

"""Removal of protocol tokens that leaked into a markup payload.

Models occasionally repeat parts of the response envelope inside the
fragment: a MESSAGE line, the OPERATION header block, separator lines, or
placeholder comments. None of that belongs in the document.
"""

import re

_LEAKED_MESSAGE = re.compile(
    # Continuation lines are taken only when a separator line closes them
    r"^[ \t]*MESSAGE:[^\n]*"
    r"(?:\n(?![ \t]*(?:-{3,}[ \t]*$|<|$))[^\n]*)*\n(?=[ \t]*-{3,}[ \t]*$)"
    r"|^[ \t]*MESSAGE:[^\n]*(?:\n|\Z)",
    re.MULTILINE,
)

_LEAKED_HEADERS = re.compile(
    r"^[ \t]*(?:OPERATION|POSITION|TARGET|SELECTOR|COMPONENT_TYPE|COMPONENT_NAME)"
    r":[^\n]*(?:\n|\Z)",
    re.MULTILINE,
)

_SEPARATOR_LINES = re.compile(r"^[ \t]*-{3,}[ \t]*(?:\n|\Z)", re.MULTILINE)

_PLACEHOLDER_COMMENTS = [
    re.compile(r"<!--\s*No code generated.*?-->", re.IGNORECASE | re.DOTALL),
    re.compile(r"<!--\s*Kein Code generiert.*?-->", re.IGNORECASE | re.DOTALL),
    re.compile(r"<!--\s*Bitte wähle.*?-->", re.IGNORECASE | re.DOTALL),
    re.compile(r"<!--\s*NAV ENTFERNT\s*-->", re.IGNORECASE),
    re.compile(
        r"<!--\s*(?:BEGIN|START|END)(?:\s+OF)?\s+(?:SECTION|HTML|CODE|FRAGMENT)\b.*?-->",
        re.IGNORECASE | re.DOTALL,
    ),
]

_EXCESS_BLANK_LINES = re.compile(r"\n(?:[ \t]*\n){3,}")


def scrub(fragment: str) -> str:
    """Strip leaked headers, separators and placeholder comments.

    Idempotent: passes repeat until nothing changes, so
    ``scrub(scrub(x)) == scrub(x)``. Text without leaked tokens only loses
    surrounding whitespace.
    """
    current = fragment
    while True:
        cleaned = _scrub_once(current)
        if cleaned == current:
            return cleaned
        current = cleaned


def _scrub_once(text: str) -> str:
    text = _LEAKED_MESSAGE.sub("", text)
    text = _LEAKED_HEADERS.sub("", text)
    text = _SEPARATOR_LINES.sub("", text)
    for pattern in _PLACEHOLDER_COMMENTS:
        text = pattern.sub("", text)
    text = _EXCESS_BLANK_LINES.sub("\n\n", text)
    return text.strip()
