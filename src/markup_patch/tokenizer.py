# src/markup_patch/tokenizer.py

"""Tokenizer for the three-dash delimited block convention.

Every response grammar shares the same shape: ``KEY: value`` header lines,
``---`` separator lines, and a free-form body. The page directive grammar and
each resource grammar differ only in their keywords and header keys.
"""

import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

SEPARATOR = "---"

_SEPARATOR_LINE = re.compile(r"^[ \t]*---[ \t]*$", re.MULTILINE)
_HEADER_LINE = re.compile(
    r"^[ \t]*(?:-[ \t]*)?(?P<key>[A-Za-z_]+):[ \t]*(?P<value>.*)$"
)
# A separator, a blank line before a keyword, or the next bare block opener
_BLOCK_END = re.compile(
    r"\n[ \t]*---|\n[ \t]*\n[A-Z_]+:|^[ \t]*[A-Z][A-Z_]+:[ \t]*$", re.MULTILINE
)


@dataclass(frozen=True)
class DelimitedBlock:
    keyword: str
    headers: dict[str, str]
    body: str
    start: int
    end: int


def normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def split_sections(text: str) -> list[str]:
    """Split text on lines consisting of exactly three dashes."""
    return _SEPARATOR_LINE.split(text)


def join_sections(sections: Iterable[str]) -> str:
    return f"\n{SEPARATOR}\n".join(sections)


def read_headers(section: str, keys: Iterable[str]) -> dict[str, str]:
    """Collect ``KEY: value`` lines for the given keys.

    Keys are matched case-insensitively and returned upper-cased. The first
    occurrence of a key wins.
    """
    wanted = {key.upper() for key in keys}
    headers: dict[str, str] = {}
    for line in section.splitlines():
        match = _HEADER_LINE.match(line)
        if not match:
            continue
        key = match.group("key").upper()
        if key in wanted and key not in headers:
            headers[key] = match.group("value").strip()
    return headers


def strip_header_lines(section: str, keys: Iterable[str]) -> str:
    wanted = {key.upper() for key in keys}
    kept = []
    for line in section.splitlines():
        match = _HEADER_LINE.match(line)
        if match and match.group("key").upper() in wanted:
            continue
        kept.append(line)
    return "\n".join(kept)


def unquote(value: str) -> str:
    """Drop one layer of surrounding quotes or backticks."""
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'`":
        return value[1:-1].strip()
    return value


def iter_blocks(
    text: str,
    keyword: str,
    header_keys: Iterable[str],
) -> Iterator[DelimitedBlock]:
    """Yield every ``KEYWORD:`` block in ``text``.

    The keyword line is followed by lower-case ``key: value`` header lines
    drawn from ``header_keys``. A header with an empty value, a ``---`` line,
    or any other line opens the body. The body runs to the next ``---`` line,
    a blank line followed by another upper-case keyword, or the end of text.
    """
    keys = {key.lower() for key in header_keys}
    opener = re.compile(
        rf"^[ \t]*{re.escape(keyword)}:[ \t]*$", re.MULTILINE | re.IGNORECASE
    )

    pos = 0
    while True:
        match = opener.search(text, pos)
        if not match:
            return

        cursor = match.end() + 1
        headers: dict[str, str] = {}
        while cursor < len(text):
            line_end = text.find("\n", cursor)
            if line_end == -1:
                line_end = len(text)
            line = text[cursor:line_end]

            header = _HEADER_LINE.match(line)
            if not header or header.group("key").lower() not in keys:
                if _SEPARATOR_LINE.fullmatch(line):
                    cursor = line_end + 1
                break

            headers[header.group("key").lower()] = unquote(header.group("value"))
            cursor = line_end + 1
            if not header.group("value").strip():
                break

        body_start = min(cursor, len(text))
        end_match = _BLOCK_END.search(text, body_start)
        body_end = end_match.start() if end_match else len(text)

        yield DelimitedBlock(
            keyword=keyword.upper(),
            headers=headers,
            body=text[body_start:body_end],
            start=match.start(),
            end=body_end,
        )
        pos = max(body_end, match.end())
