# src/markup_patch/markup/document.py

import logging
import re

from markup_patch.config import DEFAULT_CONFIG, PatchConfig

from .locator import locate_element

logger = logging.getLogger(__name__)

_BODY_OPEN = re.compile(r"<body(?=[\s>])[^>]*>", re.IGNORECASE)
_BODY_CLOSE = re.compile(r"</body\s*>", re.IGNORECASE)
_BODY_CONTENT = re.compile(
    r"<body(?=[\s>])[^>]*>(?P<content>.*)</body\s*>", re.IGNORECASE | re.DOTALL
)
_FULL_DOCUMENT = re.compile(r"<!DOCTYPE|<html(?=[\s>])", re.IGNORECASE)


def is_full_document(markup: str) -> bool:
    return bool(_FULL_DOCUMENT.search(markup))


def insert_at_body_start(document: str, fragment: str) -> str:
    """Insert right after the opening body tag, or prepend without one."""
    match = _BODY_OPEN.search(document)
    if not match:
        return _join(fragment, document)

    at = match.end()
    return document[:at] + _join_after(document, at, fragment) + document[at:]


def insert_at_body_end(document: str, fragment: str) -> str:
    """Insert right before the closing body tag, or append without one."""
    match = _BODY_CLOSE.search(document)
    if not match:
        return _join(document, fragment)

    at = match.start()
    return document[:at] + _join_before(document, at, fragment) + document[at:]


def narrow_to_fragment(
    markup: str,
    *,
    config: PatchConfig = DEFAULT_CONFIG,
) -> str:
    """Reduce an accidental full document to the part worth splicing.

    Body content wins; otherwise the top-level block elements are collected
    in order. Markup that yields neither is returned unchanged.
    """
    body = _BODY_CONTENT.search(markup)
    if body and body.group("content").strip():
        logger.debug("Narrowed full document to its body content")
        return body.group("content").strip()

    blocks = top_level_blocks(markup, config=config)
    if blocks:
        logger.debug("Narrowed full document to %d block elements", len(blocks))
        return "\n".join(blocks)

    return markup


def top_level_blocks(
    markup: str,
    *,
    config: PatchConfig = DEFAULT_CONFIG,
) -> list[str]:
    names = "|".join(re.escape(tag) for tag in config.block_tags)
    opener = re.compile(rf"<(?:{names})(?=[\s/>])[^>]*>", re.IGNORECASE)

    blocks = []
    pos = 0
    while True:
        match = opener.search(markup, pos)
        if not match:
            break
        element = locate_element(markup, match.start(), match.group(), config=config)
        if element is None:
            # Unclosed; anything after it is nested inside it
            break
        blocks.append(element.text)
        pos = element.end
    return blocks


def _join(head: str, tail: str) -> str:
    if not head:
        return tail
    if not tail:
        return head
    return f"{head}\n{tail}"


def _join_after(document: str, at: int, fragment: str) -> str:
    # Keep the document's own line breaking around the splice point
    if document.startswith("\n", at):
        return "\n" + fragment
    return fragment


def _join_before(document: str, at: int, fragment: str) -> str:
    if document[:at].endswith("\n"):
        return fragment + "\n"
    return fragment
