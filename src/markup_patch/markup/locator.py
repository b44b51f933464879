# src/markup_patch/markup/locator.py

import logging
import re
from dataclasses import dataclass

from markup_patch.config import DEFAULT_CONFIG, PatchConfig

from .selector import compile_selector

logger = logging.getLogger(__name__)

_OPEN_TAG_NAME = re.compile(r"<([A-Za-z][\w:-]*)")


@dataclass(frozen=True)
class LocatedElement:
    """Span of a complete element inside a document.

    ``end`` is exclusive and includes the closing tag, so
    ``document[start:end] == text``.
    """

    start: int
    end: int
    text: str


def locate_element(
    document: str,
    start: int,
    open_tag: str,
    *,
    config: PatchConfig = DEFAULT_CONFIG,
) -> LocatedElement | None:
    """Find the full element whose opening tag starts at ``start``.

    Nested elements with the same tag name are counted so the matching
    closing tag is found, not the first one. Void and self-closed elements
    are just their opening tag.

    Returns:
        The located element, or None when the element is never closed.
    """
    name_match = _OPEN_TAG_NAME.match(open_tag)
    if not name_match:
        return None
    tag_name = name_match.group(1)

    body_start = start + len(open_tag)
    if open_tag.endswith("/>") or tag_name.lower() in config.void_tags:
        return LocatedElement(start=start, end=body_start, text=open_tag)

    escaped = re.escape(tag_name)
    open_re = re.compile(rf"<{escaped}(?=[\s/>])[^>]*>", re.IGNORECASE)
    close_re = re.compile(rf"</{escaped}\s*>", re.IGNORECASE)

    depth = 1
    pos = body_start
    while depth > 0:
        next_close = close_re.search(document, pos)
        if not next_close:
            break

        next_open = open_re.search(document, pos, next_close.start())
        if next_open:
            if not next_open.group().endswith("/>"):
                depth += 1
            pos = next_open.end()
            continue

        depth -= 1
        pos = next_close.end()

    if depth > 0:
        logger.debug("No closing tag for <%s> opened at %d", tag_name, start)
        return None

    return LocatedElement(start=start, end=pos, text=document[start:pos])


def find_element(
    document: str,
    selector: str | None,
    *,
    config: PatchConfig = DEFAULT_CONFIG,
) -> LocatedElement | None:
    """Locate the first element in ``document`` matching ``selector``."""
    pattern = compile_selector(selector or "")
    if pattern is None:
        return None

    match = pattern.search(document)
    if not match:
        logger.debug("Selector %r matched nothing", selector)
        return None

    return locate_element(document, match.start(), match.group(), config=config)
