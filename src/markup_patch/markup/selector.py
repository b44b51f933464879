# src/markup_patch/markup/selector.py

import logging
import re

logger = logging.getLogger(__name__)

_TAG_NAME = re.compile(r"[A-Za-z][\w:-]*\Z")

# Any opening tag; the name is captured as `tag`
_ANY_TAG = r"<(?P<tag>[A-Za-z][\w:-]*)(?=[\s/>])"


def _tag(name: str) -> str:
    return rf"<(?P<tag>(?i:{re.escape(name)}))(?=[\s/>])"


def _id_attr(value: str) -> str:
    return (
        rf"[^>]*?\s(?i:id)\s*=\s*(?P<quote>[\"'])"
        rf"{re.escape(value)}(?P=quote)[^>]*>"
    )


def _class_token(name: str) -> str:
    # A whole whitespace-delimited token inside a quoted attribute value
    return rf"(?=[^\"'>]*(?<![^\s\"']){re.escape(name)}(?![^\s\"']))"


def _class_attr(classes: list[str]) -> str:
    lookaheads = "".join(_class_token(name) for name in classes)
    return rf"[^>]*?\s(?i:class)\s*=\s*[\"']{lookaheads}[^\"']*[\"'][^>]*>"


def compile_selector(selector: str) -> re.Pattern[str] | None:
    """Compile a restricted CSS selector into a pattern for its opening tag.

    Only the last space-separated token is used, so combinators and
    ancestors are ignored. Supported forms, tried in order:

    - ``#id``
    - ``.class``
    - ``tag.class1.class2`` (all classes, any order)
    - ``tag#id``
    - ``tag``

    Returns:
        A compiled pattern whose match is the element's opening tag, with the
        tag name in the ``tag`` group. None if the selector cannot be used.
    """
    parts = selector.split() if selector else []
    if not parts:
        return None
    last = parts[-1]

    if last.startswith("#"):
        element_id = last[1:]
        if not element_id:
            return None
        pattern = _ANY_TAG + _id_attr(element_id)
    elif last.startswith("."):
        classes = [c for c in last[1:].split(".") if c]
        if not classes:
            return None
        pattern = _ANY_TAG + _class_attr(classes)
    elif "." in last:
        tag, *rest = last.split(".")
        classes = [c for c in rest if c]
        if not _TAG_NAME.match(tag):
            return None
        if classes:
            pattern = _tag(tag) + _class_attr(classes)
        else:
            pattern = _tag(tag) + r"[^>]*>"
    elif "#" in last:
        tag, element_id = last.split("#", 1)
        if not _TAG_NAME.match(tag) or not element_id:
            return None
        pattern = _tag(tag) + _id_attr(element_id)
    else:
        if not _TAG_NAME.match(last):
            return None
        pattern = _tag(last) + r"[^>]*>"

    logger.debug("Compiled selector %r -> %s", selector, pattern)
    return re.compile(pattern)
