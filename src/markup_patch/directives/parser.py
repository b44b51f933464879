# src/markup_patch/directives/parser.py

import logging
import re
from time import monotonic

from markup_patch.observability import names
from markup_patch.observability.base import MetricsHook, NoOpMetricsHook
from markup_patch.tokenizer import (
    join_sections,
    normalize_newlines,
    read_headers,
    split_sections,
    strip_header_lines,
    unquote,
)

from .models import (
    DEFAULT_COMPONENT_NAMES,
    ClassificationHint,
    ComponentKind,
    Directive,
    InsertPosition,
    OperationKind,
)
from .scrubber import scrub

logger = logging.getLogger(__name__)

HEADER_KEYS = (
    "OPERATION",
    "POSITION",
    "TARGET",
    "SELECTOR",
    "COMPONENT_TYPE",
    "COMPONENT_NAME",
)

_OPERATION_LINE = re.compile(r"^[ \t]*OPERATION:", re.MULTILINE | re.IGNORECASE)
_MESSAGE = re.compile(r"MESSAGE:[ \t]*(.+?)(?=\n[ \t]*---|\n\n|\Z)", re.DOTALL)
_WORD = re.compile(r"[A-Za-z_]+")
_OPENING_FENCE = re.compile(r"\A\s*```[\w-]*[ \t]*\n?")
_CLOSING_FENCE = re.compile(r"\n?[ \t]*```[ \t]*\Z")

_OPERATION_WORDS = {
    "add": OperationKind.INSERT,
    "insert": OperationKind.INSERT,
    "modify": OperationKind.REPLACE,
    "replace": OperationKind.REPLACE,
    "delete": OperationKind.DELETE,
    "remove": OperationKind.DELETE,
    "replace_all": OperationKind.REPLACE_DOCUMENT,
    "replace_document": OperationKind.REPLACE_DOCUMENT,
}


def parse_directive(
    raw_text: str,
    *,
    metrics_hook: MetricsHook = NoOpMetricsHook(),
) -> Directive | None:
    """Parse a complete model response into a Directive.

    Expected layout::

        MESSAGE: what was done
        ---
        OPERATION: add|modify|delete|replace_all
        POSITION: start|end|before|after
        TARGET: <selector>
        SELECTOR: <selector>
        ---
        <markup fragment>

    Returns:
        The directive, or None when there is no OPERATION header or the
        operation needs a fragment and none survived scrubbing.
    """
    start = monotonic()
    directive = _parse(normalize_newlines(raw_text))

    elapsed_ms = 1000 * (monotonic() - start)
    metrics_hook.record_latency(names.DIRECTIVE_PARSE_DURATION, elapsed_ms)
    metrics_hook.increment(names.DIRECTIVE_PARSE_TOTAL)
    if directive is None:
        metrics_hook.increment(names.DIRECTIVE_PARSE_FAILURES_TOTAL)
    return directive


def extract_message(text: str) -> str:
    match = _MESSAGE.search(text)
    return match.group(1).strip() if match else ""


def strip_fences(text: str) -> str:
    text = _OPENING_FENCE.sub("", text, count=1)
    return _CLOSING_FENCE.sub("", text, count=1).strip()


def _parse(text: str) -> Directive | None:
    sections = split_sections(text)
    header_index = next(
        (i for i, section in enumerate(sections) if _OPERATION_LINE.search(section)),
        None,
    )
    if header_index is None:
        logger.debug("No OPERATION header found")
        return None

    header_section = sections[header_index]
    headers = read_headers(header_section, HEADER_KEYS)

    operation = _OPERATION_WORDS.get(_first_word(headers.get("OPERATION", "")))
    if operation is None:
        logger.debug("Unknown operation: %r", headers.get("OPERATION"))
        return None

    if header_index + 1 < len(sections):
        fragment = join_sections(sections[header_index + 1 :])
    else:
        # Second separator missing; the markup follows the headers directly
        fragment = strip_header_lines(header_section, HEADER_KEYS + ("MESSAGE",))
    fragment = scrub(strip_fences(fragment))

    if not fragment and operation is not OperationKind.DELETE:
        logger.debug("Empty fragment for %s operation", operation.value)
        return None

    try:
        position = InsertPosition(_first_word(headers.get("POSITION", "")))
    except ValueError:
        position = InsertPosition.END

    return Directive(
        operation=operation,
        fragment=fragment,
        message=extract_message(text),
        position=position,
        target=unquote(headers.get("TARGET", "")) or None,
        selector=unquote(headers.get("SELECTOR", "")) or None,
        classification_hint=_classification_hint(headers),
    )


def _first_word(value: str) -> str:
    match = _WORD.match(value.strip())
    return match.group().lower() if match else ""


def _classification_hint(headers: dict[str, str]) -> ClassificationHint | None:
    kind = _first_word(headers.get("COMPONENT_TYPE", ""))
    if kind not in (ComponentKind.HEADER.value, ComponentKind.FOOTER.value):
        return None

    component_kind = ComponentKind(kind)
    name = unquote(headers.get("COMPONENT_NAME", ""))
    return ClassificationHint(
        kind=component_kind,
        suggested_name=name or DEFAULT_COMPONENT_NAMES[component_kind],
    )
