# src/markup_patch/patching/applicator.py

import logging
from dataclasses import dataclass
from enum import Enum
from time import monotonic

from markup_patch.config import DEFAULT_CONFIG, PatchConfig
from markup_patch.directives.models import Directive, InsertPosition, OperationKind
from markup_patch.directives.scrubber import scrub
from markup_patch.markup.document import (
    insert_at_body_end,
    insert_at_body_start,
    is_full_document,
    narrow_to_fragment,
)
from markup_patch.markup.locator import LocatedElement, find_element
from markup_patch.observability import names
from markup_patch.observability.base import MetricsHook, NoOpMetricsHook

logger = logging.getLogger(__name__)


class PatchOutcome(str, Enum):
    """How a directive was carried out."""

    APPLIED = "applied"
    FALLBACK_TO_END = "fallback_to_end"  # BEFORE/AFTER target not found
    SELECTOR_NOT_FOUND = "selector_not_found"  # Document returned unchanged
    MISSING_SELECTOR = "missing_selector"  # Document returned unchanged


@dataclass(frozen=True)
class PatchResult:
    """New document plus a record of whether the selector resolved."""

    document: str
    outcome: PatchOutcome
    located: LocatedElement | None = None

    @property
    def matched(self) -> bool:
        return self.outcome is PatchOutcome.APPLIED


def apply_operation(
    document: str,
    directive: Directive,
    *,
    config: PatchConfig = DEFAULT_CONFIG,
    metrics_hook: MetricsHook = NoOpMetricsHook(),
) -> str:
    """Apply ``directive`` to ``document`` and return the new document."""
    return patch_document(
        document, directive, config=config, metrics_hook=metrics_hook
    ).document


def patch_document(
    document: str,
    directive: Directive,
    *,
    config: PatchConfig = DEFAULT_CONFIG,
    metrics_hook: MetricsHook = NoOpMetricsHook(),
) -> PatchResult:
    """Apply ``directive`` to ``document``.

    Never raises for an unmatched selector: REPLACE and DELETE leave the
    document untouched, BEFORE/AFTER inserts fall back to the end of the
    body. ``PatchResult.outcome`` tells the caller which of these happened.

    Spliced-in markup is scrubbed once more before it lands; text outside
    the edited span, including the document's own leading and trailing
    whitespace, is kept byte for byte.

    Args:
        document: Current document text. Not modified.
        directive: Parsed directive. Not modified.
        config: Tag tables used by the locator and the full-document guard.
        metrics_hook: Optional metrics hook for observability.

    Returns:
        PatchResult carrying the new document text.
    """
    start = monotonic()

    if directive.operation is OperationKind.REPLACE_DOCUMENT:
        result = PatchResult(scrub(directive.fragment), PatchOutcome.APPLIED)
    elif directive.operation is OperationKind.INSERT:
        result = _insert(document, directive, config)
    elif directive.operation is OperationKind.REPLACE:
        result = _replace(document, directive, config)
    else:
        result = _delete(document, directive, config)

    elapsed_ms = 1000 * (monotonic() - start)
    metrics_hook.record_latency(names.PATCH_APPLY_DURATION, elapsed_ms)
    metrics_hook.increment(
        names.PATCH_OPERATIONS_TOTAL,
        labels={
            "operation": directive.operation.value,
            "outcome": result.outcome.value,
        },
    )
    metrics_hook.record_gauge(names.PATCH_DOCUMENT_SIZE, len(result.document))
    if result.outcome is not PatchOutcome.APPLIED:
        metrics_hook.increment(
            names.SELECTOR_MISSES_TOTAL,
            labels={"operation": directive.operation.value},
        )
    return result


def _insert(document: str, directive: Directive, config: PatchConfig) -> PatchResult:
    fragment = directive.fragment
    if is_full_document(fragment):
        # Never nest a whole page inside the body
        fragment = narrow_to_fragment(fragment, config=config)
    fragment = scrub(fragment)
    if not fragment:
        logger.debug("Nothing left to insert after scrubbing")
        return PatchResult(document, PatchOutcome.APPLIED)

    position = directive.position
    if position is InsertPosition.START:
        return PatchResult(
            insert_at_body_start(document, fragment), PatchOutcome.APPLIED
        )

    if position in (InsertPosition.BEFORE, InsertPosition.AFTER):
        element = find_element(document, directive.target, config=config)
        if element is not None:
            if position is InsertPosition.BEFORE:
                patched = _splice(document, element, f"{fragment}\n{element.text}")
            else:
                patched = _splice(document, element, f"{element.text}\n{fragment}")
            return PatchResult(patched, PatchOutcome.APPLIED, element)

        logger.debug(
            "Insert target %r not found, appending to end", directive.target
        )
        return PatchResult(
            insert_at_body_end(document, fragment), PatchOutcome.FALLBACK_TO_END
        )

    return PatchResult(insert_at_body_end(document, fragment), PatchOutcome.APPLIED)


def _replace(document: str, directive: Directive, config: PatchConfig) -> PatchResult:
    if not directive.selector:
        logger.debug("Replace without selector, document unchanged")
        return PatchResult(document, PatchOutcome.MISSING_SELECTOR)

    element = find_element(document, directive.selector, config=config)
    if element is None:
        logger.debug("Replace selector %r not found", directive.selector)
        return PatchResult(document, PatchOutcome.SELECTOR_NOT_FOUND)

    patched = _splice(document, element, scrub(directive.fragment))
    return PatchResult(patched, PatchOutcome.APPLIED, element)


def _delete(document: str, directive: Directive, config: PatchConfig) -> PatchResult:
    if not directive.selector:
        logger.debug("Delete without selector, document unchanged")
        return PatchResult(document, PatchOutcome.MISSING_SELECTOR)

    element = find_element(document, directive.selector, config=config)
    if element is None:
        logger.debug("Delete selector %r not found", directive.selector)
        return PatchResult(document, PatchOutcome.SELECTOR_NOT_FOUND)

    start, end = element.start, element.end
    if document.startswith("\n", end):
        end += 1
    elif start > 0 and document[start - 1] == "\n":
        start -= 1

    patched = document[:start] + document[end:]
    return PatchResult(patched, PatchOutcome.APPLIED, element)


def _splice(document: str, element: LocatedElement, replacement: str) -> str:
    return document[: element.start] + replacement + document[element.end :]
