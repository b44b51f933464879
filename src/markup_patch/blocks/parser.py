# src/markup_patch/blocks/parser.py

import logging
import re
from collections.abc import Iterable
from typing import Any

import yaml

from markup_patch.directives.models import Directive, OperationKind
from markup_patch.directives.parser import extract_message, parse_directive
from markup_patch.directives.scrubber import scrub
from markup_patch.observability import names
from markup_patch.observability.base import MetricsHook, NoOpMetricsHook
from markup_patch.tokenizer import iter_blocks, normalize_newlines

from .models import (
    UPDATE_TYPES,
    ComponentUpdate,
    EntryUpdate,
    MenuItem,
    MenuUpdate,
    PageUpdate,
    ParseResult,
    ReferenceUpdate,
    SectionUpdate,
    TokenUpdate,
)

logger = logging.getLogger(__name__)

_FENCE_MARKERS = re.compile(r"```(?:html)?[ \t]*", re.IGNORECASE)
_HTML_CODE_BLOCK = re.compile(r"```html\s*(.*?)```", re.DOTALL | re.IGNORECASE)
_SELECTOR_ID = re.compile(r"#([A-Za-z0-9_-]+)")

# Lenient form for token blocks that do not follow the line layout
_LOOSE_TOKEN = re.compile(
    r"TOKEN_UPDATE:.*?id:\s*[\"']?([^\"'\n]+?)[\"']?\s*\n"
    r".*?value:\s*[\"']?([^\"'\n]+?)[\"']?\s*(?:\n|\Z)",
    re.DOTALL | re.IGNORECASE,
)

_MENU_ITEM = re.compile(
    r"-\s*label:\s*[\"']?([^\"'\n,]+)[\"']?"
    r"(?:,\s*page:\s*[\"']?@?([^\"'\n,]+)[\"']?)?"
    r"(?:,\s*url:\s*[\"']?([^\"'\n,]+)[\"']?)?"
    r"(?:,\s*position:\s*(\d+))?",
    re.IGNORECASE,
)

_ENTRY_FIELD = re.compile(r"^[ \t]+(\w+):[ \t]*[\"']?(.+?)[\"']?[ \t]*$", re.MULTILINE)


def parse_updates(
    response: str,
    *,
    metrics_hook: MetricsHook = NoOpMetricsHook(),
) -> ParseResult:
    """Extract every resource update from a model response.

    Component, section, token, menu and entry blocks are parsed
    independently. A response without any of them is read as a page
    directive; failing that, a fenced html block replaces the whole page.
    """
    text = normalize_newlines(response)
    updates: list[ReferenceUpdate] = [
        *parse_component_updates(text),
        *parse_section_updates(text),
        *parse_token_updates(text),
        *parse_menu_updates(text),
        *parse_entry_updates(text),
    ]
    has_reference_updates = bool(updates)

    if not has_reference_updates:
        page = _parse_page_update(text, metrics_hook)
        if page is not None:
            updates.append(page)

    for update in updates:
        metrics_hook.increment(
            names.BLOCKS_PARSED_TOTAL, labels={"kind": update.type}
        )
    logger.debug("Parsed %d updates", len(updates))

    return ParseResult(
        message=extract_message(text),
        updates=updates,
        has_reference_updates=has_reference_updates,
    )


def parse_component_updates(text: str) -> list[ComponentUpdate]:
    updates = []
    for block in iter_blocks(text, "COMPONENT_UPDATE", ("id", "type")):
        html = clean_html(block.body)
        if not html:
            continue
        component_type = block.headers.get("type", "").lower()
        if component_type not in ("header", "footer"):
            component_type = "header"
        updates.append(
            ComponentUpdate(
                id=block.headers.get("id", ""),
                component_type=component_type,
                html=html,
            )
        )
    return updates


def parse_section_updates(text: str) -> list[SectionUpdate]:
    updates = []
    for block in iter_blocks(text, "SECTION_UPDATE", ("selector",)):
        html = clean_html(block.body)
        if not html:
            continue
        selector = block.headers.get("selector", "")
        id_match = _SELECTOR_ID.search(selector)
        updates.append(
            SectionUpdate(
                id=id_match.group(1) if id_match else selector,
                selector=selector,
                html=html,
            )
        )
    return updates


def parse_token_updates(text: str) -> list[TokenUpdate]:
    updates = [
        TokenUpdate(id=block.headers["id"], value=block.headers["value"])
        for block in iter_blocks(text, "TOKEN_UPDATE", ("id", "value"))
        if block.headers.get("id") and block.headers.get("value")
    ]
    if updates:
        return updates

    for match in _LOOSE_TOKEN.finditer(text):
        token_id, value = match.group(1).strip(), match.group(2).strip()
        if token_id and value:
            updates.append(TokenUpdate(id=token_id, value=value))
    return updates


def parse_menu_updates(text: str) -> list[MenuUpdate]:
    updates = []
    for block in iter_blocks(text, "MENU_UPDATE", ("id", "action")):
        menu_id = block.headers.get("id")
        if not menu_id:
            continue

        action = block.headers.get("action", "").lower()
        if action not in ("add", "remove", "reorder", "update"):
            action = "update"

        items = [
            MenuItem(
                label=match.group(1).strip(),
                page=match.group(2).strip() if match.group(2) else None,
                url=match.group(3).strip() if match.group(3) else None,
                position=int(match.group(4)) if match.group(4) else None,
            )
            for match in _MENU_ITEM.finditer(block.body)
        ]
        updates.append(MenuUpdate(id=menu_id, action=action, items=items or None))
    return updates


def parse_entry_updates(text: str) -> list[EntryUpdate]:
    updates = []
    for block in iter_blocks(text, "ENTRY_UPDATE", ("id", "data")):
        entry_id = block.headers.get("id")
        data = {
            match.group(1): decode_value(match.group(2))
            for match in _ENTRY_FIELD.finditer(block.body)
        }
        if entry_id and data:
            updates.append(EntryUpdate(id=entry_id, data=data))
    return updates


def decode_value(raw: str) -> Any:
    """Decode booleans, numbers, lists and null; anything else stays a string."""
    try:
        value = yaml.safe_load(raw)
    except yaml.YAMLError:
        return raw
    if value is None or isinstance(value, (bool, int, float, list)):
        return value
    return raw


def clean_html(html: str) -> str:
    return scrub(_FENCE_MARKERS.sub("", html))


def group_updates_by_type(
    updates: Iterable[ReferenceUpdate],
) -> dict[str, list[ReferenceUpdate]]:
    grouped: dict[str, list[ReferenceUpdate]] = {kind: [] for kind in UPDATE_TYPES}
    for update in updates:
        grouped[update.type].append(update)
    return grouped


def _parse_page_update(text: str, metrics_hook: MetricsHook) -> PageUpdate | None:
    directive = parse_directive(text, metrics_hook=metrics_hook)
    if directive is not None:
        return PageUpdate(directive=directive)

    code_block = _HTML_CODE_BLOCK.search(text)
    if code_block:
        html = clean_html(code_block.group(1))
        if html:
            logger.debug("No OPERATION header, using fenced html as full page")
            return PageUpdate(
                directive=Directive(
                    operation=OperationKind.REPLACE_DOCUMENT,
                    fragment=html,
                    message=extract_message(text),
                )
            )
    return None
