# src/markup_patch/directives/streaming.py

import logging
import re

from markup_patch.config import DEFAULT_CONFIG, PatchConfig
from markup_patch.observability import names
from markup_patch.observability.base import MetricsHook, NoOpMetricsHook
from markup_patch.tokenizer import join_sections, normalize_newlines, split_sections

from .parser import strip_fences
from .scrubber import scrub

logger = logging.getLogger(__name__)

_LEGACY_BLOCK = re.compile(r"```html[ \t]*\n(.*?)(?:```|\Z)", re.DOTALL | re.IGNORECASE)


def extract_partial(
    raw_text: str,
    *,
    config: PatchConfig = DEFAULT_CONFIG,
    metrics_hook: MetricsHook = NoOpMetricsHook(),
) -> str | None:
    """Best-effort fragment for a response that is still streaming.

    Once two separators have arrived only the text after the second one is
    used. Before that it tries everything from the first recognizable
    block-level opening tag, then the body of a fenced html block. An
    unfinished tag at the very end is dropped.

    Returns:
        Scrubbed markup, or None when nothing markup-like has arrived yet.
    """
    metrics_hook.increment(names.STREAMING_EXTRACT_TOTAL)
    text = normalize_newlines(raw_text or "")

    for candidate in _candidates(text, config):
        fragment = scrub(_drop_partial_tag(candidate))
        if fragment:
            return fragment

    logger.debug("No previewable markup in %d characters", len(text))
    return None


def _candidates(text: str, config: PatchConfig) -> list[str]:
    sections = split_sections(text)
    if len(sections) >= 3:
        # Header block is complete; only the fragment after it counts
        return [strip_fences(join_sections(sections[2:]))]

    candidates = []
    tags = "|".join(re.escape(tag) for tag in config.preview_tags)
    opening = re.search(rf"<(?:{tags})(?![\w-])", text, re.IGNORECASE)
    if opening:
        candidates.append(strip_fences(text[opening.start() :]))

    legacy = _LEGACY_BLOCK.search(text)
    if legacy:
        candidates.append(legacy.group(1))

    return candidates


def _drop_partial_tag(markup: str) -> str:
    # "<section id=\"ho" renders as text in a preview; cut it off
    last_open = markup.rfind("<")
    if last_open > markup.rfind(">"):
        return markup[:last_open]
    return markup
