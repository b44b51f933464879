# src/markup_patch/detection/components.py

"""Heuristics that tell a header or footer fragment apart from content.

Each indicator found in the markup adds a fixed weight to a score that is
clamped to 0..100. A score of 50 or more counts as a hit.
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass

from markup_patch.config import DEFAULT_CONFIG, PatchConfig
from markup_patch.directives.models import (
    DEFAULT_COMPONENT_NAMES,
    ClassificationHint,
    ComponentKind,
)
from markup_patch.markup.locator import find_element

CONFIDENCE_THRESHOLD = 50

NAVIGATION_HEADER_NAME = "Navigation Header"

_BASE_NAMES = {
    ComponentKind.HEADER: "Header",
    ComponentKind.FOOTER: "Footer",
    ComponentKind.CONTENT: "Section",
}


@dataclass(frozen=True)
class _Indicators:
    tags: tuple[str, ...]
    classes: tuple[str, ...]
    ids: tuple[str, ...]
    keywords: tuple[str, ...]
    keyword_weight: int


_HEADER = _Indicators(
    tags=("<header", 'role="banner"', "<nav"),
    classes=(
        "navbar",
        "nav-bar",
        "navigation",
        "main-nav",
        "site-header",
        "top-bar",
        "header-",
        "fixed top-",
        "sticky top-",
    ),
    ids=("header", "navbar", "navigation", "main-header", "site-header", "top-nav"),
    keywords=("logo", "menu", "navigation", "login", "sign up", "burger"),
    keyword_weight=5,
)

_FOOTER = _Indicators(
    tags=("<footer", 'role="contentinfo"'),
    classes=("footer", "site-footer", "main-footer", "page-footer", "bottom-", "footer-"),
    ids=("footer", "site-footer", "main-footer", "page-footer"),
    keywords=(
        "copyright",
        "©",
        "all rights reserved",
        "datenschutz",
        "impressum",
        "privacy policy",
        "terms of service",
        "kontakt",
        "newsletter",
        "subscribe",
        "social media",
        "follow us",
    ),
    keyword_weight=8,
)

_FIRST_BLOCK = re.compile(r"<(?:section|div|header)[^>]*>", re.IGNORECASE)
_SECTION_OPEN = re.compile(r"<section", re.IGNORECASE)


@dataclass(frozen=True)
class DetectionResult:
    kind: ComponentKind
    confidence: int
    indicators: tuple[str, ...]

    @property
    def is_match(self) -> bool:
        return self.confidence >= CONFIDENCE_THRESHOLD


@dataclass(frozen=True)
class DetectedComponent:
    """A header or footer element found in a page."""

    kind: ComponentKind
    confidence: int
    html: str
    suggested_name: str


def detect_header(html: str) -> DetectionResult:
    score, indicators = _score(html, _HEADER)

    # Headers sit near the top of the markup
    first_block = _FIRST_BLOCK.search(html)
    if first_block and first_block.start() < 500:
        score += 10
        indicators.append("Position: Near top")

    # Too long for a header
    if len(_SECTION_OPEN.findall(html)) > 2:
        score -= 20
        indicators.append("Negative: Too many sections")

    return DetectionResult(ComponentKind.HEADER, _clamp(score), tuple(indicators))


def detect_footer(html: str) -> DetectionResult:
    score, indicators = _score(html, _FOOTER)
    return DetectionResult(ComponentKind.FOOTER, _clamp(score), tuple(indicators))


def detect_component_type(html: str) -> ComponentKind:
    header = detect_header(html)
    footer = detect_footer(html)

    if header.is_match and header.confidence > footer.confidence:
        return ComponentKind.HEADER
    if footer.is_match and footer.confidence > header.confidence:
        return ComponentKind.FOOTER
    return ComponentKind.CONTENT


def suggest_classification(html: str) -> ClassificationHint | None:
    """Hint for fragments that look like a reusable header or footer."""
    kind = detect_component_type(html)
    if kind is ComponentKind.CONTENT:
        return None
    return ClassificationHint(kind=kind, suggested_name=DEFAULT_COMPONENT_NAMES[kind])


def analyze_components(
    html: str,
    *,
    config: PatchConfig = DEFAULT_CONFIG,
) -> list[DetectedComponent]:
    """Find the page's shared header and footer candidates.

    The first `<header>` and the first `<footer>` are reported as found. A page
    without a `<header>` may still have a `<nav>` that reads like one; it is
    reported only when it scores as a header.
    """
    components = []

    header = find_element(html, "header", config=config)
    if header is not None:
        components.append(
            DetectedComponent(
                kind=ComponentKind.HEADER,
                confidence=detect_header(header.text).confidence,
                html=header.text,
                suggested_name=DEFAULT_COMPONENT_NAMES[ComponentKind.HEADER],
            )
        )

    footer = find_element(html, "footer", config=config)
    if footer is not None:
        components.append(
            DetectedComponent(
                kind=ComponentKind.FOOTER,
                confidence=detect_footer(footer.text).confidence,
                html=footer.text,
                suggested_name=DEFAULT_COMPONENT_NAMES[ComponentKind.FOOTER],
            )
        )

    if header is None:
        nav = find_element(html, "nav", config=config)
        if nav is not None:
            result = detect_header(nav.text)
            if result.is_match:
                components.append(
                    DetectedComponent(
                        kind=ComponentKind.HEADER,
                        confidence=result.confidence,
                        html=nav.text,
                        suggested_name=NAVIGATION_HEADER_NAME,
                    )
                )

    return components


def generate_component_name(kind: ComponentKind, existing_names: Iterable[str]) -> str:
    """First free name of the form "Header", "Header 1", "Header 2", ..."""
    taken = set(existing_names)
    base = _BASE_NAMES[kind]

    name = base
    counter = 1
    while name in taken:
        name = f"{base} {counter}"
        counter += 1
    return name


def _score(html: str, indicators: _Indicators) -> tuple[int, list[str]]:
    lower = html.lower()
    found: list[str] = []
    score = 0

    for tag in indicators.tags:
        if tag in lower:
            score += 30
            found.append(f"Tag: {tag}")

    for cls in indicators.classes:
        if cls in lower:
            score += 15
            found.append(f"Class: {cls}")

    for element_id in indicators.ids:
        if f'id="{element_id}"' in lower or f"id='{element_id}'" in lower:
            score += 25
            found.append(f"ID: {element_id}")

    for keyword in indicators.keywords:
        if keyword in lower:
            score += indicators.keyword_weight
            found.append(f"Keyword: {keyword}")

    return score, found


def _clamp(score: int) -> int:
    return min(100, max(0, score))
