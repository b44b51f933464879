# Blocks
from .blocks import (
    ComponentUpdate,
    EntryUpdate,
    MenuUpdate,
    PageUpdate,
    ParseResult,
    SectionUpdate,
    TokenUpdate,
    parse_updates,
)

# Configuration
from .config import DEFAULT_CONFIG, PatchConfig

# Detection
from .detection import (
    DetectedComponent,
    analyze_components,
    detect_component_type,
    suggest_classification,
)

# Directives
from .directives import (
    ClassificationHint,
    ComponentKind,
    Directive,
    InsertPosition,
    OperationKind,
    extract_partial,
    parse_directive,
    scrub,
)

# Markup
from .markup import LocatedElement, compile_selector, find_element, locate_element

# Observability
from .observability import LoggingMetricsHook, MetricsHook, NoOpMetricsHook

# Patching
from .patching import PatchOutcome, PatchResult, apply_operation, patch_document

__all__ = [
    # Blocks
    "ComponentUpdate",
    "EntryUpdate",
    "MenuUpdate",
    "PageUpdate",
    "ParseResult",
    "SectionUpdate",
    "TokenUpdate",
    "parse_updates",
    # Configuration
    "DEFAULT_CONFIG",
    "PatchConfig",
    # Detection
    "DetectedComponent",
    "analyze_components",
    "detect_component_type",
    "suggest_classification",
    # Directives
    "ClassificationHint",
    "ComponentKind",
    "Directive",
    "InsertPosition",
    "OperationKind",
    "extract_partial",
    "parse_directive",
    "scrub",
    # Markup
    "LocatedElement",
    "compile_selector",
    "find_element",
    "locate_element",
    # Observability
    "LoggingMetricsHook",
    "MetricsHook",
    "NoOpMetricsHook",
    # Patching
    "PatchOutcome",
    "PatchResult",
    "apply_operation",
    "patch_document",
]
