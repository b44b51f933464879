from .components import (
    DetectedComponent,
    DetectionResult,
    analyze_components,
    detect_component_type,
    detect_footer,
    detect_header,
    generate_component_name,
    suggest_classification,
)

__all__ = [
    "DetectedComponent",
    "DetectionResult",
    "analyze_components",
    "detect_component_type",
    "detect_footer",
    "detect_header",
    "generate_component_name",
    "suggest_classification",
]
