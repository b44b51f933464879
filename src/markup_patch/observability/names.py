# src/markup_patch/observability/names.py

"""Standard metric names for markup-patch observability.

Use these constants instead of hardcoded strings for consistency
across the codebase.

Note: All duration metrics are in milliseconds by convention.
Units are handled by the metrics backend (e.g., converted to seconds in Prometheus).
"""

# ============================================================================
# Directive Parsing Metrics
# ============================================================================

# Duration
DIRECTIVE_PARSE_DURATION = "directive_parse_duration"

# Counters
DIRECTIVE_PARSE_TOTAL = "directive_parse_total"
DIRECTIVE_PARSE_FAILURES_TOTAL = "directive_parse_failures_total"

# Counters (one per partial extraction attempt during streaming)
STREAMING_EXTRACT_TOTAL = "streaming_extract_total"


# ============================================================================
# Patch Metrics
# ============================================================================

# Duration
PATCH_APPLY_DURATION = "patch_apply_duration"

# Counters (labelled by operation and outcome)
PATCH_OPERATIONS_TOTAL = "patch_operations_total"
SELECTOR_MISSES_TOTAL = "selector_misses_total"

# Gauges
PATCH_DOCUMENT_SIZE = "patch_document_size"


# ============================================================================
# Block Grammar Metrics
# ============================================================================

# Counters (labelled by block kind)
BLOCKS_PARSED_TOTAL = "blocks_parsed_total"
