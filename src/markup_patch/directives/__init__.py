from .models import (
    ClassificationHint,
    ComponentKind,
    Directive,
    InsertPosition,
    OperationKind,
)
from .parser import parse_directive
from .scrubber import scrub
from .streaming import extract_partial

__all__ = [
    "ClassificationHint",
    "ComponentKind",
    "Directive",
    "InsertPosition",
    "OperationKind",
    "extract_partial",
    "parse_directive",
    "scrub",
]
