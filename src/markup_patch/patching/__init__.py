from .applicator import PatchOutcome, PatchResult, apply_operation, patch_document

__all__ = [
    "PatchOutcome",
    "PatchResult",
    "apply_operation",
    "patch_document",
]
