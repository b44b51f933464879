from .document import (
    insert_at_body_end,
    insert_at_body_start,
    is_full_document,
    narrow_to_fragment,
    top_level_blocks,
)
from .locator import LocatedElement, find_element, locate_element
from .selector import compile_selector

__all__ = [
    "LocatedElement",
    "compile_selector",
    "find_element",
    "insert_at_body_end",
    "insert_at_body_start",
    "is_full_document",
    "locate_element",
    "narrow_to_fragment",
    "top_level_blocks",
]
