from .models import (
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
from .parser import group_updates_by_type, parse_updates

__all__ = [
    "ComponentUpdate",
    "EntryUpdate",
    "MenuItem",
    "MenuUpdate",
    "PageUpdate",
    "ParseResult",
    "ReferenceUpdate",
    "SectionUpdate",
    "TokenUpdate",
    "group_updates_by_type",
    "parse_updates",
]
