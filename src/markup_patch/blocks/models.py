# src/markup_patch/blocks/models.py

from dataclasses import dataclass, field
from typing import Any, Literal, TypeAlias

from pydantic import BaseModel

from markup_patch.directives.models import Directive, OperationKind


class ComponentUpdate(BaseModel):
    """New markup for a shared header or footer component."""

    type: Literal["component"] = "component"
    id: str
    component_type: Literal["header", "footer"] = "header"
    html: str

    class Config:
        extra = "forbid"


class SectionUpdate(BaseModel):
    """New markup for one section of a page, addressed by selector."""

    type: Literal["section"] = "section"
    id: str
    selector: str
    html: str

    class Config:
        extra = "forbid"

    def to_directive(self) -> Directive:
        return Directive(
            operation=OperationKind.REPLACE,
            fragment=self.html,
            selector=self.selector,
        )


class TokenUpdate(BaseModel):
    """New value for a design token."""

    type: Literal["token"] = "token"
    id: str
    value: str

    class Config:
        extra = "forbid"


class MenuItem(BaseModel):
    label: str
    page: str | None = None
    url: str | None = None
    position: int | None = None

    class Config:
        extra = "forbid"


class MenuUpdate(BaseModel):
    type: Literal["menu"] = "menu"
    id: str
    action: Literal["add", "remove", "reorder", "update"] = "update"
    items: list[MenuItem] | None = None

    class Config:
        extra = "forbid"


class EntryUpdate(BaseModel):
    """Field values for a structured content entry."""

    type: Literal["entry"] = "entry"
    id: str
    data: dict[str, Any]

    class Config:
        extra = "forbid"


class PageUpdate(BaseModel):
    """A directive against the page document itself."""

    type: Literal["page"] = "page"
    id: str = "page"
    directive: Directive

    class Config:
        extra = "forbid"


ReferenceUpdate: TypeAlias = (
    ComponentUpdate
    | SectionUpdate
    | TokenUpdate
    | MenuUpdate
    | EntryUpdate
    | PageUpdate
)

UPDATE_TYPES = ("component", "section", "token", "menu", "entry", "page")


@dataclass(frozen=True)
class ParseResult:
    message: str
    updates: list[ReferenceUpdate] = field(default_factory=list)
    has_reference_updates: bool = False
