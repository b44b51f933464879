# src/markup_patch/directives/models.py

from dataclasses import dataclass
from enum import Enum


class OperationKind(str, Enum):
    """What a directive does. Values are the words used in the grammar."""

    INSERT = "add"
    REPLACE = "modify"
    DELETE = "delete"
    REPLACE_DOCUMENT = "replace_all"


class InsertPosition(str, Enum):
    """Where an insert lands."""

    START = "start"
    END = "end"
    BEFORE = "before"
    AFTER = "after"


class ComponentKind(str, Enum):
    """Structural region a fragment represents."""

    HEADER = "header"
    FOOTER = "footer"
    CONTENT = "content"


@dataclass(frozen=True)
class ClassificationHint:
    """Marks a fragment as a reusable header or footer."""

    kind: ComponentKind
    suggested_name: str


@dataclass(frozen=True)
class Directive:
    """A parsed edit, ready to be applied to a document.

    Immutable. The fragment has already been scrubbed.
    """

    operation: OperationKind
    fragment: str = ""
    message: str = ""
    position: InsertPosition = InsertPosition.END
    target: str | None = None  # Required for BEFORE / AFTER
    selector: str | None = None  # Required for REPLACE / DELETE
    classification_hint: ClassificationHint | None = None


DEFAULT_COMPONENT_NAMES = {
    ComponentKind.HEADER: "Global Header",
    ComponentKind.FOOTER: "Global Footer",
}
