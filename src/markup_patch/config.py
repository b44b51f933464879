# src/markup_patch/config.py

from dataclasses import dataclass, field

VOID_TAGS = frozenset({"img", "br", "hr", "input", "meta", "link"})

# Tags that open a recognizable fragment in a partial stream
PREVIEW_TAGS = (
    "!DOCTYPE",
    "html",
    "section",
    "div",
    "header",
    "nav",
    "main",
    "footer",
    "article",
)

# Top-level elements kept when a full document is narrowed to a fragment
BLOCK_TAGS = ("header", "nav", "main", "section", "article", "aside", "footer", "div")


@dataclass(frozen=True)
class PatchConfig:
    """Configuration for parsing and patching.

    Immutable. Explicit. No magic defaults from environment.
    """

    void_tags: frozenset[str] = field(default=VOID_TAGS)
    preview_tags: tuple[str, ...] = PREVIEW_TAGS
    block_tags: tuple[str, ...] = BLOCK_TAGS

    def __post_init__(self) -> None:
        if not self.preview_tags:
            raise ValueError("preview_tags must not be empty")
        if not self.block_tags:
            raise ValueError("block_tags must not be empty")
        # Normalized so lookups can stay case-insensitive
        object.__setattr__(
            self, "void_tags", frozenset(tag.lower() for tag in self.void_tags)
        )


DEFAULT_CONFIG = PatchConfig()
