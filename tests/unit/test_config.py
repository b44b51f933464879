from dataclasses import FrozenInstanceError

import pytest

from markup_patch.config import DEFAULT_CONFIG, VOID_TAGS, PatchConfig


def test_default_config_uses_module_tables() -> None:
    assert DEFAULT_CONFIG.void_tags == VOID_TAGS
    assert "section" in DEFAULT_CONFIG.preview_tags
    assert "footer" in DEFAULT_CONFIG.block_tags


def test_void_tags_are_lowercased() -> None:
    config = PatchConfig(void_tags=frozenset({"IMG", "Source"}))

    assert config.void_tags == frozenset({"img", "source"})


@pytest.mark.parametrize("field", ["preview_tags", "block_tags"])
def test_rejects_empty_tag_tables(field: str) -> None:
    with pytest.raises(ValueError, match=field):
        PatchConfig(**{field: ()})


def test_config_is_frozen() -> None:
    with pytest.raises(FrozenInstanceError):
        DEFAULT_CONFIG.block_tags = ("div",)  # type: ignore[misc]
