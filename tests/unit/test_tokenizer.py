from markup_patch.tokenizer import (
    iter_blocks,
    join_sections,
    normalize_newlines,
    read_headers,
    split_sections,
    strip_header_lines,
    unquote,
)


class TestSections:
    def test_splits_on_separator_lines_only(self) -> None:
        assert split_sections("a\n---\nb\n----\nc") == ["a\n", "\nb\n----\nc"]

    def test_separator_may_be_indented(self) -> None:
        assert split_sections("a\n  ---  \nb") == ["a\n", "\nb"]

    def test_join_sections(self) -> None:
        assert join_sections(["a", "b"]) == "a\n---\nb"

    def test_normalize_newlines(self) -> None:
        assert normalize_newlines("a\r\nb\rc") == "a\nb\nc"


class TestHeaders:
    def test_first_occurrence_wins(self) -> None:
        section = "OPERATION: add\noperation: delete\nfoo: bar"

        assert read_headers(section, ["operation"]) == {"OPERATION": "add"}

    def test_ignores_unrequested_keys(self) -> None:
        assert read_headers("color: red\nTARGET: #a", ["target"]) == {"TARGET": "#a"}

    def test_strip_header_lines(self) -> None:
        section = "OPERATION: add\n<p>Note: keep</p>\nPOSITION: end"

        assert strip_header_lines(section, ["operation", "position"]) == (
            "<p>Note: keep</p>"
        )

    def test_unquote(self) -> None:
        assert unquote('"#hero"') == "#hero"
        assert unquote("`.promo`") == ".promo"
        assert unquote("'open") == "'open"
        assert unquote('""') == ""


class TestIterBlocks:
    def test_headers_and_body(self) -> None:
        text = "intro\nSECTION_UPDATE:\nselector: '#a'\n---\n<p>x</p>\n---\nrest"

        (block,) = iter_blocks(text, "SECTION_UPDATE", ["selector"])

        assert block.keyword == "SECTION_UPDATE"
        assert block.headers == {"selector": "#a"}
        assert block.body == "<p>x</p>"
        assert block.start == text.index("SECTION_UPDATE")

    def test_adjacent_blocks_without_blank_line(self) -> None:
        text = "TOKEN_UPDATE:\nid: a\nvalue: 1\nTOKEN_UPDATE:\nid: b\nvalue: 2"

        blocks = list(iter_blocks(text, "TOKEN_UPDATE", ["id", "value"]))

        assert [block.headers for block in blocks] == [
            {"id": "a", "value": "1"},
            {"id": "b", "value": "2"},
        ]

    def test_body_ends_at_next_keyword_after_blank_line(self) -> None:
        text = "MENU_UPDATE:\nid: m\n- label: Home\n\nTOKEN_UPDATE:\nid: t"

        (block,) = iter_blocks(text, "MENU_UPDATE", ["id", "action"])

        assert block.body == "- label: Home"

    def test_no_blocks(self) -> None:
        assert list(iter_blocks("nothing here", "TOKEN_UPDATE", ["id"])) == []
