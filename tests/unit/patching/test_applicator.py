from unittest.mock import Mock

import pytest

from markup_patch.directives.models import Directive, InsertPosition, OperationKind
from markup_patch.directives.parser import parse_directive
from markup_patch.observability import names
from markup_patch.patching.applicator import (
    PatchOutcome,
    apply_operation,
    patch_document,
)

PAGE = '<body>\n<section id="a">A</section>\n</body>'


def insert(fragment: str, position: InsertPosition, target: str | None = None) -> Directive:
    return Directive(
        operation=OperationKind.INSERT,
        fragment=fragment,
        position=position,
        target=target,
    )


def delete(selector: str) -> Directive:
    return Directive(operation=OperationKind.DELETE, selector=selector)


class TestInsert:
    def test_end_of_body(self) -> None:
        result = patch_document(PAGE, insert("<nav>N</nav>", InsertPosition.END))

        assert result.document == (
            '<body>\n<section id="a">A</section>\n<nav>N</nav>\n</body>'
        )
        assert result.outcome is PatchOutcome.APPLIED

    def test_start_of_body(self) -> None:
        result = apply_operation(PAGE, insert("<nav>N</nav>", InsertPosition.START))

        assert result == '<body>\n<nav>N</nav>\n<section id="a">A</section>\n</body>'

    def test_before_target(self) -> None:
        result = patch_document(PAGE, insert("<nav>N</nav>", InsertPosition.BEFORE, "#a"))

        assert result.document == (
            '<body>\n<nav>N</nav>\n<section id="a">A</section>\n</body>'
        )
        assert result.matched
        assert result.located is not None
        assert result.located.text == '<section id="a">A</section>'

    def test_after_target(self) -> None:
        result = apply_operation(PAGE, insert("<nav>N</nav>", InsertPosition.AFTER, "#a"))

        assert result == '<body>\n<section id="a">A</section>\n<nav>N</nav>\n</body>'

    def test_after_nested_target(self) -> None:
        document = '<body>\n<div id="o"><div>in</div></div>\n</body>'

        result = apply_operation(
            document, insert("<p>x</p>", InsertPosition.AFTER, "#o")
        )

        assert result == '<body>\n<div id="o"><div>in</div></div>\n<p>x</p>\n</body>'

    @pytest.mark.parametrize("target", ["#missing", None])
    def test_missing_target_falls_back_to_end(self, target: str | None) -> None:
        result = patch_document(PAGE, insert("<nav>N</nav>", InsertPosition.BEFORE, target))

        assert result.document == (
            '<body>\n<section id="a">A</section>\n<nav>N</nav>\n</body>'
        )
        assert result.outcome is PatchOutcome.FALLBACK_TO_END
        assert not result.matched

    def test_full_document_fragment_is_narrowed(self) -> None:
        fragment = (
            "<!DOCTYPE html>\n<html>\n<head><title>t</title></head>\n"
            '<body>\n<section id="new">N</section>\n</body>\n</html>'
        )

        result = apply_operation(PAGE, insert(fragment, InsertPosition.END))

        assert result == (
            '<body>\n<section id="a">A</section>\n<section id="new">N</section>\n</body>'
        )
        assert "<!DOCTYPE" not in result
        assert result.count("<body") == 1

    def test_result_is_scrubbed(self) -> None:
        """Leaked tokens are removed even from hand-built directives."""
        result = apply_operation(
            PAGE, insert("OPERATION: add\n<nav>N</nav>", InsertPosition.END)
        )

        assert "OPERATION" not in result
        assert "<nav>N</nav>" in result


class TestReplace:
    def test_replaces_located_element(self) -> None:
        document = '<body>\n<section id="hero"><h1>Old</h1></section>\n</body>'
        directive = Directive(
            operation=OperationKind.REPLACE,
            selector="#hero",
            fragment='<section id="hero"><h1>New</h1></section>',
        )

        result = patch_document(document, directive)

        assert result.document == (
            '<body>\n<section id="hero"><h1>New</h1></section>\n</body>'
        )
        assert result.matched

    def test_replaces_whole_nested_element(self) -> None:
        document = '<div id="a"><div>x</div></div><p>keep</p>'
        directive = Directive(
            operation=OperationKind.REPLACE, selector="#a", fragment='<div id="a">y</div>'
        )

        assert apply_operation(document, directive) == '<div id="a">y</div><p>keep</p>'

    def test_missing_selector_target_is_a_no_op(self) -> None:
        document = "  <body></body>  \n"
        directive = Directive(
            operation=OperationKind.REPLACE, selector="#missing", fragment="<p>x</p>"
        )

        result = patch_document(document, directive)

        assert result.document == document
        assert result.outcome is PatchOutcome.SELECTOR_NOT_FOUND
        assert result.located is None

    def test_no_selector_is_a_no_op(self) -> None:
        directive = Directive(operation=OperationKind.REPLACE, fragment="<p>x</p>")

        result = patch_document(PAGE, directive)

        assert result.document == PAGE
        assert result.outcome is PatchOutcome.MISSING_SELECTOR


class TestDelete:
    def test_removes_element_and_trailing_newline(self) -> None:
        document = '<body>\n<div id="x">X</div>\n<p>keep</p>\n</body>'

        assert apply_operation(document, delete("#x")) == "<body>\n<p>keep</p>\n</body>"

    def test_removes_leading_newline_when_no_trailing(self) -> None:
        assert apply_operation('<body>\n<div id="x"></div></body>', delete("#x")) == (
            "<body></body>"
        )

    def test_only_first_match_is_removed(self) -> None:
        document = (
            '<body>\n<div class="promo">A</div>\n<div class="promo">B</div>\n</body>'
        )

        result = apply_operation(document, delete(".promo"))

        assert result == '<body>\n<div class="promo">B</div>\n</body>'

    def test_is_idempotent(self) -> None:
        document = '<body>\n<div id="x">X</div>\n<p>keep</p>\n</body>'

        once = apply_operation(document, delete("#x"))
        twice = apply_operation(once, delete("#x"))

        assert twice == once

    def test_missing_target_is_a_no_op(self) -> None:
        result = patch_document(PAGE, delete(".nothing"))

        assert result.document == PAGE
        assert result.outcome is PatchOutcome.SELECTOR_NOT_FOUND


class TestReplaceDocument:
    def test_returns_scrubbed_fragment(self) -> None:
        directive = Directive(
            operation=OperationKind.REPLACE_DOCUMENT,
            fragment="<!DOCTYPE html>\n<html><body>new</body></html>\n---\n",
        )

        assert apply_operation(PAGE, directive) == (
            "<!DOCTYPE html>\n<html><body>new</body></html>"
        )


class TestRoundTrip:
    def test_insert_then_delete_restores_document(self) -> None:
        document = "<body>\n<main>Hi</main>\n</body>"
        fragment = '<section id="promo">Sale</section>'

        inserted = apply_operation(document, insert(fragment, InsertPosition.END))
        restored = apply_operation(inserted, delete("#promo"))

        assert inserted != document
        assert restored == document

    def test_directive_is_not_mutated(self) -> None:
        directive = insert("<nav>N</nav>", InsertPosition.AFTER, "#a")
        snapshot = Directive(**vars(directive))

        apply_operation(PAGE, directive)

        assert directive == snapshot


class TestScenarios:
    def test_add_hero_to_empty_body(self) -> None:
        directive = parse_directive(
            "MESSAGE: add hero\n---\nOPERATION: add\nPOSITION: end\n---\n"
            '<section id="hero">Hi</section>'
        )

        assert directive is not None
        assert apply_operation("<body></body>", directive) == (
            '<body><section id="hero">Hi</section></body>'
        )

    def test_modify_missing_selector_leaves_document(self) -> None:
        directive = parse_directive(
            "MESSAGE: change\n---\nOPERATION: modify\nSELECTOR: #missing\n---\n"
            '<section id="hero">Hi</section>'
        )

        assert directive is not None
        assert apply_operation("<body></body>", directive) == "<body></body>"

    def test_delete_first_promo(self) -> None:
        directive = parse_directive(
            "MESSAGE: remove\n---\nOPERATION: delete\nSELECTOR: .promo\n---\n"
        )
        document = (
            '<body>\n<div class="promo">A</div>\n<div class="promo">B</div>\n</body>'
        )

        assert directive is not None
        assert apply_operation(document, directive) == (
            '<body>\n<div class="promo">B</div>\n</body>'
        )


class TestPatchMetrics:
    def test_records_outcome(self) -> None:
        hook = Mock()

        patch_document(PAGE, insert("<p>x</p>", InsertPosition.END), metrics_hook=hook)

        hook.increment.assert_called_once_with(
            names.PATCH_OPERATIONS_TOTAL,
            labels={"operation": "add", "outcome": "applied"},
        )
        hook.record_latency.assert_called_once()
        hook.record_gauge.assert_called_once()

    def test_records_selector_miss(self) -> None:
        hook = Mock()

        patch_document(PAGE, delete("#missing"), metrics_hook=hook)

        hook.increment.assert_any_call(
            names.SELECTOR_MISSES_TOTAL, labels={"operation": "delete"}
        )


class TestUntouchedText:
    def test_round_trip_keeps_trailing_newline(self) -> None:
        document = "<html>\n<body>\n<main>Hi</main>\n</body>\n</html>\n"

        inserted = apply_operation(
            document, insert('<section id="p">x</section>', InsertPosition.END)
        )
        restored = apply_operation(inserted, delete("#p"))

        assert inserted.endswith("</html>\n")
        assert restored == document

    def test_text_outside_the_edit_is_not_scrubbed(self) -> None:
        document = (
            "<body>\n<pre>a\n----\nb</pre>\n"
            "<!-- END SECTION hero -->\n</body>\n"
        )

        result = apply_operation(document, insert("<p>x</p>", InsertPosition.END))

        assert result == (
            "<body>\n<pre>a\n----\nb</pre>\n"
            "<!-- END SECTION hero -->\n<p>x</p>\n</body>\n"
        )

    def test_replacement_is_scrubbed(self) -> None:
        document = '  <body>\n<div id="a">old</div>\n</body>\n'
        directive = Directive(
            operation=OperationKind.REPLACE,
            selector="#a",
            fragment='SELECTOR: #a\n<div id="a">new</div>\n---',
        )

        assert apply_operation(document, directive) == (
            '  <body>\n<div id="a">new</div>\n</body>\n'
        )

    def test_fragment_scrubbed_to_nothing_is_a_no_op(self) -> None:
        result = patch_document(PAGE, insert("---\nPOSITION: end", InsertPosition.END))

        assert result.document == PAGE
