"""
Basic parser tests - single lines and single tags

Tests escaping, plain lines, line-scoped operations, continuation markers
and the warnings for malformed markup.
"""

from snipmark.lib.parser import SnippetParser, ParseState
from snipmark.lib.resolver import MappingReferenceResolver, ReferenceStore


def parse(lines, **kwargs):
    return SnippetParser(lines, **kwargs).parse()


class TestPlainLines:
    """Lines without markup"""

    def test_empty_snippet(self):
        outcome = parse([])
        assert outcome.text == ""
        assert outcome.warnings == []

    def test_escaping_without_operations(self):
        """No operations: the line is only escaped and right-trimmed"""
        outcome = parse(['a < b && c == "d"   '])
        assert outcome.text == "a &lt; b &amp;&amp; c == &quot;d&quot;"

    def test_blank_lines_kept_inside(self):
        outcome = parse(["a", "", "b"])
        assert outcome.lines == ["a", "", "b"]
        assert outcome.text == "a\n\nb"

    def test_common_indent_removed(self):
        outcome = parse(["", "    if (x) {", "        y();", "    }", ""])
        assert outcome.text == "if (x) {\n    y();\n}"

    def test_plain_comments_untouched(self):
        outcome = parse(["x(); // not markup", "# neither"])
        assert outcome.text == "x(); // not markup\n# neither"


class TestLineOperations:
    """Tags that apply to their own line only"""

    def test_highlight_substring(self):
        outcome = parse(["foo(); // @highlight substring=foo"])
        assert outcome.text == "<b>foo</b>();"

    def test_highlight_applies_to_escaped_text(self):
        outcome = parse(["a<b; // @highlight substring=a"])
        assert outcome.text == "<b>a</b>&lt;b;"

    def test_replace_substring(self):
        outcome = parse(["int x = 42; // @replace substring=42 replacement=..."])
        assert outcome.text == "int x = ...;"

    def test_operation_not_carried_to_next_line(self):
        outcome = parse(["foo(); // @highlight substring=foo", "foo();"])
        assert outcome.text == "<b>foo</b>();\nfoo();"

    def test_hash_comment_syntax(self):
        outcome = parse(["print(x)  # @highlight regex='x' type=italic"])
        assert outcome.text == "print(<i>x</i>)"

    def test_attribute_rejection(self):
        """Unknown attribute is dropped; @highlight falls back to whole-line bold"""
        outcome = parse(["x = 1 // @highlight badattr=foo"])

        assert outcome.text == "<b>x = 1</b>"
        assert outcome.warnings == ["@snippet: invalid attribute badattr used in @highlight tag"]

    def test_failed_operation_keeps_line(self):
        """When an operation cannot be built the code portion is still emitted"""
        outcome = parse(["x = 1 // @replace substring=x"])

        assert outcome.text == "x = 1"
        assert len(outcome.warnings) == 1

    def test_link(self):
        resolver = MappingReferenceResolver({"java.util.List": "java.util/List///"})
        store = ReferenceStore()
        outcome = parse(
            ["List<String> l; // @link substring=List target=java.util.List"],
            resolver=resolver,
            store=store,
        )

        assert outcome.text == '<a data-dri="ref-0">List</a>&lt;String&gt; l;'
        assert store.references == ["java.util/List///"]

    def test_unresolved_link_keeps_line(self):
        outcome = parse(["List l; // @link substring=List target=Nope"])

        assert outcome.text == "List l;"
        assert outcome.warnings == ["@snippet: unresolved target for @link tag: Nope"]


class TestContinuation:
    """Markup comments ending in ':' apply to the next line"""

    def test_continuation_folding(self):
        outcome = parse(["code //@highlight substring='x':", "next"])

        assert outcome.lines == ["code", "ne<b>x</b>t"]
        assert outcome.warnings == []

    def test_markup_only_line_with_continuation(self):
        outcome = parse(["    // @replace regex='\\d+' replacement=N:", "    f(10, 20);"])

        assert outcome.text == "f(N, N);"

    def test_continuation_keeps_comment_syntax(self):
        outcome = parse(["# @highlight substring=b:", "a = b"])

        assert outcome.text == "a = <b>b</b>"

    def test_continuation_on_last_line(self):
        """Warning, and processing stops without emitting the line"""
        outcome = parse(["a", "b // @highlight substring=b:"])

        assert outcome.text == "a"
        assert outcome.warnings == [
            "@snippet: don't place markup comment with ending `:` at the last line of snippet"
        ]


class TestMalformedMarkup:
    """Recoverable problems produce warnings"""

    def test_start_without_region(self):
        outcome = parse(["a // @start", "b"])

        assert outcome.text == "b"
        assert outcome.warnings == ["@snippet: tag @start without specified region attribute"]

    def test_end_without_start(self):
        outcome = parse(["a // @end"])

        assert outcome.text == "a"
        assert outcome.warnings == ["@snippet: `@end` tag without a matching start of the region"]

    def test_end_with_unknown_region(self):
        outcome = parse(["// @start region=a", "x", "// @end region=nope", "// @end region=a"])

        assert outcome.text == "x"
        assert outcome.warnings == ['@snippet: invalid region "nope" in @end']

    def test_state_after_inline_parse(self):
        parser = SnippetParser(["a"])
        outcome = parser.parse()

        assert parser.state is ParseState.COLLECTING_BODY
        assert outcome.finished is False
        assert outcome.errors == []
