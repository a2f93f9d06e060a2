"""
Region tests - nesting, region-scoped operations and region extraction

Tests that:
- Regions close in LIFO order, or by name
- Region-scoped operations apply until their region closes
- A named region can be extracted from an external snippet file
- Unclosed regions and unclosed extractions are reported
"""

from snipmark.lib.parser import SnippetParser, ParseState
from snipmark.lib.resolver import MappingReferenceResolver, ReferenceStore


def parse(lines, **kwargs):
    return SnippetParser(lines, **kwargs).parse()


class TestNesting:
    """Test nested regions with bound operations"""

    def test_lifo_closing(self):
        """Unnamed @end closes the most recently opened region"""
        outcome = parse([
            "x // @highlight region=A substring=x",
            "y // @replace region=B substring=y replacement=Z",
            "x y",
            "// @end",
            "x y",
            "// @end",
            "x y",
        ])

        assert outcome.lines == [
            "<b>x</b>",
            "Z",
            "<b>x</b> Z",
            "<b>x</b> y",
            "x y",
        ]
        assert outcome.warnings == []

    def test_named_end_out_of_order(self):
        """Closing A by name leaves B active"""
        outcome = parse([
            "x // @highlight region=A substring=x",
            "y // @replace region=B substring=y replacement=Z",
            "x y",
            "// @end region=A",
            "x y",
            "// @end",
            "x y",
        ])

        assert outcome.lines == [
            "<b>x</b>",
            "Z",
            "<b>x</b> Z",
            "x Z",
            "x y",
        ]

    def test_plain_regions_lifo(self):
        """@start regions close in reverse order"""
        parser = SnippetParser([
            "// @start region=A",
            "// @start region=B",
            "a",
            "// @end",
        ])
        parser.parse()

        assert parser.stack.names_list() == ["A"]

    def test_start_line_not_emitted(self):
        outcome = parse(["int a; // @start region=r", "int b;", "int c; // @end"])

        assert outcome.text == "int b;\nint c;"

    def test_end_line_keeps_closing_region_operation(self):
        """The @end line is rendered before its region closes"""
        outcome = parse([
            "x // @highlight region=r substring=x",
            "x // @end region=r",
            "x",
        ])

        assert outcome.lines == ["<b>x</b>", "<b>x</b>", "x"]

    def test_operations_compose_oldest_first(self):
        """Outer region operation runs before inner one"""
        outcome = parse([
            "// @replace region=outer substring=a replacement=b",
            "// @highlight region=inner substring=b",
            "a",
            "// @end region=inner",
            "// @end region=outer",
        ])

        assert outcome.lines == ["<b>b</b>"]

    def test_same_named_regions(self):
        """Named @end closes the innermost region of that name"""
        parser = SnippetParser([
            "// @start region=r",
            "x // @highlight region=r substring=x",
            "x",
            "// @end region=r",
            "x",
            "// @end region=r",
        ])
        outcome = parser.parse()

        assert outcome.lines == ["<b>x</b>", "<b>x</b>", "x"]
        assert len(parser.stack) == 0


class TestUnclosed:
    """Test reporting of regions left open"""

    def test_unclosed_region_warning(self):
        outcome = parse(["// @start region=q", "a", "b"])

        assert outcome.text == "a\nb"
        assert outcome.warnings == ["@snippet: snippet body contains unclosed regions: q"]

    def test_unclosed_anonymous_region(self):
        """region attribute without a value opens an anonymous region"""
        outcome = parse(["a // @highlight region substring=a", "a"])

        assert outcome.lines == ["<b>a</b>", "<b>a</b>"]
        assert outcome.warnings == ["@snippet: snippet body contains unclosed regions: anonymous"]

    def test_unclosed_regions_listed_in_order(self):
        outcome = parse(["// @start region=a", "// @highlight region", "// @start region=c"])

        assert outcome.warnings == [
            "@snippet: snippet body contains unclosed regions: a, anonymous, c"
        ]


class TestExtraction:
    """Test extracting a region from an external snippet file"""

    def test_named_region(self):
        outcome = parse(["a", "//@start region=r", "b", "//@end region=r", "c"], region="r")

        assert outcome.text == "b"
        assert outcome.finished is True
        assert outcome.warnings == []
        assert outcome.errors == []

    def test_unnamed_end_closes_extraction(self):
        outcome = parse(["a", "// @start region=r", "b", "// @end", "c"], region="r")

        assert outcome.text == "b"
        assert outcome.finished is True

    def test_other_regions_skipped_before_start(self):
        outcome = parse([
            "// @start region=other",
            "skipped",
            "// @end region=other",
            "// @start region=r",
            "kept",
            "// @end region=r",
        ], region="r")

        assert outcome.text == "kept"

    def test_nested_regions_inside_extraction(self):
        outcome = parse([
            "class A {",
            "    // @start region=r",
            "    x = 1; // @highlight region=h substring=x",
            "    y = 2;",
            "    // @end",
            "    // @end",
            "}",
        ], region="r")

        assert outcome.text == "<b>x</b> = 1;\ny = 2;"
        assert outcome.warnings == []

    def test_closing_line_code_emitted(self):
        outcome = parse(["// @start region=r", "    a();", "    b(); // @end region=r"], region="r")

        assert outcome.text == "a();\nb();"

    def test_extraction_never_closed(self):
        parser = SnippetParser(["// @start region=r", "b"], region="r")
        outcome = parser.parse()

        assert outcome.text == "b"
        assert parser.state is ParseState.COLLECTING_BODY
        assert outcome.errors == ["@snippet: external snippet does not contain closing @end tag"]

    def test_extraction_never_started(self):
        parser = SnippetParser(["a", "b"], region="r")
        outcome = parser.parse()

        assert outcome.text == ""
        assert parser.state is ParseState.AWAITING_REGION_START
        assert outcome.errors == ["@snippet: external snippet does not contain closing @end tag"]

    def test_start_without_region_while_awaiting(self):
        outcome = parse(["// @start", "// @start region=r", "b", "// @end"], region="r")

        assert outcome.text == "b"
        assert outcome.warnings == ["@snippet: tag @start without specified region attribute"]

    def test_continuation_on_last_line_leaves_extraction_open(self):
        outcome = parse(["// @start region=r", "a", "b // @highlight substring=b:"], region="r")

        assert outcome.lines == ["a"]
        assert outcome.finished is False
        assert outcome.warnings == [
            "@snippet: don't place markup comment with ending `:` at the last line of snippet"
        ]
        assert outcome.errors == ["@snippet: external snippet does not contain closing @end tag"]


class TestRegionLinks:
    """Test @link bound to a region"""

    def test_link_applies_until_region_closes(self):
        store = ReferenceStore()
        outcome = parse(
            [
                "Foo a; // @link region=L substring=Foo target=Foo",
                "Foo b;",
                "// @end region=L",
                "Foo c;",
            ],
            resolver=MappingReferenceResolver({"Foo": "pkg/Foo"}),
            store=store,
        )

        assert outcome.lines == [
            '<a data-dri="ref-0">Foo</a> a;',
            '<a data-dri="ref-0">Foo</a> b;',
            "Foo c;",
        ]
        assert outcome.warnings == []
        assert len(store) == 1
