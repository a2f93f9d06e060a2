"""
Parser for snippet markup

Processes the lines of a snippet body, interpreting the trailing markup
comments (@start, @end, @highlight, @replace, @link) and producing the
transformed, HTML-escaped text.

The parser makes a single pass over the lines and moves through three states:
1. Awaiting region start: only used when a region is extracted from an
   external file; every line before the matching @start is skipped
2. Collecting body: lines are escaped, transformed and collected
3. Finished: the extracted region was closed by its @end

Key features:
- Region stack with nested, named and anonymous regions
- Region-scoped operations applied to every line inside the region
- Continuation markers: a markup comment ending in ':' applies to the
  following line instead of the current one
- Diagnostics for malformed markup; parsing never raises

Example:
    >>> parser = SnippetParser(["if (v.isPresent()) { // @highlight substring=isPresent",
    ...                         "    return v;", "}"])
    >>> print(parser.parse().text)
    if (v.<b>isPresent</b>()) {
        return v;
    }
"""

from enum import Enum
from typing import Dict, List, Optional, Tuple

from ..models.markup import Tag, ActiveRegion, ParseOutcome
from .log import Diagnostics, LOG
from .operations import Operation, highlight_create, replace_create, link_create
from .regions import RegionStack
from .resolver import ReferenceResolver, ReferenceStore
from .scanner import markup_scan, tag_extract, attributes_parse
from .text import html_escape, indent_trim


class ParseState(Enum):
    """States of the line processor"""
    AWAITING_REGION_START = "awaiting_region_start"
    COLLECTING_BODY = "collecting_body"
    FINISHED = "finished"


class SnippetParser:
    """
    Line processor for snippet markup

    Handles:
    - Extraction of a named region from an external snippet file
    - Region bookkeeping through a RegionStack
    - Highlight, replace and link operations on single lines or regions
    - Continuation markers
    - Final removal of common indentation
    """

    def __init__(
        self,
        lines: List[str],
        region: Optional[str] = None,
        context: str = "inline",
        resolver: Optional[ReferenceResolver] = None,
        store: Optional[ReferenceStore] = None,
        diagnostics: Optional[Diagnostics] = None,
    ):
        """
        Initialize parser with snippet lines

        Args:
            lines: Lines of an inline body, or of an external snippet file
            region: Region to extract; None for inline snippets and for
                    external snippets used as a whole
            context: Origin of the lines, passed to the reference resolver
            resolver: Object with reference_resolve(target, context) used
                      by @link; without one every @link is unresolved
            store: ReferenceStore that receives resolved @link references
            diagnostics: Sink for warnings and errors

        Attributes:
            state: Current ParseState
            stack: Open regions
            outcome: Collected lines and diagnostics
        """
        self.lines = lines
        self.region = region
        self.context = context
        self.resolver = resolver
        self.store = store if store is not None else ReferenceStore()
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()

        self.state = ParseState.COLLECTING_BODY if region is None else ParseState.AWAITING_REGION_START
        self.stack = RegionStack()
        self.outcome = ParseOutcome()

    def parse(self) -> ParseOutcome:
        """
        Process all lines

        Returns:
            ParseOutcome with the output lines, the joined and de-indented
            text, and the diagnostics emitted by this parse
        """
        warnings_start = len(self.diagnostics.warnings)
        errors_start = len(self.diagnostics.errors)

        # (comment syntax, markup body) carried over to the next line
        carry: Optional[Tuple[str, str]] = None

        for index, raw in enumerate(self.lines):
            line = raw
            if carry is not None:
                line = f"{raw} {carry[0]} {carry[1]}"
                carry = None

            if self.state is ParseState.AWAITING_REGION_START:
                self.regionStart_await(line)
                continue

            comment = markup_scan(line)
            if comment is None:
                self.outcome.lines.append(self.line_render(line))
                continue

            code_line = self.line_render(comment.code)

            if comment.continues:
                if index + 1 >= len(self.lines):
                    self.diagnostics.warn(
                        "don't place markup comment with ending `:` at the last line of snippet"
                    )
                    break
                self.outcome.line_addIfNotBlank(code_line)
                carry = (comment.syntax, comment.body[:-1])
                continue

            tag = tag_extract(comment.body)
            if tag is None:
                continue
            attributes = attributes_parse(comment.body, tag, self.diagnostics)

            if tag is Tag.START:
                self.start_handle(attributes)
            elif tag is Tag.END:
                self.end_handle(attributes, code_line)
            else:
                self.operation_handle(tag, attributes, code_line)

            if self.state is ParseState.FINISHED:
                break

        self.finish_check()

        self.outcome.finished = self.state is ParseState.FINISHED
        self.outcome.warnings = self.diagnostics.warnings[warnings_start:]
        self.outcome.errors = self.diagnostics.errors[errors_start:]
        self.outcome.text = indent_trim("\n".join(self.outcome.lines))
        LOG(f"Parsed {len(self.lines)} lines into {len(self.outcome.lines)}", level=3)
        return self.outcome

    def regionStart_await(self, line: str) -> None:
        """Switch to body collection when line opens the extracted region"""
        comment = markup_scan(line)
        if comment is None or tag_extract(comment.body) is not Tag.START:
            return

        name = attributes_parse(comment.body, Tag.START, self.diagnostics).get("region")
        if name is None:
            self.diagnostics.warn("tag @start without specified region attribute")
            return
        if name == self.region:
            LOG(f"Found start of region {name}", level=3)
            self.state = ParseState.COLLECTING_BODY

    def start_handle(self, attributes: Dict[str, Optional[str]]) -> None:
        """Open a plain region; the @start line itself is not emitted"""
        name = attributes.get("region")
        if name is None:
            self.diagnostics.warn("tag @start without specified region attribute")
            return
        self.stack.push(ActiveRegion(name=name))

    def end_handle(self, attributes: Dict[str, Optional[str]], code_line: str) -> None:
        """
        Close a region, or the extracted region

        A named @end closes the most recent region of that name. An unnamed
        @end closes the most recent region; with an empty stack it closes
        the extracted region, if one is being collected.
        """
        name = attributes.get("region")
        if name is not None:
            if name == self.region:
                self.extraction_finish(code_line)
                return
            if self.stack.pop_byNameOrTop(name) is None:
                self.diagnostics.warn(f'invalid region "{name}" in @end')
        elif self.stack.pop_byNameOrTop() is None:
            if self.region is not None:
                self.extraction_finish(code_line)
                return
            self.diagnostics.warn("`@end` tag without a matching start of the region")

        self.outcome.line_addIfNotBlank(code_line)

    def extraction_finish(self, code_line: str) -> None:
        self.outcome.line_addIfNotBlank(code_line)
        self.state = ParseState.FINISHED

    def operation_handle(
        self, tag: Tag, attributes: Dict[str, Optional[str]], code_line: str
    ) -> None:
        """
        Apply a @highlight, @replace or @link tag

        The new operation is applied to the current line on top of the
        operations of open regions. With a region attribute (even without
        a value) the operation also stays active until the region closes.
        """
        operation = self.operation_build(tag, attributes)
        if operation is None:
            self.outcome.line_addIfNotBlank(code_line)
            return

        if "region" in attributes:
            self.stack.push(ActiveRegion(name=attributes["region"], operation=operation))

        self.outcome.line_addIfNotBlank(operation.apply(code_line).rstrip())

    def operation_build(
        self, tag: Tag, attributes: Dict[str, Optional[str]]
    ) -> Optional[Operation]:
        if tag is Tag.HIGHLIGHT:
            return highlight_create(attributes, self.diagnostics)
        if tag is Tag.REPLACE:
            return replace_create(attributes, self.diagnostics)
        return link_create(attributes, self.diagnostics, self.resolver, self.store, self.context)

    def line_render(self, text: str) -> str:
        """Escape a line and apply the operations of all open regions"""
        result = html_escape(text)
        for operation in self.stack.operations_active():
            result = operation.apply(result)
        return result.rstrip()

    def finish_check(self) -> None:
        """Report regions left open and an extracted region never closed"""
        if len(self.stack):
            names = ", ".join(self.stack.names_list())
            self.diagnostics.warn(f"snippet body contains unclosed regions: {names}")

        if self.region is not None and self.state is not ParseState.FINISHED:
            self.diagnostics.error("external snippet does not contain closing @end tag")
