"""
Markup-specific data models

Type-safe structures for the snippet markup tags, scan results, active
regions and the outcome of a parse.
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from ..lib.operations import Operation


class Tag(Enum):
    """
    Markup tags recognized inside a trailing snippet comment

    The value is the keyword as written after the '@'.
    """
    START = "start"
    END = "end"
    HIGHLIGHT = "highlight"
    REPLACE = "replace"
    LINK = "link"


# Attribute names each tag accepts; anything else is reported and dropped
ALLOWED_ATTRIBUTES: Dict[Tag, FrozenSet[str]] = {
    Tag.START: frozenset({"region"}),
    Tag.END: frozenset({"region"}),
    Tag.HIGHLIGHT: frozenset({"substring", "regex", "region", "type"}),
    Tag.REPLACE: frozenset({"substring", "regex", "region", "replacement"}),
    Tag.LINK: frozenset({"substring", "regex", "region", "target", "type"}),
}


def attribute_isAllowed(tag: Tag, name: str) -> bool:
    """Check if an attribute name may be used with a tag"""
    return name in ALLOWED_ATTRIBUTES[tag]


@dataclass
class MarkupComment:
    """
    Result of finding a markup comment at the end of a line

    Returned by markup_scan() when a line ends with a recognized comment
    introducer followed by one of the markup tags.

    Attributes:
        syntax: The literal comment introducer ("//", "#", "rem", "REM", "'")
        body: The full markup text starting at '@' (e.g., "@highlight substring=x")
        code: The line with the markup comment removed, right-trimmed

    Example:
        For line "foo();  // @highlight substring=foo":
        MarkupComment(syntax="//", body="@highlight substring=foo", code="foo();")
    """
    syntax: str
    body: str
    code: str

    @property
    def continues(self) -> bool:
        """True if the markup attaches to the following line (trailing ':')"""
        return self.body.endswith(":")


@dataclass
class ActiveRegion:
    """
    An open region on the region stack

    Attributes:
        name: Region name, None for anonymous regions opened by a
              region-scoped @highlight/@replace/@link
        operation: Operation applied to lines inside the region, None for
                   plain @start regions
    """
    name: Optional[str]
    operation: Optional['Operation'] = None


@dataclass
class ParseOutcome:
    """
    Result of parsing one snippet body

    Attributes:
        lines: Processed output lines, in order
        warnings: Recoverable diagnostics emitted while parsing
        errors: Data-integrity diagnostics (at most one)
        finished: True if an extraction target was closed by its @end
        text: Joined and de-indented output, set once parsing completes
    """
    lines: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    finished: bool = False
    text: str = ""

    def line_addIfNotBlank(self, line: str) -> None:
        """Append a line to the output unless it is empty or whitespace"""
        if line.strip():
            self.lines.append(line)
