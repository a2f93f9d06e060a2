"""
Scanner for snippet markup comments

Recognizes the trailing markup comment of a line and tokenizes the
attributes that follow the tag keyword.

The scanner works in two tiers:
1. Line scan: find a comment introducer (//, #, rem, REM, ') followed by
   an @tag at the end of the line
2. Attribute scan: split the text after @tag into name[=value] pairs and
   check each name against the tag's allow-list

Example:
    >>> comment = markup_scan("int x = 1;  // @highlight substring=x")
    >>> comment.syntax, comment.body, comment.code
    ('//', '@highlight substring=x', 'int x = 1;')
    >>> attributes_parse(comment.body, Tag.HIGHLIGHT)
    {'substring': 'x'}
"""

import re
from typing import Dict, Optional

from ..models.markup import Tag, MarkupComment, attribute_isAllowed
from .log import Diagnostics

TAG_NAMES = "|".join(tag.value for tag in Tag)

# group 1: comment syntax
# group 2: entire markup comment, @tag + attributes
MARKUP_SPEC = re.compile(rf"(//|#|rem|REM|')\s*(@(?:{TAG_NAMES})(?:\s.+)?)$")

# group 1: tag name only
MARKUP_TAG = re.compile(rf"@({TAG_NAMES})\s*")

# group 1: name, groups 4-6: single-quoted, double-quoted, bare value
ATTRIBUTE = re.compile(r"""(\w+)\s*(=\s*('([^']*)'|"([^"]*)"|(\S*)))?\s*""")


def markup_scan(line: str) -> Optional[MarkupComment]:
    """
    Find a markup comment at the end of a line

    Args:
        line: One line of snippet text

    Returns:
        MarkupComment with the comment syntax, the markup body and the code
        portion of the line, or None if the line carries no markup
    """
    match = MARKUP_SPEC.search(line)
    if match is None:
        return None
    code = line[:match.start()].rstrip()
    return MarkupComment(syntax=match.group(1), body=match.group(2), code=code)


def tag_extract(body: str) -> Optional[Tag]:
    """Get the tag of a markup body, or None if it does not start with one"""
    match = MARKUP_TAG.match(body)
    if match is None:
        return None
    return Tag(match.group(1))


def attributes_parse(
    body: str, tag: Tag, diagnostics: Optional[Diagnostics] = None
) -> Dict[str, Optional[str]]:
    """
    Tokenize the attributes of a markup body

    Strips the "@tag" prefix, then matches repeated name[=value] pairs.
    Names outside the tag's allow-list are reported and dropped. When a
    name occurs twice the last occurrence wins.

    Args:
        body: Markup body starting at '@' (e.g., "@replace regex=x replacement=y")
        tag: Tag the body belongs to
        diagnostics: Sink for invalid attribute warnings

    Returns:
        Dict mapping attribute names to values; a value is None when the
        attribute has no "=value" part or the value is blank
    """
    prefix = f"@{tag.value}"
    text = body[len(prefix):] if body.startswith(prefix) else body
    text = text.lstrip()

    attributes: Dict[str, Optional[str]] = {}
    for match in ATTRIBUTE.finditer(text):
        name = match.group(1)
        if not attribute_isAllowed(tag, name):
            if diagnostics is not None:
                diagnostics.warn(f"invalid attribute {name} used in @{tag.value} tag")
            continue
        attributes[name] = value_pick(match.group(4), match.group(5), match.group(6))
    return attributes


def value_pick(*candidates: Optional[str]) -> Optional[str]:
    """Return the first candidate that is not None or blank"""
    for candidate in candidates:
        if candidate is not None and candidate.strip():
            return candidate
    return None
