"""
Markup operations for @highlight, @replace and @link

An operation is a small immutable value with an apply(line) method. The
builders turn a tag's validated attributes into an operation, or report a
warning and return None when the tag cannot be honored.

All operations work on text that is already HTML-escaped. Every operation
targets the same three scopes:
    - substring=...  all literal occurrences
    - regex=...      all regex matches
    - neither        the whole line

When both substring and regex are given, both are applied, substring first.
"""

import re
from dataclasses import dataclass
from typing import Dict, Optional, Tuple, Union

from ..config import appsettings
from .log import Diagnostics, LOG
from .text import html_escape

# @highlight type -> (opening, closing) marker
HIGHLIGHT_MARKERS: Dict[str, Tuple[str, str]] = {
    "bold": ("<b>", "</b>"),
    "italic": ("<i>", "</i>"),
    "highlighted": ("<mark>", "</mark>"),
}

# $1, $2 ... group references inside a regex replacement
GROUP_REFERENCE = re.compile(r"\$(\d+)")


@dataclass(frozen=True)
class Scope:
    """
    Text an operation targets

    Attributes:
        substring: Literal text to match, or None
        regex: Compiled pattern to match, or None
    """
    substring: Optional[str] = None
    regex: Optional["re.Pattern[str]"] = None

    def wholeLine_is(self) -> bool:
        """True if neither substring nor regex was given"""
        return self.substring is None and self.regex is None


@dataclass(frozen=True)
class Highlight:
    """Wrap the scope in a bold, italic or highlighted marker pair"""
    scope: Scope
    opening: str
    closing: str

    def wrap(self, text: str) -> str:
        return f"{self.opening}{text}{self.closing}"

    def apply(self, line: str) -> str:
        return scope_wrap(self.scope, line, self.wrap)


@dataclass(frozen=True)
class Replace:
    """Replace the scope with a fixed replacement"""
    scope: Scope
    replacement: str

    def apply(self, line: str) -> str:
        result = line
        if self.scope.substring is not None:
            result = result.replace(self.scope.substring, self.replacement)
        if self.scope.regex is not None:
            result = self.scope.regex.sub(
                lambda match: replacement_expand(self.replacement, match), result
            )
        if self.scope.wholeLine_is():
            result = self.replacement
        return result


@dataclass(frozen=True)
class Link:
    """Wrap the scope in an anchor carrying a stored reference id"""
    scope: Scope
    reference_id: str

    def wrap(self, text: str) -> str:
        attribute = appsettings.link_attribute
        return f'<a {attribute}="{html_escape(self.reference_id)}">{text}</a>'

    def apply(self, line: str) -> str:
        return scope_wrap(self.scope, line, self.wrap)


Operation = Union[Highlight, Replace, Link]


def scope_wrap(scope: Scope, line: str, wrap) -> str:
    """
    Wrap every targeted piece of a line

    Args:
        scope: Substring and/or regex to target
        line: Escaped line text
        wrap: Callable wrapping a piece of text in markers

    Returns:
        Line with substring occurrences, then regex matches, wrapped; the
        whole line is wrapped when the scope names neither
    """
    result = line
    if scope.substring is not None:
        result = result.replace(scope.substring, wrap(scope.substring))
    if scope.regex is not None:
        result = scope.regex.sub(lambda match: wrap(match.group(0)), result)
    if scope.wholeLine_is():
        result = wrap(result)
    return result


def replacement_expand(replacement: str, match: "re.Match[str]") -> str:
    """
    Expand $n group references of a regex replacement

    References to groups that do not exist, or did not participate in the
    match, expand to an empty string.
    """
    def group_get(ref: "re.Match[str]") -> str:
        index = int(ref.group(1))
        if index > (match.re.groups or 0):
            return ""
        return match.group(index) or ""

    return GROUP_REFERENCE.sub(group_get, replacement)


def scope_build(
    attributes: Dict[str, Optional[str]], diagnostics: Diagnostics
) -> Tuple[bool, Scope]:
    """
    Build the scope of an operation from its attributes

    Returns:
        Tuple of (ok, scope); ok is False if the regex does not compile
    """
    substring = attributes.get("substring")
    pattern = attributes.get("regex")
    regex = None
    if pattern is not None:
        try:
            regex = re.compile(pattern)
        except re.error as e:
            diagnostics.warn(f"invalid regex {pattern} ({e})")
            return False, Scope()
    return True, Scope(substring=substring, regex=regex)


def highlight_create(
    attributes: Dict[str, Optional[str]], diagnostics: Diagnostics
) -> Optional[Highlight]:
    """
    Build a @highlight operation

    Args:
        attributes: Validated attributes (substring, regex, region, type)
        diagnostics: Sink for warnings

    Returns:
        Highlight operation, or None for an unknown type or a bad regex
    """
    kind = attributes.get("type")
    kind = kind.lower() if kind is not None else "bold"
    markers = HIGHLIGHT_MARKERS.get(kind)
    if markers is None:
        diagnostics.warn(f"invalid argument for `@highlight` type {kind}")
        return None

    ok, scope = scope_build(attributes, diagnostics)
    if not ok:
        return None
    return Highlight(scope=scope, opening=markers[0], closing=markers[1])


def replace_create(
    attributes: Dict[str, Optional[str]], diagnostics: Diagnostics
) -> Optional[Replace]:
    """Build a @replace operation, None if replacement is missing"""
    replacement = attributes.get("replacement")
    if replacement is None:
        diagnostics.warn("specify `replacement` attribute for @replace markup tag")
        return None

    ok, scope = scope_build(attributes, diagnostics)
    if not ok:
        return None
    return Replace(scope=scope, replacement=replacement)


def link_create(
    attributes: Dict[str, Optional[str]],
    diagnostics: Diagnostics,
    resolver,
    store,
    context: str,
) -> Optional[Link]:
    """
    Build a @link operation

    The target is resolved through the reference resolver; a resolved
    reference is put in the reference store, whose id ends up in the anchor.

    Args:
        attributes: Validated attributes (substring, regex, region, target, type)
        diagnostics: Sink for warnings
        resolver: Object with reference_resolve(target, context)
        store: ReferenceStore receiving the resolved reference
        context: Origin of the snippet the tag appears in

    Returns:
        Link operation, or None if the target is missing or unresolved
    """
    target = attributes.get("target")
    if target is None:
        diagnostics.warn("specify `target` attribute for @link markup tag")
        return None

    ok, scope = scope_build(attributes, diagnostics)
    if not ok:
        return None

    reference = resolver.reference_resolve(target, context) if resolver is not None else None
    if reference is None:
        diagnostics.warn(f"unresolved target for @link tag: {target}")
        return None

    reference_id = store.store(reference)
    LOG(f"Linked target {target} as {reference_id}", level=3)
    return Link(scope=scope, reference_id=reference_id)
