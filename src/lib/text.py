"""
Text helpers shared by the engine and the converter
"""

from typing import List

# Order matters: '&' first so produced entities are not escaped again
HTML_ESCAPES = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
)


def html_escape(text: str) -> str:
    """Escape text for use in HTML content and double-quoted attributes"""
    for char, entity in HTML_ESCAPES:
        text = text.replace(char, entity)
    return text


def lines_split(text: str) -> List[str]:
    """Split file contents into lines, dropping carriage returns"""
    return [line.rstrip("\r") for line in text.split("\n")]


def indent_trim(text: str) -> str:
    """
    Remove the indentation common to all non-blank lines

    A blank first or last line is dropped. Blank lines in between lose
    at most the common indentation.

    Example:
        >>> indent_trim("\\n    a\\n      b\\n")
        'a\\n  b'
    """
    lines = text.split("\n")
    indents = [len(line) - len(line.lstrip()) for line in lines if line.strip()]
    common = min(indents) if indents else 0

    last = len(lines) - 1
    result = []
    for index, line in enumerate(lines):
        if index in (0, last) and not line.strip():
            continue
        result.append(line[common:])
    return "\n".join(result)
