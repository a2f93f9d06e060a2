"""
Custom Pygments lexer for snippet markup comments

Highlights the trailing markup comments of snippet source so annotated
files can be previewed in the terminal before conversion.

Token types:
- Comment.Single: Comment introducers (//, #, rem, REM, ')
- Keyword: Markup tags (@start, @end, @highlight, @replace, @link)
- Name.Attribute: Attribute names (region, substring, regex, ...)
- Literal.String: Attribute values
- Punctuation: '=' and the trailing ':' of a continuation marker
- Text: Everything else (the code itself)
"""

from typing import List

from pygments import highlight
from pygments.formatters import TerminalFormatter
from pygments.lexer import RegexLexer, bygroups
from pygments.token import Text, Comment, Keyword, Name, Literal, Punctuation

from ..models.markup import Tag

TAG_NAMES = "|".join(tag.value for tag in Tag)


class SnippetMarkupLexer(RegexLexer):
    """
    Lexer for source code carrying snippet markup comments

    Example:
        foo(); // @highlight substring="foo" type=italic

    Tokens:
        //             → Comment.Single
        @highlight     → Keyword
        substring      → Name.Attribute
        =              → Punctuation
        "foo"          → Literal.String
    """

    name = 'SnippetMarkup'
    aliases = ['snipmark', 'snippet-markup']
    filenames = []

    tokens = {
        'root': [
            # Markup comment: introducer, optional space, tag
            (rf"(//|#|rem|REM|')(\s*)(@(?:{TAG_NAMES}))(?=\s|$)",
             bygroups(Comment.Single, Text, Keyword), 'markup'),

            # Code
            (r"[^\n/#rR']+", Text),
            (r'\n', Text),
            (r'.', Text),
        ],

        'markup': [
            # End of line closes the markup comment
            (r'\n', Text, '#pop'),

            # name=value with quoted or bare value
            (r"""(\w+)(\s*)(=)(\s*)('[^']*'|"[^"]*"|[^\s:]+(?::(?!\s*$)[^\s:]*)*)""",
             bygroups(Name.Attribute, Text, Punctuation, Text, Literal.String)),

            # Continuation marker
            (r':(?=\s*$)', Punctuation),

            # Attribute without value
            (r'\w+', Name.Attribute),

            (r'[ \t]+', Text),
            (r'.', Comment.Single),
        ],
    }


def get_lexer() -> SnippetMarkupLexer:
    """
    Get the SnippetMarkupLexer instance

    Returns:
        SnippetMarkupLexer instance ready for use with Pygments
    """
    return SnippetMarkupLexer()


def source_preview(lines: List[str]) -> str:
    """
    Render snippet lines with markup comments highlighted for a terminal

    Args:
        lines: Snippet source lines

    Returns:
        ANSI-colored text
    """
    return highlight("\n".join(lines) + "\n", get_lexer(), TerminalFormatter())
