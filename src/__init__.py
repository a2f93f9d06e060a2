"""
snipmark - Snippet markup processor

Interprets @start, @end, @highlight, @replace and @link markup comments in
source-code snippets and renders the result as HTML.
"""

__version__ = "1.0.0"

from .lib import SnippetParser, SnippetConverter, Diagnostics, LOG, state_connectToLogger

__all__ = ["SnippetParser", "SnippetConverter", "Diagnostics", "LOG", "state_connectToLogger", "__version__"]
