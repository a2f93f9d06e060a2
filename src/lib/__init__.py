"""
snipmark - Snippet markup processor

Turns source-code snippets annotated with trailing markup comments into
highlighted, linked HTML fragments.
"""

__version__ = "1.0.0"

from .log import LOG, Diagnostics, state_connectToLogger
from .parser import SnippetParser, ParseState
from .converter import SnippetConverter
from .resolver import (
    MappingReferenceResolver,
    ReferenceStore,
    SourceResolver,
    TargetsFileError,
)

__all__ = [
    "SnippetParser",
    "ParseState",
    "SnippetConverter",
    "SourceResolver",
    "MappingReferenceResolver",
    "ReferenceStore",
    "TargetsFileError",
    "Diagnostics",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
