"""
Models package for snipmark

Contains data structures and type definitions for the markup engine and
the conversion pipeline.
"""

from .state import ProgramState, pipeline
from .markup import Tag, ALLOWED_ATTRIBUTES, MarkupComment, ActiveRegion, ParseOutcome
from .snippet import SnippetAttributes, SnippetSource

__all__ = [
    "ProgramState",
    "pipeline",
    "Tag",
    "ALLOWED_ATTRIBUTES",
    "MarkupComment",
    "ActiveRegion",
    "ParseOutcome",
    "SnippetAttributes",
    "SnippetSource",
]
