"""
Snippet source models

Describe the @snippet tag attributes handed to the converter and the
source lines a resolver produces from them.
"""

from dataclasses import dataclass
from typing import List, Optional


@dataclass
class SnippetAttributes:
    """
    Attributes of a snippet tag

    Attributes:
        body: Lines of the inline body, None when the snippet has no body
        file: Value of the file= attribute (external snippet file name)
        class_name: Value of the class= attribute (external snippet class)
        region: Value of the region= attribute (region to extract)
        id: Value of the id= attribute, rendered as the container id
        lang: Value of the lang= attribute, rendered as a language-* class
    """
    body: Optional[List[str]] = None
    file: Optional[str] = None
    class_name: Optional[str] = None
    region: Optional[str] = None
    id: Optional[str] = None
    lang: Optional[str] = None

    def external_is(self) -> bool:
        """True if the snippet references an external file or class"""
        return self.file is not None or self.class_name is not None


@dataclass
class SnippetSource:
    """
    Resolved lines of a snippet

    Attributes:
        lines: Source lines (inline body, or every line of the external file)
        origin: Path of the external file, or "inline"
        region: Extraction target, None to use all lines
    """
    lines: List[str]
    origin: str = "inline"
    region: Optional[str] = None
