"""
Converter from snippet tags to HTML

Resolves where a snippet's lines come from, runs the markup parser over
them and wraps the result in the container element.

Snippet kinds:
    - inline: the snippet body is parsed as is
    - external: a file is parsed, optionally restricted to one region
    - hybrid: both are present; the inline body is rendered and the
      external region is checked to produce the same text
    - unresolved: neither is available, a placeholder is rendered
"""

from typing import Optional

from ..config import appsettings
from ..models.snippet import SnippetAttributes, SnippetSource
from .log import Diagnostics, LOG
from .parser import SnippetParser
from .resolver import ReferenceResolver, ReferenceStore, SourceResolver
from .text import html_escape


class SnippetConverter:
    """
    Converts snippet tags to HTML fragments

    Responsibilities:
    - Resolve inline and external snippet sources
    - Parse markup with a shared reference resolver and store
    - Compare hybrid snippet bodies
    - Render the container element with id and lang attributes
    """

    def __init__(
        self,
        sources: Optional[SourceResolver] = None,
        references: Optional[ReferenceResolver] = None,
        store: Optional[ReferenceStore] = None,
        diagnostics: Optional[Diagnostics] = None,
    ) -> None:
        """
        Initialize converter

        Args:
            sources: Resolver for file= and class= attributes
            references: Resolver for @link targets
            store: Store receiving resolved @link references
            diagnostics: Sink for warnings and errors of every conversion
        """
        self.sources = sources
        self.references = references
        self.store = store if store is not None else ReferenceStore()
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()

    def snippet_convert(self, attributes: SnippetAttributes) -> str:
        """
        Convert one snippet to HTML

        Args:
            attributes: Attributes and inline body of the snippet tag

        Returns:
            The processed snippet wrapped in the container element
        """
        external = None
        if attributes.external_is() and self.sources is not None:
            external = self.sources.source_resolve(attributes)

        if attributes.body is not None and external is not None:
            body = self.hybrid_parse(attributes, external)
        elif attributes.body is not None:
            body = self.source_parse(SnippetSource(lines=attributes.body))
        elif external is not None:
            body = self.source_parse(external)
        else:
            self.diagnostics.warn("unable to resolve snippet")
            body = appsettings.unresolved_placeholder

        return self.container_render(body, attributes)

    def source_parse(
        self,
        source: SnippetSource,
        store: Optional[ReferenceStore] = None,
        diagnostics: Optional[Diagnostics] = None,
    ) -> str:
        """Run the markup parser over resolved lines"""
        parser = SnippetParser(
            source.lines,
            region=source.region,
            context=source.origin,
            resolver=self.references,
            store=store if store is not None else self.store,
            diagnostics=diagnostics if diagnostics is not None else self.diagnostics,
        )
        return parser.parse().text

    def hybrid_parse(self, attributes: SnippetAttributes, external: SnippetSource) -> str:
        """
        Parse both bodies of a hybrid snippet and render the inline one

        The external body is only compared, so its diagnostics and
        references go to a scratch sink and store.
        """
        inline_text = self.source_parse(SnippetSource(lines=attributes.body or []))
        external_text = self.source_parse(
            external, store=ReferenceStore(), diagnostics=Diagnostics(forward=False)
        )
        if inline_text != external_text:
            self.diagnostics.warn(
                f"inline and external snippet bodies differ ({external.origin})"
            )
        else:
            LOG(f"Hybrid snippet matches {external.origin}", level=2)
        return inline_text

    def container_render(self, body: str, attributes: SnippetAttributes) -> str:
        """Wrap a body in the container element, with optional id and lang"""
        attrs = ""
        if attributes.id:
            attrs = f' id="{html_escape(attributes.id)}"'
        if attributes.lang:
            body = f'<code class="language-{html_escape(attributes.lang)}">{body}</code>'
        return appsettings.container_wrap(body, attrs)
