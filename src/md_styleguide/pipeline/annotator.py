"""
Markdown annotator: turns one documentation comment into an `AnnotatedBlock`.

Level-1 headings become category/article markers, `@directive` paragraphs become
metadata markers or definition entries, fenced code tagged with the example
identifier becomes a live example, and inline code spans that look like global
variables, functions or mixins get reference ids.
"""

import html
import logging
import re
from typing import Any

from markdown_it import MarkdownIt
from markdown_it.common.utils import escapeHtml
from markdown_it.token import Token

from md_styleguide.pipeline.highlight import codeblock
from md_styleguide.pipeline.nodes import (
    AnnotatedBlock,
    ArticleNode,
    CategoryNode,
    DefinitionNode,
    ExampleNode,
    FileNode,
    HtmlNode,
    Node,
    ParagraphNode,
    PriorityNode,
    SectionNode,
)
from md_styleguide.pipeline.tags import (
    MarkerKind,
    codespan_directives,
    codespan_patterns,
    marker_directives,
    match_directive,
)
from md_styleguide.schemas import RawComment

_TAG_RE = re.compile(r"<\/?[^>]+(>|$)")
_UNESCAPED_SLASH = re.compile(r"(?<!\\)/")


def strip_tags(markup: str) -> str:
    """
    >>> strip_tags("<em>Buttons</em> &amp; links")
    'Buttons & links'
    """
    return html.unescape(_TAG_RE.sub("", markup))


def heading_slug(text: str) -> str:
    """
    Anchor id for an ordinary heading.

    >>> heading_slug("<code>@mixin-name()</code> Usage")
    'mixin-name-usage'
    >>> heading_slug("$$brand Colors")
    'brand-colors'
    """
    text = strip_tags(text).strip().lower()
    text = re.sub(r"[@$()]", "", text)
    return re.sub(r"[^\w]+", "-", text).strip("-")


def reference_slug(text: str) -> str:
    """
    >>> reference_slug("$brand-color")
    'brand-color'
    """
    text = re.sub(r"[@$()]", "", text)
    return re.sub(r"[\W\s]+", "-", text).strip("-")


class Annotator:
    """
    Renderer override around markdown-it. One instance serves a whole run; it keeps
    no state between `annotate` calls.
    """

    def __init__(
        self,
        example_identifier: str = "html_example",
        header_prefix: str = "",
        lang_prefix: str = "",
    ):
        self.example_identifier = example_identifier
        self.header_prefix = header_prefix
        self.lang_prefix = lang_prefix
        self.md = MarkdownIt("commonmark", {"breaks": True, "html": True})
        self.md.enable(["table", "strikethrough"])
        self.md.renderer.rules["code_inline"] = self._render_code_inline

    # Inline rules

    def _render_code_inline(
        self, tokens: list[Token], idx: int, options: Any, env: dict
    ) -> str:
        return self.codespan(tokens[idx].content)

    def codespan(self, text: str) -> str:
        """Classify an inline code span as a global variable/function/mixin reference."""
        for kind, pattern in codespan_patterns.items():
            if m := pattern.search(text):
                name = m.group(1).replace("$$", "$", 1).strip()
                ref_id = f"{kind}-{reference_slug(name)}"
                shown = escapeHtml(name)
                return (
                    f'<code id="{ref_id}" '
                    f'class="sg-global-{kind} sg-code sg-codespan sg-global" '
                    f'data-code-id="{shown}">{shown}</code>'
                )
        return f'<code class="sg-code sg-codespan">{escapeHtml(text)}</code>'

    def render_inline(self, text: str) -> str:
        return self.md.renderInline(text).strip()

    # Block handlers

    def heading(self, raw: str, level: int, nested: bool = False) -> list[Node]:
        if level == 1 and not nested:
            category, *rest = _UNESCAPED_SLASH.split(raw, maxsplit=1)
            nodes: list[Node] = [CategoryNode(self._text(category))]
            if rest:
                nodes.extend(
                    ArticleNode(self._text(segment))
                    for segment in _UNESCAPED_SLASH.split(rest[0])
                )
            else:
                # A category may exist without any article heading.
                nodes.append(ArticleNode(""))
            return nodes

        rendered = self.render_inline(raw)
        slug = self.header_prefix + heading_slug(rendered)
        css = "sg-heading-nested" if nested else f"sg-heading-{level}"
        return [
            HtmlNode(
                f'<h{level} id="{slug}" class="sg-heading {css}">'
                f'<a class="sg-heading-anchor" href="#{slug}">{rendered}</a>'
                f"</h{level}>"
            )
        ]

    def code(self, text: str, lang: str | None) -> Node:
        text = text.rstrip("\n")
        if lang and lang == self.example_identifier:
            return ExampleNode(text.strip())
        return HtmlNode(codeblock(text, lang, self.lang_prefix))

    def paragraph(self, raw: str) -> list[Node]:
        """
        Directive paragraphs (first line starting with `@`) become markers or
        definitions; anything else is a plain paragraph.
        """
        if not raw.startswith("@"):
            return [ParagraphNode(self.render_inline(raw))]

        nodes: list[Node] = []
        for run in self._directive_runs(raw):
            found = match_directive(run)
            if found is None:
                nodes.append(ParagraphNode(self.render_inline(run)))
                continue
            name, value = found
            if name in marker_directives:
                # Marker values are one line; the rest of the run is prose.
                value, _, rest = value.partition("\n")
                nodes.append(self._marker(marker_directives[name], value))
                if rest.strip():
                    nodes.append(ParagraphNode(self.render_inline(rest.strip())))
            elif name in codespan_directives:
                nodes.append(DefinitionNode(name, self.codespan(value)))
            else:
                nodes.append(DefinitionNode(name, self.render_inline(value)))
        return nodes

    @staticmethod
    def _directive_runs(raw: str) -> list[str]:
        runs: list[list[str]] = []
        for line in raw.split("\n"):
            if line.startswith("@") or not runs:
                runs.append([line])
            else:
                runs[-1].append(line)
        return ["\n".join(run) for run in runs]

    def _marker(self, kind: MarkerKind, value: str) -> Node:
        text = strip_tags(self.render_inline(value)).strip()
        if kind is MarkerKind.SECTION:
            return SectionNode(text)
        if kind is MarkerKind.CATEGORY:
            return CategoryNode(text)
        if kind is MarkerKind.ARTICLE:
            return ArticleNode(text)
        if kind is MarkerKind.FILE:
            return FileNode(text)
        return PriorityNode(text)

    def _text(self, raw: str) -> str:
        return strip_tags(self.render_inline(raw.replace("\\/", "/")))

    # Driver

    def annotate_markdown(self, text: str) -> list[Node]:
        tokens = self.md.parse(text)
        nodes: list[Node] = []
        seen_category = False
        i = 0
        while i < len(tokens):
            token = tokens[i]
            j = i + 1
            if token.nesting == 1:
                depth = 1
                while depth and j < len(tokens):
                    depth += tokens[j].nesting
                    j += 1
            block = tokens[i:j]
            i = j

            if token.type == "heading_open":
                level = int(token.tag[1:])
                nested = level == 1 and seen_category
                nodes.extend(self.heading(block[1].content, level, nested=nested))
                seen_category = seen_category or level == 1
            elif token.type == "paragraph_open":
                nodes.extend(self.paragraph(block[1].content))
            elif token.type in ("fence", "code_block"):
                lang = token.info.strip().split()[0] if token.info.strip() else None
                nodes.append(self.code(token.content, lang))
            else:
                rendered = self.md.renderer.render(block, self.md.options, {})
                if rendered.strip():
                    nodes.append(HtmlNode(rendered.strip()))
        return nodes

    def annotate(self, comment: RawComment) -> AnnotatedBlock:
        nodes = self.annotate_markdown(comment.text)
        nodes.append(FileNode(comment.file_path))
        logging.debug(f"Annotated {comment.file_path}: {len(nodes)} nodes")
        return AnnotatedBlock(nodes)
