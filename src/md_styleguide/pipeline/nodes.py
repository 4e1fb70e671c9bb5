from dataclasses import dataclass, field
from typing import Union


@dataclass(frozen=True)
class CategoryNode:
    text: str


@dataclass(frozen=True)
class ArticleNode:
    text: str


@dataclass(frozen=True)
class SectionNode:
    name: str


@dataclass(frozen=True)
class FileNode:
    path: str


@dataclass(frozen=True)
class PriorityNode:
    value: str


@dataclass(frozen=True)
class ExampleNode:
    """Live example code, kept verbatim (unhighlighted)."""

    code: str


@dataclass(frozen=True)
class ParagraphNode:
    html: str


@dataclass(frozen=True)
class DefinitionNode:
    term: str
    description: str


@dataclass(frozen=True)
class HtmlNode:
    """Any other visible block, already rendered (headings, highlighted code, lists)."""

    html: str


Node = Union[
    CategoryNode,
    ArticleNode,
    SectionNode,
    FileNode,
    PriorityNode,
    ExampleNode,
    ParagraphNode,
    DefinitionNode,
    HtmlNode,
]

MARKER_NODES = (CategoryNode, ArticleNode, SectionNode, FileNode, PriorityNode, ExampleNode)


@dataclass
class AnnotatedBlock:
    """The annotated form of one documentation comment."""

    nodes: list[Node] = field(default_factory=list)

    def of_type(self, node_type: type) -> list:
        return [n for n in self.nodes if isinstance(n, node_type)]

    def first(self, node_type: type):
        return next((n for n in self.nodes if isinstance(n, node_type)), None)

    def body(self) -> list[Node]:
        return [n for n in self.nodes if not isinstance(n, MARKER_NODES)]

    def render_body(self) -> str:
        """Render the visible, non-marker nodes to HTML."""
        parts: list[str] = []
        definitions: list[DefinitionNode] = []

        def flush() -> None:
            if definitions:
                items = "\n".join(
                    f'<dt class="sg-code-meta sg-code-meta-type">{d.term}</dt>\n'
                    f'<dd class="sg-code-meta sg-code-meta-value">{d.description}</dd>'
                    for d in definitions
                )
                parts.append(f'<dl class="sg-code-meta-block">\n{items}\n</dl>')
                definitions.clear()

        for node in self.body():
            if isinstance(node, DefinitionNode):
                definitions.append(node)
                continue
            flush()
            if isinstance(node, ParagraphNode):
                parts.append(f"<p>{node.html}</p>")
            else:
                parts.append(node.html)
        flush()
        return "\n".join(parts).strip()
