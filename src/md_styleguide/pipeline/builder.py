import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional

from md_styleguide.pipeline.formatter import format_sections
from md_styleguide.pipeline.highlight import highlight_markup
from md_styleguide.pipeline.nodes import (
    AnnotatedBlock,
    ArticleNode,
    CategoryNode,
    ExampleNode,
    FileNode,
    PriorityNode,
    SectionNode,
)
from md_styleguide.pipeline.sorts import sort_section
from md_styleguide.schemas import (
    DEFAULT_PRIORITY,
    FIRST,
    LAST,
    ArticleRecord,
    DocumentModel,
    Priority,
)


class UnknownSectionError(ValueError):
    """An explicit `@section` directive names a section that is not configured."""


def make_id(section: str, category: str, heading: str) -> str:
    """
    >>> make_id("styles", "Buttons", "Primary / Large")
    'styles-buttons-primary-large'
    >>> make_id("styles", "Buttons", "")
    'styles-buttons'
    """
    text = f"{section}-{category}-{heading}".lower()
    return re.sub(r"[^\w]+", "-", text).strip("-")


def parse_priority(text: str | None) -> Priority:
    """
    >>> parse_priority("first"), parse_priority(" 10 "), parse_priority("2.5")
    ('first', 10, 2.5)
    >>> parse_priority("soon")
    50
    """
    if text is None:
        return DEFAULT_PRIORITY
    value = text.strip()
    if value.lower() == FIRST:
        return FIRST
    if value.lower() == LAST:
        return LAST
    try:
        number = float(value)
    except ValueError:
        logging.warning(
            f"Priority {value!r} is neither a number nor first/last, "
            f"using {DEFAULT_PRIORITY}"
        )
        return DEFAULT_PRIORITY
    if number != number or number in (float("inf"), float("-inf")):
        logging.warning(
            f"Priority {value!r} is not a finite number, using {DEFAULT_PRIORITY}"
        )
        return DEFAULT_PRIORITY
    return int(number) if number.is_integer() else number


@dataclass
class BuildState:
    """Everything one run mutates. Created fresh for every `build()`."""

    working: dict[str, list[ArticleRecord]]
    id_cache: dict[str, tuple[str, int]] = field(default_factory=dict)
    previous: Optional[ArticleRecord] = None

    @classmethod
    def for_sections(cls, sections: Iterable[str]) -> "BuildState":
        return cls(working={name: [] for name in sections})


class DocumentTreeBuilder:
    """
    Walks annotated blocks in order, resolves each block's section, category and
    heading, merges blocks that share an id and produces the sorted, grouped
    `DocumentModel`.

    `sections` maps section name to the substring that identifies it in a
    category heading. The entry with the empty substring is the default section.
    """

    def __init__(
        self,
        sections: dict[str, str],
        sort_categories: bool = True,
        highlighter: Callable[[str], str] = highlight_markup,
    ):
        defaults = [name for name, ident in sections.items() if ident == ""]
        if len(defaults) > 1:
            raise ValueError(
                f"Only one section may have an empty identifier, got {defaults}"
            )
        self.sections = dict(sections)
        self.default_section = defaults[0] if defaults else None
        self.sort_categories = sort_categories
        self.highlighter = highlighter

    def resolve_section(
        self, category: str, articles: list[str], explicit: Optional[str] = None
    ) -> tuple[Optional[str], str]:
        """
        Return ``(section name, matched identifier)``.

        The first configured non-empty identifier found in the category plus
        article text wins; otherwise the default section. An explicit section
        overrides the result but must be configured.
        """
        haystack = category + "".join(articles)
        section, matched = self.default_section, ""
        for name, ident in self.sections.items():
            if ident and ident in haystack:
                section, matched = name, ident
                break
        if explicit is not None:
            if explicit not in self.sections:
                raise UnknownSectionError(
                    f"Section {explicit!r} is not configured; "
                    f"known sections: {list(self.sections)}"
                )
            section = explicit
        return section, matched

    def extract(
        self, block: AnnotatedBlock, state: BuildState
    ) -> Optional[ArticleRecord]:
        """
        Read one block into a record that is not yet registered in `state`.

        A block without a category continues `state.previous`, so the record
        carries its id. Returns None when there is nothing to continue.
        """
        category_node = block.first(CategoryNode)
        code = [n.code for n in block.of_type(ExampleNode)]
        markup = [self.highlighter(snippet) for snippet in code]
        comment = block.render_body()
        file_node = block.first(FileNode)
        file_location = file_node.path if file_node else ""

        if category_node is None:
            previous = state.previous
            if previous is None:
                logging.debug(
                    f"Dropping block without category in {file_location or 'unknown file'}: "
                    "no previous article to continue"
                )
                return None
            return ArticleRecord(
                id=previous.id,
                category=previous.category,
                heading=previous.heading,
                section_name=previous.section_name,
                priority=previous.priority,
                file_location=file_location,
                code=code,
                markup=markup,
                comment=comment,
            )

        article_texts = [n.text for n in block.of_type(ArticleNode)]
        section_node = block.first(SectionNode)
        section, ident = self.resolve_section(
            category_node.text,
            article_texts,
            section_node.name if section_node else None,
        )

        def clean(text: str) -> str:
            return (text.replace(ident, "") if ident else text).strip()

        category = clean(category_node.text)
        heading = "/ ".join(clean(t) for t in article_texts)
        heading = heading if heading.replace("/ ", "").strip() else ""

        priority_node = block.first(PriorityNode)
        priority = parse_priority(priority_node.value if priority_node else None)
        if not heading:
            priority = FIRST

        return ArticleRecord(
            id=make_id(section or "", category, heading),
            category=category,
            heading=heading,
            section_name=section,
            priority=priority,
            file_location=file_location,
            code=code,
            markup=markup,
            comment=comment,
        )

    def add_block(self, block: AnnotatedBlock, state: BuildState) -> Optional[ArticleRecord]:
        record = self.extract(block, state)
        if record is None:
            return None

        if record.id in state.id_cache:
            section, index = state.id_cache[record.id]
            existing = state.working[section][index]
            existing.merge(record.comment, record.code, record.markup)
            state.previous = existing
            return existing

        if record.section_name is None or record.section_name not in state.working:
            logging.debug(f"Dropping {record.id!r}: no section resolved")
            return None

        records = state.working[record.section_name]
        state.id_cache[record.id] = (record.section_name, len(records))
        records.append(record)
        state.previous = record
        return record

    def build_records(self, blocks: Iterable[AnnotatedBlock]) -> dict[str, list[ArticleRecord]]:
        """Run the blocks and return each section's (optionally sorted) records."""
        state = BuildState.for_sections(self.sections)
        for block in blocks:
            self.add_block(block, state)
        if self.sort_categories:
            return {name: sort_section(records) for name, records in state.working.items()}
        return state.working

    def build(
        self,
        blocks: Iterable[AnnotatedBlock],
        custom_variables: Optional[dict[str, Any]] = None,
    ) -> DocumentModel:
        records = self.build_records(blocks)
        sections, menus = format_sections(records, self.sections)
        model = DocumentModel(
            sections=sections,
            menus=menus,
            custom_variables=dict(custom_variables or {}),
        )
        if model.is_empty():
            logging.warning(
                "No documentation comments found. Check that `sgComment` matches the "
                "delimiter used in your files and that `fileExtensions` enables them."
            )
        return model
