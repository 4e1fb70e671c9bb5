from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Literal, Optional, TypedDict, Union

import orjson

# Priority sentinels. "first" sorts before every number, "last" after.
FIRST = "first"
LAST = "last"
DEFAULT_PRIORITY = 50

Priority = Union[int, float, Literal["first", "last"]]

MARKDOWN_EXTENSIONS = frozenset({"md", "markdown", "mdown"})


class SourceKind(str, Enum):
    """Which comment syntax a source file uses."""

    MARKUP = "markup"
    MARKDOWN_FAMILY = "markdownFamily"

    @classmethod
    def for_extension(cls, extension: str) -> "SourceKind":
        """
        >>> SourceKind.for_extension("mdown") is SourceKind.MARKDOWN_FAMILY
        True
        >>> SourceKind.for_extension(".SCSS").value
        'markup'
        """
        if extension.lower().lstrip(".") in MARKDOWN_EXTENSIONS:
            return cls.MARKDOWN_FAMILY
        return cls.MARKUP


@dataclass(frozen=True)
class RawComment:
    """
    One extracted documentation comment body, tagged with its file.
    """

    file_path: str
    text: str
    source_kind: SourceKind = SourceKind.MARKUP


@dataclass
class ArticleRecord:
    id: str
    category: str
    heading: str
    section_name: Optional[str]
    priority: Priority = DEFAULT_PRIORITY
    code: list[str] = field(default_factory=list)
    markup: list[str] = field(default_factory=list)
    comment: str = ""
    file_location: str = ""

    def merge(self, comment: str, code: list[str], markup: list[str]) -> None:
        """Append a continuation's body and union its examples into this record."""
        self.comment += comment
        for snippet in code:
            if snippet not in self.code:
                self.code.append(snippet)
        for snippet in markup:
            if snippet not in self.markup:
                self.markup.append(snippet)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class MenuHeading(TypedDict):
    id: str
    name: str


class MenuCategory(TypedDict):
    """Navigation entry for one category of a section."""

    category: str
    id: str
    headings: list[MenuHeading]


class CategoryGroup(TypedDict):
    """Content entry for one category of a section."""

    category: str
    id: str
    articles: list[ArticleRecord]


@dataclass
class DocumentModel:
    sections: dict[str, list[CategoryGroup]]
    menus: dict[str, list[MenuCategory]]
    custom_variables: dict[str, Any] = field(default_factory=dict)

    def is_empty(self) -> bool:
        return not any(self.sections.values())

    def to_dict(self) -> dict[str, Any]:
        """
        Plain nested mapping handed to the template stage.
        """
        return {
            "sections": {
                name: [
                    {
                        "category": group["category"],
                        "id": group["id"],
                        "articles": [a.to_dict() for a in group["articles"]],
                    }
                    for group in groups
                ]
                for name, groups in self.sections.items()
            },
            "menus": {
                name: [
                    {
                        "category": menu["category"],
                        "id": menu["id"],
                        "headings": [dict(h) for h in menu["headings"]],
                    }
                    for menu in menus
                ]
                for name, menus in self.menus.items()
            },
            "custom_variables": self.custom_variables,
        }

    def to_json(self) -> str:
        """
        Serialize the model to pretty-printed, newline-terminated JSON.

        >>> DocumentModel(sections={"styles": []}, menus={"styles": []}).to_json().splitlines()[0]
        '{'
        """
        buf = orjson.dumps(
            self.to_dict(),
            option=orjson.OPT_INDENT_2 | orjson.OPT_APPEND_NEWLINE,
        )
        return buf.decode("utf-8")
