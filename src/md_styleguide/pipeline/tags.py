"""
Marker kinds and the `@directive` vocabulary recognized inside documentation
paragraphs.
"""

import re
from enum import Enum


class MarkerKind(str, Enum):
    CATEGORY = "category"
    ARTICLE = "article"
    SECTION = "section"
    FILE = "file"
    PRIORITY = "priority"
    EXAMPLE = "example"


# Directive name -> accepted spellings. Order matters: the first pattern that
# matches a paragraph run wins.
directive_spellings: dict[str, tuple[str, ...]] = {
    "section": ("section",),
    "category": ("category",),
    "article": ("title", "article"),
    "file": ("file", "files", "location"),
    "priority": ("priority", "order"),
    "requires": ("requires", "require", "req"),
    "returns": ("returns", "return", "ret"),
    "alias": ("alias", "aliases"),
    "param": ("parameter", "param", "arg", "argument"),
    "links": ("source", "reference", "ref", "link"),
}

# Directives that become invisible markers rather than definition entries.
marker_directives: dict[str, MarkerKind] = {
    "section": MarkerKind.SECTION,
    "category": MarkerKind.CATEGORY,
    "article": MarkerKind.ARTICLE,
    "file": MarkerKind.FILE,
    "priority": MarkerKind.PRIORITY,
}

# Definition descriptions that are re-read as code references.
codespan_directives = frozenset({"alias", "requires"})


def compile_directive(spellings: tuple[str, ...]) -> re.Pattern:
    # Longest spelling first so "requires" is not shadowed by "req".
    names = "|".join(sorted(spellings, key=len, reverse=True))
    return re.compile(rf"^@(?:{names})\b:?[ \t]*(.*)\Z", re.IGNORECASE | re.DOTALL)


directive_patterns: dict[str, re.Pattern] = {
    name: compile_directive(spellings)
    for name, spellings in directive_spellings.items()
}


def match_directive(text: str) -> tuple[str, str] | None:
    """
    Return ``(directive, remaining text)`` for the first pattern matching `text`.

    >>> match_directive("@returns: {Color} the tint")
    ('returns', '{Color} the tint')
    >>> match_directive("@order last")
    ('priority', 'last')
    >>> match_directive("@required: nope") is None
    True
    """
    for name, pattern in directive_patterns.items():
        if m := pattern.match(text):
            return name, m.group(1).strip()
    return None


# Inline code reference classes, first match wins.
codespan_patterns: dict[str, re.Pattern] = {
    "variable": re.compile(r"\s*(\${2}[A-Za-z\S]+)[,\s]?"),
    "function": re.compile(r"^\s*((?!@)\S+\(\))$", re.MULTILINE),
    "mixin": re.compile(r"\s*(@\S+\(\))$"),
}
