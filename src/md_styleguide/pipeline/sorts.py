from md_styleguide.schemas import DEFAULT_PRIORITY, FIRST, LAST, ArticleRecord, Priority


def priority_key(priority: Priority) -> tuple[int, float]:
    """
    "first" before every number, "last" after every number.

    >>> sorted([50, "first", "last", 10], key=priority_key)
    ['first', 10, 50, 'last']
    """
    if priority == FIRST:
        return (0, 0.0)
    if priority == LAST:
        return (2, 0.0)
    if isinstance(priority, (int, float)) and not isinstance(priority, bool):
        return (1, float(priority))
    return (1, float(DEFAULT_PRIORITY))


def sort_key(record: ArticleRecord) -> tuple:
    return (priority_key(record.priority), record.category, record.heading)


def sort_section(records: list[ArticleRecord]) -> list[ArticleRecord]:
    """Stable sort of one section by priority, then category, then heading."""
    return sorted(records, key=sort_key)
