from collections.abc import Iterable, Mapping

from md_styleguide.schemas import ArticleRecord, CategoryGroup, MenuCategory


def group_by_category(records: Iterable[ArticleRecord]) -> dict[str, list[ArticleRecord]]:
    """Partition records by category, in first-seen order."""
    groups: dict[str, list[ArticleRecord]] = {}
    for record in records:
        groups.setdefault(record.category, []).append(record)
    return groups


def format_menu(records: Iterable[ArticleRecord]) -> list[MenuCategory]:
    return [
        MenuCategory(
            category=category,
            id=articles[0].id,
            headings=[
                {"id": a.id, "name": a.heading if a.heading else a.category}
                for a in articles
            ],
        )
        for category, articles in group_by_category(records).items()
    ]


def format_content(records: Iterable[ArticleRecord]) -> list[CategoryGroup]:
    return [
        CategoryGroup(category=category, id=articles[0].id, articles=articles)
        for category, articles in group_by_category(records).items()
    ]


def format_sections(
    records: Mapping[str, list[ArticleRecord]], section_names: Iterable[str]
) -> tuple[dict[str, list[CategoryGroup]], dict[str, list[MenuCategory]]]:
    """Content and menu views for every configured section, empty ones included."""
    sections: dict[str, list[CategoryGroup]] = {}
    menus: dict[str, list[MenuCategory]] = {}
    for name in section_names:
        section_records = records.get(name, [])
        sections[name] = format_content(section_records)
        menus[name] = format_menu(section_records)
    return sections, menus
