import logging
import os
import re
from collections.abc import Iterable, Iterator
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path

from tqdm import tqdm

from md_styleguide.config import StyleguideConfig
from md_styleguide.schemas import RawComment, SourceKind


@dataclass(frozen=True)
class SourceFile:
    path: Path
    extension: str
    content: str


def file_extension(path: Path) -> str:
    """
    >>> file_extension(Path("a/_buttons.SCSS"))
    'scss'
    >>> file_extension(Path("Makefile"))
    ''
    """
    return path.suffix.lstrip(".").lower()


def iter_source_files(
    root: Path, extensions: set[str], exclude_dirs: Iterable[str] = ()
) -> Iterator[Path]:
    """Yield files under `root` with an enabled extension, in a stable order."""
    excluded = set(exclude_dirs)
    for dirpath, dirnames, filenames in os.walk(root, followlinks=False):
        # Prune in place so os.walk never descends into excluded directories.
        dirnames[:] = sorted(d for d in dirnames if d not in excluded)
        for name in sorted(filenames):
            path = Path(dirpath) / name
            if file_extension(path) in extensions:
                yield path


def _read(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def read_sources(paths: Iterable[Path], max_workers: int = 8) -> list[SourceFile]:
    """
    Read all files concurrently; returns only once every read has finished, in the
    order `paths` were given.
    """
    paths = list(paths)
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        contents = list(executor.map(_read, paths))
    return [
        SourceFile(path=p, extension=file_extension(p), content=c)
        for p, c in zip(paths, contents)
    ]


def comment_pattern(tag: str, kind: SourceKind) -> re.Pattern:
    tag = re.escape(tag)
    if kind is SourceKind.MARKDOWN_FAMILY:
        return re.compile(rf"< ?{tag}>([\s\S]*?)< ?/{tag} ?>", re.IGNORECASE)
    return re.compile(rf"/\* ?{tag}([\s\S]*?)\*/", re.IGNORECASE)


def display_path(path: Path, root: Path) -> str:
    """
    >>> display_path(Path("src/scss/_buttons.scss"), Path("src"))
    './scss/_buttons.scss'
    """
    try:
        rel = path.relative_to(root)
    except ValueError:
        rel = path
    return f"./{rel.as_posix()}"


def extract_comments(
    source: SourceFile, tag: str = "SG", root: Path | None = None
) -> list[RawComment]:
    """All `tag` comment bodies in `source`, in file order."""
    kind = SourceKind.for_extension(source.extension)
    file_path = display_path(source.path, root) if root else f"./{source.path.as_posix()}"
    return [
        RawComment(file_path=file_path, text=m.group(1), source_kind=kind)
        for m in comment_pattern(tag, kind).finditer(source.content)
    ]


def collect_comments(config: StyleguideConfig, progress: bool = False) -> list[RawComment]:
    root = Path(config.src_folder)
    paths = list(
        iter_source_files(root, config.enabled_extensions(), config.exclude_dirs)
    )
    logging.info(f"Found {len(paths)} candidate files under {root}")
    sources = read_sources(paths, max_workers=config.max_workers)

    comments: list[RawComment] = []
    for source in tqdm(sources, desc="Extracting", unit="file", disable=not progress):
        logging.info(f"Reading file: {display_path(source.path, root)}")
        comments.extend(extract_comments(source, config.sg_comment, root))
    logging.info(f"Extracted {len(comments)} {config.sg_comment} comments")
    return comments
