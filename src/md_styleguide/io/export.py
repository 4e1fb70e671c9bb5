import logging
from pathlib import Path
from typing import Union

from md_styleguide.schemas import DocumentModel


def export_json(model: DocumentModel, file_name: Union[str, Path]) -> Path:
    """
    Write the document model as pretty-printed JSON, creating parent directories.

    >>> import tempfile
    >>> out = Path(tempfile.mkdtemp()) / "styleguide" / "styleguide.json"
    >>> _ = export_json(DocumentModel(sections={}, menus={}), out)
    >>> out.read_text().startswith("{")
    True
    """
    path = Path(file_name)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(model.to_json(), encoding="utf-8")
    logging.info(f"Created file: {path}")
    return path
