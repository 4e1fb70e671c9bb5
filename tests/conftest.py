import pytest

from md_styleguide.config import StyleguideConfig
from md_styleguide.pipeline.annotator import Annotator
from md_styleguide.pipeline.builder import DocumentTreeBuilder
from md_styleguide.schemas import RawComment, SourceKind


@pytest.fixture(scope="session")
def sections():
    return {"styles": "", "development": "Dev:"}


@pytest.fixture(scope="session")
def annotator():
    return Annotator(example_identifier="html_example")


@pytest.fixture
def builder(sections):
    return DocumentTreeBuilder(sections)


@pytest.fixture
def config(sections):
    return StyleguideConfig(sections=sections, json_output=None)


@pytest.fixture
def annotate(annotator):
    """Annotate a list of markdown strings as if they came from one file."""

    def _annotate(*texts: str, file_path: str = "./scss/_buttons.scss"):
        return [
            annotator.annotate(
                RawComment(file_path=file_path, text=text, source_kind=SourceKind.MARKUP)
            )
            for text in texts
        ]

    return _annotate


@pytest.fixture
def records(builder, annotate):
    """Build and return the per-section record lists for markdown strings."""

    def _records(*texts: str):
        return builder.build_records(annotate(*texts))

    return _records
