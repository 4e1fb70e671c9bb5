import logging
from collections.abc import Iterable

from md_styleguide.config import StyleguideConfig, load_config  # noqa: F401
from md_styleguide.io.export import export_json
from md_styleguide.io.loader import collect_comments
from md_styleguide.pipeline.annotator import Annotator
from md_styleguide.pipeline.builder import DocumentTreeBuilder, UnknownSectionError  # noqa: F401
from md_styleguide.schemas import DocumentModel, RawComment


def build_document_model(
    comments: Iterable[RawComment], config: StyleguideConfig | None = None
) -> DocumentModel:
    """
    Run the annotator and tree builder over comments that have all been collected.
    Nothing here is shared between calls.
    """
    config = config or StyleguideConfig()
    annotator = Annotator(
        example_identifier=config.example_identifier,
        header_prefix=config.header_prefix,
    )
    blocks = [annotator.annotate(comment) for comment in comments]
    builder = DocumentTreeBuilder(config.sections, sort_categories=config.sort_categories)
    return builder.build(blocks, custom_variables=config.custom_variables)


def create_styleguide(
    config: StyleguideConfig | None = None, progress: bool = False
) -> DocumentModel:
    """
    Collect comments under `config.src_folder`, build the model and write the JSON
    artifact when `config.json_output` is set.
    """
    config = config or StyleguideConfig()
    comments = collect_comments(config, progress=progress)
    model = build_document_model(comments, config)
    if config.json_output:
        export_json(model, config.json_output)
    else:
        logging.debug("No jsonOutput configured, skipping JSON export")
    return model
