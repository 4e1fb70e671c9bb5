"""
md-styleguide: build a style guide model from SG documentation comments.

Usage:
  md-styleguide build [OPTIONS]
  md-styleguide init [OPTIONS]

Examples:
  md-styleguide init
  md-styleguide build -v
  md-styleguide build --src assets/scss --json-output out/styleguide.json -vv
"""

import logging
from pathlib import Path

import typer

from md_styleguide.config import DEFAULT_CONFIG_FILE, ConfigError, load_config, write_default_config

app = typer.Typer(help=__doc__, no_args_is_help=True)


def setup_logging(verbose: int):
    """Set up logging based on verbosity level."""
    if verbose == 0:
        level = logging.WARNING
    elif verbose == 1:
        level = logging.INFO
    else:  # verbose >= 2
        level = logging.DEBUG

    logging.basicConfig(level=level, format="%(levelname)s:%(name)s:%(message)s")


@app.command("build", help="Extract SG comments and write the style guide JSON.")
def build(
    config_file: Path = typer.Option(
        Path(DEFAULT_CONFIG_FILE), "--config", "-c", help="Configuration file"
    ),
    src: Path = typer.Option(
        None, "--src", help="Folder to scan (overrides srcFolder)"
    ),
    json_output: Path = typer.Option(
        None, "--json-output", "-o", help="JSON output path (overrides jsonOutput)"
    ),
    progress: bool = typer.Option(
        False, "--progress/--no-progress", help="Show a progress bar while extracting"
    ),
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase verbosity (-v for INFO, -vv for DEBUG)",
    ),
) -> None:
    """Load configuration, run the pipeline and write the JSON model."""
    setup_logging(verbose)
    from md_styleguide import UnknownSectionError, create_styleguide

    try:
        config = load_config(config_file)
    except ConfigError as e:
        logging.error(str(e))
        raise typer.Exit(1)

    overrides = {}
    if src is not None:
        overrides["src_folder"] = src
    if json_output is not None:
        overrides["json_output"] = json_output
    if overrides:
        config = config.model_copy(update=overrides)

    try:
        model = create_styleguide(config, progress=progress)
    except UnknownSectionError as e:
        logging.error(str(e))
        raise typer.Exit(1)

    total = sum(len(g["articles"]) for groups in model.sections.values() for g in groups)
    typer.echo(f"Built {total} articles in {len(model.sections)} sections")
    if config.json_output:
        typer.echo(f"Created file: {config.json_output}")


@app.command("init", help="Create a default configuration file.")
def init(
    config_file: Path = typer.Option(
        Path(DEFAULT_CONFIG_FILE), "--config", "-c", help="Configuration file to create"
    ),
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase verbosity (-v for INFO, -vv for DEBUG)",
    ),
) -> None:
    setup_logging(verbose)
    try:
        path = write_default_config(config_file)
    except FileExistsError:
        logging.error(
            f"Configuration file {config_file} already exists. Edit it, or delete it "
            "and run 'init' again."
        )
        raise typer.Exit(1)
    typer.echo(f"Created configuration file: {path}")


if __name__ == "__main__":
    app()
