import logging
from pathlib import Path

import orjson
import pytest

from md_styleguide.config import (
    ConfigError,
    StyleguideConfig,
    load_config,
    write_default_config,
)


def test_defaults():
    config = StyleguideConfig()
    assert config.sg_comment == "SG"
    assert config.example_identifier == "html_example"
    assert config.sections == {"styles": "", "development": "[[dev]]"}
    assert config.enabled_extensions() == {"scss", "sass", "css", "less", "md"}
    assert config.json_output == Path("styleguide/styleguide.json")


def test_missing_file_uses_defaults(tmp_path, caplog):
    caplog.set_level(logging.INFO)
    config = load_config(tmp_path / ".styleguide")
    assert config == StyleguideConfig()
    assert "using defaults" in caplog.text


def test_json_config_merges_over_defaults(tmp_path):
    path = tmp_path / ".styleguide"
    path.write_text(
        '{\n\t"sgComment": "DOC",\n\t"fileExtensions": {".SCSS": false, "styl": true},\n'
        '\t"sections": {"dev": "Dev:", "main": ""},\n\t"customVariables": {"title": "UI"}\n}',
        encoding="utf-8",
    )
    config = load_config(path)
    assert config.sg_comment == "DOC"
    assert config.file_extensions["scss"] is False
    assert config.file_extensions["styl"] is True
    assert config.file_extensions["css"] is True
    assert list(config.sections.items()) == [("dev", "Dev:"), ("main", "")]
    assert config.custom_variables == {"title": "UI"}


def test_yaml_config_with_snake_case_keys(tmp_path):
    path = tmp_path / "styleguide.yaml"
    path.write_text(
        "example_identifier: live\nsort_categories: false\njson_output: null\n",
        encoding="utf-8",
    )
    config = load_config(path)
    assert config.example_identifier == "live"
    assert config.sort_categories is False
    assert config.json_output is None


@pytest.mark.parametrize(
    "sections",
    [{"a": "A", "b": "B"}, {"a": "", "b": ""}],
)
def test_exactly_one_default_section(tmp_path, sections):
    path = tmp_path / ".styleguide"
    path.write_bytes(orjson.dumps({"sections": sections}))
    with pytest.raises(ConfigError, match="empty identifier"):
        load_config(path)


def test_unparsable_config(tmp_path):
    path = tmp_path / ".styleguide"
    path.write_text("{ not: [valid", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(path)


def test_config_must_be_mapping(tmp_path):
    path = tmp_path / ".styleguide"
    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ConfigError, match="mapping"):
        load_config(path)


def test_write_default_config_round_trips(tmp_path):
    path = write_default_config(tmp_path / ".styleguide")
    data = orjson.loads(path.read_bytes())
    assert data["sgComment"] == "SG"
    assert data["jsonOutput"] == "styleguide/styleguide.json"
    assert load_config(path) == StyleguideConfig()
    with pytest.raises(FileExistsError):
        write_default_config(path)
