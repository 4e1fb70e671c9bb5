import logging
from pathlib import Path
from typing import Any, Optional

import orjson
import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

DEFAULT_CONFIG_FILE = ".styleguide"


class ConfigError(ValueError):
    """Configuration file could not be read or is invalid."""


class StyleguideConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    sg_comment: str = Field("SG", alias="sgComment")
    example_identifier: str = Field("html_example", alias="exampleIdentifier")
    sort_categories: bool = Field(True, alias="sortCategories")
    sections: dict[str, str] = Field(
        default_factory=lambda: {"styles": "", "development": "[[dev]]"}
    )
    src_folder: Path = Field(Path("."), alias="srcFolder")
    exclude_dirs: list[str] = Field(
        default_factory=lambda: ["target", "node_modules"], alias="excludeDirs"
    )
    file_extensions: dict[str, bool] = Field(
        default_factory=lambda: {
            "scss": True,
            "sass": True,
            "css": True,
            "less": True,
            "md": True,
        },
        alias="fileExtensions",
    )
    json_output: Optional[Path] = Field(
        Path("styleguide/styleguide.json"), alias="jsonOutput"
    )
    header_prefix: str = Field("", alias="headerPrefix")
    custom_variables: dict[str, Any] = Field(
        default_factory=dict, alias="customVariables"
    )
    max_workers: int = Field(8, alias="maxWorkers", ge=1)

    @field_validator("sg_comment")
    @classmethod
    def sg_comment_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("sgComment must not be empty")
        return v.strip()

    @field_validator("sections")
    @classmethod
    def exactly_one_default_section(cls, v: dict[str, str]) -> dict[str, str]:
        defaults = [name for name, ident in v.items() if ident == ""]
        if len(defaults) != 1:
            raise ValueError(
                "Exactly one section must have an empty identifier "
                f"(the default section), got {defaults or 'none'}"
            )
        return v

    @field_validator("file_extensions", mode="before")
    @classmethod
    def normalize_extensions(cls, v: Any) -> Any:
        if isinstance(v, dict):
            return {str(k).lower().lstrip("."): bool(on) for k, on in v.items()}
        return v

    def enabled_extensions(self) -> set[str]:
        return {ext for ext, on in self.file_extensions.items() if on}


def merge_objects(base: dict, override: dict) -> dict:
    """
    Merge `override` into a copy of `base`: nested mappings key by key, anything
    else replaced.

    >>> merge_objects({"a": {"x": 1, "y": 2}, "b": [1]}, {"a": {"y": 3}, "b": [2]})
    {'a': {'x': 1, 'y': 3}, 'b': [2]}
    """
    out = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(out.get(key), dict):
            out[key] = merge_objects(out[key], value)
        else:
            out[key] = value
    return out


def default_config_dict() -> dict[str, Any]:
    return StyleguideConfig().model_dump(mode="json", by_alias=True)


def load_config(path: Path | str = DEFAULT_CONFIG_FILE) -> StyleguideConfig:
    """Read a `.styleguide` file (JSON or YAML) over the defaults."""
    path = Path(path)
    if not path.exists():
        logging.info(f"No {path} configuration file found, using defaults")
        return StyleguideConfig()

    logging.info(f"Reading {path}")
    text = path.read_text(encoding="utf-8")
    try:
        custom = orjson.loads(text)
    except orjson.JSONDecodeError:
        # YAML for hand-written configs.
        try:
            custom = yaml.safe_load(text) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Found {path}, but could not parse it: {e}") from e
    if not isinstance(custom, dict):
        raise ConfigError(f"{path} must contain a mapping, got {type(custom).__name__}")

    # Rewrite snake_case keys to their aliases so both spellings merge alike.
    aliases = {
        name: field.alias
        for name, field in StyleguideConfig.model_fields.items()
        if field.alias
    }
    custom = {aliases.get(k, k): v for k, v in custom.items()}

    merged = default_config_dict()
    if "sections" in custom:
        # Section tables are ordered and replaced wholesale.
        merged.pop("sections")
    merged = merge_objects(merged, custom)
    try:
        return StyleguideConfig.model_validate(merged)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}:\n{e}") from e


def write_default_config(path: Path | str = DEFAULT_CONFIG_FILE) -> Path:
    path = Path(path)
    if path.exists():
        raise FileExistsError(f"Configuration file {path} already exists")
    path.write_bytes(
        orjson.dumps(
            default_config_dict(),
            option=orjson.OPT_INDENT_2 | orjson.OPT_APPEND_NEWLINE,
        )
    )
    return path
