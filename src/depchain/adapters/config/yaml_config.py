from __future__ import annotations

from pathlib import Path

import jsonschema
import yaml

from depchain.adapters.errors import ConfigParseError, ConfigReadError
from depchain.domain.config import CheckConfig
from depchain.domain.json_types import JsonDict, as_json_dict, as_string_list
from depchain.domain.package import PackageArea

CONFIG_NAME = ".depchain.yaml"

_STRING_LIST = {"type": "array", "items": {"type": "string", "minLength": 1}}

CONFIG_SCHEMA: JsonDict = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "packages": _STRING_LIST,
        "ignored_imports": _STRING_LIST,
        "ignored_packages": _STRING_LIST,
        "areas": {
            "type": "array",
            "items": {"enum": [area.value for area in PackageArea]},
            "minItems": 1,
        },
    },
}


def _read_raw(path: Path) -> JsonDict:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigReadError(
            f"Could not read {path}", details={"path": str(path)}, cause=e
        ) from e
    try:
        raw: object = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ConfigParseError(
            f"Invalid YAML in {path}", details={"path": str(path)}, cause=e
        ) from e
    if not isinstance(raw, dict):
        raise ConfigParseError(
            f"{path} must contain a mapping", details={"path": str(path)}
        )
    return as_json_dict(raw)


def load_config(root: Path, base: CheckConfig | None = None) -> CheckConfig:
    config = base or CheckConfig()
    path = root / CONFIG_NAME
    if not path.exists():
        return config
    data = _read_raw(path)
    try:
        jsonschema.validate(data, CONFIG_SCHEMA)
    except jsonschema.ValidationError as e:
        raise ConfigParseError(
            f"Invalid {CONFIG_NAME}: {e.message}",
            details={"path": str(path), "field": "/".join(str(p) for p in e.path)},
            cause=e,
        ) from e
    merged = config.extend(
        ignored_imports=as_string_list(data.get("ignored_imports")),
        ignored_packages=as_string_list(data.get("ignored_packages")),
    )
    areas = as_string_list(data.get("areas"))
    return CheckConfig(
        ignored_imports=merged.ignored_imports,
        ignored_packages=merged.ignored_packages,
        package_globs=tuple(as_string_list(data.get("packages"))) or config.package_globs,
        areas=tuple(PackageArea.parse(a) for a in areas) if areas else config.areas,
    )
