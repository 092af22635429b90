"""YAML document loading and schema validation shared by the table and settings loaders."""

from __future__ import annotations

import json
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path
from typing import Any

import yaml
from jsonschema import ValidationError, validators

from stm32detect.core.errors import Stm32DetectError


class UniqueKeyLoader(yaml.SafeLoader):
    """YAML loader that rejects duplicate mapping keys."""


UniqueKeyLoader.yaml_implicit_resolvers = {
    key: list(value) for key, value in yaml.SafeLoader.yaml_implicit_resolvers.items()
}

for first_char, mappings in list(UniqueKeyLoader.yaml_implicit_resolvers.items()):
    UniqueKeyLoader.yaml_implicit_resolvers[first_char] = [
        (tag, regexp)
        for tag, regexp in mappings
        if tag != "tag:yaml.org,2002:bool"
    ]


class DuplicateKeyError(yaml.YAMLError):
    """Raised while constructing a mapping that repeats a key."""


def _construct_mapping(loader: UniqueKeyLoader, node: yaml.Node, deep: bool = False) -> dict[Any, Any]:
    mapping: dict[Any, Any] = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if key in mapping:
            raise DuplicateKeyError(f"Duplicate key '{key}' in YAML document")
        mapping[key] = loader.construct_object(value_node, deep=deep)
    return mapping


UniqueKeyLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_mapping,
)


def load_schema_validator(schema_name: str) -> Any:
    schema_text = resources.files("stm32detect.schemas").joinpath(schema_name).read_text(
        encoding="utf-8"
    )
    schema = json.loads(schema_text)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def read_yaml(
    path: Path | Traversable,
    *,
    error_cls: type[Stm32DetectError] = Stm32DetectError,
) -> dict[str, Any]:
    """Read a YAML mapping from ``path``, raising ``error_cls`` on any problem."""
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise error_cls(f"Could not read {path}: {exc}") from exc

    try:
        loaded = yaml.load(content, Loader=UniqueKeyLoader)
    except yaml.YAMLError as exc:
        raise error_cls(f"Invalid YAML in {path}: {exc}") from exc

    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise error_cls(f"{path} must contain a mapping at root")
    return loaded


def validate(
    doc: dict[str, Any],
    schema_name: str,
    source: Path | Traversable,
    *,
    error_cls: type[Stm32DetectError] = Stm32DetectError,
) -> None:
    validator = load_schema_validator(schema_name)
    try:
        validator.validate(doc)
    except ValidationError as exc:
        path = ".".join(str(p) for p in exc.path)
        where = f" ({path})" if path else ""
        raise error_cls(f"Schema validation failed for {source}{where}: {exc.message}") from exc
