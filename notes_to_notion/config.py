from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping

import yaml


class ConfigurationError(RuntimeError):
    """Raised when required configuration is missing or malformed."""


@dataclass
class EnvConfig:
    '''Expected variables in .env file'''

    token: str


@dataclass(frozen=True)
class ConfigField:
    '''Declared field of a pod configuration'''

    description: str
    type: str = "string"
    required: bool = False


@dataclass
class PodConfig:
    '''Destination of an export'''

    connection_id: str
    parent_page_id: str


_TYPE_CHECKS = {
    "string": str,
    "integer": int,
    "boolean": bool,
    "object": dict,
    "array": list,
}

# camelCase spellings accepted in pod config files
_KEY_ALIASES = {
    "connectionId": "connection_id",
    "parentPageId": "parent_page_id",
}


def validate_config(raw: Mapping[str, Any], schema: Mapping[str, ConfigField]) -> None:
    """Check raw config values against a declared schema, reporting every problem at once."""

    problems: List[str] = []
    for name, spec in schema.items():
        value = raw.get(name)
        if value is None or value == "":
            if spec.required:
                problems.append(f"missing required field '{name}' ({spec.description})")
            continue
        expected = _TYPE_CHECKS.get(spec.type)
        if expected is not None and not isinstance(value, expected):
            problems.append(f"field '{name}' must be of type {spec.type}")

    if problems:
        raise ConfigurationError("Invalid pod config: " + "; ".join(problems))


def normalize_keys(raw: Mapping[str, Any]) -> Dict[str, Any]:
    return {_KEY_ALIASES.get(key, key): value for key, value in raw.items()}


def read_pod_config_file(path: Path) -> Dict[str, Any]:
    """Read a YAML pod config file without validating it."""

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Could not parse pod config {path}: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Pod config {path} must be a mapping")
    return normalize_keys(raw)


def load_pod_config(path: Path, schema: Mapping[str, ConfigField]) -> PodConfig:
    """Read a YAML pod config, validate it and return a PodConfig."""

    return build_pod_config(read_pod_config_file(path), schema)


def build_pod_config(raw: Mapping[str, Any], schema: Mapping[str, ConfigField]) -> PodConfig:
    data = normalize_keys(raw)
    validate_config(data, schema)
    return PodConfig(
        connection_id=data["connection_id"]
        ,parent_page_id=data["parent_page_id"]
    )


def load_env_file(path: Path) -> EnvConfig:
    """Parse the provided .env file and return a structured EnvConfig."""

    raw: Dict[str, str] = {}
    for line in path.read_text(encoding="utf-8").splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or "=" not in stripped:
            continue
        key, value = stripped.split("=", 1)
        raw[key.strip()] = value.strip().strip('"').strip("'")

    try:
        return EnvConfig(token=raw["NOTION_TOKEN"])
    except KeyError as missing:
        raise ConfigurationError(f"Missing env var: {missing.args[0]}") from missing
