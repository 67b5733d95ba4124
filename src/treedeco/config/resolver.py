"""Configuration merging helpers."""

from __future__ import annotations

from collections.abc import Mapping as MappingABC
from copy import deepcopy
from typing import Any, Mapping

from pydantic import ValidationError

from .exceptions import ConfigError
from .models import TreeDecoConfig


def resolve_with_precedence(
    *,
    defaults: TreeDecoConfig,
    file_overrides: Mapping[str, Any] | None = None,
    env_overrides: Mapping[str, Any] | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> TreeDecoConfig:
    """Layer configuration sources over ``defaults``; later sources win.

    Args:
        defaults: Baseline configuration.
        file_overrides: Values read from the YAML file.
        env_overrides: Values parsed from ``TREEDECO__`` environment variables.
        overrides: Explicit values from the caller; keys may be dotted paths.

    Returns:
        TreeDecoConfig: Validated merged configuration.

    Raises:
        ConfigError: If a source is malformed or the merged values are invalid.
    """
    merged = defaults.model_dump(mode="python")
    for name, source in (
        ("file", file_overrides),
        ("environment", env_overrides),
        ("explicit", overrides),
    ):
        if source is None:
            continue
        merged = _deep_merge(merged, _expand_dotted(source, source_name=name))

    try:
        return TreeDecoConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration values: {exc}") from exc


def _expand_dotted(source: Mapping[str, Any], *, source_name: str) -> dict[str, Any]:
    if not isinstance(source, MappingABC):
        raise ConfigError(f"{source_name.capitalize()} overrides must be a mapping.")

    expanded: dict[str, Any] = {}
    for key, value in source.items():
        if not isinstance(key, str):
            raise ConfigError(f"{source_name.capitalize()} override keys must be strings.")
        if isinstance(value, MappingABC):
            value = _expand_dotted(value, source_name=source_name)
        branch: Any = value
        for segment in reversed(key.split(".")[1:]):
            branch = {segment: branch}
        head = key.split(".")[0]
        current = expanded.get(head)
        if isinstance(current, dict) and isinstance(branch, dict):
            expanded[head] = _deep_merge(current, branch)
        elif current is not None and (isinstance(current, dict) or isinstance(branch, dict)):
            raise ConfigError(
                f"{source_name.capitalize()} override for {key} conflicts with another value."
            )
        else:
            expanded[head] = branch
    return expanded


def _deep_merge(base: Mapping[str, Any], overrides: Mapping[str, Any]) -> dict[str, Any]:
    merged = {key: deepcopy(value) for key, value in base.items()}
    for key, value in overrides.items():
        if isinstance(value, MappingABC) and isinstance(merged.get(key), MappingABC):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = deepcopy(value)
    return merged


__all__ = ["resolve_with_precedence"]
