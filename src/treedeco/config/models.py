"""Configuration models describing treedeco settings."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class TreeDecoBaseModel(BaseModel):
    """Shared configuration for treedeco Pydantic models."""

    model_config = ConfigDict(extra="forbid")


class ResolutionSettings(TreeDecoBaseModel):
    """Options governing how the decorations manager resolves nodes.

    Attributes:
        max_depth: Maximum number of uncached ancestors walked while resolving one node.
        reparent_fallback: Behavior when a moved node's new parent cannot be resolved;
            ``detach`` drops inherited decorations, ``keep`` leaves the previous ones.
    """

    max_depth: int = Field(default=4096, ge=1)
    reparent_fallback: Literal["detach", "keep"] = "detach"


class ScannerSettings(TreeDecoBaseModel):
    """Filters applied when mirroring a directory on disk.

    Attributes:
        include_hidden: Whether dot-prefixed entries are included.
        follow_symlinks: Whether symlinked directories are descended into.
    """

    include_hidden: bool = False
    follow_symlinks: bool = False


class LoggingSettings(TreeDecoBaseModel):
    """Runtime logging configuration.

    Attributes:
        level: Level applied to the ``treedeco`` logger.
    """

    level: Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"] = "WARNING"


class TreeDecoConfig(TreeDecoBaseModel):
    """Top-level configuration struct for treedeco.

    Attributes:
        resolution: Decorations manager settings.
        scanner: Filesystem discovery settings.
        logging: Logging configuration.
    """

    resolution: ResolutionSettings = Field(default_factory=ResolutionSettings)
    scanner: ScannerSettings = Field(default_factory=ScannerSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


__all__ = [
    "TreeDecoBaseModel",
    "ResolutionSettings",
    "ScannerSettings",
    "LoggingSettings",
    "TreeDecoConfig",
]
