"""
Configuration models for PlayNow.

This module provides structured, immutable configuration using Pydantic models.
Every setting the tool reads (naming conventions, default content, editor
launching) lives in one PlayNowConfig value that is built once per process and
passed explicitly to the resolver, the manager and the launcher.

Example:
    >>> from playnow_config import PlayNowConfig, NamingConfig
    >>> config = PlayNowConfig(
    ...     naming=NamingConfig(page_name_prefix="Scratch-")
    ... )
    >>> config.naming.page_name_date_format
    '%H%M%S'
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from error_handling import ConfigurationError


CONFIG_ENV_VAR = "PLAYNOW_CONFIG"
DEFAULT_CONFIG_PATH = Path("~/.playnow.json")

MIN_WAIT_SECONDS_BEFORE_OPENING_PAGE = 3


class PlaygroundConfig(BaseModel):
    """Where playgrounds go and what a new page contains."""

    default_directory: Optional[Path] = Field(
        default=None,
        description="Directory used when no path is given (falls back to ~/Desktop)"
    )
    target_platform: str = Field(
        default="osx",
        description="Value of the manifest's target-platform attribute"
    )
    contents_swift_string: str = Field(
        default='var str = "Hello, playground"',
        description="Page body used when no content is supplied"
    )
    make_used_if_from_services: bool = Field(
        default=True,
        description="Protect pages created from Services against unused-page pruning"
    )

    @field_validator("default_directory")
    @classmethod
    def _expand_default_directory(cls, value: Optional[Path]) -> Optional[Path]:
        if value is None:
            return None
        return value.expanduser()

    model_config = ConfigDict(frozen=True)


class NamingConfig(BaseModel):
    """Naming conventions for bundles and pages.

    Date formats are strftime patterns.
    """

    playground_name_prefix: str = Field(
        default="PlayNow-",
        description="Prefix of generated playground bundle names"
    )
    playground_name_date_format: str = Field(
        default="%Y%m%d",
        description="strftime pattern appended to the playground prefix"
    )
    page_name_prefix: str = Field(
        default="",
        description="Prefix of generated page names"
    )
    page_name_date_format: str = Field(
        default="%H%M%S",
        description="strftime pattern appended to the page prefix"
    )

    model_config = ConfigDict(frozen=True)


class LauncherConfig(BaseModel):
    """Editor launching configuration."""

    provider_type: str = Field(
        default="macos",
        description="Launcher type: 'macos' or 'dry-run'"
    )
    editor_application: Optional[str] = Field(
        default=None,
        description="Path or name of an alternate editor application (default: system default for .playground)"
    )
    wait_seconds_before_opening_page: int = Field(
        default=MIN_WAIT_SECONDS_BEFORE_OPENING_PAGE,
        description="Grace period before opening the new page in an existing playground"
    )
    launch_timeout: float = Field(
        default=60.0,
        ge=0.0,
        description="Maximum seconds to wait for the editor to finish launching"
    )
    poll_interval: float = Field(
        default=1.0,
        gt=0.0,
        description="Seconds between checks while waiting for the editor"
    )

    @field_validator("wait_seconds_before_opening_page")
    @classmethod
    def _at_least_minimum_wait(cls, value: int) -> int:
        return max(value, MIN_WAIT_SECONDS_BEFORE_OPENING_PAGE)

    model_config = ConfigDict(frozen=True)


class InvocationConfig(BaseModel):
    """Coordination between the command-line and Services entry points."""

    default_delay: float = Field(
        default=1.0,
        ge=0.0,
        description="Seconds the default conversion waits for a Services request"
    )

    model_config = ConfigDict(frozen=True)


class DebugConfig(BaseModel):
    """Debugging and logging configuration."""

    debug_mode: bool = Field(
        default=True,
        description="Print events to the console"
    )

    model_config = ConfigDict(frozen=True)


class PlayNowConfig(BaseModel):
    """
    Main configuration object for PlayNow.

    Example:
        >>> config = PlayNowConfig.load()          # ~/.playnow.json or defaults
        >>> config = PlayNowConfig.from_file("playnow.json")
    """

    playground: PlaygroundConfig = Field(
        default_factory=PlaygroundConfig,
        description="Playground location and content configuration"
    )
    naming: NamingConfig = Field(
        default_factory=NamingConfig,
        description="Bundle and page naming configuration"
    )
    launcher: LauncherConfig = Field(
        default_factory=LauncherConfig,
        description="Editor launching configuration"
    )
    invocation: InvocationConfig = Field(
        default_factory=InvocationConfig,
        description="Entry point coordination configuration"
    )
    logging: DebugConfig = Field(
        default_factory=DebugConfig,
        description="Debug and logging configuration"
    )

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> PlayNowConfig:
        """
        Load configuration from a JSON file.

        Raises:
            ConfigurationError: if the file is not valid JSON or holds invalid settings
            OSError: if the file cannot be read
        """
        path = Path(path).expanduser()
        raw = path.read_text(encoding="utf-8")
        try:
            data = json.loads(raw) if raw.strip() else {}
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in configuration file {path}: {e}") from e
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration in {path}: {e}") from e

    @classmethod
    def load(cls, path: Optional[Union[str, Path]] = None) -> PlayNowConfig:
        """
        Load configuration, looking at `path`, then $PLAYNOW_CONFIG, then ~/.playnow.json.

        An explicitly given file must exist; the implicit locations are optional
        and a missing file yields the defaults.
        """
        if path is not None:
            return cls.from_file(path)

        env_path = os.environ.get(CONFIG_ENV_VAR)
        if env_path:
            return cls.from_file(env_path)

        default_path = DEFAULT_CONFIG_PATH.expanduser()
        if default_path.is_file():
            return cls.from_file(default_path)
        return cls()
