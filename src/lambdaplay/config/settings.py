"""LambdaSettings: one frozen object built from every configuration layer.

Layers, strongest first:

1. keyword arguments (the global CLI flags)
2. ``LAMBDAPLAY_*`` environment variables, ``__`` between section and key
3. the ``lambdaplay.toml`` found by :func:`~lambdaplay.config.discovery.find_config`
4. defaults from :mod:`lambdaplay.config.models`
"""

from __future__ import annotations

import tomllib
from contextvars import ContextVar
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, TomlConfigSettingsSource

from lambdaplay.config.discovery import find_config
from lambdaplay.config.models import SessionConfig, StorageConfig, WorkspaceConfig

# The TOML file for the settings object under construction.
_toml_file: ContextVar[Path | None] = ContextVar("lambdaplay_toml_file", default=None)


class LambdaSettings(BaseSettings):
    """Everything a command needs to know about how it was invoked.

    Built once by the root CLI group and kept on the
    :class:`~lambdaplay.commands._context.AppContext`.

    Attributes:
        project_root: Directory holding the config file, else the CWD.
        config_path: The TOML file that was read, if any.
        ephemeral: Keep the library in memory only.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "LAMBDAPLAY_",
        "env_nested_delimiter": "__",
    }

    project_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False
    ephemeral: bool = False

    workspace: WorkspaceConfig = Field(default_factory=WorkspaceConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    session: SessionConfig = Field(default_factory=SessionConfig)

    @property
    def data_dir(self) -> Path:
        """Database directory; relative paths hang off the project root."""
        path = Path(self.storage.data_dir).expanduser()
        return path if path.is_absolute() else self.project_root / path

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        toml = TomlConfigSettingsSource(settings_cls, toml_file=_toml_file.get())
        return init_settings, env_settings, toml

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        project_root: Path | None = None,
        **cli_flags: Any,
    ) -> LambdaSettings:
        """Resolve the config file and project root, then merge *cli_flags* on top.

        An explicit *config_path* that does not exist is ignored. Malformed
        TOML is reported as a :class:`click.ClickException`.
        """
        if config_path:
            candidate = Path(config_path)
            toml_path = candidate if candidate.is_file() else None
        else:
            toml_path = find_config(project_root)

        if project_root is None:
            project_root = toml_path.parent if toml_path else Path.cwd()

        token = _toml_file.set(toml_path)
        try:
            return cls(project_root=project_root, config_path=toml_path, **cli_flags)
        except tomllib.TOMLDecodeError as exc:
            raise click.ClickException(f"Invalid TOML in {toml_path}: {exc}") from exc
        finally:
            _toml_file.reset(token)
