"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, lambdaplay.toml only contains
overrides. An empty file (or none at all) is a valid configuration.
"""

from __future__ import annotations

from pydantic import BaseModel

from lambdaplay.domain.library import LIBRARY_KEY
from lambdaplay.domain.workspace import DEFAULT_EXPRESSION


class WorkspaceConfig(BaseModel):
    """[workspace] section."""

    model_config = {"frozen": True}

    default_expression: str = DEFAULT_EXPRESSION


class StorageConfig(BaseModel):
    """[storage] section.

    ``data_dir`` is resolved against the project root (the directory
    holding lambdaplay.toml, or the CWD) unless it is absolute.
    """

    model_config = {"frozen": True}

    data_dir: str = ".lambdaplay"
    library_key: str = LIBRARY_KEY


class SessionConfig(BaseModel):
    """[session] section."""

    model_config = {"frozen": True}

    prompt: str = "λ> "
    show_expanded: bool = False
