#!/usr/bin/env python3
# Ticket: 0001_field_spec_scaffolding
# Design: DESIGN.md
"""
Scaffold Configuration Reader

Reads project-specific configuration from the consuming repository's
.scaffold/config.yaml:

    default_stack: blade
    supports_typescript: false
    database:
      driver: mysql
    directories:
      model: app/Models
      controller: app/Http/Controllers
      migrations: database/migrations
      routes_file: routes/web.php
    namespaces:
      model: App\\Models
      controller: App\\Http\\Controllers

Every key is optional. FRONTEND_STACK and SUPPORT_TYPESCRIPT environment
variables override the file. Relative directories resolve against the project
root. The engine treats all values as opaque strings and booleans.
"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

CONFIG_RELATIVE_PATH = Path(".scaffold") / "config.yaml"


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


class DatabaseSettings(BaseModel):
    driver: str = "mysql"


class DirectorySettings(BaseModel):
    model: str = "app/Models"
    controller: str = "app/Http/Controllers"
    migrations: str = "database/migrations"
    routes_file: str = "routes/web.php"


class NamespaceSettings(BaseModel):
    model: str = "App\\Models"
    controller: str = "App\\Http\\Controllers"


class ScaffoldConfig(BaseModel):
    """Runtime configuration loaded from .scaffold/config.yaml."""

    project_root: str = "."
    default_stack: str = "blade"
    supports_typescript: bool = False
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    directories: DirectorySettings = Field(default_factory=DirectorySettings)
    namespaces: NamespaceSettings = Field(default_factory=NamespaceSettings)

    def resolve(self, relative: str) -> Path:
        """Resolve a configured path against the project root."""
        path = Path(relative)
        return path if path.is_absolute() else Path(self.project_root) / path

    @property
    def model_dir(self) -> Path:
        return self.resolve(self.directories.model)

    @property
    def controller_dir(self) -> Path:
        return self.resolve(self.directories.controller)

    @property
    def migrations_dir(self) -> Path:
        return self.resolve(self.directories.migrations)

    @property
    def routes_file(self) -> Path:
        return self.resolve(self.directories.routes_file)


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------


def _env_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def _apply_env_overrides(doc: dict[str, Any], environ: dict[str, str]) -> dict[str, Any]:
    if environ.get("FRONTEND_STACK"):
        doc["default_stack"] = environ["FRONTEND_STACK"]
    if environ.get("SUPPORT_TYPESCRIPT") is not None:
        doc["supports_typescript"] = _env_bool(environ["SUPPORT_TYPESCRIPT"])
    return doc


def load_scaffold_config(
    project_root: str | Path,
    config_yaml_path: str | Path | None = None,
    environ: dict[str, str] | None = None,
) -> ScaffoldConfig:
    """
    Load ScaffoldConfig from .scaffold/config.yaml.

    Args:
        project_root: Root of the consuming repository.
        config_yaml_path: Override path for config.yaml (default: .scaffold/config.yaml).
        environ: Environment mapping for overrides (default: os.environ).

    Returns:
        ScaffoldConfig with defaults applied where keys are missing.

    Raises:
        pydantic.ValidationError: if a key holds a value of the wrong type
    """
    project_root = Path(project_root)
    config_path = Path(config_yaml_path) if config_yaml_path else project_root / CONFIG_RELATIVE_PATH

    doc: dict[str, Any] = {}
    if config_path.exists():
        doc = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}

    doc = _apply_env_overrides(dict(doc), dict(os.environ if environ is None else environ))
    doc["project_root"] = str(project_root)
    return ScaffoldConfig.model_validate(doc)


def find_project_root(start: Path | None = None) -> Path:
    """Walk up from start to the first directory holding .scaffold/ or artisan."""
    current = start or Path.cwd()
    for candidate in [current] + list(current.parents):
        if (candidate / ".scaffold").exists() or (candidate / "artisan").exists():
            return candidate
    return current
