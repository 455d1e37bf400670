from __future__ import annotations

import sys
from pathlib import Path
from typing import Literal

import tomllib
from pydantic import BaseModel, ConfigDict, Field, field_validator

CONFIG_FILENAME = "layerlint.toml"

CycleMode = Literal["first", "per_component"]

CheckName = Literal[
    "isolation",
    "direction",
    "cycle",
    "immutability",
    "interface_contract",
    "purity",
]

ALL_CHECKS: tuple[CheckName, ...] = (
    "isolation",
    "direction",
    "cycle",
    "immutability",
    "interface_contract",
    "purity",
)


class LayerPattern(BaseModel):
    """One ordered classification rule: keys matching `pattern` belong to `layer`."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    pattern: str = Field(description="fnmatch glob matched against the layer key")
    layer: str = Field(description="Layer name (e.g., 'domain/entities')")


def _default_layer_patterns() -> list[LayerPattern]:
    # Whole path segments only: "*/domain/*" must not match "domain_mapper".
    table = [
        ("*/domain/entities/*", "domain/entities"),
        ("*/domain/values/*", "domain/values"),
        ("*/domain/repositories/*", "domain/repositories"),
        ("*/domain/services/*", "domain/services"),
        ("*/domain/shared/*", "domain/shared"),
        ("*/domain/errors/*", "domain/errors"),
        ("*/domain/*", "domain"),
        ("*/application/*", "application"),
        ("*/infrastructure/*", "infrastructure"),
        ("*/config/*", "config"),
        ("*/__main__/", "main"),
        ("*/cmd/*", "main"),
    ]
    return [LayerPattern(pattern=pattern, layer=layer) for pattern, layer in table]


def _default_allowed_dependencies() -> dict[str, list[str]]:
    return {
        "domain/entities": ["domain/shared", "domain/values", "domain/errors"],
        "domain/values": ["domain/shared", "domain/errors"],
        "domain/repositories": [
            "domain/entities",
            "domain/shared",
            "domain/values",
            "domain/errors",
        ],
        "domain/services": [
            "domain/entities",
            "domain/repositories",
            "domain/shared",
            "domain/values",
            "domain/errors",
        ],
        "domain/shared": [],
        "domain/errors": ["domain/shared"],
        "application": [
            "domain/entities",
            "domain/services",
            "domain/repositories",
            "domain/shared",
            "domain/values",
            "domain/errors",
        ],
        "infrastructure": [
            "domain/entities",
            "domain/repositories",
            "domain/shared",
            "domain/values",
            "domain/errors",
        ],
    }


def _default_stdlib_prefixes() -> list[str]:
    return sorted({*sys.stdlib_module_names, "__future__"})


class LayersConfig(BaseModel):
    """Layer classification patterns and the allowed dependency table."""

    model_config = ConfigDict(extra="forbid")

    patterns: list[LayerPattern] = Field(
        default_factory=_default_layer_patterns,
        description="Ordered layer patterns (first match wins)",
    )
    allowed: dict[str, list[str]] = Field(
        default_factory=_default_allowed_dependencies,
        description="Layer -> layers it may depend on",
    )
    exempt: list[str] = Field(
        default_factory=lambda: ["main", "config"],
        description="Layers never checked for dependency direction",
    )
    domain_prefix: str = Field(
        default="domain",
        description="Layers starting with this prefix form the isolated domain",
    )


class ImportsConfig(BaseModel):
    """Import categories that are skipped or tolerated by the checks."""

    model_config = ConfigDict(extra="forbid")

    standard_library_prefixes: list[str] = Field(
        default_factory=_default_stdlib_prefixes,
        description="Modules treated as standard library",
    )
    allowed_external_prefixes: list[str] = Field(
        default_factory=lambda: ["typing_extensions", "attr", "attrs", "pydantic"],
        description="Third-party modules the domain may import",
    )
    test_prefixes: list[str] = Field(
        default_factory=lambda: ["pytest", "_pytest", "unittest", "hypothesis"],
        description="Test-only modules ignored by domain isolation",
    )


class ContractsConfig(BaseModel):
    """Type-level structural contracts."""

    model_config = ConfigDict(extra="forbid")

    value_object_types: list[str] = Field(default_factory=list)
    frozen_value_objects_exempt: bool = Field(
        default=False,
        description="Accept public fields on frozen dataclasses and NamedTuples",
    )
    repository_interface_types: list[str] = Field(default_factory=list)
    context_marker_type: str = Field(default="Context")
    error_marker_type: str = Field(default="Error")
    pure_layer_name: str = Field(default="domain/services")
    forbidden_import_markers: list[str] = Field(
        default_factory=lambda: [
            "infrastructure",
            "persistence",
            ".db",
            "sqlalchemy",
            "sqlite3",
            "psycopg",
            "pymongo",
            "redis",
        ]
    )
    service_types: list[str] = Field(default_factory=list)


class LintConfig(BaseModel):
    """Configuration for a layerlint run."""

    model_config = ConfigDict(extra="forbid")

    workers: int = Field(
        default=1,
        ge=1,
        description="Parallel parse workers (1 = sequential)",
    )
    fail_fast: bool = Field(
        default=False,
        description="Keep at most the first violation of each check",
    )
    cycle_mode: CycleMode = Field(default="first")
    enabled_checks: list[CheckName] = Field(default_factory=lambda: list(ALL_CHECKS))
    include: list[str] = Field(
        default_factory=list,
        description="Glob patterns for files to include (empty = all Python files)",
    )
    exclude: list[str] = Field(
        default_factory=lambda: [
            "test_*.py",
            "**/test_*.py",
            "conftest.py",
            "**/conftest.py",
        ],
        description="Glob patterns for files to exclude",
    )
    exclude_suffixes: list[str] = Field(
        default_factory=lambda: ["_test.py", "_pb2.py", "_pb2_grpc.py"],
    )
    exclude_substrings: list[str] = Field(
        default_factory=lambda: [
            "tests/",
            "vendor/",
            "site-packages/",
            ".venv/",
            "venv/",
            "node_modules/",
            ".git/",
            "templates/",
            "__pycache__/",
        ],
    )
    nested_gitignore: bool = Field(
        default=False,
        description=(
            "Enable nested .gitignore composition (default: false for root-only)"
        ),
    )
    layers: LayersConfig = Field(default_factory=LayersConfig)
    imports: ImportsConfig = Field(default_factory=ImportsConfig)
    contracts: ContractsConfig = Field(default_factory=ContractsConfig)

    @field_validator("enabled_checks")
    @classmethod
    def dedupe_enabled_checks(cls, v: list[CheckName]) -> list[CheckName]:
        return list(dict.fromkeys(v))


class ConfigError(Exception):
    """Raised when config file exists but cannot be parsed."""


def load_config(root: Path, config_path: Path | None = None) -> LintConfig:
    """Load configuration from layerlint.toml if it exists.

    An explicit config_path must exist; the implicit file under root is
    optional and defaults apply when it is absent.
    """
    if config_path is None:
        config_path = Path(root) / CONFIG_FILENAME
        if not config_path.is_file():
            return LintConfig()
    elif not config_path.is_file():
        msg = f"Config file not found: {config_path}"
        raise ConfigError(msg)

    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {config_path}: {e}"
        raise ConfigError(msg) from e

    try:
        return LintConfig.model_validate(data)
    except Exception as e:
        msg = f"Invalid config in {config_path}: {e}"
        raise ConfigError(msg) from e
