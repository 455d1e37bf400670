from __future__ import annotations

from rules.config import LayersConfig
from rules.layers import (
    UNKNOWN_LAYER,
    build_allowed_deps,
    classify_import,
    classify_layer,
    classify_path,
    is_allowed_dependency,
    is_domain_layer,
)


def _layers_config(
    *,
    patterns: list[dict[str, str]],
    allowed: dict[str, list[str]] | None = None,
) -> LayersConfig:
    return LayersConfig.model_validate(
        {"patterns": patterns, "allowed": allowed or {}}
    )


def test_classify_layer_first_match_wins_with_overlapping_patterns() -> None:
    config = _layers_config(
        patterns=[
            {"pattern": "*domain*", "layer": "A"},
            {"pattern": "*domain/entities*", "layer": "B"},
        ],
    )

    assert classify_layer("shop/domain/entities/user", config.patterns) == "A"


def test_classify_layer_returns_unknown_when_no_pattern_matches() -> None:
    config = _layers_config(patterns=[{"pattern": "*core*", "layer": "core"}])

    assert classify_layer("shop/web/views", config.patterns) == UNKNOWN_LAYER


def test_default_patterns_classify_reference_layout() -> None:
    config = LayersConfig()

    assert classify_path("shop/domain/entities/user.py", config) == "domain/entities"
    assert classify_path("shop/domain/values/email.py", config) == "domain/values"
    assert classify_path("shop/domain/errors/errors.py", config) == "domain/errors"
    assert classify_path("shop/domain/__init__.py", config) == "domain"
    assert classify_path("shop/application/register.py", config) == "application"
    assert classify_path("shop/infrastructure/db.py", config) == "infrastructure"
    assert classify_path("shop/config/settings.py", config) == "config"
    assert classify_path("shop/__main__.py", config) == "main"
    assert classify_path("shop/__init__.py", config) == UNKNOWN_LAYER


def test_default_patterns_match_whole_path_segments() -> None:
    config = LayersConfig()

    assert (
        classify_path("shop/infrastructure/persistence/domain_mapper.py", config)
        == "infrastructure"
    )
    assert classify_path("shop/configuration/loader.py", config) == UNKNOWN_LAYER
    assert classify_path("__main__.py", config) == "main"
    assert classify_path("tools/cmd/run.py", config) == "main"
    assert classify_import("mydomain_sdk.client", config) == UNKNOWN_LAYER
    assert classify_import("domain.entities.user", config) == "domain/entities"


def test_paths_and_imports_share_one_key_space() -> None:
    config = LayersConfig()

    assert classify_path("src/shop/domain/services/billing.py", config) == (
        classify_import("shop.domain.services.billing", config)
    )
    assert classify_import("shop.infrastructure.db", config) == "infrastructure"


def test_allowed_deps_default_table() -> None:
    allowed = build_allowed_deps(LayersConfig())

    assert allowed["domain/shared"] == frozenset()
    assert allowed["domain/errors"] == frozenset({"domain/shared"})
    assert "domain/services" in allowed["application"]
    assert "application" not in allowed["infrastructure"]
    assert "main" not in allowed
    assert "config" not in allowed


def test_is_allowed_dependency() -> None:
    allowed = build_allowed_deps(
        _layers_config(
            patterns=[],
            allowed={
                "domain/entities": ["domain/shared"],
                "application": ["domain/entities", "domain/shared"],
            },
        )
    )

    assert is_allowed_dependency(
        "application", "domain/entities", allowed["application"]
    )
    assert not is_allowed_dependency(
        "domain/entities", "application", allowed["domain/entities"]
    )
    # same-layer imports never need an entry
    assert is_allowed_dependency(
        "domain/entities", "domain/entities", allowed["domain/entities"]
    )


def test_is_domain_layer_uses_prefix() -> None:
    assert is_domain_layer("domain", "domain")
    assert is_domain_layer("domain/values", "domain")
    assert not is_domain_layer("application", "domain")
    assert not is_domain_layer(UNKNOWN_LAYER, "domain")
