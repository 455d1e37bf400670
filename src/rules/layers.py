"""Layer classification and dependency rules."""

from __future__ import annotations

from fnmatch import fnmatch
from typing import TYPE_CHECKING

from utils import module_to_layer_key, path_to_layer_key

if TYPE_CHECKING:
    from collections.abc import Sequence

    from rules.config import LayerPattern, LayersConfig

UNKNOWN_LAYER = "unknown"

LayerRuleSet = dict[str, frozenset[str]]


def classify_layer(layer_key: str, patterns: Sequence[LayerPattern]) -> str:
    """Classify a layer key into an architectural layer.

    Uses first-match-wins semantics over the ordered patterns. Keys that
    match nothing are UNKNOWN_LAYER. Each pattern is tried against the key
    and against its anchored form "/key/", so "*/domain/*" matches a whole
    `domain` segment anywhere in the key.
    """
    anchored = f"/{layer_key}/"
    for rule in patterns:
        if fnmatch(layer_key, rule.pattern) or fnmatch(anchored, rule.pattern):
            return rule.layer
    return UNKNOWN_LAYER


def classify_path(path: str, layers_config: LayersConfig) -> str:
    """Classify a source file path (e.g. "src/shop/domain/user.py")."""
    return classify_layer(path_to_layer_key(path), layers_config.patterns)


def classify_import(module_name: str, layers_config: LayersConfig) -> str:
    """Classify an absolute import string (e.g. "shop.domain.user")."""
    return classify_layer(module_to_layer_key(module_name), layers_config.patterns)


def build_allowed_deps(layers_config: LayersConfig) -> LayerRuleSet:
    """Build a mapping of layer -> set of allowed dependency layers."""
    return {
        layer: frozenset(targets) for layer, targets in layers_config.allowed.items()
    }


def is_allowed_dependency(
    from_layer: str,
    to_layer: str,
    allowed: frozenset[str],
) -> bool:
    """Same-layer imports are always allowed, others must be listed."""
    if from_layer == to_layer:
        return True
    return to_layer in allowed


def is_domain_layer(layer: str, domain_prefix: str) -> bool:
    return layer.startswith(domain_prefix)
