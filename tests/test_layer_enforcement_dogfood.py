from __future__ import annotations

from pathlib import Path

from analysis import run_analysis
from rules.config import load_config
from rules.layers import UNKNOWN_LAYER, build_allowed_deps, classify_path

REPO_ROOT = Path(__file__).resolve().parent.parent


def test_load_real_config_has_expected_layers() -> None:
    config = load_config(REPO_ROOT)

    layer_names = {pattern.layer for pattern in config.layers.patterns}

    assert layer_names == {"foundation", "parsing", "graph", "checks", "interface"}
    assert config.layers.exempt == []


def test_sentinel_file_classification() -> None:
    layers = load_config(REPO_ROOT).layers

    assert classify_path("src/cli.py", layers) == "interface"
    assert classify_path("src/analysis.py", layers) == "interface"
    assert classify_path("src/checks/engine.py", layers) == "checks"
    assert classify_path("src/graph/algos.py", layers) == "graph"
    assert classify_path("src/parse/imports.py", layers) == "parsing"
    assert classify_path("src/extract/packages.py", layers) == "parsing"
    assert classify_path("src/extract/models.py", layers) == "foundation"
    assert classify_path("src/rules/config.py", layers) == "foundation"
    assert classify_path("src/utils.py", layers) == "foundation"


def test_every_layer_has_rule_entry() -> None:
    """Every layer named by a pattern must have an explicit allowed entry."""
    config = load_config(REPO_ROOT)

    layer_names = {pattern.layer for pattern in config.layers.patterns}
    allowed_deps = build_allowed_deps(config.layers)

    assert layer_names == set(allowed_deps.keys())
    assert allowed_deps["foundation"] == frozenset()


def test_all_src_files_classified() -> None:
    layers = load_config(REPO_ROOT).layers

    unclassified_files = [
        path.relative_to(REPO_ROOT).as_posix()
        for path in (REPO_ROOT / "src").rglob("*.py")
        if classify_path(path.relative_to(REPO_ROOT).as_posix(), layers)
        == UNKNOWN_LAYER
    ]

    assert unclassified_files == []


def test_layerlint_passes_on_its_own_sources() -> None:
    result = run_analysis(root=REPO_ROOT)

    assert [v.message for v in result.checks.violations] == []
    assert all(p.path.startswith("src/") for p in result.packages)
