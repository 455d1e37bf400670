"""End-to-end analysis pipeline: load, graph, check."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from checks.engine import run_checks
from extract.packages import load_packages
from graph.builder import build_dependency_graph
from rules.config import load_config

if TYPE_CHECKING:
    from checks.engine import CheckResult
    from extract.models import PackageInfo
    from graph.builder import DependencyGraph
    from rules.config import LintConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisResult:
    packages: tuple[PackageInfo, ...]
    graph: DependencyGraph
    checks: CheckResult

    @property
    def ok(self) -> bool:
        return self.checks.ok


def run_analysis(
    *,
    root: Path,
    config: LintConfig | None = None,
) -> AnalysisResult:
    """Analyze the tree under root and run every enabled check.

    Args:
        root: Analysis root; file paths in the result are relative to it
        config: Optional preloaded config (defaults to root/layerlint.toml)

    Raises:
        ConfigError: If the implicit config file is invalid.
        OSError: If the tree cannot be walked or a file cannot be read.
    """
    root = Path(root)
    if config is None:
        config = load_config(root)

    packages = tuple(load_packages(root, config))
    graph = build_dependency_graph(packages, config.imports)
    logger.info(
        "Analyzed %d files with %d internal dependency edges",
        len(packages),
        graph.edge_count,
    )

    checks = run_checks(packages, graph, config)
    return AnalysisResult(packages=packages, graph=graph, checks=checks)


__all__ = ["AnalysisResult", "run_analysis"]
