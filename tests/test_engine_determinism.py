from __future__ import annotations

import shutil
import textwrap
from pathlib import Path

from analysis import run_analysis
from checks.engine import run_checks
from checks.models import ViolationKind
from rules.config import load_config

FIXTURE_REPO = Path(__file__).parent / "fixtures" / "layered_repo"


def _broken_repo(tmp_path: Path) -> Path:
    """Fixture copy with two isolation breaks and an import cycle."""
    repo_root = tmp_path / "repo"
    shutil.copytree(FIXTURE_REPO, repo_root)
    files = {
        "shop/domain/entities/order.py": """
            import requests
            from shop.infrastructure.memory_repository import InMemoryUserRepository
        """,
        "shop/application/audit.py": """
            from shop.application.register_user import register_user
        """,
        "shop/application/register_user.py": """
            from shop.application.audit import record
        """,
    }
    for rel_path, content in files.items():
        (repo_root / rel_path).write_text(textwrap.dedent(content), encoding="utf-8")
    return repo_root


def test_rerun_yields_identical_violations(tmp_path: Path) -> None:
    repo_root = _broken_repo(tmp_path)

    first = run_analysis(root=repo_root)
    second = run_analysis(root=repo_root)

    assert first.checks.violations
    assert first.checks.violations == second.checks.violations
    assert first.graph.edge_list() == second.graph.edge_list()


def test_parallel_workers_give_same_result(tmp_path: Path) -> None:
    repo_root = _broken_repo(tmp_path)
    config = load_config(repo_root)

    sequential = run_analysis(root=repo_root, config=config)
    parallel = run_analysis(
        root=repo_root, config=config.model_copy(update={"workers": 4})
    )

    assert parallel.checks == sequential.checks


def test_violations_aggregate_across_rules(tmp_path: Path) -> None:
    result = run_analysis(root=_broken_repo(tmp_path))

    failed = {o.kind for o in result.checks.outcomes if not o.passed}
    assert failed == {
        ViolationKind.ISOLATION,
        ViolationKind.DIRECTION,
        ViolationKind.CYCLE,
    }
    isolation = [
        v for v in result.checks.violations if v.kind is ViolationKind.ISOLATION
    ]
    assert [v.detail for v in isolation] == [
        "requests",
        "shop.infrastructure.memory_repository",
    ]
    assert not result.ok


def test_fail_fast_keeps_first_violation_per_rule(tmp_path: Path) -> None:
    repo_root = _broken_repo(tmp_path)
    config = load_config(repo_root).model_copy(update={"fail_fast": True})

    result = run_analysis(root=repo_root, config=config)

    for outcome in result.checks.outcomes:
        assert len(outcome.violations) <= 1
    isolation = next(
        o for o in result.checks.outcomes if o.kind is ViolationKind.ISOLATION
    )
    assert len(isolation.violations) == 1


def test_enabled_checks_select_rules(tmp_path: Path) -> None:
    repo_root = _broken_repo(tmp_path)
    config = load_config(repo_root).model_copy(
        update={"enabled_checks": ["cycle"]}
    )
    analysis = run_analysis(root=repo_root, config=config)

    result = run_checks(analysis.packages, analysis.graph, config)

    assert [o.kind for o in result.outcomes] == [ViolationKind.CYCLE]
    assert result == analysis.checks
