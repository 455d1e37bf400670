"""File scanning utilities for layerlint."""

from __future__ import annotations

import os
from fnmatch import fnmatch
from pathlib import Path
from typing import TYPE_CHECKING, cast

from gitignore_parser import parse_gitignore  # type: ignore[import-untyped]

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


def _is_excluded_by_predicates(
    rel_path_str: str,
    exclude_suffixes: list[str] | None,
    exclude_substrings: list[str] | None,
) -> bool:
    """Suffix and path-substring exclusion (test files, vendored code, VCS, ...)."""
    if exclude_suffixes and any(rel_path_str.endswith(s) for s in exclude_suffixes):
        return True
    if exclude_substrings:
        # Leading slash so "tests/" also matches a top-level tests/ directory.
        anchored = f"/{rel_path_str}"
        return any(
            (f"/{s}" if not s.startswith("/") else s) in anchored
            for s in exclude_substrings
        )
    return False


def _should_include_file(
    path: Path,
    directory: Path,
    gitignore_matches: Callable[[str], bool] | None,
    include_patterns: list[str] | None,
    exclude_patterns: list[str] | None,
    exclude_suffixes: list[str] | None = None,
    exclude_substrings: list[str] | None = None,
) -> bool:
    """Check if a file should be included based on all filtering rules."""
    if not path.is_file() or path.is_symlink():
        return False

    if not _is_within_root(path, directory):
        return False

    try:
        rel_path = path.relative_to(directory)
    except ValueError:
        return False

    rel_path_str = rel_path.as_posix()

    if _is_excluded_by_predicates(rel_path_str, exclude_suffixes, exclude_substrings):
        return False

    if gitignore_matches is not None and gitignore_matches(str(path)):
        return False

    if include_patterns and not any(
        fnmatch(rel_path_str, pat) for pat in include_patterns
    ):
        return False

    has_excluded_match = exclude_patterns and any(
        fnmatch(rel_path_str, pat) for pat in exclude_patterns
    )
    return not has_excluded_match


def _is_within_root(path: Path, root: Path) -> bool:
    """Return True when the resolved path stays within the resolved root."""
    try:
        root_resolved = root.resolve()
        path_resolved = path.resolve()
    except OSError:
        return False

    try:
        path_resolved.relative_to(root_resolved)
    except ValueError:
        return False

    return True


def _raise_walk_error(error: OSError) -> None:
    raise error


def _walk_files(root: Path, matches: Callable[[str], bool]) -> Iterator[Path]:
    """Yield files under root whose name satisfies `matches`.

    Unlike Path.rglob, an unreadable directory raises instead of being
    skipped. Symlinked directories are not followed.
    """
    for dirpath, _dirnames, filenames in os.walk(root, onerror=_raise_walk_error):
        base = Path(dirpath)
        for name in filenames:
            if matches(name):
                yield base / name


def _iter_gitignore_files(root: Path) -> list[Path]:
    """Return sorted list of .gitignore files under root (including root)."""
    gitignore_paths = [root / ".gitignore"]
    gitignore_paths.extend(_walk_files(root, lambda name: name == ".gitignore"))
    unique_paths = {
        path for path in gitignore_paths if path.is_file() and not path.is_symlink()
    }
    return sorted(unique_paths, key=lambda p: p.relative_to(root).as_posix())


def _build_gitignore_matcher(
    root: Path,
    *,
    nested_gitignore: bool,
) -> Callable[[str], bool] | None:
    if not nested_gitignore:
        gitignore_path = root / ".gitignore"
        if gitignore_path.is_file():
            return cast("Callable[[str], bool]", parse_gitignore(gitignore_path))
        return None

    gitignore_paths = _iter_gitignore_files(root)
    if not gitignore_paths:
        return None

    matchers = [parse_gitignore(path) for path in gitignore_paths]

    def matches(path_str: str) -> bool:
        for matcher in matchers:
            try:
                if matcher(path_str):
                    return True
            except ValueError:
                continue
        return False

    return matches


def find_python_files(
    directory: Path,
    *,
    include_patterns: list[str] | None = None,
    exclude_patterns: list[str] | None = None,
    exclude_suffixes: list[str] | None = None,
    exclude_substrings: list[str] | None = None,
    nested_gitignore: bool = False,
) -> Iterator[Path]:
    """Find all Python files in a directory, respecting .gitignore.

    Args:
        directory: Directory to search for Python files
        include_patterns: Optional list of fnmatch patterns; if provided,
            files must match at least one pattern to be included
        exclude_patterns: Optional list of fnmatch patterns; files matching
            any pattern are excluded
        exclude_suffixes: Relative paths ending with any of these are excluded
        exclude_substrings: Relative paths containing any of these path
            fragments are excluded
        nested_gitignore: Compose every .gitignore under the directory
            instead of only the root one

    Yields:
        Path objects for each Python file found, sorted lexicographically
        by relative path for deterministic ordering.

    Raises:
        OSError: If the directory tree cannot be walked.
    """
    if not directory.is_dir():
        msg = f"Analysis root is not a directory: {directory}"
        raise NotADirectoryError(msg)

    gitignore_matches = _build_gitignore_matcher(
        directory,
        nested_gitignore=nested_gitignore,
    )

    matched_files = [
        path
        for path in _walk_files(directory, lambda name: name.endswith(".py"))
        if _should_include_file(
            path,
            directory,
            gitignore_matches,
            include_patterns,
            exclude_patterns,
            exclude_suffixes,
            exclude_substrings,
        )
    ]

    matched_files.sort(key=lambda p: p.relative_to(directory).as_posix())

    yield from matched_files


__all__ = ["_should_include_file", "find_python_files"]
