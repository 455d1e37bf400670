"""Package extraction: one PackageInfo per analyzed source file."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from typing import TYPE_CHECKING

from extract.models import PackageInfo
from parse.imports import extract_raw_imports, resolve_imports
from parse.treesitter_parser import parse_file
from parse.treesitter_types import (
    build_type_descriptor,
    definition_name,
    is_exported,
    iter_top_level_definitions,
)
from rules.layers import classify_path
from scan.files import find_python_files
from utils import is_package_path, path_to_module

if TYPE_CHECKING:
    from collections.abc import Collection
    from pathlib import Path

    from tree_sitter import Tree

    from rules.config import LayersConfig, LintConfig

logger = logging.getLogger(__name__)


def extract_package_info(
    relative_path: str,
    tree: Tree,
    layers_config: LayersConfig,
    known_modules: Collection[str] = frozenset(),
) -> PackageInfo:
    """Convert a parsed file into PackageInfo.

    Args:
        relative_path: POSIX path relative to the analysis root
        tree: Syntax tree of the file
        layers_config: Layer patterns used to classify the file
        known_modules: Dotted names of every analyzed module, used to
            resolve `from pkg import sub` to the `sub` module

    Returns:
        PackageInfo with resolved imports, exported names and type descriptors.
    """
    module_name = path_to_module(relative_path)
    root_node = tree.root_node

    imports = resolve_imports(
        extract_raw_imports(root_node),
        module_name,
        is_package=is_package_path(relative_path),
        known_modules=known_modules,
    )

    functions: set[str] = set()
    type_names: set[str] = set()
    types = []
    for node, decorators in iter_top_level_definitions(root_node):
        name = definition_name(node)
        if node.type == "class_definition":
            types.append(build_type_descriptor(node, decorators, module_name))
            if is_exported(name):
                type_names.add(name)
        elif is_exported(name):
            functions.add(name)

    return PackageInfo(
        path=relative_path,
        module=module_name,
        layer=classify_path(relative_path, layers_config),
        imports=imports,
        exported_functions=frozenset(functions),
        exported_types=frozenset(type_names),
        types=tuple(types),
    )


def _load_package(
    file_path: Path,
    *,
    root: Path,
    layers_config: LayersConfig,
    known_modules: Collection[str],
) -> PackageInfo | None:
    """Parse and extract a single file; None when the file does not parse."""
    relative_path = file_path.relative_to(root).as_posix()
    tree = parse_file(file_path)
    if tree is None:
        logger.warning("Skipping %s: file could not be parsed", relative_path)
        return None
    return extract_package_info(relative_path, tree, layers_config, known_modules)


def load_packages(root: Path, config: LintConfig) -> list[PackageInfo]:
    """Walk the tree under root and extract every eligible file.

    With more than one worker, files are parsed in a thread pool; results
    are collected in walk order and merged here before anything downstream
    runs.

    Raises:
        OSError: If the tree cannot be walked or a file cannot be read.
    """
    files = list(
        find_python_files(
            root,
            include_patterns=config.include,
            exclude_patterns=config.exclude,
            exclude_suffixes=config.exclude_suffixes,
            exclude_substrings=config.exclude_substrings,
            nested_gitignore=config.nested_gitignore,
        )
    )
    known_modules = frozenset(
        path_to_module(file_path.relative_to(root).as_posix()) for file_path in files
    )
    load = partial(
        _load_package,
        root=root,
        layers_config=config.layers,
        known_modules=known_modules,
    )

    if config.workers <= 1 or len(files) < 2:
        results = [load(file_path) for file_path in files]
    else:
        with ThreadPoolExecutor(max_workers=config.workers) as executor:
            results = list(executor.map(load, files))

    packages = [package for package in results if package is not None]
    packages.sort(key=lambda p: p.path)

    skipped = len(files) - len(packages)
    logger.debug(
        "Extracted %d packages from %d files (%d skipped)",
        len(packages),
        len(files),
        skipped,
    )
    return packages


__all__ = ["extract_package_info", "load_packages"]
