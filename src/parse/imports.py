"""Tree-sitter based import extraction for layerlint."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from parse.treesitter_parser import node_text

if TYPE_CHECKING:
    from collections.abc import Collection, Iterator

    from tree_sitter import Node

_IMPORT_NODE_TYPES = frozenset(
    {"import_statement", "import_from_statement", "future_import_statement"}
)


@dataclass(frozen=True)
class RawImport:
    """An import statement as written in source.

    `module` is the imported module ("" for `from . import x`), `names` the
    names listed after `import` in from-imports, `level` the number of
    leading dots (0 for absolute imports).
    """

    line: int
    module: str
    names: tuple[str, ...] = ()
    level: int = 0


def _iter_import_nodes(root: Node) -> Iterator[Node]:
    """Yield import statement nodes anywhere in the tree, in source order."""
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type in _IMPORT_NODE_TYPES:
            yield node
            continue
        stack.extend(reversed(node.children))


def _imported_name(node: Node) -> str:
    """Name of a dotted_name or aliased_import node, without its alias."""
    if node.type == "aliased_import":
        return node_text(node.child_by_field_name("name"))
    return node_text(node)


def _process_import_node(node: Node) -> list[RawImport]:
    """Process a standard import node (import x, import y as z)."""
    line = node.start_point[0] + 1
    return [
        RawImport(line=line, module=_imported_name(name_node))
        for name_node in node.children_by_field_name("name")
    ]


def _process_import_from_node(node: Node) -> RawImport | None:
    """Process a from-import node (from x import y)."""
    module_node = node.child_by_field_name("module_name")
    if module_node is None:
        return None

    level = 0
    module = ""
    if module_node.type == "relative_import":
        for child in module_node.children:
            if child.type == "import_prefix":
                level = node_text(child).count(".")
            elif child.type == "dotted_name":
                module = node_text(child)
    else:
        module = node_text(module_node)

    names = tuple(
        _imported_name(name_node)
        for name_node in node.children_by_field_name("name")
    )
    if any(child.type == "wildcard_import" for child in node.children):
        names = (*names, "*")

    return RawImport(
        line=node.start_point[0] + 1, module=module, names=names, level=level
    )


def extract_raw_imports(root: Node) -> list[RawImport]:
    """Extract every import statement from a parsed module.

    Imports nested in functions, classes and `if TYPE_CHECKING:` blocks are
    included: they are dependencies all the same.
    """
    imports: list[RawImport] = []
    for node in _iter_import_nodes(root):
        if node.type == "import_statement":
            imports.extend(_process_import_node(node))
        elif node.type == "future_import_statement":
            imports.append(RawImport(line=node.start_point[0] + 1, module="__future__"))
        else:
            raw = _process_import_from_node(node)
            if raw is not None:
                imports.append(raw)
    return imports


def resolve_relative_import(
    importing_module: str,
    relative_module: str,
    level: int,
    *,
    is_package: bool = False,
) -> str:
    """Resolve a relative import to an absolute module name.

    Args:
        importing_module: The module doing the import (e.g., "pkg.sub.mod")
        relative_module: The relative module name (e.g., "foo" from ".foo")
        level: Number of dots (1 for ".", 2 for "..", etc.)
        is_package: True when the importing module is a package __init__,
            whose "." refers to the package itself

    Returns:
        Absolute module name (e.g., "pkg.sub.foo")

    Examples:
        >>> resolve_relative_import("pkg.sub.mod", "foo", 1)
        'pkg.sub.foo'
        >>> resolve_relative_import("pkg.sub.mod", "", 1)
        'pkg.sub'
        >>> resolve_relative_import("pkg.sub.mod", "bar", 2)
        'pkg.bar'
        >>> resolve_relative_import("pkg.sub", "foo", 1, is_package=True)
        'pkg.sub.foo'
    """
    parts = importing_module.split(".") if importing_module else []
    if is_package:
        parts.append("__init__")

    if level > len(parts):
        return relative_module or importing_module

    base_parts = parts[: len(parts) - level]

    if relative_module:
        return ".".join([*base_parts, relative_module])
    if base_parts:
        return ".".join(base_parts)
    return importing_module


def _from_import_targets(
    raw: RawImport,
    importing_module: str,
    is_package: bool,
    known_modules: Collection[str],
) -> list[str]:
    """Targets of a from-import.

    A listed name that is itself an analyzed module (`from pkg import sub`)
    resolves to that module. The imported package is kept when any name is
    not a module, as that name is then defined by the package.
    """

    def absolute(module: str) -> str:
        if not raw.level:
            return module
        return resolve_relative_import(
            importing_module, module, raw.level, is_package=is_package
        )

    targets: list[str] = []
    keeps_base = False
    for name in raw.names:
        candidate = absolute(f"{raw.module}.{name}" if raw.module else name)
        if name != "*" and candidate in known_modules:
            targets.append(candidate)
        else:
            keeps_base = True
    if keeps_base or not raw.names:
        targets.append(absolute(raw.module))
    return targets


def resolve_imports(
    raw_imports: list[RawImport],
    importing_module: str,
    *,
    is_package: bool = False,
    known_modules: Collection[str] = frozenset(),
) -> tuple[str, ...]:
    """Turn raw imports into ordered, de-duplicated absolute import strings.

    `known_modules` holds the dotted names of every analyzed module. It lets
    `from pkg import sub` and `from . import sub` resolve to the `sub`
    module rather than the package that contains it.
    """
    resolved: list[str] = []
    for raw in raw_imports:
        if raw.level == 0 and not raw.names:
            resolved.append(raw.module)
        else:
            resolved.extend(
                _from_import_targets(raw, importing_module, is_package, known_modules)
            )
    return tuple(dict.fromkeys(name for name in resolved if name))


__all__ = [
    "RawImport",
    "extract_raw_imports",
    "resolve_imports",
    "resolve_relative_import",
]
