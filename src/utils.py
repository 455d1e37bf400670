"""Shared utilities for layerlint."""

from __future__ import annotations

from pathlib import Path


def path_to_module(file_path: str | Path) -> str:
    """Convert a file path to a Python module name.

    Args:
        file_path: Relative file path (e.g., "src/shop/domain/user.py" or Path object)

    Returns:
        Module name (e.g., "shop.domain.user")

    Examples:
        >>> path_to_module("src/shop/domain/user.py")
        'shop.domain.user'
        >>> path_to_module("src/shop/domain/__init__.py")
        'shop.domain'
        >>> path_to_module(Path("foo/bar.py"))
        'foo.bar'
    """
    path_str = file_path.as_posix() if isinstance(file_path, Path) else str(file_path)
    normalized_parts = [part for part in path_str.replace("\\", "/").split("/") if part]

    # src/<package>/... maps to <package>.<submodules>
    module_parts = (
        normalized_parts[1:]
        if len(normalized_parts) >= 2 and normalized_parts[0] == "src"
        else normalized_parts
    )

    if module_parts and module_parts[-1].endswith(".py"):
        module_parts[-1] = module_parts[-1][:-3]

    if module_parts and module_parts[-1] == "__init__":
        module_parts = module_parts[:-1]

    return ".".join(module_parts)


def is_package_path(file_path: str | Path) -> bool:
    """Return True when the path points at a package ``__init__.py``."""
    name = file_path.name if isinstance(file_path, Path) else str(file_path)
    return name.replace("\\", "/").rsplit("/", 1)[-1] == "__init__.py"


def module_to_layer_key(module_name: str) -> str:
    """Convert a dotted module name to the slash-separated key used for layers.

    Examples:
        >>> module_to_layer_key("shop.domain.entities.user")
        'shop/domain/entities/user'
    """
    return "/".join(part for part in module_name.split(".") if part)


def path_to_layer_key(file_path: str | Path) -> str:
    """Convert a source file path to the key used for layer classification.

    File paths and import strings share one key space so a single set of
    layer patterns classifies both.

    Examples:
        >>> path_to_layer_key("src/shop/domain/entities/user.py")
        'shop/domain/entities/user'
    """
    return module_to_layer_key(path_to_module(file_path))


def matches_prefix(module_name: str, prefixes: list[str] | tuple[str, ...]) -> bool:
    """Return True when module_name equals a prefix or is a submodule of it."""
    for prefix in prefixes:
        if module_name == prefix or module_name.startswith(f"{prefix}."):
            return True
    return False
