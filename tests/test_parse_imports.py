from __future__ import annotations

import textwrap

from parse.imports import (
    RawImport,
    extract_raw_imports,
    resolve_imports,
    resolve_relative_import,
)
from parse.treesitter_parser import parse_source


def _raw_imports(source: str) -> list[RawImport]:
    tree = parse_source(textwrap.dedent(source).encode("utf-8"))
    assert tree is not None
    return extract_raw_imports(tree.root_node)


def test_absolute_imports_in_source_order() -> None:
    raw = _raw_imports(
        """
        from __future__ import annotations

        import os
        import shop.domain.user as user_mod, json
        from shop.infrastructure import db
        """
    )

    assert [(r.module, r.level) for r in raw] == [
        ("__future__", 0),
        ("os", 0),
        ("shop.domain.user", 0),
        ("json", 0),
        ("shop.infrastructure", 0),
    ]
    assert raw[1].line == 4
    assert raw[-1].names == ("db",)


def test_nested_and_type_checking_imports_included() -> None:
    raw = _raw_imports(
        """
        from typing import TYPE_CHECKING

        if TYPE_CHECKING:
            from shop.domain.entities.user import User

        def load():
            import sqlite3
            return sqlite3

        class Repo:
            def save(self):
                from shop.infrastructure.db import session
                return session
        """
    )

    assert [r.module for r in raw] == [
        "typing",
        "shop.domain.entities.user",
        "sqlite3",
        "shop.infrastructure.db",
    ]


def test_relative_imports_record_level_and_names() -> None:
    raw = _raw_imports(
        """
        from . import sibling, other as alias
        from ..core import thing
        from .helpers import *
        """
    )

    assert raw == [
        RawImport(line=2, module="", names=("sibling", "other"), level=1),
        RawImport(line=3, module="core", names=("thing",), level=2),
        RawImport(line=4, module="helpers", names=("*",), level=1),
    ]


def test_resolve_relative_import() -> None:
    assert resolve_relative_import("pkg.sub.mod", "foo", 1) == "pkg.sub.foo"
    assert resolve_relative_import("pkg.sub.mod", "", 1) == "pkg.sub"
    assert resolve_relative_import("pkg.sub.mod", "bar", 2) == "pkg.bar"
    assert (
        resolve_relative_import("pkg.sub", "foo", 1, is_package=True) == "pkg.sub.foo"
    )
    assert resolve_relative_import("pkg.sub", "", 2, is_package=True) == "pkg"


def test_resolve_imports_expands_bare_relative_names_and_dedupes() -> None:
    raw = [
        RawImport(line=1, module="os"),
        RawImport(line=2, module="", names=("sibling",), level=1),
        RawImport(line=3, module="core", names=("thing",), level=2),
        RawImport(line=4, module="os"),
        RawImport(line=5, module="", names=("*",), level=1),
    ]

    assert resolve_imports(
        raw, "pkg.sub.mod", known_modules={"pkg.sub.sibling"}
    ) == (
        "os",
        "pkg.sub.sibling",
        "pkg.core",
        "pkg.sub",
    )


def test_relative_name_that_is_not_a_module_resolves_to_package() -> None:
    raw = [RawImport(line=1, module="", names=("helper",), level=1)]

    assert resolve_imports(raw, "pkg.sub.mod") == ("pkg.sub",)


def test_from_import_of_submodule_resolves_to_submodule() -> None:
    raw = _raw_imports(
        """
        from pkg import a, b
        from shop.domain import entities, DOMAIN_VERSION
        from shop.domain.entities.user import User
        from pkg import *
        """
    )
    known = {"pkg", "pkg.a", "pkg.b", "shop.domain", "shop.domain.entities"}

    assert resolve_imports(raw, "app.main", known_modules=known) == (
        "pkg.a",
        "pkg.b",
        "shop.domain.entities",
        "shop.domain",
        "shop.domain.entities.user",
        "pkg",
    )


def test_resolve_imports_from_package_init() -> None:
    raw = [RawImport(line=1, module="mod", names=("y",), level=1)]

    assert resolve_imports(raw, "pkg.sub", is_package=True) == ("pkg.sub.mod",)


def test_parse_source_rejects_syntax_errors() -> None:
    assert parse_source(b"def broken(:\n    pass\n") is None
    assert parse_source(b"x = 1\n") is not None
