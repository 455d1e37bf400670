"""Tree-sitter parsing of Python sources."""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

from tree_sitter import Language, Parser
from tree_sitter_python import language as get_python_language

if TYPE_CHECKING:
    from pathlib import Path

    from tree_sitter import Node, Tree

# Parsers are not shared between threads.
_LOCAL = threading.local()


def _get_parser() -> Parser:
    """Return this thread's Tree-sitter parser for Python."""
    parser: Parser | None = getattr(_LOCAL, "parser", None)
    if parser is None:
        parser = Parser(Language(get_python_language()))
        _LOCAL.parser = parser
    return parser


def parse_source(source: bytes) -> Tree | None:
    """Parse Python source bytes.

    Returns None when the tree contains syntax errors; tree-sitter always
    produces a tree, so error recovery nodes are what mark a failed parse.
    """
    tree = _get_parser().parse(source)
    if tree.root_node.has_error:
        return None
    return tree


def parse_file(file_path: Path) -> Tree | None:
    """Read and parse a Python file. IO errors propagate."""
    return parse_source(file_path.read_bytes())


def node_text(node: Node | None) -> str:
    """Decoded source text of a node with whitespace runs collapsed."""
    if node is None or not node.text:
        return ""
    return " ".join(node.text.decode("utf8").split())
