"""Parsing utilities for layerlint."""

from parse.imports import (
    RawImport,
    extract_raw_imports,
    resolve_imports,
    resolve_relative_import,
)
from parse.treesitter_parser import parse_file, parse_source
from parse.treesitter_types import extract_type_descriptors

__all__ = [
    "RawImport",
    "extract_raw_imports",
    "extract_type_descriptors",
    "parse_file",
    "parse_source",
    "resolve_imports",
    "resolve_relative_import",
]
