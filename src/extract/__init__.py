"""Package metadata extraction for layerlint.

Import from the submodules directly: `extract.models` is imported by the
parsers, which `extract.packages` in turn depends on.
"""
