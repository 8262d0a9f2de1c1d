# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Declaration front-end.

Parses Rust-like `struct`/`enum` declarations (with `#[...]` markers) into raw
`ItemDecl`s. Classification of the markers happens later, in
`tossgen.attrs` / `tossgen.model`.
"""

from __future__ import annotations

from pathlib import Path
from typing import List

from . import ast
from .parser import parse_items, parse_type


def parse_file(path: Path) -> List[ast.ItemDecl]:
	"""Parse a declaration file; spans carry the file path."""
	return parse_items(path.read_text(encoding="utf-8"), file=str(path))


__all__ = ["ast", "parse_items", "parse_type", "parse_file"]
