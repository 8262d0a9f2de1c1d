# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Source span attached to declarations, fields and attributes.

The front-end fills spans from lark node metadata; declarations built by hand
(tests, other front-ends) may leave them empty. `Span()` denotes unknown.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class Span:
	"""Best-effort file/line/column location of a syntax element."""

	file: Optional[str] = None
	line: Optional[int] = None
	column: Optional[int] = None
	end_line: Optional[int] = None
	end_column: Optional[int] = None

	@classmethod
	def from_meta(cls, meta: Any, *, file: Optional[str] = None) -> "Span":
		"""
		Construct a Span from a lark `Meta` (or any object with line/column).

		Lark leaves `meta.empty` set for rules that matched no tokens; those map
		to an unknown span that still remembers the file.
		"""
		if meta is None or getattr(meta, "empty", False):
			return cls(file=file)
		if isinstance(meta, cls):
			return meta
		return cls(
			file=file,
			line=getattr(meta, "line", None),
			column=getattr(meta, "column", None),
			end_line=getattr(meta, "end_line", None),
			end_column=getattr(meta, "end_column", None),
		)

	def is_known(self) -> bool:
		return self.line is not None

	def format(self) -> str:
		"""Render as `file:line:col` with `?` for unknown parts."""
		line = self.line if self.line is not None else "?"
		column = self.column if self.column is not None else "?"
		return f"{self.file or '<input>'}:{line}:{column}"


__all__ = ["Span"]
