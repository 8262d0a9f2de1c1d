# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Common diagnostic structure for the parser and expansion phases.

Expansion never reports warnings; every diagnostic produced today is an error
that aborts the declaration it is attached to.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from tossgen.core.span import Span


@dataclass
class Diagnostic:
	"""Represents a generator diagnostic (error/warning)."""

	message: str
	code: str | None = None
	# Phase label: "parser" for syntax errors, "expand" for marker/shape errors.
	phase: str | None = None
	severity: str = "error"
	span: Span = field(default_factory=Span)  # Source location (Span() denotes unknown).
	notes: list[str] = field(default_factory=list)

	def __post_init__(self) -> None:
		# Normalize missing spans to the sentinel Span() so renderers can rely on
		# a structured object instead of None.
		if self.span is None:  # type: ignore[unreachable]
			self.span = Span()

	def format_human(self) -> str:
		"""Render as `file:line:col: severity: message` (compiler style)."""
		text = f"{self.span.format()}: {self.severity}: {self.message}"
		if self.code:
			text += f" [{self.code}]"
		for note in self.notes:
			text += f"\n  note: {note}"
		return text

	def to_dict(self) -> dict[str, Any]:
		return {
			"phase": self.phase,
			"code": self.code,
			"message": self.message,
			"severity": self.severity,
			"file": self.span.file,
			"line": self.span.line,
			"column": self.span.column,
			"notes": list(self.notes),
		}


__all__ = ["Diagnostic"]
