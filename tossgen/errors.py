# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Structural errors raised while classifying or expanding a declaration.

All of these are generation-time failures. `TossError` subclasses are
user-facing: the driver turns them into pinned diagnostics attached to the
offending item. `UnresolvedSelfPrefixError` is deliberately *not* a
`TossError`; a bare `#[prefix]` on a struct has no enclosing name to borrow
and aborts the run.
"""

from __future__ import annotations

from typing import Optional

from tossgen.core.diagnostics import Diagnostic
from tossgen.core.span import Span


class TossError(ValueError):
	"""Base class for structural errors; carries a stable code and a span."""

	code = "TossError"
	phase = "expand"

	def __init__(self, message: str, *, span: Optional[Span] = None) -> None:
		super().__init__(message)
		self.message = message
		self.span = span if span is not None else Span()

	def to_diagnostic(self) -> Diagnostic:
		return Diagnostic(
			message=self.message,
			code=self.code,
			phase=self.phase,
			severity="error",
			span=self.span,
		)


class DuplicateMarkerError(TossError):
	"""The same marker appears twice on one item (or `source` on two fields)."""

	code = "DuplicateMarker"

	def __init__(self, marker: str, *, span: Optional[Span] = None) -> None:
		super().__init__(f"duplicate #[{marker}] attribute", span=span)
		self.marker = marker


class MalformedMarkerError(TossError):
	"""A marker was written with an argument form it does not accept."""

	code = "MalformedMarkerArguments"


class ParseError(TossError):
	"""Syntax error reported by the declaration front-end."""

	code = "SyntaxError"
	phase = "parser"


class UnresolvedSelfPrefixError(RuntimeError):
	"""Bare `#[prefix]` on a struct: there is no enclosing type to name the prefix after."""

	def __init__(self, type_ident: str, *, span: Optional[Span] = None) -> None:
		where = f" ({span.format()})" if span is not None and span.is_known() else ""
		super().__init__(f"prefix value must be specified for struct `{type_ident}`{where}")
		self.type_ident = type_ident
		self.span = span


__all__ = [
	"TossError",
	"DuplicateMarkerError",
	"MalformedMarkerError",
	"ParseError",
	"UnresolvedSelfPrefixError",
]
