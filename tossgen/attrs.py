# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Marker classification for fields, variants and type declarations.

Recognized markers:

  #[source]            field is the conversion source
  #[from]              same, for thiserror's `From` convention
  #[backtrace]         field is populated with a captured backtrace
  #[visibility(...)]   visibility of the generated trait (tokens kept verbatim)
  #[prefix(name)]      method-name prefix; bare `#[prefix]` borrows the type name

Everything else (`#[error(...)]`, `#[derive(...)]`, doc attributes) is ignored.
`#[from(...)]` / `#[from = ...]` are ignored too; other derive crates use that
spelling with arguments.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Sequence

from tossgen.core.span import Span
from tossgen.errors import DuplicateMarkerError, MalformedMarkerError
from tossgen.parser.ast import Attribute, AttrStyle

_IDENT_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

# Strict and reserved Rust keywords; none of them is a usable prefix identifier.
_KEYWORDS = frozenset(
	{
		"as", "async", "await", "break", "const", "continue", "crate", "dyn", "else",
		"enum", "extern", "false", "fn", "for", "if", "impl", "in", "let", "loop",
		"match", "mod", "move", "mut", "pub", "ref", "return", "self", "Self",
		"static", "struct", "super", "trait", "true", "type", "unsafe", "use",
		"where", "while", "abstract", "become", "box", "do", "final", "macro",
		"override", "priv", "try", "typeof", "unsized", "virtual", "yield", "_",
	}
)


class PrefixKind(Enum):
	EXPLICIT = "explicit"
	# Bare `#[prefix]`: resolved against the enclosing type name (enums only).
	SELF = "self"


@dataclass(frozen=True)
class Prefix:
	kind: PrefixKind
	name: Optional[str] = None
	span: Span = field(default_factory=Span)

	@classmethod
	def explicit(cls, name: str, *, span: Optional[Span] = None) -> "Prefix":
		return cls(kind=PrefixKind.EXPLICIT, name=name, span=span or Span())

	@classmethod
	def self_prefix(cls, *, span: Optional[Span] = None) -> "Prefix":
		return cls(kind=PrefixKind.SELF, span=span or Span())

	@property
	def is_self(self) -> bool:
		return self.kind is PrefixKind.SELF


@dataclass(frozen=True)
class Attrs:
	"""Classified markers of one item. Absent markers are None."""

	source: Optional[Attribute] = None
	from_: Optional[Attribute] = None
	backtrace: Optional[Attribute] = None
	visibility: Optional[str] = None
	prefix: Optional[Prefix] = None

	@property
	def marks_source(self) -> bool:
		return self.source is not None or self.from_ is not None

	@property
	def marks_backtrace(self) -> bool:
		return self.backtrace is not None


def _require_path_only(attr: Attribute) -> None:
	if attr.style is not AttrStyle.PATH:
		raise MalformedMarkerError(
			f"#[{attr.path}] does not take arguments; found `{attr.render()}`",
			span=attr.span,
		)


def _require_list(attr: Attribute) -> None:
	if attr.style is not AttrStyle.LIST:
		raise MalformedMarkerError(
			f"expected attribute arguments in parentheses: #[{attr.path}(...)]",
			span=attr.span,
		)


def _parse_prefix(attr: Attribute) -> Prefix:
	if attr.style is AttrStyle.PATH:
		return Prefix.self_prefix(span=attr.span)
	if attr.style is AttrStyle.NAME_VALUE:
		raise MalformedMarkerError(
			"expected #[prefix] or #[prefix(identifier)]",
			span=attr.span,
		)
	ident = attr.tokens.strip()
	if not _IDENT_RE.match(ident) or ident in _KEYWORDS:
		raise MalformedMarkerError(
			f"expected identifier in #[prefix(...)], found `{attr.tokens}`",
			span=attr.span,
		)
	return Prefix.explicit(ident, span=attr.span)


def classify(attrs: Sequence[Attribute]) -> Attrs:
	"""
	Bucket the raw attributes of one item into an `Attrs` record.

	Raises `DuplicateMarkerError` when a recognized marker repeats and
	`MalformedMarkerError` when its argument form is wrong.
	"""
	found: Dict[str, object] = {}

	def _once(name: str, attr: Attribute) -> None:
		if name in found:
			raise DuplicateMarkerError(name, span=attr.span)

	for attr in attrs:
		if attr.is_ident("source"):
			_require_path_only(attr)
			_once("source", attr)
			found["source"] = attr
		elif attr.is_ident("backtrace"):
			_require_path_only(attr)
			_once("backtrace", attr)
			found["backtrace"] = attr
		elif attr.is_ident("visibility"):
			_require_list(attr)
			_once("visibility", attr)
			found["visibility"] = attr.tokens.strip()
		elif attr.is_ident("from"):
			if attr.style is not AttrStyle.PATH:
				continue
			_once("from", attr)
			found["from"] = attr
		elif attr.is_ident("prefix"):
			_once("prefix", attr)
			found["prefix"] = _parse_prefix(attr)

	return Attrs(
		source=found.get("source"),  # type: ignore[arg-type]
		from_=found.get("from"),  # type: ignore[arg-type]
		backtrace=found.get("backtrace"),  # type: ignore[arg-type]
		visibility=found.get("visibility"),  # type: ignore[arg-type]
		prefix=found.get("prefix"),  # type: ignore[arg-type]
	)


__all__ = ["PrefixKind", "Prefix", "Attrs", "classify"]
