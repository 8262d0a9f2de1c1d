# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Raw declaration shapes produced by the front-end.

Nothing here is classified yet: attributes are kept as path + style + raw
token text, and types are opaque `TypeRef`s that only expose what expansion
needs (the canonical text and, for path types, the segment list).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from tossgen.core.span import Span


class AttrStyle(Enum):
	"""Argument form of an attribute: `#[a]`, `#[a(...)]` or `#[a = ...]`."""

	PATH = "path"
	LIST = "list"
	NAME_VALUE = "name_value"


@dataclass(frozen=True)
class Attribute:
	path: str
	style: AttrStyle = AttrStyle.PATH
	# LIST: text between the delimiters. NAME_VALUE: text after `=`.
	tokens: str = ""
	span: Span = field(default_factory=Span)

	def is_ident(self, name: str) -> bool:
		return self.path == name

	def render(self) -> str:
		if self.style is AttrStyle.LIST:
			return f"#[{self.path}({self.tokens})]"
		if self.style is AttrStyle.NAME_VALUE:
			return f"#[{self.path} = {self.tokens}]"
		return f"#[{self.path}]"


@dataclass(frozen=True)
class PathSegment:
	name: str
	args: Tuple["TypeRef", ...] = ()


@dataclass(frozen=True)
class TypeRef:
	"""
	Opaque type token.

	`text` is the canonical rendering emitted verbatim into generated code.
	`segments` is populated only for path types (`a::b::C<T>`, and the trailing
	path of `<T as Trait>::Assoc`); references, tuples, arrays and the like
	leave it empty. Generic arguments that are not types (lifetimes, const
	values, `Item = T` bindings) appear in `args` with `kind` set to
	"lifetime" / "const" / "binding".
	"""

	text: str
	segments: Tuple[PathSegment, ...] = ()
	kind: str = "type"

	def last_segment(self) -> Optional[PathSegment]:
		if not self.segments:
			return None
		return self.segments[-1]

	def __str__(self) -> str:
		return self.text


@dataclass(frozen=True)
class GenericParam:
	kind: str  # "lifetime" | "type" | "const"
	name: str
	# Text after `:` (bounds for lifetimes/types, the value type for consts).
	bounds: str = ""
	default: Optional[str] = None

	def decl_text(self) -> str:
		"""Parameter as written in impl position (bounds kept, defaults dropped)."""
		head = f"const {self.name}" if self.kind == "const" else self.name
		if self.bounds:
			return f"{head}: {self.bounds}"
		return head

	def arg_text(self) -> str:
		return self.name


@dataclass(frozen=True)
class Generics:
	params: Tuple[GenericParam, ...] = ()
	where_clause: Optional[str] = None  # predicates only, without `where`

	def with_type_param(self, name: str) -> "Generics":
		return Generics(
			params=self.params + (GenericParam(kind="type", name=name),),
			where_clause=self.where_clause,
		)

	def impl_generics(self) -> str:
		if not self.params:
			return ""
		return "<" + ", ".join(p.decl_text() for p in self.params) + ">"

	def ty_generics(self) -> str:
		if not self.params:
			return ""
		return "<" + ", ".join(p.arg_text() for p in self.params) + ">"

	def where_text(self) -> str:
		"""` where ...` with a leading space, or the empty string."""
		if not self.where_clause:
			return ""
		return f" where {self.where_clause}"


class FieldsStyle(Enum):
	NAMED = "named"
	UNNAMED = "unnamed"
	UNIT = "unit"


@dataclass(frozen=True)
class RawField:
	ident: Optional[str]
	ty: TypeRef
	attrs: Tuple[Attribute, ...] = ()
	vis: str = ""
	span: Span = field(default_factory=Span)


@dataclass(frozen=True)
class RawFields:
	style: FieldsStyle = FieldsStyle.UNIT
	fields: Tuple[RawField, ...] = ()


@dataclass(frozen=True)
class RawVariant:
	ident: str
	fields: RawFields = field(default_factory=RawFields)
	attrs: Tuple[Attribute, ...] = ()
	discriminant: Optional[str] = None
	span: Span = field(default_factory=Span)


@dataclass(frozen=True)
class ItemDecl:
	"""One `struct` or `enum` declaration as written."""

	kind: str  # "struct" | "enum"
	ident: str
	vis: str = ""
	generics: Generics = field(default_factory=Generics)
	attrs: Tuple[Attribute, ...] = ()
	fields: RawFields = field(default_factory=RawFields)  # struct only
	variants: Tuple[RawVariant, ...] = ()  # enum only
	span: Span = field(default_factory=Span)

	def derives(self) -> Tuple[str, ...]:
		"""Final path segments named by every `#[derive(...)]` on the item."""
		names: list[str] = []
		for attr in self.attrs:
			if not attr.is_ident("derive") or attr.style is not AttrStyle.LIST:
				continue
			for part in attr.tokens.split(","):
				part = part.strip()
				if part:
					names.append(part.split("::")[-1].strip())
		return tuple(names)


__all__ = [
	"AttrStyle",
	"Attribute",
	"PathSegment",
	"TypeRef",
	"GenericParam",
	"Generics",
	"FieldsStyle",
	"RawField",
	"RawFields",
	"RawVariant",
	"ItemDecl",
]
