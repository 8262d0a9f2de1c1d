# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Normalized declaration model consumed by role resolution and expansion.

`TypeDeclaration.from_item` is the only place raw attributes are classified;
a malformed or duplicated marker anywhere in the item surfaces here as a
`TossError` and nothing downstream ever sees the item.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple, Union

from tossgen.attrs import Attrs, classify
from tossgen.core.span import Span
from tossgen.parser.ast import FieldsStyle, Generics, ItemDecl, RawFields, TypeRef


@dataclass(frozen=True)
class Member:
	"""Field position: a name for named records, an index for tuple records."""

	name: Optional[str] = None
	index: Optional[int] = None

	@property
	def is_named(self) -> bool:
		return self.name is not None

	def __str__(self) -> str:
		return self.name if self.name is not None else str(self.index)


@dataclass(frozen=True)
class Field:
	member: Member
	ty: TypeRef
	attrs: Attrs = field(default_factory=Attrs)
	span: Span = field(default_factory=Span)


@dataclass(frozen=True)
class Record:
	style: FieldsStyle
	fields: Tuple[Field, ...] = ()

	@property
	def is_named(self) -> bool:
		return self.style is FieldsStyle.NAMED


@dataclass(frozen=True)
class Variant:
	ident: str
	record: Record
	attrs: Attrs = field(default_factory=Attrs)
	span: Span = field(default_factory=Span)


@dataclass(frozen=True)
class TaggedUnion:
	variants: Tuple[Variant, ...] = ()


Shape = Union[Record, TaggedUnion]


@dataclass(frozen=True)
class TypeDeclaration:
	ident: str
	shape: Shape
	vis: str = ""
	generics: Generics = field(default_factory=Generics)
	attrs: Attrs = field(default_factory=Attrs)
	span: Span = field(default_factory=Span)

	@property
	def is_union(self) -> bool:
		return isinstance(self.shape, TaggedUnion)

	@classmethod
	def from_item(cls, item: ItemDecl) -> "TypeDeclaration":
		attrs = classify(item.attrs)
		shape: Shape
		if item.kind == "enum":
			shape = TaggedUnion(
				variants=tuple(
					Variant(
						ident=v.ident,
						record=_record(v.fields),
						attrs=classify(v.attrs),
						span=v.span,
					)
					for v in item.variants
				)
			)
		else:
			shape = _record(item.fields)
		return cls(
			ident=item.ident,
			shape=shape,
			vis=item.vis,
			generics=item.generics,
			attrs=attrs,
			span=item.span,
		)


def _record(raw: RawFields) -> Record:
	fields = []
	for index, f in enumerate(raw.fields):
		member = Member(name=f.ident) if f.ident is not None else Member(index=index)
		fields.append(Field(member=member, ty=f.ty, attrs=classify(f.attrs), span=f.span))
	return Record(style=raw.style, fields=tuple(fields))


__all__ = ["Member", "Field", "Record", "Variant", "TaggedUnion", "Shape", "TypeDeclaration"]
