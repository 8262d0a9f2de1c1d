# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Field role resolution for one record or variant.

Source field (first rule that matches wins):
  1. the field marked `#[source]` or `#[from]`;
  2. otherwise the named field literally called `source`.
No source field means the record/variant gets no helper; that is not an error.

Backtrace field:
  1. the first field marked `#[backtrace]` that is not the source;
  2. otherwise the first non-source field whose type is a bare `Backtrace`.

Every remaining field is a context field, in declared order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from tossgen.errors import DuplicateMarkerError
from tossgen.model import Field, Record
from tossgen.parser.ast import TypeRef


@dataclass(frozen=True)
class ResolvedRole:
	source: Field
	backtrace: Optional[Field] = None
	context: Tuple[Field, ...] = ()


def type_is_backtrace(ty: TypeRef) -> bool:
	last = ty.last_segment()
	return last is not None and last.name == "Backtrace" and not last.args


def type_is_option(ty: TypeRef) -> bool:
	last = ty.last_segment()
	if last is None or last.name != "Option":
		return False
	return len(last.args) == 1 and last.args[0].kind == "type"


def source_field(fields: Sequence[Field]) -> Optional[Field]:
	marked = [f for f in fields if f.attrs.marks_source]
	if len(marked) > 1:
		# Markers are classified per field, so a second marked field is only
		# visible here.
		dup = marked[1]
		raise DuplicateMarkerError("source" if dup.attrs.source is not None else "from", span=dup.span)
	if marked:
		return marked[0]
	for f in fields:
		if f.member.name == "source":
			return f
	return None


def backtrace_field(fields: Sequence[Field], source: Field) -> Optional[Field]:
	for f in fields:
		if f.attrs.marks_backtrace and f.member != source.member:
			return f
	for f in fields:
		if type_is_backtrace(f.ty) and f.member != source.member:
			return f
	return None


def resolve_roles(record: Record) -> Optional[ResolvedRole]:
	"""Return the roles of `record`, or None when it has no source field."""
	source = source_field(record.fields)
	if source is None:
		return None
	backtrace = backtrace_field(record.fields, source)
	skip = {source.member} | ({backtrace.member} if backtrace is not None else set())
	context = tuple(f for f in record.fields if f.member not in skip)
	return ResolvedRole(source=source, backtrace=backtrace, context=context)


__all__ = [
	"ResolvedRole",
	"type_is_backtrace",
	"type_is_option",
	"source_field",
	"backtrace_field",
	"resolve_roles",
]
