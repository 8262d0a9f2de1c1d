# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Trait + impl generation for one record or variant.

For `struct DataStoreError { msg: String, source: io::Error }` the output is

    trait TossDataStoreError<__RETURN> {
        fn toss_data_store(self, msg: String) -> Result<__RETURN, DataStoreError>;
        fn toss_data_store_with<F: FnOnce() -> String>(self, f: F) -> Result<__RETURN, DataStoreError>;
    }
    impl<__RETURN> TossDataStoreError<__RETURN> for Result<__RETURN, io::Error> {
        fn toss_data_store(self, msg: String) -> Result<__RETURN, DataStoreError> {
            self.map_err(|e| DataStoreError { msg, source: e })
        }
        fn toss_data_store_with<F: FnOnce() -> String>(self, f: F) -> Result<__RETURN, DataStoreError> {
            self.map_err(|e| {
                let msg = f();
                DataStoreError { msg, source: e }
            })
        }
    }

The `_with` method is only generated when there is at least one context
field. The value is always rebuilt in declared field order, so tuple records
get the converted error at the source field's own position.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from tossgen.model import Field, Record, TypeDeclaration
from tossgen.naming import Names
from tossgen.options import ExpandOptions
from tossgen.roles import ResolvedRole, type_is_option

INDENT = "    "

_IDENT_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


@dataclass(frozen=True)
class GeneratedArtifact:
	"""One capability trait plus its impl, keyed by (type, variant)."""

	type_ident: str
	variant_ident: Optional[str]
	trait_name: str
	method: str
	with_method: Optional[str]
	interface: str
	implementation: str

	@property
	def key(self) -> Tuple[str, Optional[str]]:
		return (self.type_ident, self.variant_ident)

	def render(self) -> str:
		return f"{self.interface}\n{self.implementation}\n"


def _fresh(name: str, taken: Iterable[str]) -> str:
	taken = set(taken)
	while name in taken:
		name = f"_{name}"
	return name


def _type_names(decl: TypeDeclaration, record: Record) -> set:
	# Every identifier the generated signatures can mention; a generic named
	# like one of them would shadow it.
	names = {decl.ident} | {p.name for p in decl.generics.params}
	for f in record.fields:
		names.update(_IDENT_RE.findall(f.ty.text))
	if decl.generics.where_clause:
		names.update(_IDENT_RE.findall(decl.generics.where_clause))
	return names


def _param_names(context: Tuple[Field, ...]) -> List[str]:
	# Positional fields are numbered by their position among the context fields.
	return [f.member.name if f.member.name is not None else f"_{i}" for i, f in enumerate(context)]


def _backtrace_expr(field: Field, options: ExpandOptions) -> str:
	capture = f"{options.backtrace_capture}()"
	if type_is_option(field.ty):
		return f"::core::option::Option::Some({capture})"
	return f"::core::convert::From::from({capture})"


def _constructor(
	ctor: str,
	record: Record,
	role: ResolvedRole,
	params: List[str],
	binding: str,
	options: ExpandOptions,
) -> str:
	by_member = {f.member: p for f, p in zip(role.context, params)}
	values: List[Tuple[Field, str]] = []
	for f in record.fields:
		if f.member == role.source.member:
			values.append((f, binding))
		elif role.backtrace is not None and f.member == role.backtrace.member:
			values.append((f, _backtrace_expr(f, options)))
		else:
			values.append((f, by_member[f.member]))
	if not record.is_named:
		return f"{ctor}(" + ", ".join(v for _, v in values) + ")"
	parts = []
	for f, value in values:
		parts.append(f.member.name if value == f.member.name else f"{f.member.name}: {value}")
	return f"{ctor} {{ " + ", ".join(parts) + " }"


def expand_record(
	decl: TypeDeclaration,
	record: Record,
	role: ResolvedRole,
	names: Names,
	*,
	ctor: str,
	visibility: str,
	variant_ident: Optional[str] = None,
	options: ExpandOptions,
) -> GeneratedArtifact:
	"""
	Emit the trait and impl for one record (a struct, or one enum variant).

	`ctor` is the constructor path (`Ty` or `Ty::Variant`); `visibility` is
	the already-resolved visibility text of the trait (may be empty).
	"""
	generics = decl.generics.with_type_param(options.return_param)
	impl_generics = generics.impl_generics()
	trait_args = generics.ty_generics()
	where = decl.generics.where_text()
	target = f"{decl.ident}{decl.generics.ty_generics()}"
	ret = f"Result<{options.return_param}, {target}>"

	params = _param_names(role.context)
	taken = set(params) | {"self"}
	binding = _fresh("e", taken)
	producer = _fresh("f", taken)
	producer_ty = _fresh("F", _type_names(decl, record))

	args = "".join(f", {p}: {f.ty.text}" for p, f in zip(params, role.context))
	eager_sig = f"fn {names.method}(self{args}) -> {ret}{where}"

	lazy_sig = None
	if role.context:
		if len(role.context) == 1:
			tuple_ty = role.context[0].ty.text
			pattern = params[0]
		else:
			tuple_ty = "(" + ", ".join(f.ty.text for f in role.context) + ")"
			pattern = "(" + ", ".join(params) + ")"
		lazy_sig = (
			f"fn {names.with_method}<{producer_ty}: FnOnce() -> {tuple_ty}>"
			f"(self, {producer}: {producer_ty}) -> {ret}{where}"
		)

	value = _constructor(ctor, record, role, params, binding, options)

	vis = f"{visibility} " if visibility else ""
	interface_lines = [f"{vis}trait {names.trait_name}{impl_generics} {{", f"{INDENT}{eager_sig};"]
	if lazy_sig is not None:
		interface_lines.append(f"{INDENT}{lazy_sig};")
	interface_lines.append("}")

	impl_lines = [
		f"impl{impl_generics} {names.trait_name}{trait_args} for Result<{options.return_param}, {role.source.ty.text}>{where} {{",
		f"{INDENT}{eager_sig} {{",
		f"{INDENT * 2}self.map_err(|{binding}| {value})",
		f"{INDENT}}}",
	]
	if lazy_sig is not None:
		impl_lines += [
			f"{INDENT}{lazy_sig} {{",
			f"{INDENT * 2}self.map_err(|{binding}| {{",
			f"{INDENT * 3}let {pattern} = {producer}();",
			f"{INDENT * 3}{value}",
			f"{INDENT * 2}}})",
			f"{INDENT}}}",
		]
	impl_lines.append("}")

	return GeneratedArtifact(
		type_ident=decl.ident,
		variant_ident=variant_ident,
		trait_name=names.trait_name,
		method=names.method,
		with_method=names.with_method if lazy_sig is not None else None,
		interface="\n".join(interface_lines),
		implementation="\n".join(impl_lines),
	)


__all__ = ["GeneratedArtifact", "expand_record"]
