# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Tuple, Union

from lark import Lark, Token, Tree
from lark.exceptions import UnexpectedCharacters, UnexpectedEOF, UnexpectedInput, UnexpectedToken

from tossgen.core.span import Span
from tossgen.errors import ParseError
from .ast import (
	Attribute,
	AttrStyle,
	FieldsStyle,
	GenericParam,
	Generics,
	ItemDecl,
	PathSegment,
	RawField,
	RawFields,
	RawVariant,
	TypeRef,
)

_GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text() + "\ntype_only: type\n"

_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="lalr",
	lexer="basic",
	start=["start", "type_only"],
	propagate_positions=True,
	maybe_placeholders=False,
)

Node = Union[Tree, Token]


def _subtrees(tree: Tree, name: Optional[str] = None) -> List[Tree]:
	return [c for c in tree.children if isinstance(c, Tree) and (name is None or c.data == name)]


def _tokens(tree: Tree, *types: str) -> List[Token]:
	return [c for c in tree.children if isinstance(c, Token) and (not types or c.type in types)]


def _first_subtree(tree: Tree, name: str) -> Optional[Tree]:
	found = _subtrees(tree, name)
	return found[0] if found else None


class _Builder:
	"""
	Turns the lark parse tree into `ItemDecl`s.

	Holds the source text so raw attribute bodies can be sliced verbatim by
	position instead of being re-rendered from tokens.
	"""

	def __init__(self, source: str, file: Optional[str]) -> None:
		self.source = source
		self.file = file

	# ---- positions -------------------------------------------------------

	def span(self, node: Node) -> Span:
		if isinstance(node, Token):
			return Span(
				file=self.file,
				line=node.line,
				column=node.column,
				end_line=node.end_line,
				end_column=node.end_column,
			)
		return Span.from_meta(node.meta, file=self.file)

	def _bounds_of(self, node: Node) -> Tuple[int, int]:
		if isinstance(node, Token):
			return node.start_pos, node.end_pos
		return node.meta.start_pos, node.meta.end_pos

	def text(self, first: Node, last: Optional[Node] = None) -> str:
		start, end = self._bounds_of(first)
		if last is not None:
			end = self._bounds_of(last)[1]
		return self.source[start:end]

	# ---- items -----------------------------------------------------------

	def program(self, tree: Tree) -> List[ItemDecl]:
		return [self.item(child) for child in _subtrees(tree, "item")]

	def item(self, tree: Tree) -> ItemDecl:
		attrs = tuple(self.attribute(a) for a in _subtrees(tree, "outer_attr"))
		vis_tree = _first_subtree(tree, "visibility")
		vis = self.visibility(vis_tree) if vis_tree is not None else ""
		struct_tree = _first_subtree(tree, "struct_def")
		if struct_tree is not None:
			return self.struct_def(struct_tree, attrs=attrs, vis=vis, span=self.span(tree))
		enum_tree = _first_subtree(tree, "enum_def")
		assert enum_tree is not None
		return self.enum_def(enum_tree, attrs=attrs, vis=vis, span=self.span(tree))

	def struct_def(self, tree: Tree, *, attrs: Tuple[Attribute, ...], vis: str, span: Span) -> ItemDecl:
		name = _tokens(tree, "NAME")[0]
		body = [c for c in _subtrees(tree) if c.data in ("named_body", "tuple_body", "unit_body")][0]
		where = _first_subtree(body, "where_clause")
		generics = self.generics(_first_subtree(tree, "generics"), where)
		if body.data == "named_body":
			fields = self.named_fields(_first_subtree(body, "named_fields"))
		elif body.data == "tuple_body":
			fields = self.tuple_fields(_first_subtree(body, "tuple_fields"))
		else:
			fields = RawFields(style=FieldsStyle.UNIT)
		return ItemDecl(
			kind="struct",
			ident=str(name),
			vis=vis,
			generics=generics,
			attrs=attrs,
			fields=fields,
			span=span,
		)

	def enum_def(self, tree: Tree, *, attrs: Tuple[Attribute, ...], vis: str, span: Span) -> ItemDecl:
		name = _tokens(tree, "NAME")[0]
		generics = self.generics(_first_subtree(tree, "generics"), _first_subtree(tree, "where_clause"))
		variants: List[RawVariant] = []
		variant_list = _first_subtree(tree, "variant_list")
		if variant_list is not None:
			variants = [self.variant(v) for v in _subtrees(variant_list, "variant")]
		return ItemDecl(
			kind="enum",
			ident=str(name),
			vis=vis,
			generics=generics,
			attrs=attrs,
			variants=tuple(variants),
			span=span,
		)

	def variant(self, tree: Tree) -> RawVariant:
		attrs = tuple(self.attribute(a) for a in _subtrees(tree, "outer_attr"))
		name = _tokens(tree, "NAME")[0]
		fields = RawFields(style=FieldsStyle.UNIT)
		named = _first_subtree(tree, "named_fields")
		unnamed = _first_subtree(tree, "tuple_fields")
		if named is not None:
			fields = self.named_fields(named)
		elif unnamed is not None:
			fields = self.tuple_fields(unnamed)
		discriminant = None
		disc_tree = _first_subtree(tree, "discriminant")
		if disc_tree is not None:
			discriminant = "".join(str(t) for t in _tokens(disc_tree))
		return RawVariant(
			ident=str(name),
			fields=fields,
			attrs=attrs,
			discriminant=discriminant,
			span=self.span(tree),
		)

	def named_fields(self, tree: Tree) -> RawFields:
		out: List[RawField] = []
		field_list = _first_subtree(tree, "named_field_list")
		for f in _subtrees(field_list, "named_field") if field_list is not None else []:
			vis_tree = _first_subtree(f, "visibility")
			ty_tree = [c for c in _subtrees(f) if c.data not in ("outer_attr", "visibility")][0]
			out.append(
				RawField(
					ident=str(_tokens(f, "NAME")[0]),
					ty=self.type_ref(ty_tree),
					attrs=tuple(self.attribute(a) for a in _subtrees(f, "outer_attr")),
					vis=self.visibility(vis_tree) if vis_tree is not None else "",
					span=self.span(f),
				)
			)
		return RawFields(style=FieldsStyle.NAMED, fields=tuple(out))

	def tuple_fields(self, tree: Tree) -> RawFields:
		out: List[RawField] = []
		field_list = _first_subtree(tree, "tuple_field_list")
		for f in _subtrees(field_list, "tuple_field") if field_list is not None else []:
			vis_tree = _first_subtree(f, "visibility")
			ty_tree = [c for c in _subtrees(f) if c.data not in ("outer_attr", "visibility")][0]
			out.append(
				RawField(
					ident=None,
					ty=self.type_ref(ty_tree),
					attrs=tuple(self.attribute(a) for a in _subtrees(f, "outer_attr")),
					vis=self.visibility(vis_tree) if vis_tree is not None else "",
					span=self.span(f),
				)
			)
		return RawFields(style=FieldsStyle.UNNAMED, fields=tuple(out))

	# ---- attributes / visibility -----------------------------------------

	def attribute(self, tree: Tree) -> Attribute:
		path_tree = _first_subtree(tree, "attr_path")
		assert path_tree is not None
		path = "::".join(str(t) for t in _tokens(path_tree, "NAME"))
		body = [c for c in _subtrees(tree) if c.data in ("attr_list", "attr_name_value")]
		if not body:
			return Attribute(path=path, style=AttrStyle.PATH, span=self.span(tree))
		if body[0].data == "attr_list":
			group = _subtrees(body[0], "delim_group")[0]
			# Drop the delimiters themselves.
			inner = self.text(group)[1:-1].strip()
			return Attribute(path=path, style=AttrStyle.LIST, tokens=inner, span=self.span(tree))
		parts = _subtrees(body[0], "tt")
		value = self.text(parts[0], parts[-1]).strip()
		return Attribute(path=path, style=AttrStyle.NAME_VALUE, tokens=value, span=self.span(tree))

	def visibility(self, tree: Tree) -> str:
		restriction = _first_subtree(tree, "vis_restriction")
		if restriction is None:
			return "pub"
		path = _first_subtree(restriction, "path_type")
		if path is not None:
			return f"pub(in {self.type_ref(path).text})"
		return f"pub({_tokens(restriction)[0]})"

	# ---- generics --------------------------------------------------------

	def generics(self, tree: Optional[Tree], where: Optional[Tree]) -> Generics:
		params: List[GenericParam] = []
		for p in _subtrees(tree) if tree is not None else []:
			if p.data == "lifetime_param":
				bounds_tree = _first_subtree(p, "lifetime_bounds")
				params.append(
					GenericParam(
						kind="lifetime",
						name=str(_tokens(p, "LIFETIME")[0]),
						bounds=self.lifetime_bounds(bounds_tree) if bounds_tree is not None else "",
					)
				)
			elif p.data == "type_param":
				bounds_tree = _first_subtree(p, "bounds")
				default = [c for c in _subtrees(p) if c.data != "bounds"]
				params.append(
					GenericParam(
						kind="type",
						name=str(_tokens(p, "NAME")[0]),
						bounds=self.bounds(bounds_tree) if bounds_tree is not None else "",
						default=self.type_ref(default[0]).text if default else None,
					)
				)
			elif p.data == "const_param":
				ty_tree = [c for c in _subtrees(p) if c.data != "const_value"][0]
				value = _first_subtree(p, "const_value")
				params.append(
					GenericParam(
						kind="const",
						name=str(_tokens(p, "NAME")[0]),
						bounds=self.type_ref(ty_tree).text,
						default=self.text(value).strip() if value is not None else None,
					)
				)
		where_clause = None
		if where is not None:
			preds = [self.where_pred(pred) for pred in _subtrees(where)]
			where_clause = ", ".join(preds) or None
		return Generics(params=tuple(params), where_clause=where_clause)

	def where_pred(self, tree: Tree) -> str:
		if tree.data == "lifetime_pred":
			lifetime = _tokens(tree, "LIFETIME")[0]
			return f"{lifetime}: {self.lifetime_bounds(_subtrees(tree, 'lifetime_bounds')[0])}"
		ty_tree = [c for c in _subtrees(tree) if c.data != "bounds"][0]
		bounds_tree = _first_subtree(tree, "bounds")
		bounds = self.bounds(bounds_tree) if bounds_tree is not None else ""
		return f"{self.type_ref(ty_tree).text}: {bounds}".rstrip()

	def lifetime_bounds(self, tree: Tree) -> str:
		return " + ".join(str(t) for t in _tokens(tree, "LIFETIME"))

	def bounds(self, tree: Tree) -> str:
		return " + ".join(self.bound(b) for b in _subtrees(tree))

	def bound(self, tree: Tree) -> str:
		if tree.data == "lifetime_bound":
			return str(_tokens(tree, "LIFETIME")[0])
		path = self.type_ref(_subtrees(tree, "path_type")[0]).text
		if tree.data == "maybe_bound":
			return f"?{path}"
		return path

	# ---- types -----------------------------------------------------------

	def type_ref(self, tree: Tree) -> TypeRef:
		kind = tree.data
		if kind == "path_type":
			return self.path_type(tree)
		if kind == "ref_type":
			lifetime = _tokens(tree, "LIFETIME")
			is_mut = bool(_tokens(tree, "MUT"))
			inner = self.type_ref(_subtrees(tree)[0])
			text = "&"
			if lifetime:
				text += f"{lifetime[0]} "
			if is_mut:
				text += "mut "
			return TypeRef(text=text + inner.text)
		if kind == "ptr_type":
			qualifier = _tokens(tree, "CONST", "MUT")[0]
			return TypeRef(text=f"*{qualifier} {self.type_ref(_subtrees(tree)[0]).text}")
		if kind == "unit_type":
			return TypeRef(text="()")
		if kind == "paren_type":
			return TypeRef(text=f"({self.type_ref(_subtrees(tree)[0]).text})")
		if kind == "tuple_type":
			elems = [self.type_ref(t).text for t in _subtrees(tree)]
			if len(elems) == 1:
				return TypeRef(text=f"({elems[0]},)")
			return TypeRef(text="(" + ", ".join(elems) + ")")
		if kind == "array_type":
			elem = self.type_ref([c for c in _subtrees(tree) if c.data != "array_len"][0])
			length = self.text(_subtrees(tree, "array_len")[0]).strip()
			return TypeRef(text=f"[{elem.text}; {length}]")
		if kind == "slice_type":
			return TypeRef(text=f"[{self.type_ref(_subtrees(tree)[0]).text}]")
		if kind == "dyn_type":
			return TypeRef(text="dyn " + " + ".join(self.bound(b) for b in _subtrees(tree)))
		if kind == "fn_ptr_type":
			return TypeRef(text="fn" + self.fn_signature(_subtrees(tree, "fn_params")[0], _first_subtree(tree, "fn_ret")))
		if kind == "qualified_type":
			return self.qualified_type(tree)
		if kind == "never_type":
			return TypeRef(text="!")
		raise AssertionError(f"unhandled type node {kind!r}")

	def fn_signature(self, params: Tree, ret: Optional[Tree]) -> str:
		text = "(" + ", ".join(self.type_ref(t).text for t in _subtrees(params)) + ")"
		if ret is not None:
			text += f" -> {self.type_ref(_subtrees(ret)[0]).text}"
		return text

	def path_segment(self, seg: Tree) -> Tuple[PathSegment, str]:
		ident = str(_tokens(_subtrees(seg, "seg_ident")[0])[0])
		params = _first_subtree(seg, "fn_params")
		if params is not None:
			# `Fn(A) -> R` has no angle-bracketed arguments to expose.
			return PathSegment(name=ident), ident + self.fn_signature(params, _first_subtree(seg, "fn_ret"))
		args: List[TypeRef] = []
		args_tree = _first_subtree(seg, "generic_args")
		for arg in _subtrees(args_tree) if args_tree is not None else []:
			if arg.data == "type_arg":
				args.append(self.type_ref(_subtrees(arg)[0]))
			elif arg.data == "binding_arg":
				bound = self.type_ref(_subtrees(arg)[0]).text
				args.append(TypeRef(text=f"{_tokens(arg, 'NAME')[0]} = {bound}", kind="binding"))
			elif arg.data == "lifetime_arg":
				args.append(TypeRef(text=str(_tokens(arg)[0]), kind="lifetime"))
			else:
				args.append(TypeRef(text=str(_tokens(arg)[0]), kind="const"))
		if args:
			return PathSegment(name=ident, args=tuple(args)), ident + "<" + ", ".join(a.text for a in args) + ">"
		return PathSegment(name=ident), ident

	def path_type(self, tree: Tree) -> TypeRef:
		leading = bool(_tokens(tree, "LEADING_SEP"))
		parts = [self.path_segment(seg) for seg in _subtrees(tree, "path_segment")]
		text = ("::" if leading else "") + "::".join(r for _, r in parts)
		return TypeRef(text=text, segments=tuple(s for s, _ in parts))

	def qualified_type(self, tree: Tree) -> TypeRef:
		self_ty = self.type_ref(_subtrees(tree)[0]).text
		qualifier = _first_subtree(tree, "qualified_as")
		if qualifier is not None:
			self_ty += f" as {self.type_ref(_subtrees(qualifier)[0]).text}"
		parts = [self.path_segment(seg) for seg in _subtrees(tree, "path_segment")]
		text = f"<{self_ty}>::" + "::".join(r for _, r in parts)
		return TypeRef(text=text, segments=tuple(s for s, _ in parts))


def _parse_error(exc: UnexpectedInput, file: Optional[str]) -> ParseError:
	if isinstance(exc, UnexpectedEOF):
		message = "unexpected end of input"
	elif isinstance(exc, UnexpectedToken):
		if exc.token.type == "$END":
			message = "unexpected end of input"
		else:
			message = f"unexpected token '{exc.token}'"
	elif isinstance(exc, UnexpectedCharacters):
		message = f"unexpected character '{exc.char}'"
	else:
		message = "syntax error"
	line = getattr(exc, "line", None)
	column = getattr(exc, "column", None)
	if not isinstance(line, int) or line < 1:
		line, column = None, None
	return ParseError(message, span=Span(file=file, line=line, column=column))


def parse_items(source: str, *, file: Optional[str] = None) -> List[ItemDecl]:
	"""Parse a sequence of struct/enum declarations; raises `ParseError`."""
	try:
		tree = _PARSER.parse(source, start="start")
	except UnexpectedInput as exc:
		raise _parse_error(exc, file) from exc
	return _Builder(source, file).program(tree)


def parse_type(source: str) -> TypeRef:
	"""Parse a single type expression (e.g. `Option<std::backtrace::Backtrace>`)."""
	try:
		tree = _PARSER.parse(source, start="type_only")
	except UnexpectedInput as exc:
		raise _parse_error(exc, None) from exc
	return _Builder(source, None).type_ref(_subtrees(tree)[0])
