# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Trait and method naming.

  struct DataStoreError            -> TossDataStoreError, toss_data_store[_with]
  #[prefix(invalid)] struct Foo    -> toss_invalid_foo
  enum E { IoError }               -> TossEIoError, toss_io
  #[prefix(connect)] IoError       -> toss_connect_io
  #[prefix] on enum DataStoreError, variant Disconnect
                                   -> toss_data_store_disconnect
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from tossgen.attrs import Prefix, PrefixKind
from tossgen.core.span import Span
from tossgen.errors import UnresolvedSelfPrefixError

METHOD_PREFIX = "toss"
TRAIT_PREFIX = "Toss"
_ERROR_SUFFIX = "_error"


def snake_case(ident: str) -> str:
	"""`DataStoreError` -> `data_store_error`; every uppercase letter starts a word."""
	out = []
	for i, ch in enumerate(ident):
		if i > 0 and ch.isupper():
			out.append("_")
		out.append(ch.lower())
	return "".join(out)


def snake_case_trimmed(ident: str) -> str:
	"""`snake_case` with trailing `_error` suffixes removed."""
	snake = snake_case(ident)
	while snake.endswith(_ERROR_SUFFIX):
		snake = snake[: -len(_ERROR_SUFFIX)]
	return snake


@dataclass(frozen=True)
class Names:
	trait_name: str
	stem: str

	@property
	def method(self) -> str:
		return f"{METHOD_PREFIX}_{self.stem}"

	@property
	def with_method(self) -> str:
		return f"{METHOD_PREFIX}_{self.stem}_with"


def record_names(type_ident: str, prefix: Optional[Prefix], *, span: Optional[Span] = None) -> Names:
	"""Names for a struct. A bare `#[prefix]` has nothing to resolve against here."""
	base = snake_case_trimmed(type_ident)
	if prefix is None:
		stem = base
	elif prefix.kind is PrefixKind.SELF:
		raise UnresolvedSelfPrefixError(type_ident, span=span if span is not None else prefix.span)
	else:
		assert prefix.name is not None
		stem = f"{snake_case_trimmed(prefix.name)}_{base}"
	return Names(trait_name=f"{TRAIT_PREFIX}{type_ident}", stem=stem)


def variant_names(
	type_ident: str,
	variant_ident: str,
	*,
	variant_prefix: Optional[Prefix],
	type_prefix: Optional[Prefix],
) -> Names:
	"""Names for one enum variant; the variant's own prefix wins over the type's."""
	base = snake_case_trimmed(variant_ident)
	prefix = variant_prefix if variant_prefix is not None else type_prefix
	if prefix is None:
		stem = base
	elif prefix.kind is PrefixKind.SELF:
		stem = f"{snake_case_trimmed(type_ident)}_{base}"
	else:
		assert prefix.name is not None
		stem = f"{snake_case(prefix.name)}_{base}"
	return Names(trait_name=f"{TRAIT_PREFIX}{type_ident}{variant_ident}", stem=stem)


__all__ = ["snake_case", "snake_case_trimmed", "Names", "record_names", "variant_names"]
