# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Top-level dispatch: one declaration in, its generated artifacts out.

Structs produce zero or one artifact, enums one per variant that has a source
field. Errors raised anywhere abort the whole declaration; artifacts are only
returned once every record/variant has been processed.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from tossgen.expand import GeneratedArtifact, expand_record
from tossgen.model import Record, TaggedUnion, TypeDeclaration
from tossgen.naming import record_names, variant_names
from tossgen.options import ExpandOptions
from tossgen.parser.ast import ItemDecl
from tossgen.roles import resolve_roles

logger = logging.getLogger(__name__)


def _expand_struct(decl: TypeDeclaration, record: Record, options: ExpandOptions) -> List[GeneratedArtifact]:
	role = resolve_roles(record)
	if role is None:
		logger.debug("%s: no source field, nothing to generate", decl.ident)
		return []
	names = record_names(decl.ident, decl.attrs.prefix, span=decl.span)
	visibility = decl.attrs.visibility if decl.attrs.visibility is not None else decl.vis
	return [
		expand_record(
			decl,
			record,
			role,
			names,
			ctor=decl.ident,
			visibility=visibility,
			options=options,
		)
	]


def _expand_enum(decl: TypeDeclaration, union: TaggedUnion, options: ExpandOptions) -> List[GeneratedArtifact]:
	out: List[GeneratedArtifact] = []
	for variant in union.variants:
		role = resolve_roles(variant.record)
		if role is None:
			logger.debug("%s::%s: no source field, variant skipped", decl.ident, variant.ident)
			continue
		names = variant_names(
			decl.ident,
			variant.ident,
			variant_prefix=variant.attrs.prefix,
			type_prefix=decl.attrs.prefix,
		)
		if variant.attrs.visibility is not None:
			visibility = variant.attrs.visibility
		elif decl.attrs.visibility is not None:
			visibility = decl.attrs.visibility
		else:
			visibility = decl.vis
		out.append(
			expand_record(
				decl,
				variant.record,
				role,
				names,
				ctor=f"{decl.ident}::{variant.ident}",
				visibility=visibility,
				variant_ident=variant.ident,
				options=options,
			)
		)
	return out


def expand(decl: TypeDeclaration, options: Optional[ExpandOptions] = None) -> List[GeneratedArtifact]:
	"""Generate the artifacts of an already-normalized declaration."""
	options = options or ExpandOptions()
	if isinstance(decl.shape, TaggedUnion):
		artifacts = _expand_enum(decl, decl.shape, options)
	else:
		artifacts = _expand_struct(decl, decl.shape, options)
	for artifact in artifacts:
		logger.debug("%s: generated %s (%s)", decl.ident, artifact.trait_name, artifact.method)
	return artifacts


def derive(item: ItemDecl, options: Optional[ExpandOptions] = None) -> List[GeneratedArtifact]:
	"""Classify the markers of a raw item, then expand it."""
	return expand(TypeDeclaration.from_item(item), options)


__all__ = ["expand", "derive"]
