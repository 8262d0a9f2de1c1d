# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Helpers shared by the tossgen test suite.

Tests describe declarations as source text; these helpers run the front-end
and return the shapes each layer consumes.
"""

from __future__ import annotations

from typing import List, Optional

from tossgen.derive import derive
from tossgen.expand import GeneratedArtifact
from tossgen.model import TypeDeclaration
from tossgen.options import ExpandOptions
from tossgen.parser import parse_items
from tossgen.parser.ast import ItemDecl


def parse_one(source: str) -> ItemDecl:
	items = parse_items(source)
	assert len(items) == 1, f"expected one declaration, got {len(items)}"
	return items[0]


def declare(source: str) -> TypeDeclaration:
	return TypeDeclaration.from_item(parse_one(source))


def generate(source: str, options: Optional[ExpandOptions] = None) -> List[GeneratedArtifact]:
	return derive(parse_one(source), options)


def by_variant(artifacts: List[GeneratedArtifact]) -> dict:
	return {a.variant_ident: a for a in artifacts}


__all__ = ["parse_one", "declare", "generate", "by_variant"]
