# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Final text emission.

Artifacts are independent of each other, so a file is simply the
concatenation of every declaration's artifacts in input order.
"""

from __future__ import annotations

from typing import List, Sequence, Tuple

from tossgen.expand import GeneratedArtifact
from tossgen.naming import snake_case_trimmed
from tossgen.options import ExpandOptions

GENERATED_HEADER = "// @generated by tossgen; do not edit.\n"


def thiserror_export(type_ident: str, options: ExpandOptions) -> str:
	"""Hidden module re-exporting thiserror so derive users need not depend on it."""
	mod_name = f"__import_thiserror_by_{snake_case_trimmed(type_ident)}"
	return (
		"#[doc(hidden)]\n"
		f"mod {mod_name} {{\n"
		f"    pub use {options.thiserror_crate}::thiserror;\n"
		"}\n"
		"#[allow(unused_imports)]\n"
		f"use {mod_name}::*;\n"
	)


def render_declaration(type_ident: str, artifacts: Sequence[GeneratedArtifact], options: ExpandOptions) -> str:
	if not artifacts:
		return ""
	text = "".join(a.render() for a in artifacts)
	if options.reexport_thiserror:
		text += thiserror_export(type_ident, options)
	return text


def render_file(
	declarations: Sequence[Tuple[str, List[GeneratedArtifact]]],
	options: ExpandOptions,
	*,
	header: bool = True,
) -> str:
	chunks = [render_declaration(ident, artifacts, options) for ident, artifacts in declarations]
	body = "\n".join(c for c in chunks if c)
	return (GENERATED_HEADER if header else "") + body


__all__ = ["GENERATED_HEADER", "thiserror_export", "render_declaration", "render_file"]
