# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from tossgen.core.diagnostics import Diagnostic
from tossgen.core.span import Span
from tossgen.derive import derive
from tossgen.emit import render_file
from tossgen.errors import TossError
from tossgen.expand import GeneratedArtifact
from tossgen.options import ExpandOptions
from tossgen.parser import parse_file, parse_items
from tossgen.parser.ast import ItemDecl

logger = logging.getLogger(__name__)

DERIVE_NAME = "Toss"


@dataclass
class GenerateResult:
	declarations: List[Tuple[str, List[GeneratedArtifact]]] = field(default_factory=list)
	diagnostics: List[Diagnostic] = field(default_factory=list)

	@property
	def ok(self) -> bool:
		return not any(d.severity == "error" for d in self.diagnostics)


def generate_items(
	items: List[ItemDecl],
	*,
	options: Optional[ExpandOptions] = None,
	expand_all: bool = False,
) -> GenerateResult:
	"""
	Expand every item deriving `Toss` (or every item when `expand_all` is set).

	Marker errors become diagnostics; a declaration with an error contributes
	no artifacts. A bare `#[prefix]` on a struct is not a diagnostic:
	`UnresolvedSelfPrefixError` propagates to the caller.
	"""
	options = options or ExpandOptions()
	result = GenerateResult()
	for item in items:
		if not expand_all and DERIVE_NAME not in item.derives():
			logger.debug("%s: does not derive %s, skipped", item.ident, DERIVE_NAME)
			continue
		try:
			artifacts = derive(item, options)
		except TossError as err:
			result.diagnostics.append(err.to_diagnostic())
			continue
		result.declarations.append((item.ident, artifacts))
	return result


def generate_source(
	source: str,
	*,
	file: Optional[str] = None,
	options: Optional[ExpandOptions] = None,
	expand_all: bool = False,
) -> GenerateResult:
	"""Parse `source`, then `generate_items`; a syntax error is reported as a diagnostic."""
	try:
		items = parse_items(source, file=file)
	except TossError as err:
		return GenerateResult(diagnostics=[err.to_diagnostic()])
	return generate_items(items, options=options, expand_all=expand_all)


def _build_parser() -> argparse.ArgumentParser:
	p = argparse.ArgumentParser(prog="tossgen", description="Generate Toss* error conversion traits")
	p.add_argument("source", type=Path, nargs="+", help="Path(s) to declaration source file(s)")
	p.add_argument("-o", "--output", type=Path, default=None, help="Write generated code here (default: stdout)")
	p.add_argument("--json", action="store_true", help="Emit diagnostics and results as JSON")
	p.add_argument(
		"--all",
		dest="expand_all",
		action="store_true",
		help="Expand every declaration, not only those with #[derive(Toss)]",
	)
	p.add_argument(
		"--reexport-thiserror",
		action="store_true",
		help="Append a hidden module re-exporting thiserror after each declaration",
	)
	p.add_argument(
		"--thiserror-crate",
		default=ExpandOptions.thiserror_crate,
		help="Crate that re-exports thiserror (default: %(default)s)",
	)
	p.add_argument(
		"--backtrace-capture",
		default=ExpandOptions.backtrace_capture,
		help="Function called to capture backtraces (default: %(default)s)",
	)
	p.add_argument(
		"--return-param",
		default=ExpandOptions.return_param,
		help="Name of the added Ok-type parameter (default: %(default)s)",
	)
	p.add_argument("-v", "--verbose", action="store_true", help="Log expansion decisions to stderr")
	return p


def _artifact_to_json(artifact: GeneratedArtifact) -> dict:
	return {
		"type": artifact.type_ident,
		"variant": artifact.variant_ident,
		"trait": artifact.trait_name,
		"method": artifact.method,
		"with_method": artifact.with_method,
	}


def main(argv: list[str] | None = None) -> int:
	"""
	Expand all given files into one output.

	Any diagnostic fails the run (exit 1) and nothing is written. With --json,
	prints `{"exit_code", "diagnostics", ...}` to stdout; otherwise
	diagnostics go to stderr as `file:line:col: severity: message`.
	"""
	args = _build_parser().parse_args(argv)
	if args.verbose:
		logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr)

	options = ExpandOptions(
		return_param=args.return_param,
		backtrace_capture=args.backtrace_capture,
		reexport_thiserror=args.reexport_thiserror,
		thiserror_crate=args.thiserror_crate,
	)

	declarations: List[Tuple[str, List[GeneratedArtifact]]] = []
	diagnostics: List[Diagnostic] = []
	for path in args.source:
		try:
			items = parse_file(path)
		except OSError as err:
			diagnostics.append(
				Diagnostic(message=f"cannot read source: {err.strerror}", phase="io", span=Span(file=str(path)))
			)
			continue
		except TossError as err:
			diagnostics.append(err.to_diagnostic())
			continue
		result = generate_items(items, options=options, expand_all=args.expand_all)
		declarations.extend(result.declarations)
		diagnostics.extend(result.diagnostics)

	if diagnostics:
		if args.json:
			print(json.dumps({"exit_code": 1, "diagnostics": [d.to_dict() for d in diagnostics]}))
		else:
			for d in diagnostics:
				print(d.format_human(), file=sys.stderr)
		return 1

	output = render_file(declarations, options)
	if args.output is not None:
		args.output.write_text(output, encoding="utf-8")
	if args.json:
		payload = {
			"exit_code": 0,
			"diagnostics": [],
			"artifacts": [_artifact_to_json(a) for _, artifacts in declarations for a in artifacts],
		}
		if args.output is None:
			payload["output"] = output
		print(json.dumps(payload))
	elif args.output is None:
		sys.stdout.write(output)
	return 0


if __name__ == "__main__":  # pragma: no cover
	sys.exit(main())
