# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
tossgen: generates `Toss*` conversion helpers for error type declarations.

Pipeline:
  parser:  source text -> ItemDecl (raw attributes, opaque type refs)
  attrs:   raw attributes -> classified markers
  model:   ItemDecl -> TypeDeclaration (record / tagged union)
  roles:   source + backtrace field selection
  naming:  trait and method names
  expand:  trait + impl text per record/variant
  derive:  top-level dispatch; emit: final text

The CLI entrypoint is `tossgen.cli:main`.
"""

from tossgen.derive import derive, expand
from tossgen.options import ExpandOptions

__all__ = ["derive", "expand", "ExpandOptions"]
