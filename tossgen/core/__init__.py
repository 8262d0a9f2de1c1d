# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Shared diagnostic and span types."""

from tossgen.core.diagnostics import Diagnostic
from tossgen.core.span import Span

__all__ = ["Diagnostic", "Span"]
