# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ExpandOptions:
	"""Knobs for expansion and emission; the CLI maps its flags onto these."""

	# Extra trait type parameter standing for the `Ok` type of the converted Result.
	return_param: str = "__RETURN"
	# Zero-argument function called to populate backtrace fields.
	backtrace_capture: str = "std::backtrace::Backtrace::capture"
	# Append a hidden `pub use <crate>::thiserror` module per declaration.
	reexport_thiserror: bool = False
	thiserror_crate: str = "tosserror"


__all__ = ["ExpandOptions"]
