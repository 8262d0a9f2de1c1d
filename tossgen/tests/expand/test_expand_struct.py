# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from tossgen.errors import UnresolvedSelfPrefixError
from tossgen.options import ExpandOptions
from tossgen.test_support import generate


def _only(source: str, options: ExpandOptions | None = None):
	artifacts = generate(source, options)
	assert len(artifacts) == 1
	return artifacts[0]


def test_named_struct_full_output() -> None:
	artifact = _only(
		"""
#[derive(Debug, Error, Toss)]
#[error("struct error: {msg}")]
struct StructError {
    msg: String,
    source: io::Error,
}
"""
	)
	assert artifact.key == ("StructError", None)
	assert artifact.trait_name == "TossStructError"
	assert artifact.method == "toss_struct"
	assert artifact.with_method == "toss_struct_with"
	assert artifact.render() == (
		"trait TossStructError<__RETURN> {\n"
		"    fn toss_struct(self, msg: String) -> Result<__RETURN, StructError>;\n"
		"    fn toss_struct_with<F: FnOnce() -> String>(self, f: F) -> Result<__RETURN, StructError>;\n"
		"}\n"
		"impl<__RETURN> TossStructError<__RETURN> for Result<__RETURN, io::Error> {\n"
		"    fn toss_struct(self, msg: String) -> Result<__RETURN, StructError> {\n"
		"        self.map_err(|e| StructError { msg, source: e })\n"
		"    }\n"
		"    fn toss_struct_with<F: FnOnce() -> String>(self, f: F) -> Result<__RETURN, StructError> {\n"
		"        self.map_err(|e| {\n"
		"            let msg = f();\n"
		"            StructError { msg, source: e }\n"
		"        })\n"
		"    }\n"
		"}\n"
	)


def test_tuple_struct_keeps_source_position() -> None:
	artifact = _only("struct TupleError(String, #[source] io::Error, i32);")
	assert "fn toss_tuple(self, _0: String, _1: i32) -> Result<__RETURN, TupleError>;" in artifact.interface
	assert "fn toss_tuple_with<F: FnOnce() -> (String, i32)>(self, f: F)" in artifact.interface
	assert "self.map_err(|e| TupleError(_0, e, _1))" in artifact.implementation
	assert "let (_0, _1) = f();" in artifact.implementation
	assert "for Result<__RETURN, io::Error> {" in artifact.implementation


def test_tuple_struct_source_last() -> None:
	artifact = _only("struct Last(u8, u16, #[from] ParseIntError);")
	assert "self.map_err(|e| Last(_0, _1, e))" in artifact.implementation
	assert "for Result<__RETURN, ParseIntError> {" in artifact.implementation


def test_named_struct_source_first_keeps_declared_order() -> None:
	artifact = _only("struct S { #[source] inner: io::Error, path: PathBuf, line: usize }")
	assert "fn toss_s(self, path: PathBuf, line: usize)" in artifact.interface
	assert "S { inner: e, path, line }" in artifact.implementation
	assert "let (path, line) = f();" in artifact.implementation


def test_no_context_has_no_lazy_method() -> None:
	artifact = _only("struct WrapError { source: io::Error }")
	assert artifact.with_method is None
	assert "_with" not in artifact.render()
	assert "fn toss_wrap(self) -> Result<__RETURN, WrapError>;" in artifact.interface
	assert "self.map_err(|e| WrapError { source: e })" in artifact.implementation


def test_no_source_no_artifact() -> None:
	assert generate("struct Plain { msg: String }") == []
	assert generate("struct Unit;") == []


def test_optional_backtrace_is_wrapped_in_some() -> None:
	artifact = _only("struct B { msg: String, source: io::Error, #[backtrace] trace: Option<Backtrace> }")
	assert "fn toss_b(self, msg: String)" in artifact.interface
	assert (
		"B { msg, source: e, trace: ::core::option::Option::Some(std::backtrace::Backtrace::capture()) }"
		in artifact.implementation
	)


def test_direct_backtrace_uses_from() -> None:
	artifact = _only("struct B(#[source] io::Error, Backtrace);")
	assert artifact.with_method is None
	assert (
		"B(e, ::core::convert::From::from(std::backtrace::Backtrace::capture()))" in artifact.implementation
	)


def test_generics_and_where_clause_are_propagated() -> None:
	artifact = _only("struct Wrapped<'a, T: Debug> where T: Clone { ctx: &'a T, source: io::Error }")
	assert artifact.interface.splitlines()[0] == "trait TossWrapped<'a, T: Debug, __RETURN> {"
	assert (
		"fn toss_wrapped(self, ctx: &'a T) -> Result<__RETURN, Wrapped<'a, T>> where T: Clone;"
		in artifact.interface
	)
	assert artifact.implementation.splitlines()[0] == (
		"impl<'a, T: Debug, __RETURN> TossWrapped<'a, T, __RETURN> for Result<__RETURN, io::Error> where T: Clone {"
	)


def test_generated_names_avoid_collisions() -> None:
	artifact = _only("struct Holder<F> { f: F, e: u8, source: io::Error }")
	assert "fn toss_holder_with<_F: FnOnce() -> (F, u8)>(self, _f: _F)" in artifact.interface
	assert "self.map_err(|_e| Holder { f, e, source: _e })" in artifact.implementation
	assert "let (f, e) = _f();" in artifact.implementation


def test_producer_generic_avoids_type_names() -> None:
	artifact = _only("struct S { a: F, b: Vec<Option<G>>, source: io::Error }")
	assert "fn toss_s_with<_F: FnOnce() -> (F, Vec<Option<G>>)>(self, f: _F) -> Result<__RETURN, S>" in artifact.interface

	artifact = _only("struct F { msg: String, source: io::Error }")
	assert "fn toss_f_with<_F: FnOnce() -> String>(self, f: _F) -> Result<__RETURN, F>" in artifact.interface

	artifact = _only("struct S { msg: String, #[source] inner: F }")
	assert "fn toss_s_with<_F: FnOnce() -> String>(self, f: _F)" in artifact.interface
	assert "for Result<__RETURN, F> {" in artifact.implementation


def test_visibility_defaults_to_item_visibility() -> None:
	artifact = _only("pub struct P { msg: String, source: io::Error }")
	assert artifact.interface.startswith("pub trait TossP<__RETURN> {")


def test_visibility_override() -> None:
	artifact = _only("#[visibility(pub(crate))] pub struct P { source: io::Error }")
	assert artifact.interface.startswith("pub(crate) trait TossP<__RETURN> {")


def test_explicit_prefix() -> None:
	artifact = _only("#[prefix(invalid)] struct Foo { source: io::Error }")
	assert artifact.method == "toss_invalid_foo"


def test_bare_prefix_on_struct_is_fatal() -> None:
	with pytest.raises(UnresolvedSelfPrefixError, match="`Foo`"):
		generate("#[prefix] struct Foo { source: io::Error }")


def test_custom_options() -> None:
	options = ExpandOptions(return_param="Ok", backtrace_capture="crate::capture")
	artifact = _only("struct B { source: io::Error, bt: Backtrace }", options)
	assert artifact.interface.startswith("trait TossB<Ok> {")
	assert "fn toss_b(self) -> Result<Ok, B>;" in artifact.interface
	assert "bt: ::core::convert::From::from(crate::capture())" in artifact.implementation
