# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from tossgen.errors import DuplicateMarkerError
from tossgen.test_support import by_variant, generate

ENUM_ERROR = """
#[derive(Debug, Error, Toss)]
#[visibility(pub(crate))]
enum EnumError {
    #[error("invalid value: {value}")]
    InvalidValue { value: i32, source: io::Error },
    #[prefix(connect)]
    #[error("io")]
    IoError(#[from] io::Error),
    #[error("unit")]
    Unit,
    Message(String),
}
"""


def test_one_artifact_per_variant_with_source() -> None:
	artifacts = generate(ENUM_ERROR)
	assert [a.key for a in artifacts] == [("EnumError", "InvalidValue"), ("EnumError", "IoError")]


def test_named_variant_output() -> None:
	artifact = by_variant(generate(ENUM_ERROR))["InvalidValue"]
	assert artifact.render() == (
		"pub(crate) trait TossEnumErrorInvalidValue<__RETURN> {\n"
		"    fn toss_invalid_value(self, value: i32) -> Result<__RETURN, EnumError>;\n"
		"    fn toss_invalid_value_with<F: FnOnce() -> i32>(self, f: F) -> Result<__RETURN, EnumError>;\n"
		"}\n"
		"impl<__RETURN> TossEnumErrorInvalidValue<__RETURN> for Result<__RETURN, io::Error> {\n"
		"    fn toss_invalid_value(self, value: i32) -> Result<__RETURN, EnumError> {\n"
		"        self.map_err(|e| EnumError::InvalidValue { value, source: e })\n"
		"    }\n"
		"    fn toss_invalid_value_with<F: FnOnce() -> i32>(self, f: F) -> Result<__RETURN, EnumError> {\n"
		"        self.map_err(|e| {\n"
		"            let value = f();\n"
		"            EnumError::InvalidValue { value, source: e }\n"
		"        })\n"
		"    }\n"
		"}\n"
	)


def test_tuple_variant_with_prefix() -> None:
	artifact = by_variant(generate(ENUM_ERROR))["IoError"]
	assert artifact.trait_name == "TossEnumErrorIoError"
	assert artifact.method == "toss_connect_io"
	assert artifact.with_method is None
	assert "self.map_err(|e| EnumError::IoError(e))" in artifact.implementation


def test_variant_visibility_beats_type_visibility() -> None:
	artifacts = generate(
		"""
#[visibility(pub(crate))]
pub enum E {
    #[visibility(pub)]
    A { source: io::Error },
    B { source: io::Error },
}
"""
	)
	variants = by_variant(artifacts)
	assert variants["A"].interface.startswith("pub trait TossEA<__RETURN> {")
	assert variants["B"].interface.startswith("pub(crate) trait TossEB<__RETURN> {")


def test_variant_visibility_defaults_to_enum_visibility() -> None:
	artifact = generate("pub enum E { A { source: io::Error } }")[0]
	assert artifact.interface.startswith("pub trait TossEA<__RETURN> {")


def test_type_level_bare_prefix() -> None:
	artifacts = generate(
		"""
#[prefix]
enum DataStoreError {
    Disconnect(#[from] io::Error),
    #[prefix(read)]
    Header { expected: String, source: io::Error },
}
"""
	)
	variants = by_variant(artifacts)
	assert variants["Disconnect"].method == "toss_data_store_disconnect"
	assert variants["Header"].method == "toss_read_header"


def test_generic_enum() -> None:
	artifact = generate("enum E<T> { Wrap { value: T, source: io::Error } }")[0]
	assert artifact.interface.splitlines()[0] == "trait TossEWrap<T, __RETURN> {"
	assert "-> Result<__RETURN, E<T>>" in artifact.interface
	assert "E::Wrap { value, source: e }" in artifact.implementation


def test_duplicate_source_in_variant_aborts_declaration() -> None:
	with pytest.raises(DuplicateMarkerError):
		generate("enum E { Ok(#[source] io::Error), Bad(#[source] io::Error, #[from] fmt::Error) }")


def test_enum_without_sources_yields_nothing() -> None:
	assert generate("enum E { A, B(u8), C { msg: String } }") == []


def test_enum_named_like_producer_generic() -> None:
	artifact = generate("enum F { B { msg: String, source: io::Error } }")[0]
	assert (
		"fn toss_b_with<_F: FnOnce() -> String>(self, f: _F) -> Result<__RETURN, F>;" in artifact.interface
	)
	assert "F::B { msg, source: e }" in artifact.implementation
	assert "<F: FnOnce" not in artifact.render()
