# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from tossgen.cli import generate_source, main
from tossgen.emit import GENERATED_HEADER
from tossgen.errors import UnresolvedSelfPrefixError

STRUCT_ERROR = """\
#[derive(Debug, Error, Toss)]
#[error("struct error: {msg}")]
pub struct StructError {
    msg: String,
    source: io::Error,
}
"""


def _write(tmp_path: Path, name: str, text: str) -> Path:
	path = tmp_path / name
	path.write_text(text, encoding="utf-8")
	return path


def test_writes_generated_code_to_output(tmp_path: Path) -> None:
	src = _write(tmp_path, "errors.rs", STRUCT_ERROR)
	out = tmp_path / "errors_toss.rs"
	assert main([str(src), "-o", str(out)]) == 0
	text = out.read_text(encoding="utf-8")
	assert text.startswith(GENERATED_HEADER)
	assert "pub trait TossStructError<__RETURN> {" in text
	assert "fn toss_struct_with<F: FnOnce() -> String>" in text


def test_prints_to_stdout_by_default(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src = _write(tmp_path, "errors.rs", STRUCT_ERROR)
	assert main([str(src)]) == 0
	captured = capsys.readouterr()
	assert captured.out.startswith(GENERATED_HEADER)
	assert "impl<__RETURN> TossStructError<__RETURN> for Result<__RETURN, io::Error> {" in captured.out
	assert captured.err == ""


def test_only_toss_derives_are_expanded(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src = _write(
		tmp_path,
		"errors.rs",
		"#[derive(Debug)] struct A { source: io::Error }\n#[derive(tosserror::Toss)] struct B { source: io::Error }\n",
	)
	assert main([str(src)]) == 0
	out = capsys.readouterr().out
	assert "TossB" in out
	assert "TossA" not in out

	assert main([str(src), "--all"]) == 0
	out = capsys.readouterr().out
	assert "TossA" in out
	assert out.index("TossA") < out.index("TossB")


def test_reexport_thiserror(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src = _write(tmp_path, "errors.rs", STRUCT_ERROR)
	assert main([str(src), "--reexport-thiserror", "--thiserror-crate", "my_errors"]) == 0
	out = capsys.readouterr().out
	assert "#[doc(hidden)]\nmod __import_thiserror_by_struct {\n    pub use my_errors::thiserror;\n}\n" in out
	assert "#[allow(unused_imports)]\nuse __import_thiserror_by_struct::*;\n" in out


def test_marker_error_is_reported_and_nothing_written(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src = _write(tmp_path, "bad.rs", "#[derive(Toss)] struct S { #[source] #[source] a: io::Error }\n")
	out = tmp_path / "out.rs"
	assert main([str(src), "-o", str(out)]) == 1
	assert not out.exists()
	err = capsys.readouterr().err
	assert err.startswith(f"{src}:1:")
	assert "error: duplicate #[source] attribute [DuplicateMarker]" in err


def test_json_error_payload(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src = _write(tmp_path, "bad.rs", "#[derive(Toss)]\nstruct S { #[prefix(1x)] source: io::Error }\n")
	assert main([str(src), "--json"]) == 1
	payload = json.loads(capsys.readouterr().out)
	assert payload["exit_code"] == 1
	(diag,) = payload["diagnostics"]
	assert diag["code"] == "MalformedMarkerArguments"
	assert diag["phase"] == "expand"
	assert diag["file"] == str(src)
	assert diag["line"] == 2


def test_json_success_payload(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src = _write(tmp_path, "errors.rs", STRUCT_ERROR)
	assert main([str(src), "--json"]) == 0
	payload = json.loads(capsys.readouterr().out)
	assert payload["exit_code"] == 0
	assert payload["diagnostics"] == []
	assert payload["artifacts"] == [
		{
			"type": "StructError",
			"variant": None,
			"trait": "TossStructError",
			"method": "toss_struct",
			"with_method": "toss_struct_with",
		}
	]
	assert payload["output"].startswith(GENERATED_HEADER)


def test_missing_source_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	missing = tmp_path / "missing.rs"
	assert main([str(missing)]) == 1
	err = capsys.readouterr().err
	assert err.startswith(f"{missing}:?:?: error: cannot read source")


def test_syntax_error_becomes_diagnostic() -> None:
	result = generate_source("struct {\n}", file="decl.rs")
	assert not result.ok
	(diag,) = result.diagnostics
	assert diag.code == "SyntaxError"
	assert diag.phase == "parser"
	assert diag.span.file == "decl.rs"
	assert diag.span.line == 1


def test_failing_declaration_does_not_block_siblings() -> None:
	result = generate_source(
		"#[derive(Toss)] struct Good { source: io::Error }\n"
		"#[derive(Toss)] struct Bad { #[backtrace(x)] source: io::Error }\n"
	)
	assert [ident for ident, _ in result.declarations] == ["Good"]
	assert [d.code for d in result.diagnostics] == ["MalformedMarkerArguments"]


def test_bare_struct_prefix_propagates() -> None:
	with pytest.raises(UnresolvedSelfPrefixError):
		generate_source("#[derive(Toss)] #[prefix] struct Foo { source: io::Error }")


def test_skipped_items_are_logged(caplog: pytest.LogCaptureFixture) -> None:
	with caplog.at_level(logging.DEBUG, logger="tossgen"):
		result = generate_source("struct Plain { source: io::Error }")
	assert result.ok
	assert result.declarations == []
	assert "Plain: does not derive Toss, skipped" in caplog.text


def test_syntax_error_in_file_names_the_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	good = _write(tmp_path, "good.rs", STRUCT_ERROR)
	bad = _write(tmp_path, "bad.rs", "#[derive(Toss)]\nstruct {\n}\n")
	assert main([str(good), str(bad)]) == 1
	captured = capsys.readouterr()
	assert captured.out == ""
	assert captured.err.startswith(f"{bad}:2:")
	assert "[SyntaxError]" in captured.err
