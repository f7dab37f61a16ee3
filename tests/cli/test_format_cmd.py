"""
Integration tests for the format command handlers.

rustfmt is skipped (or mocked) so the tests run without a Rust toolchain.
"""

import io
from unittest.mock import patch

from use_spray.cli.__main__ import main
from use_spray.cli.handlers.format import collect_rust_files, handle_stdin

SOURCE = "use std::io;\nuse serde::Serialize;\nuse std::fmt;\n\nfn main() {}\n"
EXPECTED = "use std::{io, fmt};\n\nuse serde::Serialize;\n\nfn main() {}\n"


def test_stdin_to_stdout():
  stdin = io.StringIO(SOURCE)
  stdout = io.StringIO()

  code = handle_stdin({"skip_rustfmt": True}, stdin=stdin, stdout=stdout)

  assert code == 0
  assert stdout.getvalue() == EXPECTED


def test_stdin_via_main(monkeypatch, capsys):
  monkeypatch.setattr("sys.stdin", io.StringIO(SOURCE))
  assert main(["--skip-rustfmt"]) == 0
  assert capsys.readouterr().out == EXPECTED


def test_stdin_parse_error(caplog):
  stdout = io.StringIO()
  code = handle_stdin({"skip_rustfmt": True}, stdin=io.StringIO("use a::{b;\n"), stdout=stdout)

  assert code == 1
  assert stdout.getvalue() == ""
  assert "<stdin>" in caplog.text


@patch("use_spray.cli.handlers.format.run_rustfmt", side_effect=lambda code, *args: code.replace("{io, fmt}", "{fmt, io}"))
def test_rustfmt_applied_after_rewrite(mock_fmt):
  stdout = io.StringIO()
  code = handle_stdin({"rustfmt_args": ["--quiet"]}, stdin=io.StringIO(SOURCE), stdout=stdout)

  assert code == 0
  assert stdout.getvalue().startswith("use std::{fmt, io};")
  args = mock_fmt.call_args[0]
  assert args[1] == "rustfmt"
  assert args[2] == "2021"
  assert args[3] == ["--quiet"]


def test_missing_rustfmt_fails(caplog):
  stdout = io.StringIO()
  code = handle_stdin(
    {"rustfmt_command": "definitely-not-rustfmt-xyz"},
    stdin=io.StringIO(SOURCE),
    stdout=stdout,
  )

  assert code == 1
  assert stdout.getvalue() == ""
  assert "definitely-not-rustfmt-xyz" in caplog.text


def test_single_file_prints(tmp_path, capsys):
  src = tmp_path / "lib.rs"
  src.write_text(SOURCE, encoding="utf-8")

  assert main([str(src), "--skip-rustfmt"]) == 0
  assert capsys.readouterr().out == EXPECTED
  # Untouched without --write
  assert src.read_text(encoding="utf-8") == SOURCE


def test_write_in_place(tmp_path):
  src = tmp_path / "lib.rs"
  src.write_text(SOURCE, encoding="utf-8")

  assert main([str(src), "--skip-rustfmt", "--write"]) == 0
  assert src.read_text(encoding="utf-8") == EXPECTED


def test_check_reports_pending(tmp_path):
  dirty = tmp_path / "dirty.rs"
  dirty.write_text(SOURCE, encoding="utf-8")
  clean = tmp_path / "clean.rs"
  clean.write_text(EXPECTED, encoding="utf-8")

  assert main([str(tmp_path), "--skip-rustfmt", "--check"]) == 1
  # Check mode never writes
  assert dirty.read_text(encoding="utf-8") == SOURCE

  assert main([str(clean), "--skip-rustfmt", "--check"]) == 0


def test_multiple_files_need_mode(tmp_path, caplog):
  (tmp_path / "a.rs").write_text(SOURCE, encoding="utf-8")
  (tmp_path / "b.rs").write_text(SOURCE, encoding="utf-8")

  assert main([str(tmp_path), "--skip-rustfmt"]) == 1
  assert "--write or --check" in caplog.text


def test_missing_path(tmp_path, caplog):
  assert main([str(tmp_path / "nope.rs"), "--skip-rustfmt"]) == 1
  assert "Input not found" in caplog.text


def test_parse_error_in_batch(tmp_path):
  good = tmp_path / "good.rs"
  good.write_text(SOURCE, encoding="utf-8")
  bad = tmp_path / "bad.rs"
  bad.write_text("use a::{b;\n", encoding="utf-8")

  assert main([str(tmp_path), "--skip-rustfmt", "--write"]) == 1
  # Good files are still rewritten; bad files are left alone
  assert good.read_text(encoding="utf-8") == EXPECTED
  assert bad.read_text(encoding="utf-8") == "use a::{b;\n"


def test_cargo_toml_settings_apply(tmp_path, capsys):
  (tmp_path / "Cargo.toml").write_text(
    '[package]\nname = "demo"\n\n[package.metadata.use-spray]\nskip_rustfmt = true\nstd_roots = ["std", "proc_macro"]\n',
    encoding="utf-8",
  )
  src = tmp_path / "lib.rs"
  src.write_text("use proc_macro::TokenStream;\nuse std::fmt;\n", encoding="utf-8")

  assert main([str(src)]) == 0
  assert capsys.readouterr().out == "use proc_macro::TokenStream;\nuse std::fmt;\n"


def test_collect_rust_files_skips_target(tmp_path):
  (tmp_path / "src").mkdir()
  (tmp_path / "src" / "lib.rs").write_text("", encoding="utf-8")
  (tmp_path / "src" / "notes.txt").write_text("", encoding="utf-8")
  (tmp_path / "target" / "debug").mkdir(parents=True)
  (tmp_path / "target" / "debug" / "build.rs").write_text("", encoding="utf-8")
  (tmp_path / ".git").mkdir()
  (tmp_path / ".git" / "hook.rs").write_text("", encoding="utf-8")
  (tmp_path / "build.rs").write_text("", encoding="utf-8")

  files = collect_rust_files(tmp_path)
  assert files == [tmp_path / "build.rs", tmp_path / "src" / "lib.rs"]
