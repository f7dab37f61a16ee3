"""
Tests for CLI argument handling.

Verifies that:
1.  Arguments after `--` are split off and forwarded as rustfmt arguments.
2.  Without paths, the CLI dispatches to stdin mode.
3.  With paths, the CLI dispatches to the file handler with the write/check mode.
4.  Unset flags are passed as None so Cargo.toml settings are not overridden.
"""

from pathlib import Path
from unittest.mock import patch

import pytest

from use_spray.cli.__main__ import main, split_passthrough


def test_split_passthrough():
  assert split_passthrough(["a.rs", "--", "--config", "x=y"]) == (["a.rs"], ["--config", "x=y"])
  assert split_passthrough(["a.rs"]) == (["a.rs"], [])
  # Only the first separator splits
  assert split_passthrough(["--", "a", "--", "b"]) == ([], ["a", "--", "b"])


@patch("use_spray.cli.commands.handle_stdin", return_value=0)
def test_stdin_mode_by_default(mock_handle):
  assert main([]) == 0

  mock_handle.assert_called_once()
  overrides = mock_handle.call_args[0][0]
  assert overrides == {
    "skip_rustfmt": None,
    "rustfmt_command": None,
    "rustfmt_args": [],
    "edition": None,
    "std_roots": None,
  }


@patch("use_spray.cli.commands.handle_stdin", return_value=0)
def test_overrides_forwarded(mock_handle):
  main(
    [
      "--skip-rustfmt",
      "--rustfmt",
      "/opt/rustfmt",
      "--edition",
      "2018",
      "--std-root",
      "std",
      "--std-root",
      "proc_macro",
      "--",
      "--config",
      "max_width=80",
    ]
  )

  overrides = mock_handle.call_args[0][0]
  assert overrides["skip_rustfmt"] is True
  assert overrides["rustfmt_command"] == "/opt/rustfmt"
  assert overrides["edition"] == "2018"
  assert overrides["std_roots"] == ["std", "proc_macro"]
  assert overrides["rustfmt_args"] == ["--config", "max_width=80"]


@patch("use_spray.cli.commands.handle_format", return_value=0)
def test_paths_dispatch(mock_handle):
  main(["src/lib.rs", "src/main.rs", "--write"])

  mock_handle.assert_called_once()
  args, kwargs = mock_handle.call_args
  assert args[0] == [Path("src/lib.rs"), Path("src/main.rs")]
  assert kwargs == {"write": True, "check": False}


@patch("use_spray.cli.commands.handle_format", return_value=1)
def test_exit_code_propagates(mock_handle):
  assert main(["src", "--check"]) == 1
  assert mock_handle.call_args.kwargs["check"] is True


@pytest.mark.parametrize("flag", ["--write", "--check"])
@patch("use_spray.cli.commands.handle_stdin")
def test_mode_flags_need_paths(mock_handle, flag, capsys):
  assert main([flag]) == 2
  mock_handle.assert_not_called()
  assert "need at least one path" in capsys.readouterr().err


def test_write_and_check_are_exclusive():
  with pytest.raises(SystemExit) as exc:
    main(["a.rs", "--write", "--check"])
  assert exc.value.code == 2
