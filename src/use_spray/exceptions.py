"""
Exception hierarchy for use-spray.

Lexing and parsing failures derive from `SyntaxError` so callers catching the
builtin keep working. Classification, merging and rendering are total and never
raise; the only other failures come from configuration and the external
`rustfmt` process.
"""

from typing import Optional


class UseSprayError(Exception):
  """Base class for all use-spray errors."""


class UseSpraySyntaxError(UseSprayError, SyntaxError):
  """
  Raised when Rust source cannot be tokenized or a `use` item cannot be parsed.

  Attributes:
      line (int): 1-based line of the offending token.
      col (int): 0-based column of the offending token.
  """

  def __init__(self, message: str, line: int = 0, col: int = 0):
    super().__init__(f"{message} (line {line}, column {col})")
    self.line = line
    self.col = col


class UseSprayLexError(UseSpraySyntaxError):
  """Unrecognized or unterminated input in the tokenizer."""


class UseSprayParseError(UseSpraySyntaxError):
  """Malformed `use` item or unbalanced delimiters."""


class ConfigError(UseSprayError, ValueError):
  """Invalid configuration values (CLI or Cargo.toml metadata)."""


class RustfmtError(UseSprayError, RuntimeError):
  """
  Raised when the external formatter exits unsuccessfully.

  Attributes:
      returncode (int): Exit status of the rustfmt process.
      stderr (str): Captured diagnostic output.
  """

  def __init__(self, returncode: int, stderr: Optional[str] = None):
    detail = (stderr or "").strip()
    super().__init__(f"rustfmt exited with status {returncode}" + (f": {detail}" if detail else ""))
    self.returncode = returncode
    self.stderr = stderr or ""


class RustfmtNotFound(UseSprayError, FileNotFoundError):
  """Raised when the configured rustfmt executable cannot be located."""
