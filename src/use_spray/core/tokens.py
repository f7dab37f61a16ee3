"""
Rust Token Definitions.

Defines the enumerations for Token Kinds and Symbols used by the Lexer,
the top-level item scanner and the `use` tree parser.
"""

from enum import Enum


class TokenKind(str, Enum):
  """Enumeration of Lexer Token Types."""

  SHEBANG = "SHEBANG"
  OUTER_DOC = "OUTER_DOC"
  INNER_DOC = "INNER_DOC"
  LINE_COMMENT = "LINE_COMMENT"
  BLOCK_COMMENT = "BLOCK_COMMENT"
  RAW_STRING = "RAW_STRING"
  STRING = "STRING"
  CHAR = "CHAR"
  LIFETIME = "LIFETIME"
  IDENTIFIER = "IDENTIFIER"
  NUMBER = "NUMBER"
  PATH_SEP = "PATH_SEP"
  OPEN = "OPEN"
  CLOSE = "CLOSE"
  PUNCT = "PUNCT"
  NEWLINE = "NEWLINE"
  WHITESPACE = "WHITESPACE"
  MISMATCH = "MISMATCH"
  EOF = "EOF"


class Symbol(str, Enum):
  """Enumeration of Punctuation Symbols relevant to `use` items."""

  LBRACE = "{"
  RBRACE = "}"
  LPAREN = "("
  RPAREN = ")"
  LBRACKET = "["
  RBRACKET = "]"
  COMMA = ","
  SEMI = ";"
  STAR = "*"
  HASH = "#"
  BANG = "!"
  PATH_SEP = "::"


# Trivia never affects item structure.
TRIVIA_KINDS = frozenset(
  {
    TokenKind.SHEBANG,
    TokenKind.LINE_COMMENT,
    TokenKind.BLOCK_COMMENT,
    TokenKind.NEWLINE,
    TokenKind.WHITESPACE,
  }
)

COMMENT_KINDS = frozenset({TokenKind.LINE_COMMENT, TokenKind.BLOCK_COMMENT})

CLOSING = {
  Symbol.LBRACE.value: Symbol.RBRACE.value,
  Symbol.LPAREN.value: Symbol.RPAREN.value,
  Symbol.LBRACKET.value: Symbol.RBRACKET.value,
}

# Path segments that refer to the current crate or module rather than a crate name.
SELF_MARKERS = frozenset({"self", "super", "crate"})
