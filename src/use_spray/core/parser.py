"""
Rust Lexer and `use` Tree Parser.

This module provides:

1.  **Tokenizer**: A regex-driven lexer for Rust source text. It understands just
    enough of the language to keep delimiters balanced: comments (including nested
    block comments and doc comments), string/char/raw-string literals, lifetimes,
    identifiers and punctuation.
2.  **TokenStream**: A cursor over significant tokens with ``peek``/``consume``/``expect``.
3.  **UseTreeParser**: A recursive descent parser for a single ``[vis] use [::] tree;``
    item that flattens the tree into :class:`Declaration` objects in textual order.
"""

import re
from dataclasses import dataclass
from typing import Generator, List, Optional, Tuple, Union

from use_spray.core.nodes import Declaration, Leaf, Visibility
from use_spray.core.tokens import TRIVIA_KINDS, Symbol, TokenKind
from use_spray.exceptions import UseSprayLexError, UseSprayParseError


@dataclass
class Token:
  kind: TokenKind
  text: str
  line: int
  col: int
  start: int
  end: int

  def is_symbol(self, symbol: Union[Symbol, str]) -> bool:
    value = symbol.value if isinstance(symbol, Symbol) else symbol
    return self.kind not in (TokenKind.STRING, TokenKind.RAW_STRING, TokenKind.CHAR) and self.text == value

  def is_keyword(self, word: str) -> bool:
    return self.kind == TokenKind.IDENTIFIER and self.text == word


class Tokenizer:
  PATTERN_DEFS = [
    (TokenKind.OUTER_DOC, r"///(?!/)[^\n]*"),
    (TokenKind.INNER_DOC, r"//![^\n]*"),
    (TokenKind.LINE_COMMENT, r"//[^\n]*"),
    (TokenKind.BLOCK_COMMENT, r"/\*"),
    (TokenKind.RAW_STRING, r'[bc]?r(?P<hashes>#*)"[\s\S]*?"(?P=hashes)'),
    (TokenKind.STRING, r'[bc]?"(?:[^"\\]|\\[\s\S])*"'),
    (TokenKind.CHAR, r"b?'(?:[^'\\\n]|\\(?:x[0-9a-fA-F]{2}|u\{[0-9a-fA-F_]{1,6}\}|[^\n]))'"),
    (TokenKind.LIFETIME, r"'(?:r#)?[^\W\d]\w*"),
    (TokenKind.IDENTIFIER, r"(?:r#)?[^\W\d]\w*"),
    (TokenKind.NUMBER, r"\d\w*(?:\.\d\w*)?"),
    (TokenKind.PATH_SEP, r"::"),
    (TokenKind.OPEN, r"[({\[]"),
    (TokenKind.CLOSE, r"[)}\]]"),
    (TokenKind.NEWLINE, r"\r?\n"),
    (TokenKind.WHITESPACE, r"[^\S\n]+"),
    (TokenKind.PUNCT, r"[^\s\w'\"]"),
    (TokenKind.MISMATCH, r"[\s\S]"),
  ]

  _REGEX = re.compile("|".join(f"(?P<{kind.value}>{pattern})" for kind, pattern in PATTERN_DEFS))
  # `#!` on the first line is an interpreter line unless it opens an inner attribute
  _SHEBANG = re.compile(r"#!(?!\s*\[)[^\n]*")

  def __init__(self, text: str):
    self.text = text

  def tokenize(self) -> Generator[Token, None, None]:
    text = self.text
    line_num = 1
    line_start = 0
    pos = 0

    shebang = self._SHEBANG.match(text)
    if shebang:
      pos = shebang.end()
      yield Token(TokenKind.SHEBANG, shebang.group(), 1, 0, 0, pos)

    while pos < len(text):
      mo = self._REGEX.match(text, pos)
      kind = TokenKind(mo.lastgroup)
      start = pos
      col = start - line_start

      if kind == TokenKind.MISMATCH:
        raise UseSprayLexError(f"Unexpected character {mo.group()!r}", line_num, col)

      if kind == TokenKind.BLOCK_COMMENT:
        end = self._block_comment_end(start, line_num, col)
        kind = self._classify_block_comment(text[start:end])
      else:
        end = mo.end()

      value = text[start:end]
      yield Token(kind, value, line_num, col, start, end)

      newlines = value.count("\n")
      if newlines:
        line_num += newlines
        line_start = start + value.rindex("\n") + 1
      pos = end

    yield Token(TokenKind.EOF, "", line_num, pos - line_start, pos, pos)

  def _block_comment_end(self, start: int, line: int, col: int) -> int:
    """Finds the end of a (possibly nested) block comment starting at ``start``."""
    depth = 0
    pos = start
    text = self.text
    while pos < len(text):
      pair = text[pos : pos + 2]
      if pair == "/*":
        depth += 1
        pos += 2
      elif pair == "*/":
        depth -= 1
        pos += 2
        if depth == 0:
          return pos
      else:
        pos += 1
    raise UseSprayLexError("Unterminated block comment", line, col)

  @staticmethod
  def _classify_block_comment(value: str) -> TokenKind:
    if value.startswith("/*!"):
      return TokenKind.INNER_DOC
    # `/**/` and `/***` are ordinary comments
    if value.startswith("/**") and not value.startswith("/***") and value != "/**/":
      return TokenKind.OUTER_DOC
    return TokenKind.BLOCK_COMMENT


def significant_tokens(text: str) -> List[Token]:
  """
  Tokenizes ``text`` and drops trivia (whitespace and ordinary comments).

  Doc comments are kept because they attach to the following item.

  Args:
      text: Rust source.

  Returns:
      List[Token]: Tokens ending with a single EOF token.
  """
  return [tok for tok in Tokenizer(text).tokenize() if tok.kind not in TRIVIA_KINDS]


class TokenStream:
  """Cursor over a list of significant tokens."""

  def __init__(self, tokens: List[Token]):
    self.tokens = tokens
    self.pos = 0

  def peek(self, offset: int = 0) -> Token:
    idx = self.pos + offset
    if idx >= len(self.tokens):
      return self.tokens[-1]
    return self.tokens[idx]

  def consume(self) -> Token:
    token = self.peek()
    if token.kind != TokenKind.EOF:
      self.pos += 1
    return token

  def at_end(self) -> bool:
    return self.peek().kind == TokenKind.EOF

  def match(self, symbol: Union[Symbol, str]) -> bool:
    return self.peek().is_symbol(symbol)

  def match_keyword(self, word: str) -> bool:
    return self.peek().is_keyword(word)

  def expect(self, symbol: Union[Symbol, str]) -> Token:
    if not self.match(symbol):
      cur = self.peek()
      value = symbol.value if isinstance(symbol, Symbol) else symbol
      raise UseSprayParseError(f"Expected '{value}', got {cur.kind.value} ({cur.text!r})", cur.line, cur.col)
    return self.consume()

  def expect_identifier(self) -> Token:
    cur = self.peek()
    if cur.kind != TokenKind.IDENTIFIER:
      raise UseSprayParseError(f"Expected identifier, got {cur.kind.value} ({cur.text!r})", cur.line, cur.col)
    return self.consume()


class UseTreeParser:
  """
  Parses one ``use`` item from a :class:`TokenStream`.

  The parser is positioned by the caller at the first token of an item. If the
  item turns out not to be a ``use`` item (e.g. ``pub fn``), :meth:`parse_item`
  rewinds the stream and returns None.
  """

  def __init__(self, stream: TokenStream):
    self.stream = stream

  def parse_item(self) -> Optional[Tuple[Token, Token, List[Declaration]]]:
    """
    Parses ``[vis] use [::] tree ;``.

    Returns:
        Optional[Tuple[Token, Token, List[Declaration]]]: First token, the
        terminating semicolon and the flattened declarations, or None when the
        item is not a ``use`` item.

    Raises:
        UseSprayParseError: If the item starts with ``use`` but is malformed.
    """
    stream = self.stream
    mark = stream.pos
    first = stream.peek()

    visibility = self.parse_visibility()
    if visibility is None or not stream.match_keyword("use"):
      stream.pos = mark
      return None
    stream.consume()

    leading_colon = False
    if stream.match(Symbol.PATH_SEP):
      stream.consume()
      leading_colon = True

    declarations: List[Declaration] = []
    for path, leaf in self.parse_tree(()):
      declarations.append(Declaration(visibility, path, leaf, leading_colon))

    semi = stream.expect(Symbol.SEMI)
    return first, semi, declarations

  def parse_visibility(self) -> Optional[Visibility]:
    """
    Parses an optional visibility modifier.

    Returns:
        Optional[Visibility]: The parsed visibility (private when absent), or
        None if the tokens after ``pub(`` are not a visibility restriction.
    """
    stream = self.stream
    if not stream.match_keyword("pub"):
      return Visibility.private()
    stream.consume()

    if not stream.match(Symbol.LPAREN):
      return Visibility.public()

    mark = stream.pos
    stream.consume()
    in_token = False
    if stream.match_keyword("in"):
      stream.consume()
      in_token = True
    elif not any(stream.match_keyword(word) for word in ("crate", "self", "super")):
      stream.pos = mark
      return None

    scope = [stream.expect_identifier().text]
    while stream.match(Symbol.PATH_SEP):
      stream.consume()
      scope.append(stream.expect_identifier().text)
    stream.expect(Symbol.RPAREN)
    return Visibility.restricted(tuple(scope), in_token)

  def parse_tree(self, prefix: Tuple[str, ...]) -> Generator[Tuple[Tuple[str, ...], Leaf], None, None]:
    """
    Recursively flattens a use tree below ``prefix``.

    Yields:
        Tuple[Tuple[str, ...], Leaf]: One (path, leaf) pair per imported item.
    """
    stream = self.stream
    tok = stream.peek()

    if stream.match(Symbol.LBRACE):
      stream.consume()
      while not stream.match(Symbol.RBRACE):
        yield from self.parse_tree(prefix)
        if stream.match(Symbol.COMMA):
          stream.consume()
        elif not stream.match(Symbol.RBRACE):
          cur = stream.peek()
          raise UseSprayParseError(f"Expected ',' or '}}' in use group, got {cur.text!r}", cur.line, cur.col)
      stream.consume()
      return

    if stream.match(Symbol.STAR):
      stream.consume()
      yield prefix, Leaf.glob()
      return

    if tok.kind != TokenKind.IDENTIFIER:
      raise UseSprayParseError(f"Unexpected {tok.kind.value} ({tok.text!r}) in use tree", tok.line, tok.col)

    name = stream.consume().text
    if stream.match(Symbol.PATH_SEP):
      stream.consume()
      yield from self.parse_tree(prefix + (name,))
    elif stream.match_keyword("as"):
      stream.consume()
      alias = stream.expect_identifier().text
      yield prefix, Leaf.renamed(name, alias)
    elif name == "self" and prefix:
      yield prefix, Leaf.self_target()
    else:
      yield prefix, Leaf.named(name)
