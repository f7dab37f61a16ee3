"""
Top-Level Item Scanner.

Walks the token stream of a Rust file and locates every `use` item that sits at
the top level of the file (delimiter depth zero). Items nested inside functions,
inline modules or macro bodies are skipped.

A `use` item preceded by an outer attribute (``#[cfg(test)]``) or an outer doc
comment (``///``) is reported with ``attached=True``; the rewrite leaves such
items untouched.
"""

import logging
from bisect import bisect_left
from typing import List

from use_spray.core.nodes import UseItem
from use_spray.core.parser import Token, Tokenizer, TokenStream, UseTreeParser
from use_spray.core.tokens import CLOSING, COMMENT_KINDS, TRIVIA_KINDS, Symbol, TokenKind
from use_spray.exceptions import UseSprayParseError

logger = logging.getLogger(__name__)


class SourceScanner:
  """
  Extracts top-level `use` items with their character spans.
  """

  def __init__(self, text: str):
    self.text = text
    tokens = list(Tokenizer(text).tokenize())
    self.comment_offsets = [tok.start for tok in tokens if tok.kind in COMMENT_KINDS]
    self.stream = TokenStream([tok for tok in tokens if tok.kind not in TRIVIA_KINDS])
    self.parser = UseTreeParser(self.stream)

  def scan(self) -> List[UseItem]:
    """
    Scans the whole file.

    Returns:
        List[UseItem]: Top-level `use` items in textual order.

    Raises:
        UseSprayParseError: On unbalanced delimiters or a malformed `use` item.
    """
    stream = self.stream
    items: List[UseItem] = []
    at_item_start = True
    attached = False

    while not stream.at_end():
      tok = stream.peek()

      if not at_item_start:
        stream.consume()
        if tok.kind == TokenKind.OPEN:
          self._skip_balanced(tok)
          # `struct S { .. }`, `fn f() { .. }`, `mod m { .. }` end with their body
          if tok.is_symbol(Symbol.LBRACE):
            at_item_start = True
            attached = False
        elif tok.kind == TokenKind.CLOSE:
          raise UseSprayParseError(f"Unmatched closing delimiter {tok.text!r}", tok.line, tok.col)
        elif tok.is_symbol(Symbol.SEMI):
          at_item_start = True
          attached = False
        continue

      if tok.kind == TokenKind.OUTER_DOC:
        stream.consume()
        attached = True
        continue

      if tok.kind == TokenKind.INNER_DOC:
        stream.consume()
        continue

      if tok.is_symbol(Symbol.HASH):
        inner = stream.peek(1).is_symbol(Symbol.BANG)
        bracket = stream.peek(2 if inner else 1)
        if bracket.is_symbol(Symbol.LBRACKET):
          stream.pos += 2 if inner else 1
          stream.consume()
          self._skip_balanced(bracket)
          if not inner:
            attached = True
          continue

      if tok.is_keyword("pub") or tok.is_keyword("use"):
        parsed = self.parser.parse_item()
        if parsed is not None:
          first, semi, declarations = parsed
          items.append(
            UseItem(
              start=first.start,
              end=semi.end,
              declarations=declarations,
              attached=attached,
              commented=self._has_comment(first.start, semi.end),
              line=first.line,
            )
          )
          logger.debug("use item at line %d with %d declarations", first.line, len(declarations))
          attached = False
          continue

      if tok.is_symbol(Symbol.SEMI):
        # stray `;` at item level
        stream.consume()
        attached = False
        continue

      at_item_start = False

    return items

  def _has_comment(self, start: int, end: int) -> bool:
    idx = bisect_left(self.comment_offsets, start)
    return idx < len(self.comment_offsets) and self.comment_offsets[idx] < end

  def _skip_balanced(self, opener: Token) -> None:
    """
    Consumes tokens up to and including the delimiter closing ``opener``.

    The opener itself must already be consumed.
    """
    stream = self.stream
    expected = [CLOSING[opener.text]]
    while expected:
      tok = stream.consume()
      if tok.kind == TokenKind.EOF:
        raise UseSprayParseError(f"Unclosed delimiter {opener.text!r}", opener.line, opener.col)
      if tok.kind == TokenKind.OPEN:
        expected.append(CLOSING[tok.text])
      elif tok.kind == TokenKind.CLOSE:
        want = expected.pop()
        if tok.text != want:
          raise UseSprayParseError(f"Mismatched delimiter: expected {want!r}, got {tok.text!r}", tok.line, tok.col)
