# kvtree.py
# Recursive-descent reader for the kvtree data notation.
#
# =============================================================================
#  PARSER IMPLEMENTATION: RECURSIVE DESCENT WITH A TWO-TOKEN WINDOW
# =============================================================================
#
# Grammar:
#
#   value   := object | list | STRING | INTEGER | FLOAT | IDENTIFIER
#   object  := '{' [ member (',' member)* [','] ] '}'
#   member  := (STRING | INTEGER | FLOAT) ':' value
#   list    := '[' [ value (',' value)* ] ']'
#
# Objects accept a trailing comma, lists do not. Bare identifiers are read as
# strings. Numeric member keys are kept as spelled in the source, so 1.50 and
# 1.5 are different keys.
#
# The parser holds a cursor over the token list and a window of two tokens,
# ``current`` and ``peek``. Every production that needs a specific token goes
# through ``expect``/``expect_and_read``, which compare token kinds only.
# The first mismatch raises UnexpectedToken and unwinds the whole descent;
# there is no recovery and no partial tree.
# =============================================================================

import argparse
import sys
from typing import Iterable, Iterator, List, Optional, TextIO

import ast_nodes as nodes
from lexer import Token, TokenKind, eof_token, lex

# ---------------------------------------------------------------------------
# CONSTANTS AND TUNABLES
# ---------------------------------------------------------------------------
COLOR_MODES = ("auto", "always", "never")
_ERROR_STYLE = "\x1b[1;31m"  # bold red
_RESET_STYLE = "\x1b[0m"

_KEY_KINDS = (TokenKind.STRING, TokenKind.INTEGER, TokenKind.FLOAT)


# ---------------------------------------------------------------------------
# ERRORS
# ---------------------------------------------------------------------------
class UnexpectedToken(SyntaxError):
    """Raised on the first token that violates the grammar. Carries that token."""

    def __init__(self, token: Token):
        super().__init__(
            f"unexpected token {token.kind.value} '{token.value}' at offset {token.offset}"
        )
        self.token = token


# ---------------------------------------------------------------------------
# PARSER
# ---------------------------------------------------------------------------
class Parser:
    """
    Two-token lookahead parser over a token sequence.

    The constructor primes the window, so ``current`` already holds the first
    token of the input. Once the sequence runs dry the window fills with EOF.
    """

    def __init__(self, tokens: Iterable[Token]):
        self._tokens: Iterator[Token] = iter(tokens)
        self._end = 0
        self.current: Token = eof_token()
        self.peek: Token = eof_token()
        self.read()
        self.read()

    def read(self) -> None:
        self.current = self.peek
        nxt = next(self._tokens, None)
        if nxt is None:
            self.peek = eof_token(self._end)
        else:
            self._end = nxt.offset
            self.peek = nxt

    def current_is(self, kind: TokenKind) -> bool:
        return self.current.is_kind(kind)

    def expect(self, kind: TokenKind) -> Token:
        if not self.current_is(kind):
            raise UnexpectedToken(self.current)
        return self.current

    def expect_and_read(self, kind: TokenKind) -> Token:
        token = self.expect(kind)
        self.read()
        return token

    # -- productions --------------------------------------------------------

    def parse(self) -> nodes.AstNode:
        """Parse one value starting at ``current``."""
        token = self.current
        kind = token.kind
        if kind is TokenKind.LBRACE:
            return self.parse_object()
        if kind is TokenKind.LBRACKET:
            return self.parse_list()
        if kind is TokenKind.STRING or kind is TokenKind.IDENTIFIER:
            self.read()
            return nodes.String(token.value)
        if kind is TokenKind.INTEGER:
            self.read()
            return nodes.Integer(token.value)
        if kind is TokenKind.FLOAT:
            self.read()
            return nodes.Float(token.value)
        raise UnexpectedToken(token)

    def parse_document(self) -> nodes.AstNode:
        """Parse one value and require it to span the whole input."""
        root = self.parse()
        self.expect(TokenKind.EOF)
        return root

    def parse_object(self) -> nodes.KeyValueList:
        self.expect_and_read(TokenKind.LBRACE)
        entries: List[nodes.KeyValue] = []
        while not self.current_is(TokenKind.RBRACE):
            entries.append(self.parse_member())
            if not self.current_is(TokenKind.COMMA):
                break
            self.read()
        self.expect_and_read(TokenKind.RBRACE)
        return nodes.KeyValueList.from_entries(entries)

    def parse_member(self) -> nodes.KeyValue:
        token = self.current
        if token.kind not in _KEY_KINDS:
            raise UnexpectedToken(token)
        if token.kind is TokenKind.STRING:
            key = token.value
        else:
            key = token.text or str(token.value)
        self.read()
        self.expect_and_read(TokenKind.COLON)
        return nodes.KeyValue(key, self.parse())

    def parse_list(self) -> nodes.List:
        self.expect_and_read(TokenKind.LBRACKET)
        items: List[nodes.AstNode] = []
        if not self.current_is(TokenKind.RBRACKET):
            items.append(self.parse())
            while self.current_is(TokenKind.COMMA):
                self.read()
                items.append(self.parse())
        self.expect_and_read(TokenKind.RBRACKET)
        return nodes.List(tuple(items))


# ---------------------------------------------------------------------------
# PUBLIC API
# ---------------------------------------------------------------------------
def parse(text: str) -> nodes.AstNode:
    """
    Parse kvtree text into a single root node.

    Raises UnexpectedToken on the first token that does not fit, including
    any token left over after the root value.
    """
    return Parser(lex(text)).parse_document()


# ---------------------------------------------------------------------------
# CLI ENTRYPOINT
# ---------------------------------------------------------------------------
def _use_color(mode: str, stream: TextIO) -> bool:
    if mode == "always":
        return True
    if mode == "never":
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def print_error(exc: SyntaxError, stream: TextIO, color: bool = False) -> None:
    line = f"SyntaxError: {exc}"
    if color:
        line = f"{_ERROR_STYLE}{line}{_RESET_STYLE}"
    print(line, file=stream)


def _read_source(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8") as fh:
        return fh.read()


def _cli(argv: List[str]) -> int:
    """
    Command-line interface for validation runs.

    Exit codes: 0 on success, 1 on a parse error, 2 when the input cannot
    be read.
    """
    ap = argparse.ArgumentParser(prog="kvtree", description="kvtree notation validator")
    ap.add_argument("file", help="kvtree file to verify, or - for stdin")
    ap.add_argument("--debug", action="store_true", help="dump token stream and exit")
    ap.add_argument("--color", choices=COLOR_MODES, default="auto",
                    help="color parse errors on stderr (default: auto)")
    args = ap.parse_args(argv)

    try:
        data = _read_source(args.file)
    except (OSError, UnicodeDecodeError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if args.debug:
        for tok in lex(data):
            print(tok)
        return 0

    try:
        parse(data)
    except SyntaxError as exc:
        print_error(exc, sys.stderr, _use_color(args.color, sys.stderr))
        return 1
    print("OK")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    return _cli(sys.argv[1:] if argv is None else argv)


__all__ = ["UnexpectedToken", "Parser", "parse", "lex", "print_error", "main"]

# ---------------------------------------------------------------------------
# MAIN GUARD
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    sys.exit(main())
