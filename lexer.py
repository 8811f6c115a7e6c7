# lexer.py
# Token model and scanner for the kvtree notation.
#
# =============================================================================
#  LEXER IMPLEMENTATION: ONE REGEX, ERRORS AS TOKENS
# =============================================================================
#
# The scanner walks the input with a single compiled regex of named groups,
# anchored at the current position. Group order encodes match priority:
#
# 1. FLOAT is listed before INTEGER but requires a fractional part, so a pure
#    digit run can only ever match INTEGER. This gives the "Integer wins on
#    ties, longest match otherwise" behaviour without backtracking.
# 2. Bare words (letters and underscore) become IDENTIFIER tokens.
# 3. Strings keep their escape sequences verbatim; only the quotes go.
#
# Nothing here raises. A character no rule covers becomes an ERROR token and
# scanning resumes on the next character. A string with no closing quote runs
# to the end of input, so it becomes a single ERROR token holding the whole
# unterminated span. The parser rejects ERROR tokens like any other misplaced
# token.
# =============================================================================

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Union

# ---------------------------------------------------------------------------
# CONSTANTS
# ---------------------------------------------------------------------------
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

# ---------------------------------------------------------------------------
# REGEX BLUEPRINT
# ---------------------------------------------------------------------------
_WHITESPACE = r"\s+"
_FLOAT      = r"[0-9]+\.[0-9]+"
_INTEGER    = r"[0-9]+"
_IDENTIFIER = r"[A-Za-z_]+"
_STRING     = r'"(?:[^"\\]|\\.)*"'

_TOKEN_RE = re.compile(
    rf"(?P<WHITESPACE>{_WHITESPACE})|"
    rf"(?P<FLOAT>{_FLOAT})|"
    rf"(?P<INTEGER>{_INTEGER})|"
    rf"(?P<IDENTIFIER>{_IDENTIFIER})|"
    rf"(?P<STRING>{_STRING})|"
    r"(?P<COMMA>,)|"
    r"(?P<LBRACE>\{)|"
    r"(?P<RBRACE>\})|"
    r"(?P<LBRACKET>\[)|"
    r"(?P<RBRACKET>\])|"
    r"(?P<COLON>:)",
    re.DOTALL,
)

_UNTERMINATED_RE = re.compile(r'"(?:[^"\\]|\\.)*\\?', re.DOTALL)


# ---------------------------------------------------------------------------
# TOKEN MODEL
# ---------------------------------------------------------------------------
class TokenKind(Enum):
    """Closed set of lexical categories."""
    IDENTIFIER = "IDENTIFIER"
    STRING     = "STRING"
    INTEGER    = "INTEGER"
    FLOAT      = "FLOAT"
    COMMA      = "COMMA"
    LBRACE     = "LBRACE"
    RBRACE     = "RBRACE"
    LBRACKET   = "LBRACKET"
    RBRACKET   = "RBRACKET"
    COLON      = "COLON"
    EOF        = "EOF"
    ERROR      = "ERROR"


@dataclass(frozen=True)
class Token:
    """
    Immutable token record: (kind, value, offset, text).

    ``value`` is the payload: text for IDENTIFIER and STRING, a Python int or
    float for numbers, the rejected lexeme for ERROR and the punctuation
    character otherwise. ``offset`` is the absolute position in the source
    and ``text`` the lexeme exactly as written there. ``text`` takes no part
    in equality.
    """
    kind: TokenKind
    value: Union[str, int, float]
    offset: int
    text: str = field(default="", compare=False)

    def is_kind(self, kind: TokenKind) -> bool:
        """Compare the discriminant only; payload and offset are ignored."""
        return self.kind is kind

    def __str__(self) -> str:
        return f"{self.kind.value} {self.value!r} @{self.offset}"


def eof_token(offset: int = 0) -> Token:
    return Token(TokenKind.EOF, "", offset)


# ---------------------------------------------------------------------------
# SCANNER
# ---------------------------------------------------------------------------
def _materialize(kind: str, lexeme: str, start: int) -> Token:
    if kind == "INTEGER":
        value = int(lexeme)
        if not INT64_MIN <= value <= INT64_MAX:
            return Token(TokenKind.ERROR, lexeme, start, lexeme)
        return Token(TokenKind.INTEGER, value, start, lexeme)
    if kind == "FLOAT":
        return Token(TokenKind.FLOAT, float(lexeme), start, lexeme)
    if kind == "STRING":
        return Token(TokenKind.STRING, lexeme[1:-1], start, lexeme)
    return Token(TokenKind[kind], lexeme, start, lexeme)


def _error_token(text: str, pos: int) -> Token:
    # A quote that STRING could not close reaches end of input.
    if text[pos] == '"':
        lexeme = _UNTERMINATED_RE.match(text, pos).group()
    else:
        lexeme = text[pos]
    return Token(TokenKind.ERROR, lexeme, pos, lexeme)


def iter_tokens(text: str) -> Iterable[Token]:
    """
    Single-pass generator over the tokens of ``text``, ending with EOF.

    Gaps in regex coverage are reported one character at a time as ERROR
    tokens. An unterminated string is the exception: its whole span, from
    the opening quote to end of input, becomes one ERROR token.
    """
    pos = 0
    end = len(text)
    while pos < end:
        m = _TOKEN_RE.match(text, pos)
        if m is None:
            tok = _error_token(text, pos)
            yield tok
            pos += len(tok.text)
            continue
        pos = m.end()
        if m.lastgroup == "WHITESPACE":
            continue
        yield _materialize(m.lastgroup, m.group(), m.start())
    yield eof_token(end)


def lex(text: str) -> List[Token]:
    """Tokenize ``text`` into a materialized list terminated by one EOF token."""
    return list(iter_tokens(text))


__all__ = ["INT64_MIN", "INT64_MAX", "TokenKind", "Token", "eof_token", "iter_tokens", "lex"]
