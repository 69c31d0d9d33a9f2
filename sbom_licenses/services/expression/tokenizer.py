"""
SPDX Expression Tokenizer.

Turns a raw license-expression string into a lazy stream of `Token` objects
terminated by a single END token.

Lexical rules:
- Identifiers are runs of ASCII letters, digits, '.', '-', '+' and ':'
  (the latter only appears in 'DocumentRef-x:LicenseRef-y' references).
- 'AND', 'OR' and 'WITH' are keywords only in uppercase; 'and' or 'With'
  are ordinary identifiers.
- Whitespace separates tokens and is discarded.
- '(' and ')' are single-character tokens.
"""

import string
from typing import Iterator, NamedTuple

from .errors import LexError

IDENTIFIER = "IDENTIFIER"
AND = "AND"
OR = "OR"
WITH = "WITH"
LPAREN = "LPAREN"
RPAREN = "RPAREN"
END = "END"

KEYWORDS = {"AND": AND, "OR": OR, "WITH": WITH}

_ID_CHARS = frozenset(string.ascii_letters + string.digits + ".-+:")


class Token(NamedTuple):
    """
    A single lexical token; an immutable, hashable value.

    Attributes:
        kind (str): One of IDENTIFIER, AND, OR, WITH, LPAREN, RPAREN, END.
        text (str): The source text of the token (empty for END).
        position (int): Index of the token in the stream.
        offset (int): Byte offset of the token in the UTF-8 encoded input.
    """
    kind: str
    text: str
    position: int
    offset: int

    def __repr__(self) -> str:
        if self.kind == IDENTIFIER:
            return f"Token({self.kind}, {self.text!r}, @{self.offset})"
        return f"Token({self.kind}, @{self.offset})"


def tokenize(expr: str) -> Iterator[Token]:
    """
    Lazily tokenizes an SPDX license expression.

    Args:
        expr (str): The raw expression.

    Yields:
        Token: Tokens in source order, ending with exactly one END token.

    Raises:
        LexError: When a character outside the identifier alphabet, and not
            whitespace or a parenthesis, is encountered.
    """
    s = expr or ""
    i = 0
    position = 0
    byte_offset = 0

    while i < len(s):
        ch = s[i]

        if ch.isspace():
            byte_offset += len(ch.encode("utf-8"))
            i += 1
            continue

        if ch in "()":
            kind = LPAREN if ch == "(" else RPAREN
            yield Token(kind, ch, position, byte_offset)
            position += 1
            byte_offset += 1
            i += 1
            continue

        if ch not in _ID_CHARS:
            raise LexError(ch, byte_offset, expression=s)

        # The identifier alphabet is pure ASCII: one char == one byte
        start = i
        while i < len(s) and s[i] in _ID_CHARS:
            i += 1
        word = s[start:i]
        yield Token(KEYWORDS.get(word, IDENTIFIER), word, position, byte_offset)
        position += 1
        byte_offset += i - start

    yield Token(END, "", position, byte_offset)
