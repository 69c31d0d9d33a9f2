"""
test: services/expression/tokenizer.py

The tokenizer is lazy: errors surface only when the offending character is
reached, and the stream always ends with a single END token.
"""

import types

import pytest

from sbom_licenses.services.expression import tokenizer as tk
from sbom_licenses.services.expression.errors import LexError


def kinds(expr):
    return [t.kind for t in tk.tokenize(expr)]


def texts(expr):
    return [t.text for t in tk.tokenize(expr) if t.kind == tk.IDENTIFIER]


def test_tokenize_is_a_lazy_generator():
    stream = tk.tokenize("MIT")
    assert isinstance(stream, types.GeneratorType)
    first = next(stream)
    assert first.kind == tk.IDENTIFIER and first.text == "MIT"
    assert next(stream).kind == tk.END
    with pytest.raises(StopIteration):
        next(stream)


def test_empty_input_yields_only_end():
    assert kinds("") == [tk.END]
    assert kinds("   \t ") == [tk.END]


def test_keywords_and_parentheses():
    assert kinds("(MIT OR Apache-2.0) AND GPL-2.0-only WITH Classpath-exception-2.0") == [
        tk.LPAREN, tk.IDENTIFIER, tk.OR, tk.IDENTIFIER, tk.RPAREN,
        tk.AND, tk.IDENTIFIER, tk.WITH, tk.IDENTIFIER, tk.END,
    ]


def test_keywords_are_case_sensitive():
    """Lowercase or mixed-case operators are ordinary identifiers."""
    assert kinds("MIT or Apache-2.0") == [tk.IDENTIFIER] * 3 + [tk.END]
    assert texts("GPL-2.0 With exc") == ["GPL-2.0", "With", "exc"]


def test_other_uppercase_words_are_identifiers():
    assert kinds("ANDROID OR ORACLE") == [tk.IDENTIFIER, tk.OR, tk.IDENTIFIER, tk.END]


def test_identifier_alphabet_and_custom_refs():
    ids = texts("GPL-2.0+ OR LicenseRef-my.lic-1 OR DocumentRef-spdx-tool-1.2:LicenseRef-MIT-Style-2")
    assert ids == ["GPL-2.0+", "LicenseRef-my.lic-1", "DocumentRef-spdx-tool-1.2:LicenseRef-MIT-Style-2"]


def test_parentheses_need_no_whitespace():
    assert texts("(MIT)AND(ISC)") == ["MIT", "ISC"]
    assert kinds("(MIT)AND(ISC)")[:4] == [tk.LPAREN, tk.IDENTIFIER, tk.RPAREN, tk.AND]


def test_positions_and_offsets():
    tokens = list(tk.tokenize("  MIT  OR (ISC)"))
    assert [t.position for t in tokens] == [0, 1, 2, 3, 4, 5]
    assert [t.offset for t in tokens] == [2, 7, 10, 11, 14, 15]


def test_invalid_character_raises_lex_error_with_offset():
    with pytest.raises(LexError) as exc_info:
        list(tk.tokenize("MIT, Apache-2.0"))
    assert exc_info.value.char == ","
    assert exc_info.value.offset == 3
    assert exc_info.value.kind == "LexError"


def test_lex_error_offset_counts_bytes():
    """Multi-byte whitespace before the bad character shifts the byte offset."""
    with pytest.raises(LexError) as exc_info:
        list(tk.tokenize("MIT\u00a0/"))
    # 'MIT' (3 bytes) + NBSP (2 bytes in UTF-8)
    assert exc_info.value.offset == 5
    assert exc_info.value.char == "/"


def test_lex_error_is_raised_lazily():
    stream = tk.tokenize("MIT OR é")
    assert next(stream).text == "MIT"
    assert next(stream).kind == tk.OR
    with pytest.raises(LexError):
        next(stream)


def test_tokens_are_immutable_values():
    first = list(tk.tokenize("MIT OR MIT"))
    second = list(tk.tokenize("MIT OR MIT"))
    assert first == second
    assert len({*first, *second}) == 4
    with pytest.raises(AttributeError):
        first[0].text = "ISC"
