"""
test: services/expression/__init__.py (analyze_expression)

The facade never raises for bad input: it returns a diagnostic plus a single
degraded entry so that one broken license field cannot abort a batch.
"""

import pytest

from sbom_licenses.services import expression as ex


def test_valid_expression_has_entries_and_canonical_form():
    result = ex.analyze_expression("(MIT  OR Apache-2.0) AND ISC")
    assert result.ok
    assert result.canonical == "(MIT OR Apache-2.0) AND ISC"
    assert [e.identifier for e in result.entries] == ["MIT", "Apache-2.0", "ISC"]
    assert result.entries[0].group_id == result.entries[1].group_id
    assert result.entries[2].combinator_context == "required"
    assert not any(e.degraded for e in result.entries)


def test_exception_binding():
    result = ex.analyze_expression("GPL-2.0-or-later WITH Classpath-exception-2.0")
    assert len(result.entries) == 1
    entry = result.entries[0]
    assert (entry.identifier, entry.exception) == ("GPL-2.0-or-later", "Classpath-exception-2.0")


def test_idempotent_or():
    result = ex.analyze_expression("MIT OR MIT")
    assert [e.identifier for e in result.entries] == ["MIT"]


def test_missing_operand_degrades_to_raw_text():
    result = ex.analyze_expression("MIT AND")
    assert not result.ok
    assert result.canonical is None
    assert len(result.entries) == 1
    assert result.entries[0].identifier == "MIT AND"
    assert result.entries[0].degraded is True

    diag = result.diagnostics[0]
    assert diag.kind == "MissingOperandError"
    assert diag.expression == "MIT AND"
    assert diag.offset == 7


def test_unbalanced_parenthesis_diagnostic():
    result = ex.analyze_expression("(MIT OR Apache-2.0")
    diag = result.diagnostics[0]
    assert diag.kind == "UnbalancedParenthesisError"
    assert diag.offset == 0
    assert diag.position == 0
    assert result.entries[0].identifier == "(MIT OR Apache-2.0"


@pytest.mark.parametrize("raw", ["", "   ", None])
def test_empty_input_yields_noassertion(raw):
    result = ex.analyze_expression(raw)
    assert result.diagnostics[0].kind == "EmptyExpression"
    assert result.diagnostics[0].symbols == []
    assert len(result.entries) == 1
    assert result.entries[0].identifier == ex.NOASSERTION
    assert result.entries[0].degraded is True


def test_lex_error_diagnostic():
    result = ex.analyze_expression("MIT, BSD")
    diag = result.diagnostics[0]
    assert diag.kind == "LexError"
    assert diag.offset == 3
    assert result.entries[0].identifier == "MIT, BSD"


def test_degraded_entry_keeps_raw_text_verbatim():
    result = ex.analyze_expression("  Apache License 2.0 ")
    assert result.entries[0].identifier == "  Apache License 2.0 "
    assert result.expression == "  Apache License 2.0 "


def test_diagnostic_carries_salvaged_symbols(monkeypatch):
    monkeypatch.setattr(ex, "extract_symbols", lambda raw: ["MIT"])
    result = ex.analyze_expression("MIT AND")
    assert result.diagnostics[0].symbols == ["MIT"]


def test_literal_noassertion_is_an_ordinary_identifier():
    result = ex.analyze_expression("NOASSERTION")
    assert result.ok
    assert result.entries[0].identifier == "NOASSERTION"
    assert result.entries[0].degraded is False


@pytest.mark.parametrize("expr", [
    "MIT",
    "A AND B OR C",
    "A OR B AND C",
    "(MIT OR Apache-2.0) AND ISC",
    "GPL-2.0-or-later WITH Classpath-exception-2.0 OR (LGPL-2.1-only AND MIT)",
    "((A OR B) AND (C OR D)) OR E",
])
def test_canonical_form_reparses_to_same_tree(expr):
    result = ex.analyze_expression(expr)
    assert ex.parse_spdx(result.canonical) == ex.parse_spdx(expr)
    assert ex.analyze_expression(result.canonical).entries == result.entries


@pytest.mark.parametrize("raw,expected", [
    ("MIT AND ISC", "required"),
    ("MIT OR ISC", "alternative"),
    ("(MIT OR ISC) AND Zlib", "mixed"),
    ("MIT AND", "required"),
    ("", "required"),
])
def test_analysis_carries_combinator_summary(raw, expected):
    assert ex.analyze_expression(raw).summary == expected


def test_deep_nesting_degrades_instead_of_raising():
    raw = "(" * 1200 + "MIT" + ")" * 1200
    result = ex.analyze_expression(raw)
    assert result.diagnostics[0].kind == "NestingTooDeepError"
    assert result.entries[0].identifier == raw
    assert result.entries[0].degraded is True


@pytest.mark.parametrize("op", ["AND", "OR"])
def test_long_chain_is_analyzed(op):
    raw = f" {op} ".join(f"L{i}" for i in range(1200))
    result = ex.analyze_expression(raw)
    assert result.ok
    assert result.canonical == raw
    assert len(result.entries) == 1200
