"""
License expression subsystem: tokenizer, parser, normalizer and the
`analyze_expression` facade used by the package workflow.
"""

import logging

from sbom_licenses.models.schemas import (
    REQUIRED,
    ExpressionAnalysis,
    LicenseEntry,
    ParseDiagnostic,
)
from .compat_utils import extract_symbols
from .errors import (
    DuplicateExceptionError,
    EmptyExpression,
    LexError,
    LicenseExpressionError,
    MissingExceptionError,
    MissingOperandError,
    NestingTooDeepError,
    ParseError,
    TrailingInputError,
    UnbalancedParenthesisError,
    UnexpectedTokenError,
)
from .normalizer import flatten, summarize
from .parser_spdx import And, License, Node, Or, WithException, parse_spdx, render_expression
from .tokenizer import Token, tokenize

logger = logging.getLogger(__name__)

NOASSERTION = "NOASSERTION"


def degraded_entry(raw: str) -> LicenseEntry:
    """Builds the fallback entry for a field that could not be parsed."""
    text = raw or ""
    return LicenseEntry(
        identifier=text if text.strip() else NOASSERTION,
        combinator_context=REQUIRED,
        degraded=True,
    )


def analyze_expression(raw: str) -> ExpressionAnalysis:
    """
    Tokenizes, parses and flattens one raw license field.

    Failures never propagate: the result then carries a diagnostic and a
    single degraded entry (the raw text exactly as received, or NOASSERTION
    for blank input).

    Args:
        raw (str): The raw license field.

    Returns:
        ExpressionAnalysis: Entries plus diagnostics for the field.
    """
    raw = raw or ""
    try:
        root = parse_spdx(raw)
    except LicenseExpressionError as exc:
        logger.debug("License expression %r rejected: %s", raw, exc.message)
        diagnostic = ParseDiagnostic(
            kind=exc.kind,
            message=exc.message,
            expression=raw,
            offset=exc.offset,
            position=exc.position,
            symbols=[] if isinstance(exc, EmptyExpression) else extract_symbols(raw),
        )
        entries = [degraded_entry(raw)]
        return ExpressionAnalysis(
            expression=raw,
            entries=entries,
            summary=summarize(entries),
            diagnostics=[diagnostic],
        )

    entries = flatten(root)
    return ExpressionAnalysis(
        expression=raw,
        canonical=render_expression(root),
        entries=entries,
        summary=summarize(entries),
    )


__all__ = [
    "NOASSERTION",
    "analyze_expression",
    "degraded_entry",
    "tokenize",
    "Token",
    "parse_spdx",
    "render_expression",
    "flatten",
    "summarize",
    "Node",
    "License",
    "WithException",
    "And",
    "Or",
    "LicenseExpressionError",
    "LexError",
    "EmptyExpression",
    "ParseError",
    "UnexpectedTokenError",
    "MissingOperandError",
    "NestingTooDeepError",
    "UnbalancedParenthesisError",
    "MissingExceptionError",
    "DuplicateExceptionError",
    "TrailingInputError",
]
