"""
Compatibility Utilities Module.

Lenient helpers used when the strict parser rejects a license field. They
salvage whatever license symbols can still be recognized so that a
diagnostic can point at them, without ever raising.
"""

import logging
from typing import List
from license_expression import Licensing

logger = logging.getLogger(__name__)

# Initialize the licensing parser
licensing = Licensing()


def extract_symbols(expr: str) -> List[str]:
    """
    Extracts individual license symbols from an SPDX expression.

    This function uses the `license_expression` library in non-strict mode
    to identify unique symbols within a string (ignoring logical operators
    like AND/OR).

    Args:
        expr (str): The license expression to inspect.

    Returns:
        List[str]: A list of identified license symbols. Returns an empty list
        if parsing fails or the expression is empty.
    """
    if not expr or not expr.strip():
        return []

    try:
        tree = licensing.parse(expr, strict=False)
        # The 'symbols' attribute contains the list of license identifiers found
        return [str(sym) for sym in getattr(tree, "symbols", [])]

    except Exception:  # pylint: disable=broad-exception-caught
        # This is a diagnostic helper, not a validator: a failure here must
        # not hide the original parse error.
        logger.debug("Lenient symbol extraction failed for %r", expr)
        return []
