"""
License Expression Errors.

Exception hierarchy raised by the tokenizer and the parser. Every error
derives from `LicenseExpressionError` (itself a `ValueError`), so callers
that only need to know "this field could not be decomposed" can catch a
single type, while diagnostics can still report the precise variant.
"""

from typing import Optional


class LicenseExpressionError(ValueError):
    """
    Base class for all license-expression failures.

    Attributes:
        message (str): Human-readable description of the failure.
        expression (str): The raw expression that failed.
        offset (Optional[int]): Byte offset of the offending text, if known.
        position (Optional[int]): Index of the offending token, if known.
    """

    def __init__(
            self,
            message: str,
            expression: str = "",
            offset: Optional[int] = None,
            position: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.expression = expression
        self.offset = offset
        self.position = position

    @property
    def kind(self) -> str:
        """Short name of the error variant, used in diagnostics."""
        return type(self).__name__


class EmptyExpression(LicenseExpressionError):
    """The input was blank or whitespace-only."""

    def __init__(self, expression: str = ""):
        super().__init__("Empty license expression", expression=expression)


class LexError(LicenseExpressionError):
    """
    An invalid character was found while tokenizing.

    Attributes:
        char (str): The offending character.
    """

    def __init__(self, char: str, offset: int, expression: str = ""):
        super().__init__(
            f"Invalid character {char!r} at offset {offset}",
            expression=expression,
            offset=offset,
        )
        self.char = char


class ParseError(LicenseExpressionError):
    """Base class for syntactic errors; always carries the token position."""


class UnexpectedTokenError(ParseError):
    """A keyword or closing parenthesis appeared where a license was expected."""


class MissingOperandError(ParseError):
    """The expression ended where an operand was expected (e.g. 'MIT AND')."""


class UnbalancedParenthesisError(ParseError):
    """An opening parenthesis was never closed, or a closing one was never opened."""


class MissingExceptionError(ParseError):
    """'WITH' was not followed by an exception identifier."""


class DuplicateExceptionError(ParseError):
    """A second 'WITH' clause was applied to the same license."""


class TrailingInputError(ParseError):
    """Tokens remained after a complete expression."""


class NestingTooDeepError(ParseError):
    """Parentheses were nested deeper than the parser accepts."""
