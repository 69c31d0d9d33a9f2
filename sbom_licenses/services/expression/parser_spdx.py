"""
SPDX Expression Parser.

This module implements a recursive descent parser for SPDX license
expressions. It constructs an Abstract Syntax Tree (AST) composed of
License, WithException, And and Or nodes.

Grammar (lowest to highest precedence):

    Expr     := OrExpr
    OrExpr   := AndExpr ('OR' AndExpr)*
    AndExpr  := WithExpr ('AND' WithExpr)*
    WithExpr := Atom ('WITH' Identifier)?
    Atom     := Identifier | '(' Expr ')'

'AND' and 'OR' are left-associative: 'A OR B OR C' is Or(Or(A, B), C).
The parser does a single left-to-right pass over the token stream with one
token of lookahead, and raises a specific `ParseError` subclass on the first
syntax error it meets.

Operator chains are parsed with loops, so only parenthesized groups cost
stack frames; their depth is capped at MAX_NESTING_DEPTH. Rendering walks
the tree with an explicit stack, so arbitrarily long chains render too.
"""

from typing import Iterable, Iterator, List, Optional, Tuple

from .errors import (
    DuplicateExceptionError,
    EmptyExpression,
    MissingExceptionError,
    MissingOperandError,
    NestingTooDeepError,
    TrailingInputError,
    UnbalancedParenthesisError,
    UnexpectedTokenError,
)
from .tokenizer import AND, END, IDENTIFIER, LPAREN, OR, RPAREN, WITH, Token, tokenize

MAX_NESTING_DEPTH = 100


class Node:  # pylint: disable=too-few-public-methods
    """
    Abstract base class representing a generic node in the SPDX expression AST.
    """


class License(Node):  # pylint: disable=too-few-public-methods
    """
    Leaf node representing a single license identifier.

    Attributes:
        id (str): The identifier exactly as written (e.g. "MIT", "LicenseRef-Foo").
    """

    def __init__(self, id: str):  # pylint: disable=redefined-builtin
        self.id = id

    def __eq__(self, other) -> bool:
        return isinstance(other, License) and self.id == other.id

    def __hash__(self) -> int:
        return hash(("License", self.id))

    def __repr__(self) -> str:
        return f"License({self.id})"


class WithException(Node):  # pylint: disable=too-few-public-methods
    """
    Node pairing a license (or a parenthesized group) with an exception.

    Attributes:
        license (Node): The licensed operand.
        exception (str): The exception identifier following 'WITH'.
    """

    def __init__(self, license: Node, exception: str):  # pylint: disable=redefined-builtin
        self.license = license
        self.exception = exception

    def __eq__(self, other) -> bool:
        return (
            isinstance(other, WithException)
            and self.license == other.license
            and self.exception == other.exception
        )

    def __hash__(self) -> int:
        return hash(("WithException", self.license, self.exception))

    def __repr__(self) -> str:
        return f"WithException({self.license}, {self.exception})"


class And(Node):  # pylint: disable=too-few-public-methods
    """
    Node representing a logical AND operation between two sub-expressions.

    Attributes:
        left (Node): The left operand.
        right (Node): The right operand.
    """

    def __init__(self, left: Node, right: Node):
        self.left = left
        self.right = right

    def __eq__(self, other) -> bool:
        return isinstance(other, And) and (self.left, self.right) == (other.left, other.right)

    def __hash__(self) -> int:
        return hash(("And", self.left, self.right))

    def __repr__(self) -> str:
        return f"And({self.left}, {self.right})"


class Or(Node):  # pylint: disable=too-few-public-methods
    """
    Node representing a logical OR operation between two sub-expressions.

    Attributes:
        left (Node): The left operand.
        right (Node): The right operand.
    """

    def __init__(self, left: Node, right: Node):
        self.left = left
        self.right = right

    def __eq__(self, other) -> bool:
        return isinstance(other, Or) and (self.left, self.right) == (other.left, other.right)

    def __hash__(self) -> int:
        return hash(("Or", self.left, self.right))

    def __repr__(self) -> str:
        return f"Or({self.left}, {self.right})"


def _has_exception(node: Node) -> bool:
    stack = [node]
    while stack:
        current = stack.pop()
        if isinstance(current, WithException):
            return True
        if isinstance(current, (And, Or)):
            stack.extend((current.right, current.left))
    return False


def parse_tokens(tokens: Iterable[Token], expr: str = "") -> Node:
    """
    Parses a token stream into an AST.

    Args:
        tokens (Iterable[Token]): Tokens as produced by `tokenize`, ending with END.
        expr (str): The source text, attached to raised errors for diagnostics.

    Returns:
        Node: The root node of the AST.

    Raises:
        EmptyExpression: If the stream holds nothing but END.
        ParseError: On the first syntax error (see `errors` for the variants).
        LexError: Propagated from a lazy tokenizer.
    """
    stream: Iterator[Token] = iter(tokens)
    current = next(stream)
    depth = 0

    if current.kind == END:
        raise EmptyExpression(expr)

    # --- Inner Helper Functions (Closure) ---

    def advance() -> Token:
        """Returns the current token and moves the lookahead forward."""
        nonlocal current
        tok = current
        if tok.kind != END:
            current = next(stream)
        return tok

    def fail(error_cls, message: str, tok: Token):
        raise error_cls(message, expression=expr, offset=tok.offset, position=tok.position)

    def parse_atom() -> Node:
        """Parses an identifier or a parenthesized sub-expression."""
        nonlocal depth
        tok = current

        if tok.kind == IDENTIFIER:
            advance()
            return License(tok.text)

        if tok.kind == LPAREN:
            if depth >= MAX_NESTING_DEPTH:
                fail(NestingTooDeepError,
                     f"Parentheses nested deeper than {MAX_NESTING_DEPTH} levels "
                     f"at offset {tok.offset}", tok)
            advance()  # eat '('
            depth += 1
            node = parse_or()
            depth -= 1
            if current.kind == RPAREN:
                advance()  # eat ')'
                return node
            if current.kind == END:
                fail(UnbalancedParenthesisError,
                     f"Unmatched '(' at offset {tok.offset}", tok)
            fail(UnexpectedTokenError,
                 f"Expected ')' but found {current.text!r} at offset {current.offset}",
                 current)

        if tok.kind == END:
            fail(MissingOperandError,
                 f"Expected a license after offset {tok.offset} but the expression ended", tok)

        fail(UnexpectedTokenError,
             f"Expected a license but found {tok.text!r} at offset {tok.offset}", tok)
        return None  # unreachable, fail() always raises

    def parse_with() -> Node:
        """Parses an atom with an optional 'WITH <exception>' suffix."""
        node = parse_atom()
        if current.kind != WITH:
            return node

        with_tok = advance()
        if _has_exception(node):
            fail(DuplicateExceptionError,
                 f"Second 'WITH' at offset {with_tok.offset} on a license that "
                 f"already has an exception", with_tok)
        if current.kind != IDENTIFIER:
            fail(MissingExceptionError,
                 f"'WITH' at offset {with_tok.offset} is not followed by an exception identifier",
                 with_tok)
        node = WithException(node, advance().text)

        if current.kind == WITH:
            fail(DuplicateExceptionError,
                 f"Second 'WITH' at offset {current.offset} on the same license", current)
        return node

    def parse_and() -> Node:
        """Parses 'AND' sequences (higher precedence than OR)."""
        left = parse_with()
        while current.kind == AND:
            advance()  # eat 'AND'
            left = And(left, parse_with())
        return left

    def parse_or() -> Node:
        """Parses 'OR' sequences (lowest precedence)."""
        left = parse_and()
        while current.kind == OR:
            advance()  # eat 'OR'
            left = Or(left, parse_and())
        return left

    # --- End Helpers ---

    root = parse_or()

    if current.kind == RPAREN:
        fail(UnbalancedParenthesisError, f"Unmatched ')' at offset {current.offset}", current)
    if current.kind != END:
        fail(TrailingInputError,
             f"Unexpected {current.text!r} at offset {current.offset} after a complete expression",
             current)
    return root


def parse_spdx(expr: str) -> Node:
    """
    Parses an SPDX expression string into an AST.

    Args:
        expr (str): The SPDX expression to parse.

    Returns:
        Node: The root node of the AST.

    Raises:
        EmptyExpression: If the expression is empty or whitespace-only.
        LexError: If the expression contains an invalid character.
        ParseError: If the expression is syntactically invalid.
    """
    if not expr or not expr.strip():
        raise EmptyExpression(expr or "")
    return parse_tokens(tokenize(expr), expr)


_PRECEDENCE = {Or: 1, And: 2, WithException: 3, License: 4}


def _chain(node: Node) -> List[Node]:
    """Operands of a left-leaning chain of same-typed AND/OR nodes, in source order."""
    kind = type(node)
    operands = []
    while type(node) is kind:
        operands.append(node.right)
        node = node.left
    operands.append(node)
    operands.reverse()
    return operands


def render_expression(node: Node) -> str:
    """
    Renders an AST back to a canonical SPDX string.

    Only the parentheses needed to preserve the tree shape are emitted, so
    `parse_spdx(render_expression(node)) == node` holds for every tree the
    parser can build.
    """
    rendered: List[str] = []
    # (node, operands) pairs; operands is None until the node's children are queued
    stack: List[Tuple[Node, Optional[List[Node]]]] = [(node, None)]

    while stack:
        current, operands = stack.pop()

        if operands is None:
            if isinstance(current, License):
                rendered.append(current.id)
                continue
            if isinstance(current, WithException):
                operands = [current.license]
            elif isinstance(current, (And, Or)):
                operands = _chain(current)
            else:
                raise TypeError(f"Unsupported node type: {type(current).__name__}")
            stack.append((current, operands))
            stack.extend((child, None) for child in reversed(operands))
            continue

        parts = rendered[-len(operands):]
        del rendered[-len(operands):]

        if isinstance(current, WithException):
            inner = parts[0]
            if not isinstance(current.license, License):
                inner = f"({inner})"
            rendered.append(f"{inner} WITH {current.exception}")
            continue

        prec = _PRECEDENCE[type(current)]
        op = " AND " if isinstance(current, And) else " OR "
        for i, operand in enumerate(operands):
            # right operands of equal precedence need parentheses (left associativity)
            if _PRECEDENCE[type(operand)] < prec or (i > 0 and _PRECEDENCE[type(operand)] == prec):
                parts[i] = f"({parts[i]})"
        rendered.append(op.join(parts))

    return rendered.pop()
