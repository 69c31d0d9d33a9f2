"""
License Expression Normalizer.

Flattens a parsed SPDX AST into an ordered list of `LicenseEntry` objects
suitable for tabular reporting.

Key Logic:
    - **License / WithException**: one entry each; an exception applied to a
      parenthesized group is attached to every license of that group.
    - **AND**: both operands are flattened left to right in the current context.
    - **OR**: allocates a fresh group. Directly chained ORs ('A OR B OR C')
      share a single group; an OR reached through an AND inside a group gets
      a child group whose path extends the parent's ((1,) -> (1, 1)).
      Every entry below an OR is tagged "alternative".
    - Duplicates (same identifier, exception and group path) keep only the
      first occurrence.
"""

from typing import Dict, List, Optional, Tuple

from sbom_licenses.models.schemas import ALTERNATIVE, REQUIRED, LicenseEntry
from .parser_spdx import And, License, Node, Or, WithException

GroupPath = Tuple[int, ...]


def _or_branches(node: Node) -> List[Node]:
    """Collects the operands of a chain of OR nodes, in source order."""
    branches: List[Node] = []
    stack = [node]
    while stack:
        current = stack.pop()
        if isinstance(current, Or):
            stack.extend((current.right, current.left))
        else:
            branches.append(current)
    return branches


def flatten(node: Node) -> List[LicenseEntry]:
    """
    Converts an AST into its ordered effective license entries.

    The tree is walked with an explicit stack, so long operator chains do
    not hit the interpreter's recursion limit.

    Args:
        node (Node): The root of a well-formed AST.

    Returns:
        List[LicenseEntry]: Entries in depth-first, left-to-right order with
        duplicates removed.
    """
    entries: List[LicenseEntry] = []
    seen = set()
    counters: Dict[GroupPath, int] = {}

    def allocate(parent: GroupPath) -> GroupPath:
        counters[parent] = counters.get(parent, 0) + 1
        return parent + (counters[parent],)

    # (node, group, option, exception); children are pushed right to left
    stack: List[Tuple[Node, GroupPath, Optional[int], Optional[str]]] = [(node, (), None, None)]

    while stack:
        n, group, option, exception = stack.pop()
        if isinstance(n, License):
            key = (n.id, exception, group)
            if key in seen:
                continue
            seen.add(key)
            entries.append(LicenseEntry(
                identifier=n.id,
                exception=exception,
                combinator_context=ALTERNATIVE if group else REQUIRED,
                group_id=group,
                option=option if group else None,
            ))
        elif isinstance(n, WithException):
            stack.append((n.license, group, option, n.exception))
        elif isinstance(n, And):
            stack.append((n.right, group, option, exception))
            stack.append((n.left, group, option, exception))
        elif isinstance(n, Or):
            child = allocate(group)
            branches = _or_branches(n)
            for idx in range(len(branches), 0, -1):
                stack.append((branches[idx - 1], child, idx, exception))
        else:
            raise TypeError(f"Unsupported node type: {type(n).__name__}")

    return entries


def summarize(entries: List[LicenseEntry]) -> str:
    """
    Summarizes the combinators of a list of entries.

    Returns:
        str: "none" for no entries, "required" or "alternative" when every
        entry shares that context, otherwise "mixed".
    """
    contexts = {entry.combinator_context for entry in entries}
    if not contexts:
        return "none"
    if len(contexts) == 1:
        return contexts.pop()
    return "mixed"
