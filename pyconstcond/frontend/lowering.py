"""
Lower Python ``ast`` expressions into the condition expression tree.

Only integers, booleans, names and the supported operators survive lowering;
every other construct becomes an ``Opaque`` leaf that the engine can neither
fold nor split on.
"""

import ast
from typing import Dict, List, Optional, Type

from ..semantics.nodes import (
    BinaryOp,
    BoolLiteral,
    Expr,
    IntLiteral,
    Name,
    Not,
    Opaque,
    Operator,
)

_BINOPS: Dict[Type[ast.operator], Operator] = {
    ast.Add: Operator.ADD,
    ast.Sub: Operator.SUB,
    ast.Mult: Operator.MUL,
    ast.FloorDiv: Operator.FLOORDIV,
    ast.Pow: Operator.POW,
    ast.Mod: Operator.MOD,
}

_CMPOPS: Dict[Type[ast.cmpop], Operator] = {
    ast.Eq: Operator.EQ,
    ast.NotEq: Operator.NE,
    ast.Lt: Operator.LT,
    ast.Gt: Operator.GT,
    ast.LtE: Operator.LE,
    ast.GtE: Operator.GE,
}


def _opaque(node: ast.AST) -> Opaque:
    return Opaque(ast.unparse(node))


def _dotted_name(node: ast.expr) -> Optional[str]:
    """``a.b.c`` for an attribute chain rooted at a plain name, else None."""
    if isinstance(node, ast.Name):
        return node.id
    if isinstance(node, ast.Attribute):
        base = _dotted_name(node.value)
        if base is not None:
            return f"{base}.{node.attr}"
    return None


def lower(node: ast.expr) -> Expr:
    """
    Convert a Python expression AST into an ``Expr``.

    Each call builds fresh nodes, so identities never leak between
    conditions.
    """
    if isinstance(node, ast.Constant):
        # bool is a subclass of int
        if isinstance(node.value, bool):
            return BoolLiteral(node.value)
        if isinstance(node.value, int):
            return IntLiteral(node.value)
        return _opaque(node)

    if isinstance(node, (ast.Name, ast.Attribute)):
        dotted = _dotted_name(node)
        return Name(dotted) if dotted is not None else _opaque(node)

    if isinstance(node, ast.UnaryOp):
        return _lower_unary(node)

    if isinstance(node, ast.BinOp):
        op = _BINOPS.get(type(node.op))
        if op is None:
            return _opaque(node)
        return BinaryOp(op, lower(node.left), lower(node.right))

    if isinstance(node, ast.BoolOp):
        op = Operator.AND if isinstance(node.op, ast.And) else Operator.OR
        return _balanced(op, [lower(value) for value in node.values])

    if isinstance(node, ast.Compare):
        return _lower_compare(node)

    return _opaque(node)


def _lower_unary(node: ast.UnaryOp) -> Expr:
    if isinstance(node.op, ast.Not):
        return Not(lower(node.operand))
    if isinstance(node.op, ast.UAdd):
        return lower(node.operand)
    if isinstance(node.op, ast.USub):
        operand = node.operand
        if (
            isinstance(operand, ast.Constant)
            and isinstance(operand.value, int)
            and not isinstance(operand.value, bool)
        ):
            return IntLiteral(-operand.value)
        return BinaryOp(Operator.SUB, IntLiteral(0), lower(operand))
    return _opaque(node)


def _lower_compare(node: ast.Compare) -> Expr:
    """``a < b < c`` becomes ``a < b and b < c`` sharing the node for ``b``."""
    operands = [lower(node.left)] + [lower(c) for c in node.comparators]
    links: List[Expr] = []
    for i, cmpop in enumerate(node.ops):
        op = _CMPOPS.get(type(cmpop))
        if op is None:
            # is, is not, in, not in
            return _opaque(node)
        links.append(BinaryOp(op, operands[i], operands[i + 1]))
    return _balanced(Operator.AND, links)


def _balanced(op: Operator, operands: List[Expr]) -> Expr:
    """
    Join ``operands`` with the associative ``op``; nesting depth stays
    logarithmic in the number of operands.
    """
    if len(operands) == 1:
        return operands[0]
    mid = (len(operands) + 1) // 2
    return BinaryOp(op, _balanced(op, operands[:mid]), _balanced(op, operands[mid:]))
