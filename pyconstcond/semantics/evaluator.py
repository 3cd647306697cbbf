"""
Constant-folding evaluator.

Reduces an expression to an exact integer, optionally with some nodes pinned
to boolean truth values. Booleans are the integers 0 and 1; a result is
"boolean" only by where it came from.

``None`` means "cannot be statically reduced". It is the expected outcome for
anything touching a free variable and is never raised as an error.
"""

from typing import Mapping, Optional

from .nodes import (
    BinaryOp,
    BoolLiteral,
    Expr,
    IntLiteral,
    Not,
    Operator,
    Paren,
)

# Largest exponent folded by POW.
MAX_EXPONENT = 4096

# Wider values are not folded; keeps arithmetic and rendering cheap.
MAX_RESULT_BITS = 8192

Env = Mapping[Expr, bool]

_EMPTY_ENV: Env = {}


def _truth(value: int) -> int:
    return 1 if value != 0 else 0


def evaluate(node: Expr, env: Optional[Env] = None) -> Optional[int]:
    """
    Evaluate ``node`` to an integer.

    Args:
        node: Expression to fold
        env: Nodes pinned to truth values, keyed by node identity. A pinned
            node short-circuits evaluation even when it is composite.

    Returns:
        The exact value, or None if the expression is not reducible.
    """
    if env is None:
        env = _EMPTY_ENV

    if node in env:
        return 1 if env[node] else 0

    if isinstance(node, IntLiteral):
        return _bounded(node.value)
    if isinstance(node, BoolLiteral):
        return 1 if node.value else 0
    if isinstance(node, Paren):
        return evaluate(node.inner, env)
    if isinstance(node, Not):
        value = evaluate(node.operand, env)
        if value is None:
            return None
        return 1 - _truth(value)
    if isinstance(node, BinaryOp):
        # Both sides are always folded: no short-circuit.
        left = evaluate(node.left, env)
        if left is None:
            return None
        right = evaluate(node.right, env)
        if right is None:
            return None
        return _apply(node.op, left, right)

    # Name, Opaque
    return None


def evaluate_bool(node: Expr, env: Optional[Env] = None) -> Optional[bool]:
    """Evaluate ``node`` and interpret the result as a truth value."""
    value = evaluate(node, env)
    if value is None:
        return None
    return value != 0


def _bounded(value: int) -> Optional[int]:
    if value.bit_length() > MAX_RESULT_BITS:
        return None
    return value


def _apply(op: Operator, left: int, right: int) -> Optional[int]:
    if op is Operator.EQ:
        return int(left == right)
    if op is Operator.NE:
        return int(left != right)
    if op is Operator.LT:
        return int(left < right)
    if op is Operator.GT:
        return int(left > right)
    if op is Operator.LE:
        return int(left <= right)
    if op is Operator.GE:
        return int(left >= right)
    if op is Operator.ADD:
        return _bounded(left + right)
    if op is Operator.SUB:
        return _bounded(left - right)
    if op is Operator.MUL:
        if left.bit_length() + right.bit_length() > MAX_RESULT_BITS + 1:
            return None
        return _bounded(left * right)
    if op is Operator.FLOORDIV:
        if right == 0:
            return None
        return left // right
    if op is Operator.POW:
        if right < 0 or right > MAX_EXPONENT:
            return None
        if abs(left).bit_length() * right > MAX_RESULT_BITS + right:
            return None
        return _bounded(left ** right)
    if op is Operator.MOD:
        if right == 0:
            return None
        return left % right
    if op is Operator.AND:
        return int(bool(left) and bool(right))
    if op is Operator.OR:
        return int(bool(left) or bool(right))
    return None
