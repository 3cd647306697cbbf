"""
Z3 encoding of condition expressions.

Used to confirm verdicts: a verdict ``v`` for condition ``c`` is confirmed
when ``c != v`` is unsatisfiable with every variable ranging over the
integers. Booleans are encoded as 0/1 integers, matching the evaluator.

Operators whose Python semantics Z3 integer arithmetic does not share
(``//``, ``%`` and ``**`` over unknown operands) are only encoded when the
evaluator can fold them to a constant.
"""

import logging
from typing import Dict, Optional

import z3

from ..semantics.evaluator import evaluate
from ..semantics.nodes import (
    BinaryOp,
    BoolLiteral,
    Expr,
    IntLiteral,
    Name,
    Not,
    Operator,
    Paren,
)

logger = logging.getLogger(__name__)


class UnsupportedExpression(Exception):
    """The expression has no faithful Z3 encoding."""


def _as_int(cond: z3.BoolRef) -> z3.ArithRef:
    return z3.If(cond, z3.IntVal(1), z3.IntVal(0))


def _truthy(value: z3.ArithRef) -> z3.BoolRef:
    return value != 0


class Z3Encoder:
    """Translates expressions to Z3 integer terms, one ``z3.Int`` per name."""

    def __init__(self):
        self.variables: Dict[str, z3.ArithRef] = {}

    def encode(self, node: Expr) -> z3.ArithRef:
        folded = evaluate(node)
        if folded is not None:
            return z3.IntVal(folded)

        if isinstance(node, IntLiteral):
            return z3.IntVal(node.value)
        if isinstance(node, BoolLiteral):
            return z3.IntVal(1 if node.value else 0)
        if isinstance(node, Name):
            if node.ident not in self.variables:
                self.variables[node.ident] = z3.Int(node.ident)
            return self.variables[node.ident]
        if isinstance(node, Paren):
            return self.encode(node.inner)
        if isinstance(node, Not):
            return _as_int(z3.Not(_truthy(self.encode(node.operand))))
        if isinstance(node, BinaryOp):
            return self._encode_binary(node)
        raise UnsupportedExpression(str(node))

    def _encode_binary(self, node: BinaryOp) -> z3.ArithRef:
        op = node.op
        if op in (Operator.FLOORDIV, Operator.MOD, Operator.POW):
            raise UnsupportedExpression(str(node))

        left = self.encode(node.left)
        right = self.encode(node.right)

        if op is Operator.EQ:
            return _as_int(left == right)
        if op is Operator.NE:
            return _as_int(left != right)
        if op is Operator.LT:
            return _as_int(left < right)
        if op is Operator.GT:
            return _as_int(left > right)
        if op is Operator.LE:
            return _as_int(left <= right)
        if op is Operator.GE:
            return _as_int(left >= right)
        if op is Operator.ADD:
            return left + right
        if op is Operator.SUB:
            return left - right
        if op is Operator.MUL:
            return left * right
        if op is Operator.AND:
            return _as_int(z3.And(_truthy(left), _truthy(right)))
        if op is Operator.OR:
            return _as_int(z3.Or(_truthy(left), _truthy(right)))
        raise UnsupportedExpression(str(node))


def confirm_verdict(condition: Expr, value: bool, timeout_ms: int = 2000) -> Optional[bool]:
    """
    Check a verdict with Z3 over integer-valued variables.

    Args:
        condition: Condition the verdict was given for
        value: Claimed constant truth value
        timeout_ms: Z3 solver timeout

    Returns:
        True if Z3 proves the condition always equals ``value``, False if it
        finds an integer assignment where it does not, None if the
        condition cannot be encoded or Z3 gives up.
    """
    encoder = Z3Encoder()
    try:
        term = encoder.encode(condition)
    except UnsupportedExpression as e:
        logger.debug(f"no Z3 encoding for '{condition}': {e}")
        return None
    except RecursionError:
        logger.debug("condition is nested too deeply for a Z3 encoding")
        return None

    solver = z3.Solver()
    solver.set("timeout", timeout_ms)
    solver.add(_truthy(term) != z3.BoolVal(value))

    result = solver.check()
    if result == z3.unsat:
        return True
    if result == z3.sat:
        logger.debug(f"Z3 counterexample for '{condition}': {solver.model()}")
        return False
    return None
