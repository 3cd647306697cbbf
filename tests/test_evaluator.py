"""
Tests for the constant-folding evaluator.

Coverage:
- Literals, parentheses, negation
- Comparison operators with standard (non-swapped) operand order
- Exact integer arithmetic, floor division and modulo semantics
- Failure (None) for free variables, opaque nodes, zero divisors
- Substitution environment: precedence and identity keys
"""

import ast

import pytest

from pyconstcond.frontend.lowering import lower
from pyconstcond.semantics.evaluator import MAX_EXPONENT, MAX_RESULT_BITS, evaluate, evaluate_bool
from pyconstcond.semantics.nodes import (
    BinaryOp,
    BoolLiteral,
    IntLiteral,
    Name,
    Not,
    Opaque,
    Operator,
    Paren,
)


def expr(source: str):
    """Lower a Python expression string."""
    return lower(ast.parse(source, mode="eval").body)


class TestLiterals:
    """Leaves and wrappers."""

    def test_int_literal(self):
        assert evaluate(IntLiteral(777)) == 777

    def test_bool_literals_are_zero_and_one(self):
        assert evaluate(BoolLiteral(True)) == 1
        assert evaluate(BoolLiteral(False)) == 0

    def test_paren_evaluates_inner(self):
        assert evaluate(Paren(IntLiteral(3))) == 3

    def test_not_normalizes_operand(self):
        assert evaluate(Not(IntLiteral(5))) == 0
        assert evaluate(Not(IntLiteral(0))) == 1

    def test_big_integers_are_exact(self):
        assert evaluate(expr("10 ** 30 + 1 - 10 ** 30")) == 1


class TestComparisons:
    """Comparison operators yield 0/1 with left-to-right operand order."""

    @pytest.mark.parametrize("source,expected", [
        ("2 + 2 == 4", 1),
        ("2 + 2 != 4", 0),
        ("3 < 5", 1),
        ("3 > 5", 0),
        ("3 <= 5", 1),
        ("5 <= 3", 0),
        ("5 <= 5", 1),
        ("5 >= 3", 1),
        ("3 >= 5", 0),
    ])
    def test_comparison(self, source, expected):
        assert evaluate(expr(source)) == expected


class TestArithmetic:
    """Exact integer arithmetic."""

    def test_add_sub_mul(self):
        assert evaluate(expr("2 + 3 * 4 - 1")) == 13

    def test_floordiv_rounds_down(self):
        assert evaluate(expr("7 // 2")) == 3
        assert evaluate(expr("-7 // 2")) == -4

    def test_floordiv_by_zero_is_not_reducible(self):
        assert evaluate(expr("5 // 0")) is None

    def test_mod_takes_sign_of_divisor(self):
        assert evaluate(expr("-7 % 3")) == 2
        assert evaluate(expr("7 % -3")) == -2

    def test_mod_by_zero_is_not_reducible(self):
        assert evaluate(expr("5 % 0")) is None

    def test_pow(self):
        assert evaluate(expr("2 ** 10")) == 1024
        assert evaluate(expr("7 ** 0")) == 1

    def test_negative_exponent_is_not_reducible(self):
        assert evaluate(expr("2 ** -1")) is None

    def test_huge_exponent_is_not_reducible(self):
        node = BinaryOp(Operator.POW, IntLiteral(2), IntLiteral(MAX_EXPONENT + 1))
        assert evaluate(node) is None

    def test_power_tower_is_not_folded(self):
        # 7 ** 4096 alone is far wider than MAX_RESULT_BITS
        assert evaluate(expr("(7 ** 4096) ** 4096 > 0")) is None
        assert evaluate(expr("((7 ** 4096) ** 4096) ** 4096 > 0")) is None

    def test_wide_results_are_not_folded(self):
        assert evaluate(expr("10 ** 4000 * 10 ** 4000")) is None
        assert evaluate(expr("2 ** 4096 * 2 ** 4096 * 2 ** 4096")) is None
        big = (1 << MAX_RESULT_BITS) - 1
        assert evaluate(BinaryOp(Operator.ADD, IntLiteral(big), IntLiteral(big))) is None
        assert evaluate(IntLiteral(1 << (MAX_RESULT_BITS + 1))) is None

    def test_results_up_to_the_bound_are_folded(self):
        assert evaluate(expr("2 ** 4096")) == 1 << 4096
        assert evaluate(expr("2 ** 4096 * 2 ** 4095")) == 1 << 8191
        assert evaluate(expr("(-1) ** 4095")) == -1

    def test_unary_minus_on_expression(self):
        assert evaluate(expr("-(2 + 3)")) == -5


class TestLogical:
    """AND/OR combine both operands, normalized to 0/1, without short-circuit."""

    def test_and_uses_both_operands(self):
        # Evaluating the left operand twice would give 1 here.
        assert evaluate(expr("1 and 0")) == 0
        assert evaluate(expr("True and 0")) == 0

    def test_or_normalizes(self):
        assert evaluate(expr("0 or 3")) == 1
        assert evaluate(expr("0 or 0")) == 0

    def test_no_short_circuit(self):
        # Python would return False at runtime; folding needs both sides.
        assert evaluate(expr("False and x")) is None
        assert evaluate(expr("True or x")) is None

    def test_evaluate_bool(self):
        assert evaluate_bool(expr("not (1 > 2)")) is True
        assert evaluate_bool(expr("2 - 2")) is False
        assert evaluate_bool(expr("x")) is None


class TestNotReducible:
    """Free variables and opaque nodes never reduce."""

    def test_name(self):
        assert evaluate(Name("x")) is None

    def test_opaque(self):
        assert evaluate(Opaque("f(x)")) is None

    def test_name_inside_arithmetic(self):
        assert evaluate(expr("x + 1 > 3")) is None

    def test_not_of_unknown(self):
        assert evaluate(Not(Name("x"))) is None


class TestSubstitution:
    """Nodes pinned in the environment."""

    def test_pinned_comparison(self):
        node = expr("x > 5")
        assert evaluate(node, {node: True}) == 1
        assert evaluate(node, {node: False}) == 0

    def test_pinning_takes_precedence_over_structure(self):
        node = expr("1 > 2")
        assert evaluate(node, {node: True}) == 1

    def test_pinned_subexpression(self):
        node = expr("not (x > 5) or True")
        comparison = node.left.operand
        assert evaluate(node, {comparison: True}) == 1

    def test_lookup_is_by_identity(self):
        first = expr("x > 5")
        second = expr("x > 5")
        assert evaluate(second, {first: True}) is None

    def test_pinned_name(self):
        name = Name("flag")
        assert evaluate(BinaryOp(Operator.AND, name, BoolLiteral(True)), {name: True}) == 1
