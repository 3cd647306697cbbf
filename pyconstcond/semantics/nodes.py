"""
Expression tree for branch conditions.

A closed set of variants:
- IntLiteral, BoolLiteral: constants
- Name: a free variable (plain or dotted, e.g. ``self.count``)
- BinaryOp: comparison, arithmetic or logical binary operator
- Not: logical negation
- Paren: explicit grouping
- Opaque: anything the host could not express with the variants above

Nodes compare and hash by identity (``eq=False``). The verdict engine pins
individual comparison nodes to truth values through dicts keyed by node, and
two structurally identical comparisons at different positions must stay
distinct keys.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union

# Wider ints are shown in hex: decimal str() of very large ints is capped.
_DECIMAL_BITS = 12000


class Operator(Enum):
    """Binary operators understood by the evaluator."""
    EQ = "=="
    NE = "!="
    LT = "<"
    GT = ">"
    LE = "<="
    GE = ">="
    ADD = "+"
    SUB = "-"
    MUL = "*"
    FLOORDIV = "//"
    POW = "**"
    MOD = "%"
    AND = "and"
    OR = "or"

    @property
    def symbol(self) -> str:
        return self.value

    @property
    def is_comparison(self) -> bool:
        return self in COMPARISON_OPERATORS


COMPARISON_OPERATORS = frozenset({
    Operator.EQ, Operator.NE, Operator.LT, Operator.GT, Operator.LE, Operator.GE,
})


@dataclass(frozen=True, eq=False)
class IntLiteral:
    value: int

    def __str__(self) -> str:
        if self.value.bit_length() > _DECIMAL_BITS:
            return hex(self.value)
        return str(self.value)


@dataclass(frozen=True, eq=False)
class BoolLiteral:
    value: bool

    def __str__(self) -> str:
        return "True" if self.value else "False"


@dataclass(frozen=True, eq=False)
class Name:
    """Reference to a variable; ``ident`` is its full dotted text."""
    ident: str

    def __str__(self) -> str:
        return self.ident


@dataclass(frozen=True, eq=False)
class BinaryOp:
    op: Operator
    left: "Expr"
    right: "Expr"

    def __str__(self) -> str:
        return f"{self.left} {self.op.symbol} {self.right}"


@dataclass(frozen=True, eq=False)
class Not:
    operand: "Expr"

    def __str__(self) -> str:
        return f"not {self.operand}"


@dataclass(frozen=True, eq=False)
class Paren:
    inner: "Expr"

    def __str__(self) -> str:
        return f"({self.inner})"


@dataclass(frozen=True, eq=False)
class Opaque:
    """
    A sub-expression outside the supported language (call, float, string,
    subscript, unsupported operator...). Never reducible.
    """
    text: str = "<opaque>"

    def __str__(self) -> str:
        return self.text


Expr = Union[IntLiteral, BoolLiteral, Name, BinaryOp, Not, Paren, Opaque]
