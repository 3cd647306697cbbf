"""
Atomic ``variable OP constant`` comparisons ("divisions").

A division records how one comparison node behaves as its variable moves
along the value line: its truth value below, at, and above the constant.
``x < 5`` is (True, False, False); ``5 <= x`` is (False, True, True).
"""

from dataclasses import dataclass
from typing import Callable, Dict, List

from .evaluator import evaluate
from .nodes import BinaryOp, Expr, Name, Not, Operator, Paren


@dataclass(frozen=True)
class Division:
    """
    Comparison of variable ``name`` against ``point``.

    ``owner`` is the comparison node itself; the verdict engine pins it to
    truth values during case analysis.
    """
    owner: BinaryOp
    name: str
    point: int
    left: bool
    at_point: bool
    right: bool

    @classmethod
    def less(cls, owner: BinaryOp, name: str, point: int) -> "Division":
        return cls(owner, name, point, True, False, False)

    @classmethod
    def less_eq(cls, owner: BinaryOp, name: str, point: int) -> "Division":
        return cls(owner, name, point, True, True, False)

    @classmethod
    def greater(cls, owner: BinaryOp, name: str, point: int) -> "Division":
        return cls(owner, name, point, False, False, True)

    @classmethod
    def greater_eq(cls, owner: BinaryOp, name: str, point: int) -> "Division":
        return cls(owner, name, point, False, True, True)

    @classmethod
    def eq(cls, owner: BinaryOp, name: str, point: int) -> "Division":
        return cls(owner, name, point, False, True, False)

    @classmethod
    def not_eq(cls, owner: BinaryOp, name: str, point: int) -> "Division":
        return cls(owner, name, point, True, False, True)

    def bool_before_point(self, x: int) -> bool:
        """
        Truth value for a variable slightly smaller than ``x``.

        For ``v >= 5``: x == 4 -> False, x == 5 -> False, x == 6 -> True.
        """
        return self.left if x <= self.point else self.right

    def bool_at_point(self, x: int) -> bool:
        """
        Truth value for a variable exactly equal to ``x``.

        For ``v >= 5``: x == 4 -> False, x == 5 -> True, x == 6 -> True.
        """
        if x < self.point:
            return self.left
        if x > self.point:
            return self.right
        return self.at_point

    def bool_at_plus_infinity(self) -> bool:
        return self.right

    def __repr__(self) -> str:
        pattern = "-".join(str(b) for b in (self.left, self.at_point, self.right))
        return f"Division('{self.owner}': {self.name} at {self.point} as {pattern})"


DivisionFactory = Callable[[BinaryOp, str, int], Division]

# ``x OP c``
_DIRECT: Dict[Operator, DivisionFactory] = {
    Operator.EQ: Division.eq,
    Operator.NE: Division.not_eq,
    Operator.LT: Division.less,
    Operator.GT: Division.greater,
    Operator.LE: Division.less_eq,
    Operator.GE: Division.greater_eq,
}

# ``c OP x``: the inequality flips relative to the variable.
_SWAPPED: Dict[Operator, DivisionFactory] = {
    Operator.EQ: Division.eq,
    Operator.NE: Division.not_eq,
    Operator.LT: Division.greater,
    Operator.GT: Division.less,
    Operator.LE: Division.greater_eq,
    Operator.GE: Division.less_eq,
}


def collect_divisions(node: Expr, divisions: List[Division]) -> None:
    """
    Append every ``variable OP constant`` comparison found in ``node``.

    The constant side may be any reducible expression (``x < 2 + 3``).
    Compound operands such as ``not (a > 5 and b > 5)`` are searched
    recursively. A binary node with a variable on one side whose other side
    does not reduce, or whose operator is not a comparison, is opaque: it
    contributes nothing and is not searched further.
    """
    if isinstance(node, BinaryOp):
        if isinstance(node.left, Name):
            table = _DIRECT
            name = node.left.ident
            number = evaluate(node.right)
        elif isinstance(node.right, Name):
            table = _SWAPPED
            name = node.right.ident
            number = evaluate(node.left)
        else:
            collect_divisions(node.left, divisions)
            collect_divisions(node.right, divisions)
            return

        if number is None:
            return
        factory = table.get(node.op)
        if factory is not None:
            divisions.append(factory(node, name, number))
    elif isinstance(node, Not):
        collect_divisions(node.operand, divisions)
    elif isinstance(node, Paren):
        collect_divisions(node.inner, divisions)
