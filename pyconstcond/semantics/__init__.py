"""
Decision engine for constant conditions.

Leaves first: nodes → evaluator → divisions → regions → combine → verdict.
"""

from .nodes import (
    Operator,
    Expr,
    IntLiteral,
    BoolLiteral,
    Name,
    BinaryOp,
    Not,
    Paren,
    Opaque,
)
from .evaluator import evaluate, evaluate_bool
from .divisions import Division, collect_divisions
from .regions import Row, partition
from .combine import combine, count_assignments
from .verdict import EngineConfig, Verdict, VerdictReason, analyze, decide

__all__ = [
    "Operator",
    "Expr",
    "IntLiteral",
    "BoolLiteral",
    "Name",
    "BinaryOp",
    "Not",
    "Paren",
    "Opaque",
    "evaluate",
    "evaluate_bool",
    "Division",
    "collect_divisions",
    "Row",
    "partition",
    "combine",
    "count_assignments",
    "EngineConfig",
    "Verdict",
    "VerdictReason",
    "analyze",
    "decide",
]
