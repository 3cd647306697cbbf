"""
Joint assignments: the cross product of per-variable representative rows.

Each joint assignment pins every collected comparison node to a truth value,
consistently with one region per variable.
"""

import itertools
from typing import Dict, Iterator, List, Mapping, Tuple

from ..errors import InvariantViolation
from .nodes import BinaryOp
from .regions import Row

Assignment = Dict[BinaryOp, bool]


def count_assignments(rows_by_name: Mapping[str, List[Row]]) -> int:
    """Number of joint assignments ``combine`` would produce."""
    total = 1
    for rows in rows_by_name.values():
        total *= len(rows)
    return total if rows_by_name else 0


def iter_joint_rows(rows_by_name: Mapping[str, List[Row]]) -> Iterator[Tuple[Row, ...]]:
    """
    Yield one row per variable for every combination.

    Raises:
        InvariantViolation: if there is nothing to combine
    """
    if not rows_by_name or any(not rows for rows in rows_by_name.values()):
        raise InvariantViolation(
            f"no representative rows to combine: {dict(rows_by_name)!r}"
        )
    return itertools.product(*rows_by_name.values())


def merge(rows: Tuple[Row, ...]) -> Assignment:
    """Flatten one row per variable into a single node -> truth mapping."""
    assignment: Assignment = {}
    for row in rows:
        assignment.update(row.values)
    return assignment


def combine(rows_by_name: Mapping[str, List[Row]]) -> List[Assignment]:
    """
    All joint assignments, in product order.

    a  b  c - rows of x
    1  2    - rows of y
    -> (a,1), (a,2), (b,1), (b,2), (c,1), (c,2)
    """
    return [merge(rows) for rows in iter_joint_rows(rows_by_name)]
