"""
Region partitioning of each variable's value line.

Every division is piecewise constant with breakpoints at its threshold, so
the value line of a variable splits into finitely many regions between and at
the distinct thresholds. One representative row per region realizes every
combination of truth values the variable's comparisons can take together:

    (-inf, t1)  [t1]  (t1, t2)  [t2]  ...  [tn]  (tn, +inf)

Rows that repeat their predecessor are dropped, so a variable with ``m``
distinct thresholds yields at most ``2m + 1`` rows.
"""

import logging
from dataclasses import dataclass, field
from fractions import Fraction
from typing import Dict, List, Tuple, Union

from .divisions import Division
from .nodes import BinaryOp

logger = logging.getLogger(__name__)

Sample = Union[int, Fraction]


@dataclass(frozen=True)
class Row:
    """
    Truth values of all divisions of one variable at a representative point.

    ``sample`` is a value of the variable inside the region; it explains a
    verdict but plays no part in deduplication.
    """
    name: str
    sample: Sample
    values: Tuple[Tuple[BinaryOp, bool], ...] = field(default=())

    @property
    def truths(self) -> Tuple[bool, ...]:
        return tuple(value for _, value in self.values)


def _group_by_name(divisions: List[Division]) -> Dict[str, List[Division]]:
    grouped: Dict[str, List[Division]] = {}
    for division in divisions:
        grouped.setdefault(division.name, []).append(division)
    return grouped


def _sample_before(points: List[int], index: int) -> Sample:
    """A value strictly between the previous threshold and ``points[index]``."""
    point = points[index]
    if index == 0 or point - points[index - 1] > 1:
        return point - 1
    # No integer in the gap; the variable may still hold a non-integer.
    return Fraction(points[index - 1] + point, 2)


def _rows_for(name: str, divs: List[Division]) -> List[Row]:
    points = sorted({d.point for d in divs})
    rows: List[Row] = []

    def push(sample: Sample, truths: List[bool]) -> None:
        if rows and list(rows[-1].truths) == truths:
            return
        rows.append(Row(name, sample, tuple(zip((d.owner for d in divs), truths))))

    for index, point in enumerate(points):
        push(_sample_before(points, index), [d.bool_before_point(point) for d in divs])
        push(point, [d.bool_at_point(point) for d in divs])

    push(points[-1] + 1, [d.bool_at_plus_infinity() for d in divs])
    return rows


def partition(divisions: List[Division]) -> Dict[str, List[Row]]:
    """
    Build the ordered representative rows for every variable.

    Args:
        divisions: Divisions collected from one condition

    Returns:
        Variable name -> rows, ascending along the value line. Variables
        appear in order of their first division.
    """
    result: Dict[str, List[Row]] = {}
    for name, divs in _group_by_name(divisions).items():
        result[name] = _rows_for(name, divs)
        logger.debug(f"{name}: {len(divs)} divisions -> {len(result[name])} regions")
    return result
