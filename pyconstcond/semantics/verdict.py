"""
Verdict engine: is a condition always True, always False, or undecided?

1. Fold the condition directly; a variable-free condition is settled here.
2. Otherwise collect ``variable OP constant`` divisions.
3. Partition each variable's value line into representative regions.
4. Re-evaluate the condition with its comparisons pinned by every joint
   assignment of regions.
5. Report a verdict only if every assignment reduces and all agree.

The case split costs the product of the per-variable region counts, so it is
abandoned past ``EngineConfig.max_assignments``.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from ..errors import InvariantViolation
from .combine import count_assignments, iter_joint_rows, merge
from .divisions import Division, collect_divisions
from .evaluator import evaluate_bool
from .nodes import Expr
from .regions import Row, Sample, partition

logger = logging.getLogger(__name__)

DEFAULT_MAX_ASSIGNMENTS = 4096

Binding = Dict[str, Sample]


@dataclass
class EngineConfig:
    max_assignments: int = DEFAULT_MAX_ASSIGNMENTS
    strict: bool = False  # re-raise InvariantViolation instead of degrading


class VerdictReason(Enum):
    CONSTANT = "constant"              # folded without case analysis
    CASE_SPLIT = "case_split"          # unanimous over all regions
    NO_DIVISIONS = "no_divisions"      # free variables but nothing to split on
    IRREDUCIBLE = "irreducible"        # pinning comparisons was not enough
    UNDECIDED = "undecided"            # regions disagree
    LIMIT_EXCEEDED = "limit_exceeded"
    INTERNAL_ERROR = "internal_error"


@dataclass
class Verdict:
    """
    Outcome of ``decide``.

    ``value`` is the constant truth value of the condition, or None when no
    verdict may be reported.
    """
    value: Optional[bool]
    reason: VerdictReason
    variables: Tuple[str, ...] = ()
    assignments_checked: int = 0
    regions: Dict[str, Tuple[Sample, ...]] = field(default_factory=dict)
    witness: Optional[Tuple[Binding, Binding]] = None  # for UNDECIDED

    @property
    def is_constant(self) -> bool:
        return self.value is not None

    def describe(self) -> str:
        """Short human-readable rationale."""
        if self.reason is VerdictReason.CONSTANT:
            return f"always {self.value} (constant expression)"
        if self.reason is VerdictReason.CASE_SPLIT:
            parts = [
                f"{name} in {{{', '.join(str(s) for s in samples)}}}"
                for name, samples in self.regions.items()
            ]
            return (
                f"always {self.value} over {self.assignments_checked} regions "
                f"({'; '.join(parts)})"
            )
        if self.reason is VerdictReason.UNDECIDED and self.witness:
            first, second = self.witness
            return f"undecided: differs between {_fmt(first)} and {_fmt(second)}"
        return self.reason.value.replace("_", " ")


def _fmt(binding: Binding) -> str:
    return ", ".join(f"{name}={value}" for name, value in binding.items())


def _binding(rows: Tuple[Row, ...]) -> Binding:
    return {row.name: row.sample for row in rows}


def decide(condition: Expr, config: Optional[EngineConfig] = None) -> Verdict:
    """
    Decide whether ``condition`` is constant.

    Args:
        condition: Branch condition expression
        config: Engine limits; defaults to ``EngineConfig()``

    Returns:
        A Verdict; ``verdict.value`` is None unless the condition provably
        always evaluates to that value.
    """
    config = config or EngineConfig()

    try:
        return _decide(condition, config)
    except InvariantViolation as e:
        logger.error(f"internal invariant violated while analyzing '{condition}': {e}")
        if config.strict:
            raise
        return Verdict(None, VerdictReason.INTERNAL_ERROR)
    except RecursionError:
        # Rendering the condition would recurse again.
        logger.error("condition is nested too deeply to analyze")
        if config.strict:
            raise
        return Verdict(None, VerdictReason.INTERNAL_ERROR)


def _decide(condition: Expr, config: EngineConfig) -> Verdict:
    direct = evaluate_bool(condition)
    if direct is not None:
        return Verdict(direct, VerdictReason.CONSTANT)

    divisions: List[Division] = []
    collect_divisions(condition, divisions)
    if not divisions:
        return Verdict(None, VerdictReason.NO_DIVISIONS)

    logger.debug(f"{len(divisions)} divisions in '{condition}': {divisions}")
    return _case_split(condition, divisions, config)


def _case_split(condition: Expr, divisions: List[Division], config: EngineConfig) -> Verdict:
    rows_by_name = partition(divisions)
    variables = tuple(rows_by_name)
    total = count_assignments(rows_by_name)

    if total == 0:
        raise InvariantViolation(f"empty combination after divisions: {divisions}")
    if total > config.max_assignments:
        logger.warning(
            f"case split of '{condition}' needs {total} assignments "
            f"(limit {config.max_assignments}); skipped"
        )
        return Verdict(None, VerdictReason.LIMIT_EXCEEDED, variables)

    joint = iter_joint_rows(rows_by_name)
    first_rows = next(joint)
    expected = evaluate_bool(condition, merge(first_rows))
    if expected is None:
        # Pinning the comparisons did not make the condition reducible.
        return Verdict(None, VerdictReason.IRREDUCIBLE, variables, 1)

    checked = 1
    for rows in joint:
        checked += 1
        value = evaluate_bool(condition, merge(rows))
        if value is None:
            return Verdict(None, VerdictReason.IRREDUCIBLE, variables, checked)
        if value != expected:
            witness = (_binding(first_rows), _binding(rows))
            return Verdict(None, VerdictReason.UNDECIDED, variables, checked, witness=witness)

    regions = {
        name: tuple(row.sample for row in rows)
        for name, rows in rows_by_name.items()
    }
    return Verdict(expected, VerdictReason.CASE_SPLIT, variables, checked, regions)


def analyze(condition: Expr, config: Optional[EngineConfig] = None) -> Optional[bool]:
    """The constant value of ``condition``, or None if there is no verdict."""
    return decide(condition, config).value
