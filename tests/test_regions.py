"""
Tests for region partitioning.

Coverage:
- Row order along the value line and adjacent-duplicate suppression
- Representative samples for each region
- Regions between adjacent integers
- The 2m + 1 bound on rows per variable
"""

import ast
from fractions import Fraction

from pyconstcond.frontend.lowering import lower
from pyconstcond.semantics.divisions import collect_divisions
from pyconstcond.semantics.regions import partition


def rows_for(source: str):
    node = lower(ast.parse(source, mode="eval").body)
    divisions = []
    collect_divisions(node, divisions)
    return partition(divisions)


class TestSingleVariable:

    def test_complementary_halves(self):
        rows = rows_for("x < 5 or x >= 5")["x"]
        # below 5, at 5; above 5 repeats "at 5" and is dropped
        assert [r.truths for r in rows] == [(True, False), (False, True)]
        assert [r.sample for r in rows] == [4, 5]

    def test_two_thresholds(self):
        rows = rows_for("x < 5 and x > 10")["x"]
        assert [r.truths for r in rows] == [
            (True, False),
            (False, False),
            (False, True),
        ]
        assert [r.sample for r in rows] == [4, 5, 11]

    def test_equality(self):
        rows = rows_for("x == 5")["x"]
        assert [r.truths for r in rows] == [(False,), (True,), (False,)]
        assert [r.sample for r in rows] == [4, 5, 6]

    def test_region_between_adjacent_integers(self):
        rows = rows_for("x <= 5 or x >= 6")["x"]
        assert [r.truths for r in rows] == [
            (True, False),
            (False, False),
            (False, True),
        ]
        assert rows[1].sample == Fraction(11, 2)

    def test_row_values_are_keyed_by_owner(self):
        node = lower(ast.parse("x < 5 or x >= 5", mode="eval").body)
        divisions = []
        collect_divisions(node, divisions)
        (first, _) = partition(divisions)["x"]
        assert [owner for owner, _ in first.values] == [node.left, node.right]

    def test_rows_bounded_by_thresholds(self):
        source = " or ".join(f"x == {i}" for i in range(10))
        rows = rows_for(source)["x"]
        assert len(rows) == 2 * 10 + 1

    def test_duplicate_thresholds_are_merged(self):
        rows = rows_for("x > 3 or x >= 3 or x != 3")["x"]
        assert len(rows) <= 3

    def test_only_adjacent_duplicates_are_dropped(self):
        rows = rows_for("x == 1 or x == 3")["x"]
        # "nothing holds" recurs between and around the points
        assert [r.truths for r in rows].count((False, False)) == 3


class TestMultipleVariables:

    def test_grouped_in_order_of_appearance(self):
        by_name = rows_for("y > 1 or x < 3 or y < 0")
        assert list(by_name) == ["y", "x"]
        assert len(by_name["y"][0].values) == 2
        assert len(by_name["x"][0].values) == 1
