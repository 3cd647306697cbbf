"""
pyconstcond: constant-condition detection for Python branch heads.

For every ``if``/``elif`` condition the analyzer decides whether it evaluates
to the same boolean under every assignment of its free variables:
1. Constant folding for variable-free conditions
2. Case splitting over integer comparisons (``x < 5``, ``3 >= y``) otherwise
3. No verdict when neither settles it

A verdict is only ever reported when it is exact.
"""

__version__ = "0.1.0"
