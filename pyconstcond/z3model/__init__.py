"""
Z3 model of condition expressions (verdict confirmation).
"""

from .encoding import UnsupportedExpression, Z3Encoder, confirm_verdict

__all__ = ["UnsupportedExpression", "Z3Encoder", "confirm_verdict"]
