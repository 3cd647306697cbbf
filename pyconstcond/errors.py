"""
Error taxonomy.

Non-reducible expressions are not errors: the evaluator returns ``None`` for
them. Exceptions are reserved for engine defects and bad configuration.
"""


class ConstCondError(Exception):
    """Base class for pyconstcond errors."""


class InvariantViolation(ConstCondError, AssertionError):
    """
    An internal invariant of the decision engine does not hold.

    Signals a defect in the engine itself, e.g. divisions were collected but
    no joint assignment could be formed. The verdict engine logs it and
    degrades to "no verdict" unless running in strict mode.
    """


class ConfigError(ConstCondError):
    """A configuration file could not be interpreted."""
