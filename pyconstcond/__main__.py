"""
Allow running pyconstcond as a module:

    python -m pyconstcond <target> [options]

Delegates to pyconstcond.cli:main().
"""
import sys
from .cli import main

sys.exit(main())
