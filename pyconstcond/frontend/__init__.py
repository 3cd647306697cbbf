"""
Frontend: Python source → condition expression trees.
"""

from .loader import load_python_file, load_python_string
from .lowering import lower

__all__ = ["load_python_file", "load_python_string", "lower"]
