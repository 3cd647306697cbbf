"""
Frontend: load Python source files and parse them to ASTs.

Unreadable or unparsable files are skipped with a warning; they never abort
a scan.
"""

import ast
import logging
from pathlib import Path
from typing import Optional, Tuple

logger = logging.getLogger(__name__)


def load_python_file(filepath: Path) -> Optional[Tuple[str, ast.Module]]:
    """
    Read and parse a Python source file.

    Args:
        filepath: Path to .py file

    Returns:
        (source, module), or None on error
    """
    try:
        source = Path(filepath).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Error loading {filepath}: {e}")
        return None

    module = load_python_string(source, str(filepath))
    if module is None:
        return None
    return source, module


def load_python_string(source: str, filename: str = "<string>") -> Optional[ast.Module]:
    """
    Parse Python source code from a string.

    Args:
        source: Python source code
        filename: Filename to use in error messages

    Returns:
        Parsed module, or None on error
    """
    try:
        return ast.parse(source, filename=filename)
    except (SyntaxError, ValueError, RecursionError) as e:
        logger.warning(f"Error parsing {filename}: {e}")
        return None
