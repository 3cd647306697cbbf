"""
pyconstcond.ci: configuration and CI reporting.

Provides:
- ``.pyconstcond.yml`` configuration loading
- SARIF 2.1.0 output for GitHub Code Scanning
"""

__all__ = ["config", "sarif"]
