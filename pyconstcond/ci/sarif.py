"""
SARIF 2.1.0 serializer for pyconstcond results.

Converts an AnalysisResult to the SARIF JSON format consumed by GitHub
Code Scanning, VS Code SARIF Viewer, and other SARIF-compatible tools.

Spec: https://docs.oasis-open.org/sarif/sarif/v2.1.0/sarif-v2.1.0.html
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pyconstcond import __version__

if TYPE_CHECKING:
    from pyconstcond.analyzer import AnalysisResult, ConditionFinding

# ── Rule metadata ────────────────────────────────────────────────────────────

CONSTANT_CONDITION_RULE: dict[str, str] = {
    "id": "PCC001",
    "name": "ConstantCondition",
    "shortDescription": "Branch condition is constant",
    "fullDescription": (
        "An if/elif condition evaluates to the same truth value for every "
        "value of its variables, so one of its branches is dead code."
    ),
    "level": "warning",
    "precision": "very-high",
    "cwe": "CWE-570",
}


def _rule_descriptor() -> dict[str, Any]:
    meta = CONSTANT_CONDITION_RULE
    return {
        "id": meta["id"],
        "name": meta["name"],
        "shortDescription": {"text": meta["shortDescription"]},
        "fullDescription": {"text": meta["fullDescription"]},
        "defaultConfiguration": {"level": meta["level"]},
        "properties": {
            "precision": meta["precision"],
            "tags": ["correctness", "maintainability"],
        },
        "helpUri": f"https://cwe.mitre.org/data/definitions/{meta['cwe'].split('-')[1]}.html",
    }


# ── Public API ────────────────────────────────────────────────────────────────


def results_to_sarif(
    result: "AnalysisResult",
    repo_root: Path | str,
) -> dict[str, Any]:
    """
    Convert an AnalysisResult to SARIF 2.1.0 JSON.

    Parameters
    ----------
    result : AnalysisResult
        Findings from ``analyze_paths``.
    repo_root : Path
        Repository root.  File paths in the SARIF output are made relative
        to it when possible.

    Returns
    -------
    dict
        A SARIF 2.1.0 JSON-serialisable dict.
    """
    repo_root = Path(repo_root).resolve()
    sarif_results = [_make_result(f, repo_root) for f in result.findings]

    return {
        "$schema": "https://json.schemastore.org/sarif-2.1.0.json",
        "version": "2.1.0",
        "runs": [
            {
                "tool": {
                    "driver": {
                        "name": "pyconstcond",
                        "semanticVersion": __version__,
                        "rules": [_rule_descriptor()],
                    }
                },
                "results": sarif_results,
                "invocations": [
                    {
                        "executionSuccessful": True,
                        "toolExecutionNotifications": [
                            {
                                "level": "warning",
                                "message": {"text": f"Could not parse {path}"},
                            }
                            for path in result.parse_failures
                        ],
                    }
                ],
                "properties": {
                    "metrics": {
                        "filesAnalyzed": result.files_analyzed,
                        "conditionsChecked": result.conditions_checked,
                        "constantConditions": len(result.findings),
                    }
                },
            }
        ],
    }


def write_sarif(sarif: dict[str, Any], output_path: Path | str) -> None:
    """Write a SARIF dict to a JSON file."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w") as f:
        json.dump(sarif, f, indent=2)


def load_sarif(path: Path | str) -> dict[str, Any]:
    """Load a SARIF JSON file."""
    with open(path) as f:
        return json.load(f)


# ── Internal helpers ─────────────────────────────────────────────────────────


def _relative_uri(path: str, repo_root: Path) -> str:
    abs_path = Path(path).resolve()
    try:
        return abs_path.relative_to(repo_root).as_posix()
    except ValueError:
        # not under repo_root
        return Path(path).as_posix()


def _make_result(finding: "ConditionFinding", repo_root: Path) -> dict[str, Any]:
    """Build a single SARIF result object for one constant condition."""
    verdict = finding.verdict

    region: dict[str, Any] = {
        "startLine": finding.line,
        "startColumn": finding.col,
        "endLine": finding.end_line,
        "endColumn": finding.end_col,
        "snippet": {"text": finding.source},
    }

    properties: dict[str, Any] = {
        "value": finding.value,
        "branchKind": finding.kind,
        "reason": verdict.reason.value,
        "variables": list(verdict.variables),
        "assignmentsChecked": verdict.assignments_checked,
    }
    if finding.confirmed is not None:
        properties["z3Confirmed"] = finding.confirmed

    return {
        "ruleId": CONSTANT_CONDITION_RULE["id"],
        "ruleIndex": 0,
        "level": CONSTANT_CONDITION_RULE["level"],
        "message": {"text": f"{finding.message}: {verdict.describe()}"},
        "locations": [
            {
                "physicalLocation": {
                    "artifactLocation": {
                        "uri": _relative_uri(finding.path, repo_root),
                        "uriBaseId": "%SRCROOT%",
                    },
                    "region": region,
                }
            }
        ],
        "properties": properties,
    }
