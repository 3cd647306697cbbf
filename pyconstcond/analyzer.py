"""
Core analyzer: finds ``if``/``elif`` conditions with a constant truth value.

For each branch head in a Python file:
1. Lower the condition AST into the engine's expression tree
2. Ask the verdict engine whether it is always True or always False
3. Optionally confirm the verdict with Z3
4. Record a finding at the condition's source location

Files are independent; a file that fails to load is counted and skipped.
"""

import ast
import fnmatch
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Set

from .ci.config import ConstCondConfig, ScanConfig
from .frontend.loader import load_python_file, load_python_string
from .frontend.lowering import lower
from .semantics.verdict import Verdict, decide
from .z3model.encoding import confirm_verdict

logger = logging.getLogger(__name__)


@dataclass
class ConditionFinding:
    """A branch condition that always evaluates to ``value``."""
    path: str
    line: int
    col: int  # 1-based
    end_line: int
    end_col: int  # 1-based, exclusive
    kind: str  # 'if' or 'elif'
    source: str
    value: bool
    verdict: Verdict
    confirmed: Optional[bool] = None  # Z3 confirmation, when requested

    @property
    def message(self) -> str:
        return f"Condition `{self.source}` is always {self.value}"

    def format(self) -> str:
        text = f"{self.path}:{self.line}:{self.col}: {self.message}"
        if self.confirmed is True:
            text += " (Z3-confirmed)"
        return text


@dataclass
class AnalysisResult:
    """Findings across all analyzed files."""
    findings: List[ConditionFinding] = field(default_factory=list)
    files_analyzed: int = 0
    conditions_checked: int = 0
    parse_failures: List[str] = field(default_factory=list)

    def merge(self, other: "AnalysisResult") -> None:
        self.findings.extend(other.findings)
        self.files_analyzed += other.files_analyzed
        self.conditions_checked += other.conditions_checked
        self.parse_failures.extend(other.parse_failures)

    def summary(self) -> str:
        """Human-readable summary of result."""
        lines = [finding.format() for finding in self.findings]
        lines.append(
            f"{len(self.findings)} constant condition(s) in "
            f"{self.files_analyzed} file(s), {self.conditions_checked} condition(s) checked"
        )
        if self.parse_failures:
            lines.append(f"Skipped {len(self.parse_failures)} unparsable file(s)")
        return "\n".join(lines)


class ConditionAnalyzer(ast.NodeVisitor):
    """
    Visits every ``if``/``elif`` statement of a module and decides its
    condition.
    """

    def __init__(self, source: str, path: str = "<string>", config: Optional[ConstCondConfig] = None):
        self.source = source
        self.lines = source.split("\n")
        self.path = path
        self.config = config or ConstCondConfig()

        self.findings: List[ConditionFinding] = []
        self.conditions_checked = 0
        self._elif_nodes: Set[int] = set()

    def analyze(self, module: ast.Module) -> List[ConditionFinding]:
        self.visit(module)
        return self.findings

    def visit_If(self, node: ast.If):
        if len(node.orelse) == 1 and isinstance(node.orelse[0], ast.If):
            child = node.orelse[0]
            if self._starts_with_elif(child):
                self._elif_nodes.add(id(child))

        kind = "elif" if id(node) in self._elif_nodes else "if"
        self._check_condition(node.test, kind)
        self.generic_visit(node)

    def generic_visit(self, node: ast.AST):
        # Expressions hold no statements; deep operator chains stay unvisited.
        if isinstance(node, ast.expr):
            return
        super().generic_visit(node)

    def _line(self, lineno: int) -> str:
        return self.lines[lineno - 1] if 0 < lineno <= len(self.lines) else ""

    def _char_col(self, lineno: int, byte_offset: int) -> int:
        """AST column offsets count UTF-8 bytes; convert to characters."""
        prefix = self._line(lineno).encode("utf-8")[:byte_offset]
        return len(prefix.decode("utf-8", errors="replace"))

    def _starts_with_elif(self, node: ast.If) -> bool:
        line = self._line(node.lineno)
        return line[self._char_col(node.lineno, node.col_offset):].startswith("elif")

    def _check_condition(self, test: ast.expr, kind: str) -> None:
        self.conditions_checked += 1
        try:
            condition = lower(test)
        except RecursionError:
            logger.warning(f"{self.path}:{test.lineno}: condition nested too deeply; skipped")
            return
        verdict = decide(condition, self.config.engine)
        text = ast.get_source_segment(self.source, test) or ast.unparse(test)
        logger.debug(f"{self.path}:{test.lineno}: '{text}' -> {verdict.reason.value}")
        if verdict.value is None:
            return

        end_line = test.end_lineno or test.lineno
        end_offset = test.end_col_offset if test.end_col_offset is not None else test.col_offset

        finding = ConditionFinding(
            path=self.path,
            line=test.lineno,
            col=self._char_col(test.lineno, test.col_offset) + 1,
            end_line=end_line,
            end_col=self._char_col(end_line, end_offset) + 1,
            kind=kind,
            source=text,
            value=verdict.value,
            verdict=verdict,
        )
        if self.config.analysis.z3_confirm:
            finding.confirmed = confirm_verdict(
                condition, verdict.value, self.config.analysis.z3_timeout_ms
            )
            if finding.confirmed is False:
                logger.error(f"Z3 refutes verdict for {finding.format()}")
        self.findings.append(finding)


def analyze_source(
    source: str,
    path: str = "<string>",
    config: Optional[ConstCondConfig] = None,
) -> AnalysisResult:
    """Analyze Python source text."""
    module = load_python_string(source, path)
    if module is None:
        return AnalysisResult(parse_failures=[path])
    analyzer = ConditionAnalyzer(source, path, config)
    findings = analyzer.analyze(module)
    return AnalysisResult(findings, 1, analyzer.conditions_checked)


def analyze_file(filepath: Path, config: Optional[ConstCondConfig] = None) -> AnalysisResult:
    """Analyze one Python file."""
    loaded = load_python_file(filepath)
    if loaded is None:
        return AnalysisResult(parse_failures=[str(filepath)])
    source, module = loaded
    analyzer = ConditionAnalyzer(source, str(filepath), config)
    findings = analyzer.analyze(module)
    return AnalysisResult(findings, 1, analyzer.conditions_checked)


def _matches(rel_path: str, pattern: str) -> bool:
    if fnmatch.fnmatch(rel_path, pattern):
        return True
    # "**/x" also matches "x" at the top level
    return pattern.startswith("**/") and fnmatch.fnmatch(rel_path, pattern[3:])


def iter_python_files(root: Path, scan: ScanConfig) -> Iterator[Path]:
    """Files under ``root`` selected by the include/exclude globs, sorted."""
    for path in sorted(root.rglob("*")):
        if not path.is_file():
            continue
        rel = path.relative_to(root).as_posix()
        if not any(_matches(rel, pat) for pat in scan.include):
            continue
        if any(_matches(rel, pat) for pat in scan.exclude):
            continue
        yield path


def analyze_paths(paths: Iterable[Path], config: Optional[ConstCondConfig] = None) -> AnalysisResult:
    """
    Analyze files and directories.

    Explicit files are always analyzed; directories are walked with the
    scan globs from ``config``.
    """
    config = config or ConstCondConfig()
    result = AnalysisResult()
    for target in paths:
        target = Path(target)
        if target.is_dir():
            for path in iter_python_files(target, config.scan):
                result.merge(analyze_file(path, config))
        else:
            result.merge(analyze_file(target, config))
    return result
