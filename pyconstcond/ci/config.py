"""
Configuration file loader for ``.pyconstcond.yml``.

Provides sane defaults so the tool works out of the box even without a
config file, while allowing per-repo customisation of engine limits,
Z3 confirmation, and scan scope.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from pyconstcond.errors import ConfigError
from pyconstcond.semantics.verdict import DEFAULT_MAX_ASSIGNMENTS, EngineConfig

CONFIG_NAMES = (".pyconstcond.yml", ".pyconstcond.yaml")


@dataclass
class AnalysisConfig:
    z3_confirm: bool = False
    z3_timeout_ms: int = 2000


@dataclass
class ScanConfig:
    exclude: list[str] = field(default_factory=lambda: [
        ".git/**",
        ".venv/**",
        "venv/**",
        "build/**",
        "**/__pycache__/**",
    ])
    include: list[str] = field(default_factory=lambda: ["**/*.py"])


@dataclass
class ConstCondConfig:
    """Top-level configuration for pyconstcond."""
    engine: EngineConfig = field(default_factory=EngineConfig)
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    scan: ScanConfig = field(default_factory=ScanConfig)

    @classmethod
    def load(cls, repo_root: Path) -> "ConstCondConfig":
        """Load config from .pyconstcond.yml in ``repo_root``, falling back to defaults."""
        for name in CONFIG_NAMES:
            config_path = Path(repo_root) / name
            if config_path.exists():
                return cls.load_file(config_path)
        return cls()

    @classmethod
    def load_file(cls, config_path: Path) -> "ConstCondConfig":
        """Load an explicit config file."""
        try:
            with open(config_path) as f:
                raw = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"{config_path}: invalid YAML: {e}") from e
        if not isinstance(raw, dict):
            raise ConfigError(f"{config_path}: expected a mapping at top level")
        return cls._from_dict(raw)

    @classmethod
    def _from_dict(cls, raw: dict[str, Any]) -> "ConstCondConfig":
        engine_raw = _section(raw, "engine")
        analysis_raw = _section(raw, "analysis")
        scan_raw = _section(raw, "scan")

        engine = EngineConfig(
            max_assignments=_int(engine_raw, "engine", "max_assignments", DEFAULT_MAX_ASSIGNMENTS),
            strict=_bool(engine_raw, "engine", "strict", False),
        )
        analysis = AnalysisConfig(
            z3_confirm=_bool(analysis_raw, "analysis", "z3_confirm", False),
            z3_timeout_ms=_int(analysis_raw, "analysis", "z3_timeout_ms", 2000),
        )

        if engine.max_assignments < 1:
            raise ConfigError("engine.max-assignments must be at least 1")

        scan = ScanConfig()
        if "exclude" in scan_raw:
            scan.exclude = _patterns(scan_raw, "exclude")
        if "include" in scan_raw:
            scan.include = _patterns(scan_raw, "include")

        return cls(engine=engine, analysis=analysis, scan=scan)

    def to_yaml(self) -> str:
        """Serialise to YAML string."""
        lines = [
            "# .pyconstcond.yml - pyconstcond configuration",
            "",
            "engine:",
            f"  max-assignments: {self.engine.max_assignments}",
            f"  strict: {str(self.engine.strict).lower()}",
            "",
            "analysis:",
            f"  z3-confirm: {str(self.analysis.z3_confirm).lower()}",
            f"  z3-timeout-ms: {self.analysis.z3_timeout_ms}",
            "",
            "scan:",
            "  exclude:",
        ]
        for pat in self.scan.exclude:
            lines.append(f'    - "{pat}"')
        lines.append("  include:")
        for pat in self.scan.include:
            lines.append(f'    - "{pat}"')
        lines.append("")
        return "\n".join(lines)


def _section(raw: dict[str, Any], name: str) -> dict[str, Any]:
    section = raw.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigError(f"section '{name}' must be a mapping")
    return section


def _get(section: dict[str, Any], key: str, default: Any) -> Any:
    """Accept both ``max-assignments`` and ``max_assignments`` spellings."""
    return section.get(key.replace("_", "-"), section.get(key, default))


def _int(section: dict[str, Any], name: str, key: str, default: int) -> int:
    value = _get(section, key, default)
    # bool is a subclass of int
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{name}.{key.replace('_', '-')} must be an integer, got {value!r}")
    return value


def _bool(section: dict[str, Any], name: str, key: str, default: bool) -> bool:
    value = _get(section, key, default)
    if not isinstance(value, bool):
        raise ConfigError(f"{name}.{key.replace('_', '-')} must be true or false, got {value!r}")
    return value


def _patterns(section: dict[str, Any], key: str) -> list[str]:
    value = section[key]
    if not isinstance(value, list) or not all(isinstance(p, str) for p in value):
        raise ConfigError(f"scan.{key} must be a list of glob strings")
    return list(value)
