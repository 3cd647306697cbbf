"""
Tests for ``.pyconstcond.yml`` loading.
"""

import pytest

from pyconstcond.ci.config import ConstCondConfig
from pyconstcond.errors import ConfigError
from pyconstcond.semantics.verdict import DEFAULT_MAX_ASSIGNMENTS


def test_defaults_without_file(tmp_path):
    config = ConstCondConfig.load(tmp_path)
    assert config.engine.max_assignments == DEFAULT_MAX_ASSIGNMENTS
    assert config.engine.strict is False
    assert config.analysis.z3_confirm is False
    assert "**/*.py" in config.scan.include


def test_dashed_keys(tmp_path):
    (tmp_path / ".pyconstcond.yml").write_text(
        "engine:\n"
        "  max-assignments: 64\n"
        "  strict: true\n"
        "analysis:\n"
        "  z3-confirm: true\n"
        "  z3-timeout-ms: 500\n"
        "scan:\n"
        "  exclude: ['legacy/**']\n"
    )
    config = ConstCondConfig.load(tmp_path)
    assert config.engine.max_assignments == 64
    assert config.engine.strict is True
    assert config.analysis.z3_confirm is True
    assert config.analysis.z3_timeout_ms == 500
    assert config.scan.exclude == ["legacy/**"]


def test_underscored_keys_and_yaml_suffix(tmp_path):
    (tmp_path / ".pyconstcond.yaml").write_text("engine:\n  max_assignments: 10\n")
    assert ConstCondConfig.load(tmp_path).engine.max_assignments == 10


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "empty.yml"
    path.write_text("")
    assert ConstCondConfig.load_file(path).engine.max_assignments == DEFAULT_MAX_ASSIGNMENTS


@pytest.mark.parametrize("text", [
    "- just\n- a list\n",
    "engine: 3\n",
    "engine:\n  max-assignments: lots\n",
    "engine:\n  max-assignments: 0\n",
    "engine: [unclosed\n",
    "engine:\n  strict: 'false'\n",
    "engine:\n  max-assignments: true\n",
    "analysis:\n  z3-confirm: \"no\"\n",
    "analysis:\n  z3-timeout-ms: '500'\n",
    "scan:\n  exclude: 'build/**'\n",
    "scan:\n  include: [1, 2]\n",
])
def test_invalid_files(tmp_path, text):
    path = tmp_path / "bad.yml"
    path.write_text(text)
    with pytest.raises(ConfigError):
        ConstCondConfig.load_file(path)


def test_to_yaml_round_trip(tmp_path):
    config = ConstCondConfig()
    config.engine.max_assignments = 99
    config.analysis.z3_confirm = True
    config.scan.exclude = ["vendor/**"]

    path = tmp_path / "out.yml"
    path.write_text(config.to_yaml())
    loaded = ConstCondConfig.load_file(path)

    assert loaded.engine.max_assignments == 99
    assert loaded.analysis.z3_confirm is True
    assert loaded.scan.exclude == ["vendor/**"]
    assert loaded.scan.include == config.scan.include


def test_type_errors_name_the_key(tmp_path):
    path = tmp_path / "bad.yml"
    path.write_text("engine:\n  strict: 'false'\n")
    with pytest.raises(ConfigError, match="engine.strict"):
        ConstCondConfig.load_file(path)
