"""
Tests for the configuration file and the status values.
"""

from pathlib import Path

import pytest

from repo_linter.core import CheckStatus, CheckerConfiguration, ExitCode, config_from_dict, load_config
from repo_linter.errors import ConfigError

from conftest import write


class TestCheckStatus:

    def test_only_red_is_failing(self):
        assert [s for s in CheckStatus if s.is_failing] == [CheckStatus.RED]

    def test_icons(self):
        assert CheckStatus.GREEN.icon == "✅"
        assert CheckStatus.RED.icon == "❌"


def test_exit_codes():
    assert (ExitCode.SUCCESS, ExitCode.TOOL_FAILURE, ExitCode.CHECKS_FAILED) == (0, 1, 100)


class TestConfigFromDict:

    def test_defaults(self):
        config = config_from_dict({})
        assert config.truncate_output is True
        assert config.gitignore_enabled is True
        assert config.cleanup is True
        assert config.jobs == 4
        assert config.checks == []

    def test_full(self):
        config = config_from_dict({
            "truncate_output": False,
            "jobs": 2,
            "clone_directory": "~/clones",
            "trufflehog_path": "/usr/local/bin/trufflehog",
            "forbidden_strings": ["TODO: remove"],
            "checks": [
                {"name": "Secrets check", "allowed_to_fail": True},
                {"name": "README exists"},
            ],
        })
        assert config.truncate_output is False
        assert config.jobs == 2
        assert config.clone_directory == Path("~/clones").expanduser()
        assert config.trufflehog_path == "/usr/local/bin/trufflehog"
        assert config.forbidden_strings == ["TODO: remove"]
        assert config.checks == [
            CheckerConfiguration("Secrets check", allowed_to_fail=True),
            CheckerConfiguration("README exists", allowed_to_fail=False),
        ]

    @pytest.mark.parametrize("data, message", [
        ({"colour": True}, "Unknown configuration keys: colour"),
        ({"jobs": "4"}, "'jobs' must be of type int"),
        ({"jobs": True}, "'jobs' must be of type int"),
        ({"jobs": 0}, "'jobs' must be at least 1"),
        ({"cleanup": "yes"}, "'cleanup' must be of type bool"),
        ({"truncate_head": -1}, "must not be negative"),
        ({"forbidden_strings": "secret"}, "'forbidden_strings' must be a list"),
        ({"forbidden_strings": [""]}, "'forbidden_strings' must be a list"),
        ({"checks": {"name": "x"}}, "'checks' must be a list"),
        ({"checks": [{"allowed_to_fail": True}]}, "a non-empty 'name' is required"),
        ({"checks": [{"name": "x", "allowed": True}]}, "Unknown keys in check entry 'x': allowed"),
        ({"checks": [{"name": "x", "allowed_to_fail": "yes"}]}, "must be true or false"),
        ({"checks": [{"name": "x"}, {"name": "x"}]}, "Duplicate check entry: x"),
    ])
    def test_invalid(self, data, message):
        with pytest.raises(ConfigError, match=message):
            config_from_dict(data)


class TestLoadConfig:

    def test_explicit_file(self, tmp_path):
        path = write(tmp_path / "config.yaml", "jobs: 8\ngitignore_enabled: false\n")
        config = load_config(path)
        assert config.jobs == 8
        assert config.gitignore_enabled is False

    def test_empty_file(self, tmp_path):
        config = load_config(write(tmp_path / "config.yaml", ""))
        assert config.jobs == 4

    def test_default_file_in_cwd(self, tmp_path, monkeypatch):
        write(tmp_path / ".repolinter.yaml", "truncate_output: false\n")
        monkeypatch.chdir(tmp_path)
        assert load_config().truncate_output is False

    def test_no_default_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert load_config().truncate_output is True

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(ConfigError, match="Cannot read configuration file"):
            load_config(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(write(tmp_path / "config.yaml", "jobs: [1\n"))

    def test_not_a_mapping(self, tmp_path):
        with pytest.raises(ConfigError, match="must contain a mapping"):
            load_config(write(tmp_path / "config.yaml", "- a\n- b\n"))
