"""
Unit tests for liveconfig override sources.
"""

import pytest

from liveconfig.core.overrides import (
    ChainedOverrides,
    CommandLineOverrides,
    EnvironmentOverrides,
    MappingOverrides,
    coerce_value,
)


@pytest.mark.parametrize("raw,expected", [
    ("true", True),
    ("False", False),
    ("42", 42),
    ("-3", -3),
    ("2.5", 2.5),
    ("localhost", "localhost"),
    ("1.2.3", "1.2.3"),
])
def test_coerce_value(raw, expected):
    assert coerce_value(raw) == expected


class TestCommandLineOverrides:
    """Test --key value collection."""

    def test_pairs_and_flags(self):
        overrides = CommandLineOverrides(
            ["--db.host", "h", "--debug", "--port", "8080", "positional"]
        )
        assert overrides.all_overrides() == {"db.host": "h", "debug": True, "port": 8080}

    def test_trailing_flag_is_true(self):
        assert CommandLineOverrides(["--verbose"]).all_overrides() == {"verbose": True}

    def test_reads_sys_argv_by_default(self, monkeypatch):
        monkeypatch.setattr("sys.argv", ["prog", "--name", "svc"])
        assert CommandLineOverrides().all_overrides() == {"name": "svc"}

    def test_set_override_is_recorded(self):
        overrides = CommandLineOverrides([])
        overrides.set_override("x", 1)
        assert overrides.all_overrides() == {"x": 1}

    def test_snapshot_is_a_copy(self):
        overrides = MappingOverrides({"x": 1})
        snapshot = overrides.all_overrides()
        snapshot["y"] = 2
        assert overrides.all_overrides() == {"x": 1}


class TestMappingOverrides:

    def test_remove_override(self):
        overrides = MappingOverrides({"x": 1, "y": 2})
        overrides.remove_override("x")
        overrides.remove_override("missing")
        assert overrides.all_overrides() == {"y": 2}


class TestEnvironmentOverrides:
    """Test prefixed environment variable overrides."""

    def test_prefixed_variables_become_paths(self):
        environ = {
            "LIVECONFIG__DB__HOST": "db1",
            "LIVECONFIG__PORT": "9000",
            "LIVECONFIG__": "ignored",
            "PATH": "/usr/bin",
        }
        overrides = EnvironmentOverrides(environ=environ)
        assert overrides.all_overrides() == {"db/host": "db1", "port": 9000}

    def test_environment_is_read_on_every_snapshot(self):
        environ = {}
        overrides = EnvironmentOverrides(prefix="APP__", environ=environ)
        assert overrides.all_overrides() == {}
        environ["APP__MODE"] = "fast"
        assert overrides.all_overrides() == {"mode": "fast"}

    def test_recorded_values_win(self):
        overrides = EnvironmentOverrides(environ={"LIVECONFIG__MODE": "env"})
        overrides.set_override("mode", "set")
        assert overrides.all_overrides()["mode"] == "set"


class TestChainedOverrides:
    """Test merged override sources."""

    def test_later_sources_win(self):
        chained = ChainedOverrides(
            MappingOverrides({"x": 1, "y": 1}),
            MappingOverrides({"y": 2}),
        )
        assert chained.all_overrides() == {"x": 1, "y": 2}

    def test_set_override_wins_over_every_source(self):
        first, second = MappingOverrides(), MappingOverrides({"z": 2})
        chained = ChainedOverrides(first, second)
        chained.set_override("z", 3)

        assert chained.all_overrides() == {"z": 3}
        assert first.all_overrides() == {}
        assert second.all_overrides() == {"z": 2}

    def test_requires_a_source(self):
        with pytest.raises(ValueError):
            ChainedOverrides()
