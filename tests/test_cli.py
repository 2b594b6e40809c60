"""Tests for the fluent-introspect command line."""

import json
from pathlib import Path

import pytest

from fluent_introspect.cli import main
from fluent_introspect.config import CONFIG_FILENAMES


@pytest.fixture
def wide_console(monkeypatch):
    """Keep rich from wrapping table cells."""
    monkeypatch.setenv("COLUMNS", "200")


def run_json(capsys, argv):
    assert main(argv + ["--format", "json"]) == 0
    return json.loads(capsys.readouterr().out)


class TestCLIMain:
    """Tests for the main CLI entry point."""

    def test_no_command_shows_help(self, capsys):
        assert main([]) == 0
        captured = capsys.readouterr()
        assert "usage:" in captured.out.lower()
        assert "classes" in captured.out

    def test_version_flag(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert "fluent-introspect 0.1.0" in capsys.readouterr().out

    def test_unknown_command(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["frobnicate"])
        assert exc_info.value.code == 2


class TestClassesCommand:
    """Tests for the classes command."""

    def test_json_format(self, isolated_config: Path, capsys):
        rows = run_json(capsys, ["classes", "sample_app", "--name", "sample_app.repositories.*"])
        assert sorted(row["class"] for row in rows) == [
            "sample_app.repositories.BaseRepository",
            "sample_app.repositories.PostRepository",
            "sample_app.repositories.UserRepository",
        ]

    def test_implements_concrete(self, isolated_config: Path, capsys):
        rows = run_json(
            capsys,
            ["classes", "sample_app", "--implements", "sample_app.contracts.Repository", "--concrete"],
        )
        by_name = {row["class"]: row for row in rows}
        assert set(by_name) == {
            "sample_app.repositories.PostRepository",
            "sample_app.repositories.UserRepository",
        }
        user = by_name["sample_app.repositories.UserRepository"]
        assert user["parent"] == "sample_app.repositories.BaseRepository"
        assert user["traits"] == ["sample_app.mixins.AuditMixin", "sample_app.mixins.TimestampsMixin"]
        assert user["abstract"] is False

    def test_uses_and_abstract(self, isolated_config: Path, capsys):
        rows = run_json(capsys, ["classes", "sample_app", "--abstract", "--extends", "sample_app.contracts.Repository"])
        assert [row["class"] for row in rows] == ["sample_app.repositories.BaseRepository"]

        rows = run_json(capsys, ["classes", "sample_app", "--uses", "sample_app.mixins.SoftDeletesMixin"])
        assert [row["class"] for row in rows] == ["sample_app.repositories.PostRepository"]

    def test_table_format(self, isolated_config: Path, capsys, wide_console):
        assert main(["classes", "sample_app.controllers", "--name", "*Controller"]) == 0
        assert "3 match(es)" in capsys.readouterr().out

    def test_no_matches(self, isolated_config: Path, capsys):
        assert main(["classes", "sample_app", "--name", "*Nothing"]) == 0
        assert "No matches" in capsys.readouterr().out

    def test_modules_from_config(self, isolated_config: Path, capsys):
        (isolated_config / CONFIG_FILENAMES[0]).write_text(
            '[defaults]\nformat = "json"\n\n[discovery]\nmodules = ["sample_app.enums"]\n'
        )
        assert main(["classes"]) == 0
        rows = json.loads(capsys.readouterr().out)
        assert sorted(row["class"] for row in rows) == [
            "sample_app.enums.Priority",
            "sample_app.enums.Status",
            "sample_app.enums.Suit",
        ]

    def test_no_modules(self, isolated_config: Path, capsys):
        assert main(["classes"]) == 1
        assert "no modules given" in capsys.readouterr().err

    def test_unimportable_module(self, isolated_config: Path, capsys):
        assert main(["classes", "no_such_package_for_tests"]) == 1
        assert "could not import" in capsys.readouterr().err

    def test_invalid_config_reported(self, isolated_config: Path, capsys):
        (isolated_config / CONFIG_FILENAMES[0]).write_text('[defaults]\nformat = "xml"\n')
        assert main(["classes", "sample_app"]) == 1
        assert "Unknown output format" in capsys.readouterr().err


class TestInspectCommands:
    """Tests for the class and method commands."""

    def test_class_json(self, isolated_config: Path, capsys):
        data = run_json(capsys, ["class", "sample_app.repositories.UserRepository"])
        assert data["parent"] == "sample_app.repositories.BaseRepository"
        assert data["constructor_parameters"][0]["name"] == "connection"

    def test_class_table(self, isolated_config: Path, capsys, wide_console):
        assert main(["class", "sample_app.repositories.UserRepository"]) == 0
        out = capsys.readouterr().out
        assert "Constructor parameters" in out
        assert "connection" in out

    def test_class_not_found(self, isolated_config: Path, capsys):
        assert main(["class", "sample_app.repositories.Missing"]) == 1
        assert "Class not found" in capsys.readouterr().err

    def test_method_json(self, isolated_config: Path, capsys):
        data = run_json(capsys, ["method", "sample_app.repositories.UserRepository", "find"])
        assert [p["name"] for p in data["parameters"]] == ["key", "with_trashed"]
        assert data["return_type"] == "?dict"
        assert data["docstring"]["description"] == "Find a record by key."

    def test_method_table(self, isolated_config: Path, capsys, wide_console):
        assert main(["method", "sample_app.repositories.UserRepository", "find"]) == 0
        assert "with_trashed" in capsys.readouterr().out

    def test_method_not_found(self, isolated_config: Path, capsys):
        assert main(["method", "sample_app.repositories.UserRepository", "missing"]) == 1
        assert "Method not found" in capsys.readouterr().err


class TestJobsCommand:
    """Tests for the jobs command."""

    def test_queue_json(self, isolated_config: Path, capsys):
        rows = run_json(capsys, ["jobs", "sample_app", "--queue", "emails"])
        assert [row["class"] for row in rows] == ["sample_app.jobs.SendWelcomeEmail"]
        assert rows[0]["connection"] == "redis"
        assert rows[0]["backoff"] == [10, 30]

    def test_marker_only_unique(self, isolated_config: Path, capsys):
        rows = run_json(capsys, ["jobs", "sample_app", "--marker-only", "--unique"])
        assert rows[0]["class"] == "sample_app.jobs.ProcessPodcast"
        assert rows[0]["middleware"] == ["rate_limited"]
        assert len(rows) == 1

    def test_heuristic_from_config(self, isolated_config: Path, capsys):
        (isolated_config / CONFIG_FILENAMES[0]).write_text(
            "[discovery]\njob_suffixes = []\njob_module_segments = []\n"
        )
        rows = run_json(capsys, ["jobs", "sample_app"])
        assert sorted(row["class"] for row in rows) == [
            "sample_app.jobs.ProcessPodcast",
            "sample_app.jobs.SendWelcomeEmail",
            "sample_app.services.DynamicQueueJob",
        ]

    def test_no_modules(self, isolated_config: Path, capsys):
        assert main(["jobs"]) == 1
        assert "no modules given" in capsys.readouterr().err


class TestViewsCommand:
    """Tests for the views command."""

    def test_json(self, isolated_config: Path, templates_dir: Path, capsys):
        rows = run_json(capsys, ["views", str(templates_dir), "--extends", "layouts.app"])
        assert rows == [
            {"view": "home", "extends": "layouts.app", "includes": ["partials.nav", "partials.footer"]},
            {"view": "users.index", "extends": "layouts.app", "includes": ["partials.nav"]},
        ]

    def test_namespace_option(self, isolated_config: Path, templates_dir: Path, capsys):
        rows = run_json(
            capsys,
            ["views", "--namespace", f"layouts={templates_dir / 'layouts'}", "--name", "layouts::*"],
        )
        assert [row["view"] for row in rows] == ["layouts::app"]

    def test_paths_from_config(self, isolated_config: Path, templates_dir: Path, capsys):
        (isolated_config / CONFIG_FILENAMES[0]).write_text(f'[views]\npaths = ["{templates_dir}"]\n')
        rows = run_json(capsys, ["views", "--uses", "partials.footer"])
        assert [row["view"] for row in rows] == ["home"]

    def test_bad_namespace(self, isolated_config: Path, capsys):
        assert main(["views", "--namespace", "mail"]) == 1
        assert "expected NAME=PATH" in capsys.readouterr().err

    def test_no_paths(self, isolated_config: Path, capsys):
        assert main(["views"]) == 1
        assert "no template paths" in capsys.readouterr().err


class TestConfigCommand:
    """Tests for the config command."""

    def test_show_defaults(self, isolated_config: Path, capsys):
        assert main(["config"]) == 0
        out = capsys.readouterr().out
        assert "[defaults]" in out
        assert 'format = "table"  # from: default' in out
        assert "job_suffixes = [\"Job\"]" in out

    def test_show_sources(self, isolated_config: Path, capsys):
        (isolated_config / CONFIG_FILENAMES[0]).write_text('[defaults]\nformat = "json"\n')
        assert main(["config", "--show"]) == 0
        assert 'format = "json"  # from: .fluent-introspect.toml' in capsys.readouterr().out

    def test_init_creates_template(self, isolated_config: Path, capsys):
        assert main(["config", "--init"]) == 0
        target = isolated_config / CONFIG_FILENAMES[0]
        assert target.is_file()
        assert "[discovery]" in target.read_text()

        assert main(["config", "--init"]) == 1
        assert "already exists" in capsys.readouterr().err

    def test_init_user(self, isolated_config: Path, capsys):
        from fluent_introspect import config as config_module

        assert main(["config", "--init", "--user"]) == 0
        assert config_module.USER_CONFIG_PATH.is_file()

    def test_paths(self, isolated_config: Path, capsys):
        assert main(["config", "--paths"]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert lines[0].startswith("user ") and lines[0].endswith("(not found)")
        assert lines[1] == "project  .fluent-introspect.toml or fluent-introspect.toml  (not found)"

    def test_paths_found(self, isolated_config: Path, capsys):
        (isolated_config / CONFIG_FILENAMES[0]).write_text("")
        assert main(["config", "--paths"]) == 0
        assert "(loaded)" in capsys.readouterr().out.splitlines()[1]

    def test_get(self, isolated_config: Path, capsys):
        assert main(["config", "get", "defaults.format"]) == 0
        assert capsys.readouterr().out.strip() == "table"

        assert main(["config", "get", "discovery.job_suffixes"]) == 0
        assert capsys.readouterr().out.strip() == '["Job"]'

    @pytest.mark.parametrize(
        "argv,message",
        [
            (["config", "get"], "requires a key"),
            (["config", "get", "format"], "Invalid key format"),
            (["config", "get", "output.format"], "Unknown config section"),
            (["config", "get", "defaults.colour"], "Unknown key"),
        ],
    )
    def test_get_errors(self, isolated_config: Path, capsys, argv, message):
        assert main(argv) == 1
        assert message in capsys.readouterr().err

    def test_invalid_config_reported(self, isolated_config: Path, capsys):
        (isolated_config / CONFIG_FILENAMES[0]).write_text("[defaults\n")
        assert main(["config", "--show"]) == 1
        assert "Invalid TOML" in capsys.readouterr().err
