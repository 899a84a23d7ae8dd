#!/usr/bin/env python3
"""Tests for the command-line interface."""

import os

import pytest
import yaml

from tagblacklist.cli import CLIError, build_config, main, parse_arguments
from tagblacklist.core.config import ConfigSource
from tagblacklist.core.constants import TAGBLACKLIST_VERSION


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in list(os.environ):
        if key.startswith("TAGBLACKLIST_"):
            monkeypatch.delenv(key)


@pytest.fixture
def store_path(tmp_path):
    return tmp_path / "blacklists.yaml"


@pytest.fixture
def cli(store_path):
    """Run main() against a temporary store."""

    def invoke(*args):
        return main(["--store", str(store_path), *args])

    return invoke


class TestParseArguments:
    """Tests for argument parsing and validation."""

    def test_apply_arguments(self, items_file):
        args = parse_arguments(
            ["apply", "--items", str(items_file), "--ids", "10", "11", "--disable", "0", "-f", "yaml"]
        )

        assert args.command == "apply"
        assert args.ids == ["10", "11"]
        assert args.disable == [0]
        assert args.format == "yaml"

    def test_command_required(self):
        with pytest.raises(SystemExit):
            parse_arguments([])

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            parse_arguments(["--version"])
        assert exc_info.value.code == 0
        assert TAGBLACKLIST_VERSION in capsys.readouterr().out

    def test_missing_items_file(self, tmp_path):
        with pytest.raises(CLIError, match="Items file does not exist"):
            parse_arguments(["apply", "--items", str(tmp_path / "none.yaml")])

    def test_missing_config_file(self, tmp_path):
        with pytest.raises(CLIError, match="Configuration file does not exist"):
            parse_arguments(["--config", str(tmp_path / "none.yaml"), "list"])

    def test_build_config_overrides(self):
        args = parse_arguments(["--store", "x.yaml", "--debug", "list"])
        config = build_config(args)

        assert config.get("tagblacklist.store.path") == "x.yaml"
        assert config.get("tagblacklist.logging.level") == "DEBUG"
        assert config.resolve("tagblacklist.store.path").source is ConfigSource.CLI_ARGS


class TestCommands:
    """Tests for the CLI subcommands."""

    def test_list_seeds_defaults(self, cli, store_path, capsys):
        assert cli("list") == 0

        out = capsys.readouterr().out.splitlines()
        assert out == ["  Safe mode (2 rules)", "  No blacklist (0 rules)"]
        assert store_path.exists()

    def test_list_marks_configured_default(self, cli, tmp_path, capsys):
        config = tmp_path / "config.yaml"
        config.write_text(yaml.safe_dump({"tagblacklist": {"blacklist": {"default": "Safe mode"}}}))

        assert cli("--config", str(config), "list") == 0
        assert "* Safe mode (2 rules)" in capsys.readouterr().out

    def test_set_and_show(self, cli, capsys):
        assert cli("set", "Work", "--text", "artist:someone\\nred_hair AND blue_eyes") == 0
        assert cli("show", "Work") == 0

        out = capsys.readouterr().out
        assert "0. someone" in out
        assert "1. red_hair and blue_eyes  [AND]" in out

    def test_set_from_file(self, cli, tmp_path, capsys):
        text_file = tmp_path / "work.txt"
        text_file.write_text("# work filter\nsolo\n")

        assert cli("set", "Work", "--file", str(text_file)) == 0
        assert cli("show", "Work") == 0
        assert capsys.readouterr().out.strip() == "0. solo"

    def test_show_unknown(self, cli, capsys):
        assert cli("show", "Missing") == 1
        assert "Blacklist not found: Missing" in capsys.readouterr().err

    def test_remove(self, cli, capsys):
        assert cli("remove", "No blacklist") == 0
        assert cli("list") == 0
        assert "No blacklist" not in capsys.readouterr().out

    def test_remove_unknown(self, cli):
        assert cli("remove", "Missing") == 1

    def test_apply_text(self, cli, items_file, capsys):
        assert cli("apply", "--items", str(items_file), "--blacklist", "Safe mode") == 0

        out = capsys.readouterr().out.splitlines()
        assert out[0] == "Blacklist 1/3"
        assert "* Safe mode" in out
        assert "rating:e*  1" in out

    def test_apply_yaml_selected_ids(self, cli, items_file, capsys):
        cli("set", "Solo", "--text", "solo\\nrating:e*")
        capsys.readouterr()

        code = cli(
            "apply", "--items", str(items_file), "-b", "Solo", "--ids", "10", "12", "-f", "yaml"
        )

        assert code == 0
        data = yaml.safe_load(capsys.readouterr().out)
        assert data["blacklist"] == "Solo"
        assert data["total"] == 2
        assert data["hit_ids"] == [10]
        assert data["rules"][1]["hits"] == []

    def test_apply_disable(self, cli, items_file, capsys):
        code = cli(
            "apply", "--items", str(items_file), "-b", "Safe mode", "--disable", "1", "-f", "yaml"
        )

        assert code == 0
        data = yaml.safe_load(capsys.readouterr().out)
        assert data["hit_ids"] == []
        assert data["rules"][1]["disabled"] is True

    def test_apply_disable_out_of_range(self, cli, items_file, capsys):
        assert cli("apply", "--items", str(items_file), "--disable", "7") == 1
        assert "No rule at index 7" in capsys.readouterr().err

    def test_apply_unknown_id(self, cli, items_file, capsys):
        assert cli("apply", "--items", str(items_file), "--ids", "10", "99") == 1
        assert "99" in capsys.readouterr().err

    def test_apply_non_decimal_id(self, cli, items_file, capsys):
        assert cli("apply", "--items", str(items_file), "--ids", "²") == 1
        assert "No content item with id '²'" in capsys.readouterr().err

    def test_removing_everything_reseeds(self, cli, capsys):
        cli("remove", "Safe mode")
        cli("remove", "No blacklist")
        capsys.readouterr()

        assert cli("list") == 0
        assert "Safe mode (2 rules)" in capsys.readouterr().out

    def test_bad_log_level(self, cli, monkeypatch, capsys):
        monkeypatch.setenv("TAGBLACKLIST_LOGGING_LEVEL", "chatty")
        assert cli("list") == 1
        assert "Unknown log level" in capsys.readouterr().err
