"""Tests for argument parsing and the metapkg entry point."""

import json
from unittest.mock import patch

import pytest

import metapkg
from args import parse_args
from render import CommandResult


class TestArgParsing:
    """Tests for 'metapkg' CLI argument parsing."""

    def test_info(self):
        ns = parse_args(["info", "pypi", "requests"])
        assert ns.action == "info"
        assert (ns.ecosystem, ns.name) == ("pypi", "requests")

    def test_deps_version_optional(self):
        assert parse_args(["deps", "composer", "monolog/monolog"]).version is None
        assert parse_args(["deps", "composer", "monolog/monolog", "3.5.0"]).version == "3.5.0"

    def test_global_options_before_command(self):
        ns = parse_args(["--loglevel", "debug", "--json", "--home", "/tmp/h", "info", "oss", "o/r"])
        assert ns.LOG_LEVEL == "DEBUG"
        assert ns.JSON is True
        assert ns.HOME == "/tmp/h"

    def test_issues_list_defaults(self):
        ns = parse_args(["issues-list", "oss", "o/r"])
        assert ns.STATE == "open"
        assert ns.LIMIT == 30

    def test_issues_list_options(self):
        ns = parse_args(["issues-list", "oss", "o/r", "--state", "closed", "--limit", "5"])
        assert (ns.STATE, ns.LIMIT) == ("closed", 5)

    def test_crawl_tag(self):
        ns = parse_args(["crawl", "tag", "cli", "out.json", "25"])
        assert (ns.crawl_target, ns.topic, ns.output, ns.max_results) == ("tag", "cli", "out.json", 25)
        assert parse_args(["crawl", "tag", "cli", "out.json"]).max_results == 50

    def test_discuss_new(self):
        ns = parse_args(["discuss-new", "oss", "o/r", "Q&A", "Title", "Body"])
        assert (ns.category, ns.title, ns.body) == ("Q&A", "Title", "Body")

    @pytest.mark.parametrize("argv", [["-h"], ["--help"], ["/?"], ["help"]])
    def test_help_aliases(self, argv):
        assert parse_args(argv).action == "help"

    def test_no_command(self):
        assert parse_args([]).action is None

    @pytest.mark.parametrize(
        "argv",
        [
            ["frobnicate"],
            ["info", "pypi"],
            ["search", "pypi", "x"],
            ["issues-show", "oss", "o/r", "abc"],
            ["issues-list", "oss", "o/r", "--state", "merged"],
            ["crawl"],
        ],
    )
    def test_usage_errors_exit_1(self, argv, capsys):
        with pytest.raises(SystemExit) as excinfo:
            parse_args(argv)
        assert excinfo.value.code == 1
        assert "CLI USAGE" in capsys.readouterr().err


@patch("metapkg.configure_logging")
class TestMain:
    """Tests for the main entry point."""

    def test_no_command_prints_help(self, _mock_logging, capsys):
        with pytest.raises(SystemExit) as excinfo:
            metapkg.main([])
        assert excinfo.value.code == 0
        assert "CLI USAGE" in capsys.readouterr().out

    def test_help(self, _mock_logging, capsys):
        with pytest.raises(SystemExit) as excinfo:
            metapkg.main(["--help"])
        assert excinfo.value.code == 0
        assert "ECOSYSTEMS" in capsys.readouterr().out

    def test_unknown_command_exits_1(self, _mock_logging):
        with pytest.raises(SystemExit) as excinfo:
            metapkg.main(["bogus"])
        assert excinfo.value.code == 1

    @patch("metapkg.commands.cmd_info")
    def test_text_output(self, mock_cmd, _mock_logging, capsys):
        mock_cmd.return_value = CommandResult("info", data={"name": "a"}, lines=["Name      : a"])

        with pytest.raises(SystemExit) as excinfo:
            metapkg.main(["info", "pypi", "a"])

        assert excinfo.value.code == 0
        assert capsys.readouterr().out == "Name      : a\n"
        assert mock_cmd.call_args[0][1:] == ("pypi", "a")

    @patch("metapkg.commands.cmd_info")
    def test_json_output_and_copy(self, mock_cmd, _mock_logging, capsys, tmp_path):
        mock_cmd.return_value = CommandResult("info", data={"name": "a"}, lines=["Name      : a"])
        copy = tmp_path / "out.txt"

        with pytest.raises(SystemExit):
            metapkg.main(["--json", "--log-output", str(copy), "info", "pypi", "a"])

        printed = json.loads(capsys.readouterr().out)
        assert printed == {"command": "info", "ok": True, "data": {"name": "a"}, "error": None}
        assert json.loads(copy.read_text(encoding="utf-8")) == printed

    @patch("metapkg.commands.cmd_deps")
    def test_failure_still_exits_0(self, mock_cmd, _mock_logging, caplog):
        mock_cmd.return_value = CommandResult.failure("deps", "Failed to fetch package info.")

        with pytest.raises(SystemExit) as excinfo:
            metapkg.main(["deps", "pypi", "missing"])

        assert excinfo.value.code == 0
        assert "Failed to fetch package info." in caplog.text

    @patch("metapkg.commands.cmd_crawl_tag")
    def test_dispatch_crawl_tag(self, mock_cmd, _mock_logging):
        mock_cmd.return_value = CommandResult("crawl", lines=[])
        with pytest.raises(SystemExit):
            metapkg.main(["crawl", "tag", "cli", "out.json", "7"])
        assert mock_cmd.call_args[0][1:] == ("cli", "out.json", 7)

    @patch("web.server.run_server")
    def test_serve(self, mock_run_server, _mock_logging):
        with pytest.raises(SystemExit) as excinfo:
            metapkg.main(["serve", "--port", "9001"])
        assert excinfo.value.code == 0
        assert mock_run_server.call_args.kwargs == {"host": "127.0.0.1", "port": 9001}
