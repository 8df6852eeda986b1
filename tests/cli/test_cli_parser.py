"""
Unit tests for the CLI argument parser and dispatcher.
"""

import logging
from pathlib import Path

import pytest
from unittest.mock import Mock, patch

from pyembedkit.cli.parser import CLI, main


@pytest.fixture(autouse=True)
def restore_root_logger():
    """CLI.run reconfigures the root logger; undo that after each test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


class TestParser:
    def test_install_arguments(self):
        args = CLI().parse_args(
            [
                "--verbose",
                "--config",
                "ci.yaml",
                "install",
                "3.14.0",
                "--tool-name",
                "python-embedded-nightly",
                "--cache-dir",
                "/opt/cache",
                "--url-template",
                "https://mirror/{version}/{arch}.zip",
                "--timeout",
                "60",
            ]
        )

        assert args.command == "install"
        assert args.verbose is True
        assert args.config == Path("ci.yaml")
        assert args.python_version == "3.14.0"
        assert args.tool_name == "python-embedded-nightly"
        assert args.cache_dir == Path("/opt/cache")
        assert args.url_template == "https://mirror/{version}/{arch}.zip"
        assert args.timeout == 60

    def test_install_defaults(self):
        args = CLI().parse_args(["install"])

        assert args.python_version is None
        assert args.tool_name is None
        assert args.cache_dir is None
        assert args.url_template is None
        assert args.timeout is None
        assert args.config is None

    def test_versions_arguments(self):
        args = CLI().parse_args(["versions", "--cache-dir", "/opt/cache"])

        assert args.command == "versions"
        assert args.cache_dir == Path("/opt/cache")

    def test_version_flag(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            CLI().parse_args(["--version"])

        assert exc_info.value.code == 0
        assert "pyembedkit" in capsys.readouterr().out

    def test_unknown_command(self):
        with pytest.raises(SystemExit):
            CLI().parse_args(["frobnicate"])


class TestRun:
    def test_no_command_prints_help(self, capsys):
        assert CLI().run([]) == 1
        assert "usage" in capsys.readouterr().out.lower()

    def test_dispatches_to_command_module(self):
        module = Mock()
        module.run.return_value = 0

        with patch("importlib.import_module", return_value=module) as mock_import:
            assert CLI().run(["install", "3.14.0"]) == 0

        mock_import.assert_called_once_with("pyembedkit.cli.commands.install")
        assert module.run.call_args[0][0].python_version == "3.14.0"

    def test_keyboard_interrupt(self):
        module = Mock()
        module.run.side_effect = KeyboardInterrupt

        with patch("importlib.import_module", return_value=module):
            assert CLI().run(["versions"]) == 130

    def test_unexpected_error(self, caplog):
        module = Mock()
        module.run.side_effect = RuntimeError("boom")

        # Keep caplog's handler on the root logger
        with patch.object(CLI, "_configure_logging"), patch(
            "importlib.import_module", return_value=module
        ):
            assert CLI().run(["versions"]) == 1

        assert "boom" in caplog.text

    def test_main_exits_with_code(self):
        with patch.object(CLI, "run", return_value=3):
            with pytest.raises(SystemExit) as exc_info:
                main()

        assert exc_info.value.code == 3


class TestConfigureLogging:
    @pytest.mark.parametrize(
        "flags,level",
        [
            (["--verbose"], logging.DEBUG),
            (["--quiet"], logging.ERROR),
            ([], logging.INFO),
        ],
    )
    def test_levels(self, flags, level):
        cli = CLI()
        cli._configure_logging(cli.parse_args(flags + ["versions"]))

        assert logging.getLogger().level == level
