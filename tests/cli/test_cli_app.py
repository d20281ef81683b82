"""Tests for CLI application wiring."""

from splitfetch.cli.app import create_cli_app
from splitfetch.cli.state import CLIState
from splitfetch.config.settings import LogLevel


class TestCLIAppCreation:
    """Test create_cli_app and its global options."""

    def test_help_lists_download_command(self, cli_runner):
        result = cli_runner.invoke(create_cli_app(), ["--help"])

        assert result.exit_code == 0
        assert "download" in result.output
        assert "--blocks" in result.output

    def test_no_args_shows_help(self, cli_runner):
        result = cli_runner.invoke(create_cli_app(), [])

        assert "Usage" in result.output

    def test_download_help(self, cli_runner, test_app):
        result = cli_runner.invoke(test_app, ["download", "--help"])

        assert result.exit_code == 0
        assert "--hash" in result.output

    def test_global_options_build_settings(self, cli_runner, mocker):
        captured: list[CLIState] = []
        original_init = CLIState.__init__

        def recording_init(self, settings, session_factory=None):
            original_init(self, settings, session_factory)
            captured.append(self)

        mocker.patch.object(CLIState, "__init__", recording_init)

        cli_runner.invoke(
            create_cli_app(),
            [
                "--blocks",
                "8",
                "--buffer-size",
                "4096",
                "--timeout",
                "30",
                "--verbose",
                "download",
                "--help",
            ],
        )

        assert len(captured) == 1
        settings = captured[0].settings
        assert settings.block_count == 8
        assert settings.buffer_size == 4096
        assert settings.timeout == 30.0
        assert settings.log_level == LogLevel.DEBUG

    def test_rejects_zero_blocks(self, cli_runner):
        result = cli_runner.invoke(
            create_cli_app(), ["--blocks", "0", "download", "https://example.com/a"]
        )

        assert result.exit_code != 0
