"""CLI application factory."""

from typing import Optional

import typer

from ..app import create_app
from ..config.settings import LogLevel, Settings, build_settings
from .commands.download import download
from .state import CLIState


def create_cli_app(
    settings: Settings | None = None,
    state: CLIState | None = None,
) -> typer.Typer:
    """Create CLI application with optional settings or state override.

    Args:
        settings: Optional Settings override for testing
        state: Optional fully built CLIState, e.g. with an injected
            session factory. Takes precedence over settings.

    Returns:
        Configured Typer application with commands registered
    """
    app = typer.Typer(
        name="splitfetch",
        help="splitfetch - resumable parallel-chunked HTTP downloads",
        no_args_is_help=True,
    )

    @app.callback()
    def setup(
        ctx: typer.Context,
        blocks: Optional[int] = typer.Option(
            None,
            "--blocks",
            "-b",
            help="Number of slices downloaded concurrently",
            min=1,
        ),
        buffer_size: Optional[int] = typer.Option(
            None,
            "--buffer-size",
            help="Bytes read from the network per write",
            min=1,
        ),
        timeout: Optional[float] = typer.Option(
            None,
            "--timeout",
            "-t",
            help="Total timeout per slice request in seconds",
            min=0.001,
        ),
        verbose: bool = typer.Option(
            False,
            "--verbose",
            "-v",
            help="Enable verbose output (DEBUG logging)",
        ),
    ) -> None:
        """Global options available to all commands."""
        if state is not None:
            resolved_state = state
        else:
            resolved_settings = settings or build_settings(
                block_count=blocks,
                buffer_size=buffer_size,
                timeout=timeout,
                log_level=LogLevel.DEBUG if verbose else None,
            )
            resolved_state = CLIState(resolved_settings)

        create_app(resolved_state.settings)
        ctx.obj = resolved_state

    app.command()(download)
    return app
