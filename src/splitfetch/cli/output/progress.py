"""Progress display functions for CLI."""

from pathlib import Path

import typer

from ...downloads.session import DownloadSession


def format_bytes(bytes_value: float) -> str:
    """Convert bytes to human-readable format, e.g. "1.5 MB"."""
    for unit in ["B", "KB", "MB", "GB", "TB"]:
        if bytes_value < 1024:
            if unit == "B":
                return f"{int(bytes_value)} {unit}"
            return f"{bytes_value:.1f} {unit}"
        bytes_value /= 1024
    return f"{bytes_value:.1f} PB"


def display_download_start(session: DownloadSession) -> None:
    """Display download started message."""
    typer.echo(
        f"Downloading: {session.url} ({format_bytes(session.content_length)}, "
        f"{session.block_count} slices)"
    )


def display_progress(session: DownloadSession) -> None:
    """Display one progress line."""
    typer.echo(
        f"  {format_bytes(session.download_size)} / "
        f"{format_bytes(session.content_length)} ({session.progress:.1%})"
    )


def display_download_complete(session: DownloadSession, target: Path) -> None:
    """Display completion message."""
    typer.secho(f"✓ Downloaded: {session.url}", fg=typer.colors.GREEN)
    typer.echo(f"  → {target}")


def display_download_error(url: str, error: BaseException) -> None:
    """Display error message."""
    typer.secho(f"✗ Failed: {url}", fg=typer.colors.RED)
    typer.secho(f"  Error: {error}", fg=typer.colors.RED)


def display_validation_passed(algorithm: str) -> None:
    typer.secho(f"✓ {algorithm} validation passed", fg=typer.colors.GREEN)


def display_validation_failed(error: BaseException) -> None:
    typer.secho("✗ Hash validation failed", fg=typer.colors.RED)
    typer.secho(f"  {error}", fg=typer.colors.RED)
