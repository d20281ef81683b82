"""Download command implementation."""

import asyncio
from pathlib import Path
from typing import Optional

import aiofiles
import aiofiles.os
import typer
from pydantic import ValidationError

from ...domain.exceptions import FileValidationError
from ...domain.hash_validation import HashConfig
from ...domain.session_config import SessionConfig
from ...downloads.session import DownloadSession
from ...downloads.validation import FileValidator
from ...infrastructure.http import create_client_session
from ...utils.filename import filename_from_url
from ..output.progress import (
    display_download_complete,
    display_download_error,
    display_download_start,
    display_progress,
    display_validation_failed,
    display_validation_passed,
)
from ..state import CLIState

PROGRESS_INTERVAL = 1.0


def validate_hash(hash_str: str) -> HashConfig:
    """Parse an 'algorithm:hash' option.

    Raises:
        typer.Exit: If hash format is invalid or algorithm is unsupported
    """
    try:
        return HashConfig.from_checksum_string(hash_str)
    except ValueError as e:
        typer.secho(f"✗ Invalid hash: {e}", fg=typer.colors.RED)
        raise typer.Exit(code=1)


def build_config(url: str, target: Path, state: CLIState) -> SessionConfig:
    """Build the session config, exiting on invalid input.

    Raises:
        typer.Exit: If the URL or target is invalid
    """
    try:
        return SessionConfig(
            url=url,
            target_path=target,
            block_count=state.settings.block_count,
            buffer_size=state.settings.buffer_size,
        )
    except ValidationError as e:
        typer.secho(f"✗ Invalid download: {url}", fg=typer.colors.RED)
        typer.secho(f"  {e}", fg=typer.colors.RED)
        raise typer.Exit(code=1)


async def report_progress(session: DownloadSession, interval: float) -> None:
    """Print progress until cancelled."""
    while True:
        await asyncio.sleep(interval)
        display_progress(session)


async def download_file(
    config: SessionConfig,
    hash_config: Optional[HashConfig],
    state: CLIState,
    *,
    show_progress: bool = True,
) -> DownloadSession:
    """Core download logic with injected dependencies.

    Creates the session, makes sure the target exists, runs the download
    to completion and optionally validates the checksum.

    Raises:
        SplitFetchError: On preflight, download or validation failure
    """
    session = await state.create_session(config)
    display_download_start(session)

    await aiofiles.os.makedirs(config.target_path.parent, exist_ok=True)
    # Nothing resumes across CLI runs, so whatever the target held is stale.
    async with aiofiles.open(config.target_path, "wb"):
        pass

    async with create_client_session(timeout=state.settings.timeout) as client:
        session.init(client)
        session.start()
        reporter = (
            asyncio.create_task(report_progress(session, PROGRESS_INTERVAL))
            if show_progress
            else None
        )
        try:
            await session.wait()
        finally:
            if reporter is not None:
                reporter.cancel()

    display_download_complete(session, config.target_path)

    if hash_config is not None:
        await FileValidator().validate(config.target_path, hash_config)
        display_validation_passed(str(hash_config.algorithm))

    return session


def download(
    ctx: typer.Context,
    url: str = typer.Argument(..., help="URL to download"),
    output: Optional[Path] = typer.Option(
        None,
        "-o",
        "--output",
        help="Target file (defaults to the URL's filename in the current directory)",
    ),
    hash_str: Optional[str] = typer.Option(
        None, "--hash", help="Hash for validation (format: algorithm:hash)"
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Do not print progress while downloading"
    ),
) -> None:
    """Download a file in parallel slices using HTTP range requests.

    Examples:
        splitfetch download https://example.com/file.zip
        splitfetch download https://example.com/file.zip -o /tmp/file.zip
        splitfetch --blocks 32 download https://example.com/file.zip
        splitfetch download https://example.com/file.zip --hash sha256:abc123...
    """
    state: CLIState = ctx.obj

    # Validate inputs early at CLI boundary
    hash_config = validate_hash(hash_str) if hash_str else None
    target = output if output else Path(filename_from_url(url))
    config = build_config(url, target, state)

    try:
        asyncio.run(
            download_file(config, hash_config, state, show_progress=not quiet)
        )
    except FileValidationError as e:
        display_validation_failed(e)
        raise typer.Exit(code=1)
    except Exception as e:
        display_download_error(url, e)
        raise typer.Exit(code=1)
