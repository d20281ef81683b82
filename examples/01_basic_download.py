#!/usr/bin/env python3
"""
01_basic_download.py - Simplest possible parallel download

Demonstrates: DownloadSession.create -> init -> start -> wait
Note: Requires internet connection to run
"""
import asyncio
from pathlib import Path

import aiohttp

from splitfetch import DownloadSession, SessionConfig


async def main() -> None:
    """Download a 10MB file in 8 concurrent slices to ./downloads."""
    print("Starting basic download example...")

    config = SessionConfig(
        url="https://proof.ovh.net/files/10Mb.dat",
        target_path=Path("./downloads/01-basic-10Mb.dat"),
        block_count=8,
        buffer_size=64 * 1024,
    )
    config.target_path.parent.mkdir(parents=True, exist_ok=True)

    # HEAD preflight: checks Accept-Ranges and reads Content-Length
    session = await DownloadSession.create(config)
    print(f"Resource size: {session.content_length} bytes")

    async with aiohttp.ClientSession() as client:
        session.init(client)
        session.start()
        await session.wait()

    print(f"Download {session.state}: {session.download_size} bytes")
    print(f"Saved to {config.target_path}")


if __name__ == "__main__":
    asyncio.run(main())
