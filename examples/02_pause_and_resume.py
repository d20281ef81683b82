#!/usr/bin/env python3
"""
02_pause_and_resume.py - Pausing a download and resuming it

Demonstrates:
- Polling download_size / progress while slices are in flight
- pause() cancelling every slice at once (non-blocking)
- start() resuming each slice from the bytes already on disk

Note: Requires internet connection to run
"""
import asyncio
from pathlib import Path

import aiohttp

from splitfetch import DownloadSession, SessionConfig


async def show_progress(session: DownloadSession, until: float) -> None:
    """Print progress until the given fraction is reached."""
    while session.is_downloading and session.progress < until:
        print(f"  {session.progress:6.1%}  ({session.download_size} bytes)")
        await asyncio.sleep(0.2)


async def main() -> None:
    config = SessionConfig(
        url="https://proof.ovh.net/files/100Mb.dat",
        target_path=Path("./downloads/02-pause-100Mb.dat"),
        block_count=16,
        buffer_size=64 * 1024,
    )
    config.target_path.parent.mkdir(parents=True, exist_ok=True)
    session = await DownloadSession.create(config)

    async with aiohttp.ClientSession() as client:
        session.init(client)

        print("Downloading until 30%...")
        session.start()
        await show_progress(session, until=0.3)

        session.pause()
        await session.wait()
        print(f"Paused ({session.state}) at {session.progress:.1%}")

        unfinished = [task for task in session.tasks if not task.is_complete]
        print(f"{len(unfinished)} of {len(session.tasks)} slices still incomplete")

        await asyncio.sleep(1)

        print("Resuming...")
        session.start()
        await show_progress(session, until=1.0)
        await session.wait()

    print(f"Download {session.state}: {session.download_size} bytes")


if __name__ == "__main__":
    asyncio.run(main())
