#!/usr/bin/env python3
"""
03_hash_validation.py - File integrity verification with SHA256

Demonstrates:
- Real-world workflow: checksum -> download -> validate
- FileValidator raising HashMismatchError on a wrong checksum

Note: Requires internet connection to run
"""
import asyncio
from pathlib import Path

import aiohttp

from splitfetch import DownloadSession, FileValidator, HashConfig, SessionConfig
from splitfetch.domain import HashMismatchError

# Pre-calculated checksum for proof.ovh.net's 1Mb.dat
CHECKSUM = "sha256:788d1a44b1633c8594def083d1b650e4842ea3e38d88c90228e7d581c6425c68"


async def main() -> None:
    config = SessionConfig(
        url="https://proof.ovh.net/files/1Mb.dat",
        target_path=Path("./downloads/03-hash-1Mb.dat"),
        block_count=4,
    )
    config.target_path.parent.mkdir(parents=True, exist_ok=True)
    session = await DownloadSession.create(config)

    async with aiohttp.ClientSession() as client:
        session.init(client)
        session.start()
        await session.wait()

    validator = FileValidator()

    # Correct hash -> validates
    digest = await validator.validate(
        config.target_path, HashConfig.from_checksum_string(CHECKSUM)
    )
    print(f"✓ sha256 matches: {digest[:16]}...")

    # Intentionally wrong hash -> mismatch
    try:
        await validator.validate(
            config.target_path,
            HashConfig(algorithm="sha256", expected_hash="0" * 64),
        )
    except HashMismatchError as e:
        print(f"✗ Expected failure: {e}")


if __name__ == "__main__":
    asyncio.run(main())
