"""CLI state container."""

import typing as t

from ..config.settings import Settings
from ..domain.session_config import SessionConfig
from ..downloads.preflight import create_session
from ..downloads.session import DownloadSession

SessionFactory = t.Callable[[SessionConfig], t.Awaitable[DownloadSession]]


class CLIState:
    """Application state container for CLI commands.

    Holds Settings and the factory used to build download sessions, so
    tests can inject a session without touching the network.
    """

    def __init__(
        self,
        settings: Settings,
        session_factory: SessionFactory | None = None,
    ) -> None:
        self.settings = settings
        self._session_factory = session_factory

    async def create_session(self, config: SessionConfig) -> DownloadSession:
        if self._session_factory is not None:
            return await self._session_factory(config)
        return await create_session(
            config, durable_writes=self.settings.durable_writes
        )
