import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional, Union

from easyaccess.core.config import Settings
from easyaccess.core.db import create_engine, create_session_factory, init_models
from easyaccess.db.repositories import FileRepository, LocalFileRepository, SqlFileRepository

logger = logging.getLogger(__name__)


class SqlStorage:
    """Хранилище в реляционной базе, сессия на каждый запрос"""

    name = "sql"

    def __init__(self, database_url: str, echo: bool = False):
        self.engine = create_engine(database_url, echo=echo)
        self.session_factory = create_session_factory(self.engine)

    async def open(self) -> None:
        await init_models(self.engine)
        logger.info(f"SQL storage ready at {self.engine.url.render_as_string(hide_password=True)}")

    async def close(self) -> None:
        await self.engine.dispose()

    @asynccontextmanager
    async def repository(self) -> AsyncIterator[FileRepository]:
        async with self.session_factory() as session:
            try:
                yield SqlFileRepository(session)
            finally:
                await session.close()


class LocalStorage:
    """Встроенное хранилище, один экземпляр на приложение"""

    name = "local"

    def __init__(self, path: Optional[Path] = None):
        self.path = path
        self.store: Optional[LocalFileRepository] = None

    async def open(self) -> None:
        self.store = LocalFileRepository(self.path)
        logger.info(f"Local storage ready at {self.path or 'memory'} with {len(self.store)} files")

    async def close(self) -> None:
        self.store = None

    @asynccontextmanager
    async def repository(self) -> AsyncIterator[FileRepository]:
        if self.store is None:
            raise RuntimeError("Local storage is not open")
        yield self.store


Storage = Union[SqlStorage, LocalStorage]


def create_storage(settings: Settings) -> Storage:
    """Создание хранилища по настройкам"""
    if settings.storage_backend == "local":
        path = Path(settings.local_store_path) if settings.local_store_path else None
        return LocalStorage(path)
    return SqlStorage(settings.database_url, echo=settings.sql_echo)
