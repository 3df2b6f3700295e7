import base64
from pathlib import Path

import pytest

from easyaccess.core.config import Settings
from easyaccess.core.db import create_engine, create_session_factory, init_models
from easyaccess.db.repositories import LocalFileRepository, SqlFileRepository
from easyaccess.domains.files.services import FileService

MEMORY_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


def make_image(size: int = 16, mime: str = "image/png") -> str:
    """Helper to build a data URI with `size` decoded bytes."""
    payload = base64.b64encode(b"\x89" * size).decode("ascii")
    return f"data:{mime};base64,{payload}"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        storage_backend="local",
        local_store_path="",
        password_scheme="legacy",
        max_image_bytes=1024,
    )


@pytest.fixture
def store_path(tmp_path: Path) -> Path:
    return tmp_path / "easyaccess-files.json"


@pytest.fixture
async def sql_repository():
    engine = create_engine(MEMORY_DATABASE_URL)
    await init_models(engine)
    session_factory = create_session_factory(engine)
    async with session_factory() as session:
        yield SqlFileRepository(session)
    await engine.dispose()


@pytest.fixture(params=["local", "sql"])
async def repository(request, store_path: Path):
    """Both storage backends behind the same contract."""
    if request.param == "local":
        yield LocalFileRepository(store_path)
        return

    engine = create_engine(MEMORY_DATABASE_URL)
    await init_models(engine)
    session_factory = create_session_factory(engine)
    async with session_factory() as session:
        yield SqlFileRepository(session)
    await engine.dispose()


@pytest.fixture
def service(repository, settings: Settings) -> FileService:
    return FileService(repository, settings)
