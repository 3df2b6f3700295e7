from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from easyaccess.db.base import Base


def create_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """Асинхронный движок"""
    if database_url.startswith("sqlite") and ":memory:" in database_url:
        # in-memory SQLite живет внутри одного соединения, делим его между сессиями
        return create_async_engine(
            database_url,
            echo=echo,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    return create_async_engine(database_url, future=True, echo=echo)


def create_session_factory(engine: AsyncEngine) -> sessionmaker:
    """Фабрика сессий"""
    return sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


async def init_models(engine: AsyncEngine) -> None:
    """Создание таблиц, если их еще нет"""
    # Импорт регистрирует модели в метаданных
    import easyaccess.db.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
