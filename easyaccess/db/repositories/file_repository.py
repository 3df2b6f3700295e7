import logging
import uuid
from typing import NoReturn, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from easyaccess.db.models.file import File as FileModel, FileImage as FileImageModel
from easyaccess.db.repositories.base import FileRepository
from easyaccess.domains.files.entities import File, FileContent
from easyaccess.domains.files.exceptions import (
    DuplicateNameError, NotFoundError, StoreUnavailableError
)

logger = logging.getLogger(__name__)


class SqlFileRepository(FileRepository):
    """Репозиторий файлов поверх таблиц files и file_images"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, file: File) -> File:
        """Создание нового файла"""
        db_file = FileModel(
            id=file.id,
            name=file.name,
            password_digest=file.password_digest,
            content_text=file.content.text,
            created_at=file.created_at,
            updated_at=file.updated_at,
            images=self._to_images(file.content)
        )

        self.session.add(db_file)
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise DuplicateNameError(file.name) from e
        except SQLAlchemyError as e:
            await self._fail("create file", e)

        return self._to_domain(db_file)

    async def get_by_id(self, file_id: uuid.UUID) -> Optional[File]:
        """Получение файла по id"""
        db_file = await self._get_model(file_id)
        return self._to_domain(db_file) if db_file else None

    async def get_by_name(self, name: str) -> Optional[File]:
        """Получение файла по имени"""
        try:
            result = await self.session.execute(
                select(FileModel).where(FileModel.name == name)
            )
            db_file = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            await self._fail("get file", e)

        return self._to_domain(db_file) if db_file else None

    async def update(self, file: File) -> File:
        """Обновление содержимого файла"""
        db_file = await self._get_model(file.id)

        if db_file is None:
            raise NotFoundError()

        db_file.content_text = file.content.text
        db_file.updated_at = file.updated_at
        # delete-orphan удаляет прежние строки изображений
        db_file.images = self._to_images(file.content)

        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            await self._fail("update file content", e)

        return self._to_domain(db_file)

    async def delete(self, file_id: uuid.UUID) -> bool:
        """Удаление файла"""
        db_file = await self._get_model(file_id)

        if db_file is None:
            return False

        try:
            await self.session.delete(db_file)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self._fail("delete file", e)

        return True

    async def _get_model(self, file_id: uuid.UUID) -> Optional[FileModel]:
        try:
            result = await self.session.execute(
                select(FileModel).where(FileModel.id == file_id)
            )
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            await self._fail("get file", e)

    async def _fail(self, action: str, error: SQLAlchemyError) -> NoReturn:
        await self.session.rollback()
        logger.error(f"Database error, could not {action}: {error}")
        raise StoreUnavailableError(f"Could not {action}") from error

    @staticmethod
    def _to_images(content: FileContent) -> list:
        return [
            FileImageModel(position=position, image_data=image)
            for position, image in enumerate(content.images)
        ]

    def _to_domain(self, db_file: FileModel) -> File:
        """Преобразование модели БД в доменную сущность"""
        return File(
            id=db_file.id,
            name=db_file.name,
            password_digest=db_file.password_digest,
            content=FileContent(
                text=db_file.content_text or "",
                images=[image.image_data for image in db_file.images]
            ),
            created_at=db_file.created_at,
            updated_at=db_file.updated_at
        )
