import base64
import binascii
import logging
import re
import uuid
from typing import List, Optional, TYPE_CHECKING

from pydantic import ValidationError as PydanticValidationError

from easyaccess.core.config import Settings, settings as default_settings
from easyaccess.core.security import get_password_hash, verify_password
from easyaccess.domains.files.entities import File, FileContent
from easyaccess.domains.files.exceptions import (
    DuplicateNameError, InvalidCredentialsError, NotFoundError, ValidationError
)
from easyaccess.domains.files.schemas import FileAccess, FileCreate

if TYPE_CHECKING:
    from easyaccess.db.repositories.base import FileRepository

logger = logging.getLogger(__name__)

IMAGE_DATA_URI = re.compile(r"^data:image/[\w.+-]+;base64,(?P<payload>.*)$", re.DOTALL)


def validate_image(image: str, max_bytes: int) -> None:
    """Проверка изображения: data URI с типом image/* не больше max_bytes"""
    match = IMAGE_DATA_URI.match(image)
    if not match:
        raise ValidationError("Please select an image file")

    payload = match.group("payload")
    # Размер по длине base64 до декодирования
    if len(payload) * 3 // 4 - payload[-2:].count("=") > max_bytes:
        raise ValidationError(f"Image size exceeds {max_bytes} byte limit")

    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValidationError("Image data is not valid base64") from e

    if len(data) > max_bytes:
        raise ValidationError(f"Image size exceeds {max_bytes} byte limit")


class FileService:
    """Сервис для работы с файлами"""

    def __init__(self, repository: "FileRepository", settings: Settings = default_settings):
        self.repository = repository
        self.settings = settings

    async def create_file(self, name: str, password: str) -> File:
        """Создание нового файла"""
        self._parse(FileCreate, name=name, password=password)

        if len(name) < self.settings.min_name_length:
            raise ValidationError(
                f"File name must be at least {self.settings.min_name_length} characters"
            )
        if len(password) < self.settings.min_password_length:
            raise ValidationError(
                f"Password must be at least {self.settings.min_password_length} characters"
            )

        # Проверка уникальности имени до вставки
        if await self.repository.get_by_name(name) is not None:
            raise DuplicateNameError(name)

        file = File.create_file(
            name=name,
            password_digest=get_password_hash(password, self.settings.password_scheme)
        )

        created_file = await self.repository.create(file)
        logger.info(f"File {created_file.id} created")
        return created_file

    async def authenticate_file(self, name: str, password: str) -> File:
        """Доступ к файлу по имени и паролю"""
        self._parse(FileAccess, name=name, password=password)

        file = await self.repository.get_by_name(name)

        if file is None:
            raise NotFoundError()

        if not verify_password(password, file.password_digest):
            logger.warning(f"Incorrect password for file {file.id}")
            raise InvalidCredentialsError()

        return file

    async def get_file(self, file_id: uuid.UUID) -> Optional[File]:
        """Получение файла по id"""
        return await self.repository.get_by_id(file_id)

    async def get_file_by_name(self, name: str) -> Optional[File]:
        """Получение файла по имени"""
        return await self.repository.get_by_name(name)

    async def update_content(self, file_id: uuid.UUID, text: str, images: List[str]) -> File:
        """Полная замена текста и изображений файла"""
        file = await self._require(file_id)
        file.update_content(FileContent(text=text, images=list(images)))
        return await self.repository.update(file)

    async def add_image(self, file_id: uuid.UUID, image: str) -> File:
        """Добавление изображения в конец списка"""
        validate_image(image, self.settings.max_image_bytes)

        # Чтение-изменение-запись без блокировки, выигрывает последняя запись
        file = await self._require(file_id)
        content = file.with_image(image)
        return await self.update_content(file_id, content.text, content.images)

    async def remove_image(self, file_id: uuid.UUID, index: int) -> File:
        """Удаление изображения по индексу"""
        file = await self._require(file_id)

        try:
            content = file.without_image(index)
        except IndexError:
            raise ValidationError(f"Image index {index} is out of range")

        return await self.update_content(file_id, content.text, content.images)

    async def delete_file(self, file_id: uuid.UUID) -> None:
        """Удаление файла вместе с изображениями"""
        if not await self.repository.delete(file_id):
            raise NotFoundError()

        logger.info(f"File {file_id} deleted")

    async def _require(self, file_id: uuid.UUID) -> File:
        file = await self.repository.get_by_id(file_id)

        if file is None:
            raise NotFoundError()

        return file

    @staticmethod
    def _parse(schema, **data):
        try:
            return schema(**data)
        except PydanticValidationError as e:
            messages = [error["msg"].removeprefix("Value error, ") for error in e.errors()]
            raise ValidationError("; ".join(messages)) from e
