import uuid
from abc import ABC, abstractmethod
from typing import Optional

from easyaccess.domains.files.entities import File


class FileRepository(ABC):
    """Набор операций, который реализует каждое хранилище файлов.

    Хранилище отвечает только за сохранение: уникальность имени при
    вставке, полную замену содержимого при обновлении и удаление записи
    вместе с изображениями. Ошибки ввода-вывода поднимаются как
    StoreUnavailableError, повторов нет.
    """

    @abstractmethod
    async def create(self, file: File) -> File:
        """Сохранение нового файла; DuplicateNameError при занятом имени"""

    @abstractmethod
    async def get_by_id(self, file_id: uuid.UUID) -> Optional[File]:
        """Получение файла по id"""

    @abstractmethod
    async def get_by_name(self, name: str) -> Optional[File]:
        """Получение файла по точному имени"""

    @abstractmethod
    async def update(self, file: File) -> File:
        """Сохранение содержимого и updated_at; NotFoundError если файла нет"""

    @abstractmethod
    async def delete(self, file_id: uuid.UUID) -> bool:
        """Удаление файла и его изображений"""
