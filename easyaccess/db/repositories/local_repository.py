"""Хранилище файлов в одном JSON-документе.

Все записи лежат под одним ключом, документ читается и целиком
проверяется при создании хранилища и перезаписывается после каждой
изменяющей операции. Запись идет во временный файл с атомарной заменой,
а состояние в памяти меняется только после успешной записи, поэтому
неудачная операция не оставляет частичных изменений. Без пути хранилище
живет только в памяти.
"""
import logging
import os
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from easyaccess.db.repositories.base import FileRepository
from easyaccess.domains.files.entities import File, FileContent
from easyaccess.domains.files.exceptions import (
    DuplicateNameError, NotFoundError, StoreUnavailableError
)

logger = logging.getLogger(__name__)

STORAGE_KEY = "easyaccess-files"


class StoredContent(BaseModel):
    """Содержимое записи в JSON-документе"""
    text: str = ""
    images: List[str] = Field(default_factory=list)


class StoredFile(BaseModel):
    """Запись файла в JSON-документе"""
    model_config = ConfigDict(populate_by_name=True)

    id: uuid.UUID
    name: str
    password_digest: str = Field(alias="passwordDigest")
    content: StoredContent = Field(default_factory=StoredContent)
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def require_iso_string(cls, v):
        # Числовые метки времени не принимаются
        if not isinstance(v, (str, datetime)):
            raise ValueError("Timestamp must be an ISO-8601 string")
        return v

    @field_validator("created_at", "updated_at")
    @classmethod
    def to_naive_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is not None:
            return v.astimezone(timezone.utc).replace(tzinfo=None)
        return v


class StoreData(BaseModel):
    """Весь документ хранилища"""
    model_config = ConfigDict(populate_by_name=True)

    files: List[StoredFile] = Field(default_factory=list, alias=STORAGE_KEY)


class LocalFileRepository(FileRepository):
    """Репозиторий файлов во встроенном хранилище ключ-значение"""

    def __init__(self, path: Optional[Path] = None):
        self._path = path
        self._data = self._load()

    def _load(self) -> StoreData:
        if self._path is None or not self._path.exists():
            return StoreData()
        try:
            return StoreData.model_validate_json(self._path.read_text(encoding="utf-8"))
        except (OSError, ValidationError) as e:
            logger.error(f"Could not read file store at {self._path}: {e}")
            raise StoreUnavailableError(f"Could not read file store at {self._path}") from e

    def _commit(self, data: StoreData) -> None:
        if self._path is not None:
            payload = data.model_dump_json(by_alias=True)
            tmp_path = self._path.with_name(self._path.name + ".tmp")
            try:
                self._path.parent.mkdir(parents=True, exist_ok=True)
                tmp_path.write_text(payload, encoding="utf-8")
                os.replace(tmp_path, self._path)
            except OSError as e:
                logger.error(f"Could not write file store at {self._path}: {e}")
                raise StoreUnavailableError(f"Could not write file store at {self._path}") from e

        self._data = data

    def _find(self, file_id: uuid.UUID) -> Optional[StoredFile]:
        for record in self._data.files:
            if record.id == file_id:
                return record
        return None

    async def create(self, file: File) -> File:
        """Создание нового файла"""
        if any(record.name == file.name for record in self._data.files):
            raise DuplicateNameError(file.name)

        record = self._to_record(file)
        self._commit(StoreData(files=[*self._data.files, record]))

        return self._to_domain(record)

    async def get_by_id(self, file_id: uuid.UUID) -> Optional[File]:
        """Получение файла по id"""
        record = self._find(file_id)
        return self._to_domain(record) if record else None

    async def get_by_name(self, name: str) -> Optional[File]:
        """Получение файла по имени"""
        for record in self._data.files:
            if record.name == name:
                return self._to_domain(record)
        return None

    async def update(self, file: File) -> File:
        """Обновление содержимого файла"""
        current = self._find(file.id)
        if current is None:
            raise NotFoundError()

        # Идентичность записи не меняется, сохраняются только содержимое и время
        record = current.model_copy(update={
            "content": StoredContent(text=file.content.text, images=list(file.content.images)),
            "updated_at": file.updated_at,
        })

        files = [record if r.id == file.id else r for r in self._data.files]
        self._commit(StoreData(files=files))

        return self._to_domain(record)

    async def delete(self, file_id: uuid.UUID) -> bool:
        """Удаление файла"""
        if self._find(file_id) is None:
            return False

        self._commit(StoreData(files=[r for r in self._data.files if r.id != file_id]))
        return True

    def __len__(self) -> int:
        return len(self._data.files)

    @staticmethod
    def _to_record(file: File) -> StoredFile:
        return StoredFile(
            id=file.id,
            name=file.name,
            password_digest=file.password_digest,
            content=StoredContent(text=file.content.text, images=list(file.content.images)),
            created_at=file.created_at,
            updated_at=file.updated_at
        )

    @staticmethod
    def _to_domain(record: StoredFile) -> File:
        """Преобразование записи хранилища в доменную сущность"""
        return File(
            id=record.id,
            name=record.name,
            password_digest=record.password_digest,
            content=FileContent(text=record.content.text, images=list(record.content.images)),
            created_at=record.created_at,
            updated_at=record.updated_at
        )
