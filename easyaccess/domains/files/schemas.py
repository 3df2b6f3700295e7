from pydantic import BaseModel, Field, field_validator
from typing import List
from datetime import datetime
import uuid


class FileCredentials(BaseModel):
    """Базовая схема имени и пароля файла"""
    name: str = Field(..., max_length=255)
    password: str

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError('File name is required')
        return v

    @field_validator('password')
    @classmethod
    def validate_password(cls, v):
        if not v.strip():
            raise ValueError('Password is required')
        return v


class FileCreate(FileCredentials):
    """Схема для создания файла"""
    pass


class FileAccess(FileCredentials):
    """Схема для доступа к существующему файлу"""
    pass


class FileContentSchema(BaseModel):
    """Содержимое файла"""
    text: str = ""
    images: List[str] = Field(default_factory=list)


class FileContentUpdate(FileContentSchema):
    """Схема для полной замены содержимого"""
    pass


class ImageAdd(BaseModel):
    """Схема для добавления изображения"""
    image: str = Field(..., min_length=1)


class FileResponse(BaseModel):
    """Схема для ответа с данными файла (без дайджеста пароля)"""
    id: uuid.UUID
    name: str
    content: FileContentSchema
    created_at: datetime
    updated_at: datetime
