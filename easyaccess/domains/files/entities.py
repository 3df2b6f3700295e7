import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import List, Optional


def utcnow() -> datetime:
    """Текущее время UTC без tzinfo"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


@dataclass
class FileContent:
    """Содержимое файла: текст и изображения в порядке отображения"""
    text: str = ""
    images: List[str] = field(default_factory=list)


class File:
    """Сущность файла домена Files"""

    def __init__(
        self,
        id: uuid.UUID,
        name: str,
        password_digest: str,
        content: Optional[FileContent] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None
    ):
        self.id = id
        self.name = name
        self.password_digest = password_digest
        self.content = content or FileContent()
        self.created_at = created_at or utcnow()
        self.updated_at = updated_at or self.created_at

    def update_content(self, content: FileContent) -> None:
        """Полная замена содержимого (не слияние)"""
        self.content = FileContent(text=content.text, images=list(content.images))
        self._touch()

    def with_image(self, image: str) -> FileContent:
        """Содержимое с изображением, добавленным в конец"""
        return FileContent(text=self.content.text, images=[*self.content.images, image])

    def without_image(self, index: int) -> FileContent:
        """Содержимое без изображения по индексу"""
        if not 0 <= index < len(self.content.images):
            raise IndexError(index)
        images = list(self.content.images)
        del images[index]
        return FileContent(text=self.content.text, images=images)

    def _touch(self) -> None:
        # updated_at строго растет даже при грубом системном таймере
        now = utcnow()
        if now <= self.updated_at:
            now = self.updated_at + timedelta(microseconds=1)
        self.updated_at = now

    @classmethod
    def create_file(cls, name: str, password_digest: str) -> "File":
        """Создание нового пустого файла"""
        now = utcnow()
        return cls(
            id=uuid.uuid4(),
            name=name,
            password_digest=password_digest,
            content=FileContent(),
            created_at=now,
            updated_at=now
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, File):
            return False
        return self.id == other.id

    def __repr__(self) -> str:
        return f"File(id={self.id}, name={self.name}, images={len(self.content.images)})"
