from easyaccess.db.repositories.base import FileRepository
from easyaccess.db.repositories.file_repository import SqlFileRepository
from easyaccess.db.repositories.local_repository import LocalFileRepository

__all__ = [
    "FileRepository",
    "SqlFileRepository",
    "LocalFileRepository"
]
