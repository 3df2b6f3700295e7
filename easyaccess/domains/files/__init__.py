from easyaccess.domains.files.entities import File, FileContent
from easyaccess.domains.files.exceptions import (
    FileStoreError, ValidationError, DuplicateNameError, NotFoundError,
    InvalidCredentialsError, StoreUnavailableError
)
from easyaccess.domains.files.schemas import (
    FileCredentials, FileCreate, FileAccess, FileContentSchema,
    FileContentUpdate, ImageAdd, FileResponse
)
from easyaccess.domains.files.services import FileService

__all__ = [
    "File", "FileContent",
    "FileStoreError", "ValidationError", "DuplicateNameError", "NotFoundError",
    "InvalidCredentialsError", "StoreUnavailableError",
    "FileCredentials", "FileCreate", "FileAccess", "FileContentSchema",
    "FileContentUpdate", "ImageAdd", "FileResponse",
    "FileService"
]
