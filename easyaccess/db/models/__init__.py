from easyaccess.db.models.file import File, FileImage

__all__ = [
    "File",
    "FileImage"
]
