class FileStoreError(Exception):
    """Базовая ошибка хранилища файлов"""


class ValidationError(FileStoreError):
    """Некорректные входные данные, обнаруженные до обращения к хранилищу"""


class DuplicateNameError(FileStoreError):
    def __init__(self, name: str):
        super().__init__("A file with this name already exists")
        self.name = name


class NotFoundError(FileStoreError):
    def __init__(self, message: str = "File not found"):
        super().__init__(message)


class InvalidCredentialsError(FileStoreError):
    def __init__(self):
        super().__init__("Incorrect password")


class StoreUnavailableError(FileStoreError):
    """Сбой нижележащего хранилища (диск, сеть, база данных)"""
