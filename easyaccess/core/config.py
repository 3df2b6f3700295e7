from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    storage_backend: Literal["sql", "local"] = "sql"

    database_url: str = "sqlite+aiosqlite:///./easyaccess.db"
    sql_echo: bool = False

    # Пустой путь - локальное хранилище только в памяти
    local_store_path: str = "./easyaccess-files.json"

    password_scheme: Literal["legacy", "bcrypt"] = "legacy"

    min_name_length: int = 3
    min_password_length: int = 6
    max_image_bytes: int = 5 * 1024 * 1024

    log_level: str = "INFO"

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
