"""Хеширование паролей файлов.

Схема ``legacy`` - это скользящий строковый хеш с множителем 31, который
приложение хранит с самого начала. Он быстрый и легко подбирается, то есть
НЕ является криптографическим. Схема сохранена, чтобы ранее записанные
дайджесты продолжали проходить проверку.

Схема ``bcrypt`` - осознанное улучшение безопасности, включается настройкой
PASSWORD_SCHEME. Соль хранится внутри строки хеша. Проверка понимает оба
формата, поэтому смена схемы не блокирует существующие файлы.
"""
from passlib.context import CryptContext

LEGACY_SCHEME = "legacy"
BCRYPT_SCHEME = "bcrypt"

# Контекст для хеширования паролей
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def digest(plaintext: str) -> str:
    """Детерминированный legacy-дайджест пароля в шестнадцатеричном виде"""
    value = 0
    raw = plaintext.encode("utf-16-le", "surrogatepass")
    for i in range(0, len(raw), 2):
        code_unit = raw[i] | (raw[i + 1] << 8)
        value = ((value << 5) - value + code_unit) & 0xFFFFFFFF

    # Обратно в знаковое 32-битное целое
    if value >= 0x80000000:
        value -= 0x100000000
    return format(value, "x")


def is_bcrypt_hash(stored: str) -> bool:
    return pwd_context.identify(stored, required=False) == "bcrypt"


def get_password_hash(password: str, scheme: str = LEGACY_SCHEME) -> str:
    """Хеширование пароля выбранной схемой"""
    if scheme == LEGACY_SCHEME:
        return digest(password)
    if scheme == BCRYPT_SCHEME:
        # bcrypt имеет ограничение 72 байта, обрезаем пароль
        return pwd_context.hash(password.encode("utf-8")[:72])
    raise ValueError(f"Unsupported password scheme: {scheme}")


def verify_password(plain_password: str, stored_digest: str) -> bool:
    """Проверка пароля"""
    if is_bcrypt_hash(stored_digest):
        return pwd_context.verify(plain_password.encode("utf-8")[:72], stored_digest)
    return digest(plain_password) == stored_digest
