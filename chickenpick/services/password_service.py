"""
Пароли для удаления отзывов, постов и комментариев (без учётных записей)
"""
import bcrypt

# bcrypt учитывает только первые 72 байта
_BCRYPT_MAX_BYTES = 72


def _to_bytes(plain_password: str) -> bytes:
    return (plain_password or "").encode('utf-8')[:_BCRYPT_MAX_BYTES]


def hash_password(plain_password: str) -> str:
    """Хеширование пароля с использованием bcrypt"""
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(_to_bytes(plain_password), salt)
    return hashed.decode('utf-8')


def verify_password(plain_password: str, password_hash: str) -> bool:
    """Проверка соответствия пароля хешу"""
    if not password_hash:
        return False
    return bcrypt.checkpw(_to_bytes(plain_password), password_hash.encode('utf-8'))
