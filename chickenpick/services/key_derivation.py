"""
Сервис для получения ключей объектов хранилища из человекочитаемых идентификаторов
"""
import re
import unicodedata
from typing import Tuple

FNV_OFFSET_BASIS = 0x811C9DC5
FNV_PRIME = 0x01000193
MASK_32 = 0xFFFFFFFF

MENU_IMAGE_EXT = ".webp"
LOGO_PREFIX = "brand_"

_LEADING_JUNK_RE = re.compile(r"^[\s\ufeff]+")
_TRAILING_JUNK_RE = re.compile(r"[,\s\ufeff]+$")
_ASCII_NAME_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


def normalize_base_name(raw: str) -> str:
    """
    Нормализует идентификатор перед хешированием.
    Убирает пробелы (и BOM) по краям, хвостовые запятые и приводит Unicode к NFC.

    Примеры:
    - "  양념치킨, " → "양념치킨"
    - "황금올리브치킨,," → "황금올리브치킨"
    - разложенный (NFD) хангыль → составной (NFC)
    """
    if not raw:
        return ""
    base = _TRAILING_JUNK_RE.sub("", _LEADING_JUNK_RE.sub("", raw))
    return unicodedata.normalize("NFC", base)


def _utf8(text: str) -> bytes:
    try:
        return text.encode("utf-8")
    except UnicodeEncodeError:
        # одиночные суррогаты заменяются на U+FFFD, как в браузерном TextEncoder
        return text.encode("utf-16-le", "surrogatepass").decode("utf-16-le", "replace").encode("utf-8")


def fnv1a32(data: bytes) -> int:
    h = FNV_OFFSET_BASIS
    for b in data:
        h ^= b
        h = (h * FNV_PRIME) & MASK_32
    return h


def fnv1a32x2_hex(text: str) -> str:
    """
    Два прохода FNV-1a по UTF-8 строки: второй с добавленным NUL-байтом.
    Итог — 16 hex-символов (два 32-битных хеша подряд).
    """
    data = _utf8(text)
    h1 = fnv1a32(data)
    h2 = fnv1a32(data + b"\x00")
    return f"{h1:08x}{h2:08x}"


def derive_key_stem(raw: str) -> str:
    """Ключ без расширения: хеш нормализованного идентификатора"""
    return fnv1a32x2_hex(normalize_base_name(raw))


def derive_key(raw: str) -> str:
    """Ключ фото меню в хранилище (всегда .webp)"""
    return f"{derive_key_stem(raw)}{MENU_IMAGE_EXT}"


def split_filename(filename: str) -> Tuple[str, str]:
    """Делит имя файла по последней точке: ("양념치킨, ", ".jpg")"""
    name = filename or ""
    dot = name.rfind(".")
    if dot <= 0:
        return name, ""
    return name[:dot], name[dot:]


def derive_logo_key(filename: str) -> str:
    """
    Ключ логотипа бренда.

    Латинское имя файла сохраняется как есть, чтобы bbq.svg находился по slug бренда
    без хеширования; всё остальное (хангыль, спецсимволы) хешируется.
    - "bbq.svg" → "brand_bbq.svg"
    - "교촌.SVG" → "brand_<hash(교촌)>.svg"
    """
    stem, ext = split_filename(filename)
    ext = ext.lower()
    if _ASCII_NAME_RE.match(stem):
        return f"{LOGO_PREFIX}{stem}{ext}"
    return f"{LOGO_PREFIX}{derive_key_stem(stem)}{ext}"
