"""
Пакетная загрузка фото меню и логотипов брендов в хранилище
"""
from dataclasses import dataclass, field
from typing import Iterable, List, Tuple

from chickenpick.config import settings
from chickenpick.logging_config import upload_logger
from chickenpick.services.image_encoding import WEBP_CONTENT_TYPE, ImageEncodingError, encode_webp
from chickenpick.services.key_derivation import derive_key, derive_logo_key, split_filename
from chickenpick.services.storage_client import BlobStore

# (имя файла, содержимое, content-type)
UploadedFile = Tuple[str, bytes, str]

MENU_LABEL = "메뉴"
LOGO_LABEL = "로고"


@dataclass
class BatchResult:
    success: int = 0
    fail: int = 0
    keys: List[str] = field(default_factory=list)
    failures: List[str] = field(default_factory=list)

    def add_success(self, key: str) -> None:
        self.success += 1
        self.keys.append(key)

    def add_failure(self, label: str, filename: str, message: str) -> None:
        self.fail += 1
        self.failures.append(f"[{label}] {filename}: {message}")

    def to_dict(self) -> dict:
        return {"success": self.success, "fail": self.fail, "keys": self.keys, "failures": self.failures}


def upload_menu_images(storage: BlobStore, files: Iterable[UploadedFile], quality: int = None) -> BatchResult:
    """
    Фото меню: имя файла (без расширения) → хеш-ключ .webp, картинка перекодируется в WebP.
    Файлы обрабатываются по одному; ошибка одного файла не прерывает пакет.
    """
    quality = quality or settings.WEBP_QUALITY
    result = BatchResult()
    for filename, data, _content_type in files:
        stem, _ext = split_filename(filename)
        key = derive_key(stem)
        try:
            webp = encode_webp(data, quality=quality)
            storage.put(key, webp, WEBP_CONTENT_TYPE)
        except ImageEncodingError as e:
            upload_logger.warning("Menu image encode failed file=%s: %s", filename, e)
            result.add_failure(MENU_LABEL, filename, f"{ImageEncodingError.reason}: {e}")
            continue
        except Exception as e:
            upload_logger.exception("Menu image upload failed file=%s key=%s: %s", filename, key, e)
            result.add_failure(MENU_LABEL, filename, str(e))
            continue
        upload_logger.info("Menu image uploaded file=%s key=%s", filename, key)
        result.add_success(key)
    return result


def upload_brand_logos(storage: BlobStore, files: Iterable[UploadedFile]) -> BatchResult:
    """Логотипы: латинское имя файла сохраняется как есть, остальное хешируется. Байты не меняются."""
    result = BatchResult()
    for filename, data, content_type in files:
        key = derive_logo_key(filename)
        try:
            if not data:
                raise ValueError("пустой файл")
            storage.put(key, data, content_type or "application/octet-stream")
        except Exception as e:
            upload_logger.exception("Logo upload failed file=%s key=%s: %s", filename, key, e)
            result.add_failure(LOGO_LABEL, filename, str(e))
            continue
        upload_logger.info("Logo uploaded file=%s key=%s", filename, key)
        result.add_success(key)
    return result
