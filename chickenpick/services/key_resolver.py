"""
Подбор кандидатов ключей картинки при отображении
"""
import re
import unicodedata
from typing import List, Optional

from chickenpick.brands import BrandRecord
from chickenpick.services.key_derivation import (
    LOGO_PREFIX,
    MENU_IMAGE_EXT,
    derive_key_stem,
    normalize_base_name,
)

CHICKEN_KR = "치킨"
LOGO_EXT = ".svg"

_WHITESPACE_RE = re.compile(r"\s+")
# Оставляем только латиницу, цифры и слоги хангыля
_NON_KEY_CHARS_RE = re.compile(r"[^A-Za-z0-9가-힣]")


def _strip_brand_prefix(identifier: str, brand_id: str) -> Optional[str]:
    """
    Убирает префикс бренда вида "bbq" / "bbq_" (без учёта регистра).
    Срабатывает только если после slug идёт "_" или конец строки:
    "bbq_treat" → "treat", "bbqtreat" → None.
    """
    if not brand_id:
        return None
    match = re.match(rf"{re.escape(brand_id)}(?:_|$)", identifier, re.IGNORECASE)
    if not match:
        return None
    return identifier[match.end():]


def menu_candidate_stems(identifier: str, brand_id: Optional[str] = None) -> List[str]:
    """
    Возвращает упорядоченный список хешей-кандидатов (без расширения) для фото меню.

    Идентификатор в таблице может отличаться от имени загруженного файла
    (пробелы, пунктуация, префикс бренда, слово "치킨"), поэтому пробуем варианты
    от самого вероятного к менее вероятному. Дубликаты по хешу схлопываются.
    """
    clean_id = unicodedata.normalize("NFC", (identifier or "").strip())
    variants = [
        clean_id,
        _WHITESPACE_RE.sub("", clean_id),
        _NON_KEY_CHARS_RE.sub("", clean_id),
    ]

    if CHICKEN_KR in clean_id:
        no_chicken = clean_id.replace(CHICKEN_KR, "", 1).strip()
        variants.append(no_chicken)
        variants.append(no_chicken.replace("_", ""))

    no_brand = _strip_brand_prefix(clean_id, brand_id or "")
    if no_brand is not None:
        variants.append(no_brand)
        variants.append(no_brand.replace(CHICKEN_KR, "", 1))

    stems: List[str] = []
    for variant in variants:
        stem = derive_key_stem(variant)
        if stem not in stems:
            stems.append(stem)
    return stems


def brand_candidate_keys(brand_slug: str, brand_korean_name: Optional[str] = None) -> List[str]:
    """
    Кандидаты логотипа: сначала латинский slug (оператор загрузил bbq.svg),
    затем хеш корейского названия (оператор загрузил 비비큐.svg).
    """
    keys = [f"{LOGO_PREFIX}{brand_slug}{LOGO_EXT}"]
    if brand_korean_name:
        clean_name = normalize_base_name(brand_korean_name)
        keys.append(f"{LOGO_PREFIX}{derive_key_stem(clean_name)}{LOGO_EXT}")
    return keys


def menu_candidate_urls(storage, identifier: str, brand_id: Optional[str] = None, extension: str = MENU_IMAGE_EXT) -> List[str]:
    return [storage.public_url(f"{stem}{extension}") for stem in menu_candidate_stems(identifier, brand_id)]


def brand_candidate_urls(storage, brand: BrandRecord) -> List[str]:
    return [storage.public_url(key) for key in brand_candidate_keys(brand.id, brand.korean_name)]
