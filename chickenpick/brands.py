"""
Справочник брендов и тегов
"""
from dataclasses import dataclass
from typing import Dict, List, Optional


@dataclass(frozen=True)
class BrandRecord:
    id: str  # короткий латинский slug, он же префикс brand_<slug>.svg
    name: str
    korean_name: str
    color: str


ALL_BRANDS = "all"

BRANDS: Dict[str, BrandRecord] = {
    "all": BrandRecord("all", "All", "전체", "#111827"),
    "bbq": BrandRecord("bbq", "BBQ", "비비큐", "#A50034"),
    "bhc": BrandRecord("bhc", "BHC", "BHC", "#F58220"),
    "kyochon": BrandRecord("kyochon", "Kyochon", "교촌", "#C0985D"),
    "goobne": BrandRecord("goobne", "Goobne", "굽네", "#D12732"),
    "nene": BrandRecord("nene", "Nene", "네네", "#F6C60D"),
    "norangtongdak": BrandRecord("norangtongdak", "Norang", "노랑통닭", "#FFD200"),
    "mexicana": BrandRecord("mexicana", "Mexicana", "멕시카나", "#CE1F2C"),
    "gcova": BrandRecord("gcova", "Zicoba", "지코바", "#C8161D"),
    "cheogajip": BrandRecord("cheogajip", "Cheogajip", "처갓집", "#E30412"),
    "pelicana": BrandRecord("pelicana", "Pelicana", "페리카나", "#D60018"),
    "puradakchicken": BrandRecord("puradakchicken", "Puradak", "푸라닭", "#000000"),
}

# Бренд по умолчанию для неизвестных slug (плейсхолдер рисуется чёрным блоком)
UNKNOWN_BRAND_COLOR = "#000000"

# Перевод частей курицы (теги меню) на корейский
PART_TO_KR: Dict[str, str] = {
    "Whole": "한마리",
    "Whole chicken": "한마리",
    "Boneless": "순살",
    "Drumsticks": "닭다리",
    "Leg": "다리",
    "Wings": "날개",
    "Wing": "날개",
    "Combo": "콤보",
    "Wings & drumettes": "윙&봉",
    "Wing combo": "윙콤보",
    "Stick": "스틱",
    "Single Menu": "기본",
}

REVIEW_TAGS: List[str] = [
    "👍 Crispy",
    "🔥 Spicy",
    "🍺 Good with Beer",
    "🍚 Good with Rice",
    "🍯 Sweet",
    "🧀 Cheesy",
]


def get_brand(slug: Optional[str]) -> Optional[BrandRecord]:
    if not slug:
        return None
    return BRANDS.get(slug)


def list_brands(include_all: bool = False) -> List[BrandRecord]:
    return [b for key, b in BRANDS.items() if include_all or key != ALL_BRANDS]
