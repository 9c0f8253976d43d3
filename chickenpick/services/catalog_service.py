"""
Каталог: фильтрация, группировка и сортировка меню
"""
import re
from typing import Dict, Iterable, List, Optional

from chickenpick.brands import ALL_BRANDS, BRANDS, PART_TO_KR, get_brand
from chickenpick.models import Menu
from chickenpick.services.image_resolution import placeholder_label
from chickenpick.services.key_derivation import normalize_base_name
from chickenpick.services.key_resolver import menu_candidate_urls

FILTER_KEYS = ("spicy", "crunch", "sweet", "cheese", "garlic", "boneless")
SORT_KEYS = ("rating", "name", "brand")

# Хвост названия с частью курицы: "후라이드 순살" и "후라이드 콤보" — одна группа
_PART_SUFFIX_RE = re.compile(r" (콤보|순살|윙|스틱|다리).*")


def _metric(menu: Menu, name: str) -> int:
    return int((menu.metrics or {}).get(name) or 0)


def _matches_filter(menu: Menu, key: str) -> bool:
    name_en = (menu.name_en or "").lower()
    name_kr = menu.name_kr or ""
    if key == "boneless":
        has_tag = any("boneless" in t.lower() or "순살" in t for t in (menu.tags or []))
        return has_tag or "boneless" in name_en or "순살" in name_kr
    if key == "cheese":
        return "치즈" in name_kr or "cheese" in name_en
    if key == "sweet":
        return _metric(menu, "sweet") >= 3
    if key == "garlic":
        return _metric(menu, "garlic") >= 2
    if key == "crunch":
        return _metric(menu, "crunch") >= 4
    if key == "spicy":
        return _metric(menu, "spicy") >= 1
    return True


def filter_menus(
    menus: Iterable[Menu],
    brand: str = ALL_BRANDS,
    search: str = "",
    filters: Optional[List[str]] = None,
    spicy_level: Optional[int] = None,
    favorites: Optional[List[str]] = None,
) -> List[Menu]:
    search = search or ""
    search_low = search.lower()
    result = []
    for menu in menus:
        if favorites is not None and menu.id not in favorites:
            continue
        if brand and brand != ALL_BRANDS and menu.brand != brand:
            continue
        if search:
            hit = (
                search_low in (menu.name_en or "").lower()
                or search in (menu.name_kr or "")
                or search_low in (menu.desc_text or "").lower()
            )
            if not hit:
                continue
        elif menu.type == "burger":
            # бургеры показываем только при поиске
            continue
        if not all(_matches_filter(menu, key) for key in (filters or [])):
            continue
        if spicy_level is not None and _metric(menu, "spicy") != spicy_level:
            continue
        result.append(menu)
    return result


def group_key(menu: Menu) -> str:
    base = normalize_base_name(menu.name_kr or menu.name_en or menu.id)
    base = _PART_SUFFIX_RE.sub("", base)
    return f"{menu.brand}-{base}"


def group_menus(menus: Iterable[Menu]) -> List[Dict]:
    groups: Dict[str, Dict] = {}
    for menu in menus:
        key = group_key(menu)
        if key not in groups:
            groups[key] = {"key": key, "base_name": key.split("-", 1)[1], "variants": []}
        groups[key]["variants"].append(menu)
    for group in groups.values():
        group["variants"].sort(key=lambda m: m.price or 0)
    return list(groups.values())


def sort_groups(groups: List[Dict], sort_by: str = "rating") -> List[Dict]:
    def first(g):
        return g["variants"][0]

    if sort_by == "name":
        return sorted(groups, key=lambda g: first(g).name_kr or "")
    if sort_by == "brand":
        return sorted(groups, key=lambda g: first(g).brand or "")
    return sorted(
        groups,
        key=lambda g: (-(first(g).avg_rating or 0), -(first(g).review_count or 0)),
    )


def korean_part_name(part: str) -> str:
    """ "Boneless" → "순살"; неизвестные части возвращаются как есть"""
    clean = (part or "").strip()
    if clean in PART_TO_KR:
        return PART_TO_KR[clean]
    for key, value in PART_TO_KR.items():
        if key in clean:
            return value
    return clean


def menu_image_payload(menu: Menu, storage) -> Dict:
    """
    Данные для показа картинки: готовый image_url (если есть) и
    кандидаты для последовательного перебора при его отсутствии.
    """
    brand = get_brand(menu.brand)
    return {
        "image_url": menu.image_url,
        "candidates": [] if menu.image_url else menu_candidate_urls(storage, menu.id, menu.brand or ""),
        "placeholder": {
            "color": brand.color if brand else None,
            "label": placeholder_label(brand),
            "brand_name": brand.name if brand else menu.brand,
        },
    }


def serialize_menu(menu: Menu, storage) -> Dict:
    parts = menu.tags or ["Single Menu"]
    return {
        "id": menu.id,
        "brand": menu.brand,
        "brandName": BRANDS[menu.brand].name if menu.brand in BRANDS else menu.brand,
        "nameKr": menu.name_kr,
        "nameEn": menu.name_en,
        "type": menu.type,
        "price": menu.price,
        "description": menu.desc_text,
        "allergens": menu.allergens,
        "i18n": menu.i18n or {},
        "metrics": menu.metrics or {},
        "tags": menu.tags or [],
        "partsKr": [korean_part_name(p) for p in parts],
        "avgRating": round(menu.avg_rating or 0, 1),
        "reviewCount": menu.review_count or 0,
        "image": menu_image_payload(menu, storage),
    }
