from typing import List, Optional

import httpx
from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from chickenpick.brands import ALL_BRANDS, get_brand, list_brands
from chickenpick.config import settings
from chickenpick.db import get_db
from chickenpick.logging_config import catalog_logger
from chickenpick.models import Menu
from chickenpick.services.catalog_service import (
    FILTER_KEYS,
    SORT_KEYS,
    filter_menus,
    group_menus,
    serialize_menu,
    sort_groups,
)
from chickenpick.services.image_resolution import (
    HttpImageProbe,
    ImageResolver,
    render_placeholder_svg,
    resolve_first_available,
)
from chickenpick.services.key_resolver import brand_candidate_urls, menu_candidate_urls
from chickenpick.services.storage_client import BlobStore, get_storage_client

router = APIRouter(prefix="/api", tags=["menus"])
# menu_id берётся из CSV и может содержать "/" ("후라이드/양념 반반"), поэтому {menu_id:path};
# маршруты с суффиксом (/image, /placeholder.svg, /reviews) объявлены раньше карточки меню


async def get_image_probe():
    async with httpx.AsyncClient(timeout=settings.IMAGE_PROBE_TIMEOUT_SECONDS) as client:
        yield HttpImageProbe(client)


def _get_menu_or_404(db: Session, menu_id: str) -> Menu:
    menu = db.query(Menu).filter(Menu.id == menu_id).first()
    if not menu:
        raise HTTPException(status_code=404, detail="Меню не найдено")
    return menu


@router.get("/brands")
async def brands_list(storage: BlobStore = Depends(get_storage_client)):
    return {
        "items": [
            {
                "id": b.id,
                "name": b.name,
                "koreanName": b.korean_name,
                "color": b.color,
                "logoCandidates": brand_candidate_urls(storage, b),
            }
            for b in list_brands(include_all=True)
        ]
    }


@router.get("/brands/{slug}/logo")
async def brand_logo(
    slug: str,
    storage: BlobStore = Depends(get_storage_client),
    probe=Depends(get_image_probe),
):
    """Перебирает кандидатов логотипа на сервере; при неудаче — SVG-заглушка"""
    brand = get_brand(slug)
    if not brand:
        raise HTTPException(status_code=404, detail="Бренд не найден")
    resolver = ImageResolver(brand_candidate_urls(storage, brand))
    url = await resolve_first_available(resolver, probe)
    return {
        "url": url,
        "state": resolver.state.value,
        "attempts": resolver.attempts,
        "placeholderSvg": None if url else render_placeholder_svg(brand),
    }


@router.get("/menus")
async def menus_list(
    brand: str = ALL_BRANDS,
    q: Optional[str] = None,
    filters: Optional[List[str]] = Query(default=None),
    spicy: Optional[int] = Query(default=None, ge=0, le=5),
    sort: str = "rating",
    favorites: Optional[List[str]] = Query(default=None),
    db: Session = Depends(get_db),
    storage: BlobStore = Depends(get_storage_client),
):
    unknown = [f for f in (filters or []) if f not in FILTER_KEYS]
    if unknown:
        raise HTTPException(status_code=400, detail=f"Неизвестные фильтры: {', '.join(unknown)}")
    if sort not in SORT_KEYS:
        raise HTTPException(status_code=400, detail=f"Неизвестная сортировка: {sort}")

    menus = db.query(Menu).all()
    filtered = filter_menus(menus, brand=brand, search=q or "", filters=filters, spicy_level=spicy, favorites=favorites)
    groups = sort_groups(group_menus(filtered), sort)
    catalog_logger.info("[MENUS] brand=%s q=%s filters=%s -> %s groups", brand, q, filters, len(groups))
    return {
        "groups": [
            {
                "key": g["key"],
                "baseName": g["base_name"],
                "variants": [serialize_menu(m, storage) for m in g["variants"]],
            }
            for g in groups
        ],
        "total": len(groups),
    }


@router.get("/menus/{menu_id:path}/image")
async def menu_image(
    menu_id: str,
    db: Session = Depends(get_db),
    storage: BlobStore = Depends(get_storage_client),
    probe=Depends(get_image_probe),
):
    """
    Подбор картинки меню на сервере: готовый image_url, иначе кандидаты по очереди.
    Если ничего не загрузилось — возвращаем ссылку на заглушку.
    """
    menu = _get_menu_or_404(db, menu_id)
    resolver = ImageResolver(
        menu_candidate_urls(storage, menu.id, menu.brand or ""),
        preset_url=menu.image_url,
    )
    url = await resolve_first_available(resolver, probe)
    return {
        "url": url,
        "state": resolver.state.value,
        "attempts": resolver.attempts,
        "placeholder": None if url else f"/api/menus/{menu.id}/placeholder.svg",
    }


@router.get("/menus/{menu_id:path}/placeholder.svg")
async def menu_placeholder(menu_id: str, db: Session = Depends(get_db)):
    menu = _get_menu_or_404(db, menu_id)
    return Response(content=render_placeholder_svg(get_brand(menu.brand)), media_type="image/svg+xml")


@router.get("/menus/{menu_id:path}")
async def menu_detail(
    menu_id: str,
    db: Session = Depends(get_db),
    storage: BlobStore = Depends(get_storage_client),
):
    return serialize_menu(_get_menu_or_404(db, menu_id), storage)
