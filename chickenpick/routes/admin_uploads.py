"""
Админка: загрузка фото меню, логотипов брендов и CSV с данными меню
"""
from typing import List

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from sqlalchemy.orm import Session

from chickenpick.db import get_db
from chickenpick.logging_config import upload_logger
from chickenpick.services.csv_import_service import import_menus_csv
from chickenpick.services.storage_client import BlobStore, get_storage_client
from chickenpick.services.upload_service import upload_brand_logos, upload_menu_images

router = APIRouter(prefix="/admin/uploads", tags=["admin_uploads"])


async def _read_files(files: List[UploadFile]):
    # Читаем по одному: пакет обрабатывается строго последовательно
    result = []
    for f in files:
        result.append((f.filename or "", await f.read(), f.content_type or ""))
    return result


@router.post("/menu-images")
async def upload_menu_images_route(
    files: List[UploadFile] = File(...),
    storage: BlobStore = Depends(get_storage_client),
):
    """Фото меню: имя файла → хеш-ключ .webp"""
    payload = await _read_files(files)
    result = upload_menu_images(storage, payload)
    return {
        **result.to_dict(),
        "status": f"✅ 메뉴 이미지 완료! 성공 {result.success}, 실패 {result.fail}",
    }


@router.post("/logos")
async def upload_logos_route(
    files: List[UploadFile] = File(...),
    storage: BlobStore = Depends(get_storage_client),
):
    """Логотипы брендов (SVG/PNG): bbq.svg → brand_bbq.svg"""
    payload = await _read_files(files)
    result = upload_brand_logos(storage, payload)
    return {
        **result.to_dict(),
        "status": f"✅ 로고 업로드 완료! 성공 {result.success}, 실패 {result.fail}",
    }


@router.post("/csv")
async def upload_csv_route(
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    storage: BlobStore = Depends(get_storage_client),
):
    """CSV с данными меню: upsert в таблицу menus"""
    content = await file.read()
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise HTTPException(status_code=400, detail="CSV должен быть в кодировке UTF-8")

    try:
        result = import_menus_csv(text, db, storage)
    except Exception as e:
        db.rollback()
        upload_logger.exception("CSV import failed for file=%s: %s", file.filename, e)
        raise HTTPException(status_code=500, detail=f"❌ 오류: {str(e)[:200]}")

    return {
        **result.to_dict(),
        "status": f"✅ 데이터 업로드 성공! ({result.total}개)",
    }
