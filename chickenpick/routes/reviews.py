from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session

from chickenpick.db import get_db
from chickenpick.services.review_service import (
    apply_review_action,
    create_review,
    delete_review,
    list_reviews,
    serialize_review,
)

router = APIRouter(prefix="/api", tags=["reviews"])


class ReviewCreate(BaseModel):
    rating: int
    content: str = ""
    tags: List[str] = []
    password: Optional[str] = None


class PasswordPayload(BaseModel):
    password: str


@router.get("/menus/{menu_id:path}/reviews")
async def reviews_list(menu_id: str, db: Session = Depends(get_db)):
    return {"items": [serialize_review(r) for r in list_reviews(db, menu_id)]}


@router.post("/menus/{menu_id:path}/reviews", status_code=201)
async def review_create(menu_id: str, payload: ReviewCreate, db: Session = Depends(get_db)):
    try:
        review = create_review(
            db,
            menu_id,
            rating=payload.rating,
            content=payload.content,
            tags=payload.tags,
            password=payload.password,
        )
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return serialize_review(review)


@router.post("/reviews/{review_id}/delete")
async def review_delete(review_id: int, payload: PasswordPayload, db: Session = Depends(get_db)):
    try:
        delete_review(db, review_id, payload.password)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    return {"success": True}


@router.post("/reviews/{review_id}/{action}")
async def review_action(review_id: int, action: str, db: Session = Depends(get_db)):
    """helpful / report"""
    try:
        review = apply_review_action(db, review_id, action)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return serialize_review(review)
