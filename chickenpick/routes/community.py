"""
Сообщество: посты, опросы, комментарии
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session

from chickenpick.db import get_db
from chickenpick.services.community_service import (
    add_comment,
    create_post,
    delete_post,
    list_comments,
    list_posts,
    open_post,
    serialize_comment,
    serialize_post,
    vote,
)

router = APIRouter(prefix="/api/posts", tags=["community"])


class PostCreate(BaseModel):
    nickname: str
    password: str
    title: str
    content: str
    menu_id: Optional[str] = None
    poll_options: Optional[List[str]] = None


class VotePayload(BaseModel):
    option: int


class CommentCreate(BaseModel):
    nickname: str
    password: str
    content: str


class PasswordPayload(BaseModel):
    password: str


@router.get("")
async def posts_list(db: Session = Depends(get_db)):
    return {"items": [serialize_post(p) for p in list_posts(db)]}


@router.post("", status_code=201)
async def post_create(payload: PostCreate, db: Session = Depends(get_db)):
    try:
        post = create_post(
            db,
            nickname=payload.nickname,
            password=payload.password,
            title=payload.title,
            content=payload.content,
            menu_id=payload.menu_id,
            poll_options=payload.poll_options,
        )
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return serialize_post(post)


@router.get("/{post_id}")
async def post_detail(post_id: int, db: Session = Depends(get_db)):
    try:
        post = open_post(db, post_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return serialize_post(post, list_comments(db, post_id))


@router.post("/{post_id}/vote")
async def post_vote(post_id: int, payload: VotePayload, db: Session = Depends(get_db)):
    try:
        post = vote(db, post_id, payload.option)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return serialize_post(post)


@router.post("/{post_id}/comments", status_code=201)
async def comment_create(post_id: int, payload: CommentCreate, db: Session = Depends(get_db)):
    try:
        add_comment(db, post_id, payload.nickname, payload.password, payload.content)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"items": [serialize_comment(c) for c in list_comments(db, post_id)]}


@router.post("/{post_id}/delete")
async def post_delete(post_id: int, payload: PasswordPayload, db: Session = Depends(get_db)):
    try:
        delete_post(db, post_id, payload.password)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    return {"success": True}
