"""
Сообщество: посты, опросы и комментарии
"""
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from chickenpick.logging_config import community_logger
from chickenpick.models import Comment, Menu, Post
from chickenpick.services.password_service import hash_password, verify_password


def _require(value: Optional[str], field: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValueError(f"Поле '{field}' обязательно")
    return value


def create_post(
    db: Session,
    nickname: str,
    password: str,
    title: str,
    content: str,
    menu_id: Optional[str] = None,
    poll_options: Optional[List[str]] = None,
) -> Post:
    nickname = _require(nickname, "nickname")
    password = _require(password, "password")
    title = _require(title, "title")
    content = _require(content, "content")

    if menu_id and not db.query(Menu).filter(Menu.id == menu_id).first():
        raise LookupError("Отмеченное меню не найдено")

    options = None
    votes = None
    if poll_options is not None:
        options = [o.strip() for o in poll_options if o and o.strip()]
        if len(options) < 2:
            raise ValueError("В опросе нужно минимум 2 варианта")
        votes = {str(i): 0 for i in range(len(options))}

    post = Post(
        nickname=nickname,
        password_hash=hash_password(password),
        title=title,
        content=content,
        menu_id=menu_id or None,
        poll_options=options,
        poll_votes=votes,
    )
    db.add(post)
    db.commit()
    db.refresh(post)
    community_logger.info("Post %s created by '%s' poll=%s", post.id, nickname, bool(options))
    return post


def list_posts(db: Session) -> List[Post]:
    return db.query(Post).order_by(Post.created_at.desc(), Post.id.desc()).all()


def open_post(db: Session, post_id: int) -> Post:
    """Возвращает пост и увеличивает счётчик просмотров"""
    post = db.query(Post).filter(Post.id == post_id).first()
    if not post:
        raise LookupError("Пост не найден")
    post.view_count = (post.view_count or 0) + 1
    db.commit()
    db.refresh(post)
    return post


def vote(db: Session, post_id: int, option_index: int) -> Post:
    post = db.query(Post).filter(Post.id == post_id).first()
    if not post:
        raise LookupError("Пост не найден")
    if not post.poll_options:
        raise ValueError("В посте нет опроса")
    if not 0 <= option_index < len(post.poll_options):
        raise ValueError("Нет такого варианта")
    # JSON-колонку переприсваиваем целиком, иначе SQLAlchemy не увидит изменение
    votes = dict(post.poll_votes or {})
    key = str(option_index)
    votes[key] = int(votes.get(key, 0)) + 1
    post.poll_votes = votes
    db.commit()
    db.refresh(post)
    return post


def add_comment(db: Session, post_id: int, nickname: str, password: str, content: str) -> Comment:
    if not db.query(Post).filter(Post.id == post_id).first():
        raise LookupError("Пост не найден")
    comment = Comment(
        post_id=post_id,
        nickname=_require(nickname, "nickname"),
        password_hash=hash_password(_require(password, "password")),
        content=_require(content, "content"),
    )
    db.add(comment)
    db.commit()
    db.refresh(comment)
    return comment


def list_comments(db: Session, post_id: int) -> List[Comment]:
    return (
        db.query(Comment)
        .filter(Comment.post_id == post_id)
        .order_by(Comment.created_at.asc(), Comment.id.asc())
        .all()
    )


def delete_post(db: Session, post_id: int, password: str) -> None:
    post = db.query(Post).filter(Post.id == post_id).first()
    if not post:
        raise LookupError("Пост не найден")
    if not verify_password(password, post.password_hash):
        raise PermissionError("Неверный пароль")
    db.delete(post)
    db.commit()
    community_logger.info("Post %s deleted", post_id)


def poll_results(post: Post) -> List[Dict]:
    if not post.poll_options:
        return []
    votes = post.poll_votes or {}
    total = sum(int(v) for v in votes.values())
    results = []
    for idx, option in enumerate(post.poll_options):
        count = int(votes.get(str(idx), 0))
        percent = round(count / total * 100) if total > 0 else 0
        results.append({"index": idx, "option": option, "votes": count, "percent": percent})
    return results


def serialize_comment(comment: Comment) -> dict:
    return {
        "id": comment.id,
        "nickname": comment.nickname,
        "content": comment.content,
        "createdAt": comment.created_at.isoformat() if comment.created_at else None,
    }


def serialize_post(post: Post, comments: Optional[List[Comment]] = None) -> dict:
    data = {
        "id": post.id,
        "nickname": post.nickname,
        "title": post.title,
        "content": post.content,
        "menuId": post.menu_id,
        "viewCount": post.view_count or 0,
        "poll": poll_results(post),
        "createdAt": post.created_at.isoformat() if post.created_at else None,
    }
    if comments is not None:
        data["comments"] = [serialize_comment(c) for c in comments]
    return data
