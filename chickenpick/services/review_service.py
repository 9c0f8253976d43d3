"""
Отзывы и оценки меню
"""
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from chickenpick.brands import REVIEW_TAGS
from chickenpick.config import settings
from chickenpick.logging_config import catalog_logger
from chickenpick.models import Menu, Review
from chickenpick.services.password_service import hash_password, verify_password

REVIEW_ACTIONS = {"helpful": "helpful_count", "report": "report_count"}


def _visible_filter():
    return Review.report_count < settings.REVIEW_REPORT_HIDE_THRESHOLD


def recalc_menu_rating(db: Session, menu: Menu) -> None:
    """Пересчитывает avg_rating/review_count по видимым отзывам"""
    avg, count = (
        db.query(func.avg(Review.rating), func.count(Review.id))
        .filter(Review.menu_id == menu.id, _visible_filter())
        .one()
    )
    menu.avg_rating = round(float(avg or 0), 1)
    menu.review_count = int(count or 0)


def list_reviews(db: Session, menu_id: str) -> List[Review]:
    return (
        db.query(Review)
        .filter(Review.menu_id == menu_id, _visible_filter())
        .order_by(Review.created_at.desc(), Review.id.desc())
        .all()
    )


def create_review(
    db: Session,
    menu_id: str,
    rating: int,
    content: str = "",
    tags: Optional[List[str]] = None,
    password: Optional[str] = None,
) -> Review:
    menu = db.query(Menu).filter(Menu.id == menu_id).first()
    if not menu:
        raise LookupError("Меню не найдено")
    if not isinstance(rating, int) or not 1 <= rating <= 5:
        raise ValueError("Оценка должна быть от 1 до 5")
    unknown = [t for t in (tags or []) if t not in REVIEW_TAGS]
    if unknown:
        raise ValueError(f"Неизвестные теги: {', '.join(unknown)}")

    review = Review(
        menu_id=menu_id,
        rating=rating,
        content=(content or "").strip(),
        tags=list(tags or []),
        password_hash=hash_password(password or settings.REVIEW_DEFAULT_PASSWORD),
    )
    db.add(review)
    db.flush()
    recalc_menu_rating(db, menu)
    db.commit()
    db.refresh(review)
    catalog_logger.info("Review %s created for menu '%s' rating=%s", review.id, menu_id, rating)
    return review


def apply_review_action(db: Session, review_id: int, action: str) -> Review:
    """helpful / report: увеличивает соответствующий счётчик"""
    column = REVIEW_ACTIONS.get(action)
    if not column:
        raise ValueError(f"Неизвестное действие: {action}")
    review = db.query(Review).filter(Review.id == review_id).first()
    if not review:
        raise LookupError("Отзыв не найден")
    setattr(review, column, (getattr(review, column) or 0) + 1)
    db.flush()
    if action == "report":
        # после порога отзыв скрывается и перестаёт влиять на рейтинг
        recalc_menu_rating(db, review.menu)
    db.commit()
    db.refresh(review)
    return review


def delete_review(db: Session, review_id: int, password: str) -> None:
    review = db.query(Review).filter(Review.id == review_id).first()
    if not review:
        raise LookupError("Отзыв не найден")
    if not verify_password(password, review.password_hash):
        raise PermissionError("Неверный пароль")
    menu = review.menu
    db.delete(review)
    db.flush()
    recalc_menu_rating(db, menu)
    db.commit()
    catalog_logger.info("Review %s deleted from menu '%s'", review_id, menu.id)


def serialize_review(review: Review) -> dict:
    return {
        "id": review.id,
        "menuId": review.menu_id,
        "rating": review.rating,
        "content": review.content,
        "tags": review.tags or [],
        "helpfulCount": review.helpful_count or 0,
        "reportCount": review.report_count or 0,
        "createdAt": review.created_at.isoformat() if review.created_at else None,
    }
