from sqlalchemy import Column, Integer, String, Text, Float, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship
from chickenpick.db import Base
from datetime import datetime


class Menu(Base):
    __tablename__ = "menus"

    # id — человекочитаемый идентификатор из CSV (часто на корейском), из него выводится ключ картинки
    id = Column(String, primary_key=True, index=True)
    brand = Column(String, index=True, nullable=True)  # slug бренда: bbq, kyochon, ...
    name_kr = Column(String, nullable=True)
    name_en = Column(String, nullable=True)
    type = Column(String, nullable=False, default="chicken")  # chicken / burger / side
    price = Column(Integer, nullable=False, default=0)
    desc_text = Column(Text, nullable=True)
    allergens = Column(Text, nullable=True)
    i18n = Column(JSON, nullable=True)  # {"desc": {"en": ...}, "allergens": {"ja": ...}}
    image_url = Column(String, nullable=True)  # если задан — имеет приоритет над подбором кандидатов
    metrics = Column(JSON, nullable=True)  # {"spicy": 0..5, "crunch": 0..5, "sweet": 0..5, "garlic": 0..5}
    tags = Column(JSON, nullable=True)  # ["Whole", "Boneless", ...]

    # Агрегаты отзывов, пересчитываются при каждом изменении
    avg_rating = Column(Float, nullable=False, default=0.0)
    review_count = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    reviews = relationship("Review", back_populates="menu", cascade="all, delete-orphan")


class Review(Base):
    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, index=True)
    menu_id = Column(String, ForeignKey("menus.id"), nullable=False, index=True)
    rating = Column(Integer, nullable=False)
    content = Column(Text, nullable=False, default="")
    tags = Column(JSON, nullable=True)
    password_hash = Column(String, nullable=False)
    helpful_count = Column(Integer, nullable=False, default=0)
    report_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)

    menu = relationship("Menu", back_populates="reviews")


class Post(Base):
    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, index=True)
    nickname = Column(String, nullable=False)
    password_hash = Column(String, nullable=False)
    title = Column(String, nullable=False)
    content = Column(Text, nullable=False)
    menu_id = Column(String, ForeignKey("menus.id"), nullable=True)  # отмеченное меню
    poll_options = Column(JSON, nullable=True)  # ["[BBQ] Golden Olive", ...]
    poll_votes = Column(JSON, nullable=True)  # {"0": 3, "1": 5}
    view_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)

    comments = relationship("Comment", back_populates="post", cascade="all, delete-orphan")


class Comment(Base):
    __tablename__ = "comments"

    id = Column(Integer, primary_key=True, index=True)
    post_id = Column(Integer, ForeignKey("posts.id"), nullable=False, index=True)
    nickname = Column(String, nullable=False)
    password_hash = Column(String, nullable=False)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    post = relationship("Post", back_populates="comments")
