"""
Catalog tables: restaurant menus and the shared dish catalog
"""
from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Integer, String, Text, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from accessmenu.core.db import Base


class MenuRecord(Base):
    __tablename__ = "menus"
    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    dishes = relationship(
        "MenuDishRecord",
        back_populates="menu",
        cascade="all, delete-orphan",
        order_by="MenuDishRecord.id",
    )


class MenuDishRecord(Base):
    __tablename__ = "menu_dishes"
    id = Column(Integer, primary_key=True)
    menu_id = Column(Integer, ForeignKey("menus.id"), nullable=False, index=True)
    name = Column(JSON, nullable=False)  # {"en": "...", "zh": "..."}
    description = Column(JSON, nullable=False, default=dict)
    explanation = Column(JSON, nullable=True)
    section = Column(JSON, nullable=False, default=dict)
    price = Column(Float, nullable=False)
    allergens = Column(JSON, nullable=False, default=list)
    dietary_tags = Column(JSON, nullable=False, default=list)
    variants = Column(JSON, nullable=False, default=list)  # [{"id", "name", "price"}]

    menu = relationship("MenuRecord", back_populates="dishes")


class CatalogDishRecord(Base):
    """Dish contributed to the shared catalog by an ingestion source"""
    __tablename__ = "catalog_dishes"
    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    language = Column(String(8), nullable=False, index=True)  # language of the explanation
    menu_language = Column(String(8), nullable=False)  # language the name is written in
    explanation = Column(Text, nullable=False)
    tags = Column(JSON, nullable=False, default=list)
    allergens = Column(JSON, nullable=False, default=list)
    cuisine = Column(String(64), nullable=True)
    source = Column(String(128), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
