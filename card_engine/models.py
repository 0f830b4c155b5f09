"""
Data models : Card, CardBlock, Template
SQLAlchemy (SQLite) + schémas Pydantic v2 de l'API éditeur
"""
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

import sqlalchemy as sa
from pydantic import BaseModel, Field
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


# ── ORM ────────────────────────────────────────────────────────────────

class Base(DeclarativeBase):
    pass


class TemplateDB(Base):
    __tablename__ = "templates"
    id:           Mapped[str]      = mapped_column(sa.String, primary_key=True, default=lambda: str(uuid.uuid4()))
    name:         Mapped[str]      = mapped_column(sa.String, nullable=False, default="")
    theme_json:   Mapped[str]      = mapped_column(sa.Text, default="{}")
    preview_json: Mapped[str]      = mapped_column(sa.Text, default="{}")
    version:      Mapped[int]      = mapped_column(sa.Integer, default=0)
    updated_at:   Mapped[datetime] = mapped_column(sa.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class CardDB(Base):
    __tablename__ = "cards"
    id:          Mapped[str]           = mapped_column(sa.String, primary_key=True, default=lambda: str(uuid.uuid4()))
    title:       Mapped[str]           = mapped_column(sa.String, nullable=False, default="")
    theme:       Mapped[str]           = mapped_column(sa.Text, default="{}")
    template_id: Mapped[Optional[str]] = mapped_column(sa.String, sa.ForeignKey("templates.id"), nullable=True)
    created_at:  Mapped[datetime]      = mapped_column(sa.DateTime, default=datetime.utcnow)
    updated_at:  Mapped[datetime]      = mapped_column(sa.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    blocks: Mapped[List["CardBlockDB"]] = relationship("CardBlockDB", back_populates="card", cascade="all, delete-orphan")


class CardBlockDB(Base):
    __tablename__ = "card_blocks"
    id:       Mapped[str]           = mapped_column(sa.String, primary_key=True, default=lambda: str(uuid.uuid4()))
    card_id:  Mapped[str]           = mapped_column(sa.String, sa.ForeignKey("cards.id"), nullable=False)
    type:     Mapped[str]           = mapped_column(sa.String, nullable=False)
    enabled:  Mapped[bool]          = mapped_column(sa.Boolean, default=True)
    order:    Mapped[int]           = mapped_column(sa.Integer, default=0)
    settings: Mapped[str]           = mapped_column(sa.Text, default="{}")
    style:    Mapped[str]           = mapped_column(sa.Text, default="{}")
    title:    Mapped[Optional[str]] = mapped_column(sa.String, nullable=True)

    card: Mapped["CardDB"] = relationship("CardDB", back_populates="blocks")


# ── PYDANTIC SCHEMAS ────────────────────────────────────────────────────

class EditorDraft(BaseModel):
    """Brouillon envoyé par l'éditeur : liste de blocs + fond (legacy accepté)."""
    blocks:     Optional[List[Dict[str, Any]]] = None
    background: Optional[Dict[str, Any]]       = None


class RecolorRequest(BaseModel):
    background: Dict[str, Any] = Field(default_factory=dict)
    color_a:    str
    color_b:    str
