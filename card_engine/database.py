"""SQLite : init + session + CRUD helpers + SqlCardStore"""
import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Any, Iterable, List, Optional

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from .models import Base, CardBlockDB, CardDB, TemplateDB
from .templates import TemplateSnapshot, base_template_blocks, blocks_from_template

log = logging.getLogger(__name__)

DATA_DIR = Path(os.getenv("CARD_ENGINE_DATA_DIR", str(Path(__file__).parent.parent / "data")))
DB_PATH  = os.getenv("CARD_ENGINE_DB_PATH", str(DATA_DIR / "card_engine.db"))


def make_engine(db_path: str):
    return create_engine(f"sqlite:///{db_path}", connect_args={"check_same_thread": False})


def make_session_factory(engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


ENGINE       = make_engine(DB_PATH)
SessionLocal = make_session_factory(ENGINE)


def init_db(engine=None):
    if engine is None:
        DATA_DIR.mkdir(parents=True, exist_ok=True)
        engine = ENGINE
    Base.metadata.create_all(bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# ── JSON helpers ──
def jl(s: Optional[str]) -> list:
    try:
        v = json.loads(s or "[]")
    except (TypeError, ValueError):
        return []
    return v if isinstance(v, list) else []

def jo(s: Optional[str]) -> dict:
    try:
        v = json.loads(s or "{}")
    except (TypeError, ValueError):
        return {}
    return v if isinstance(v, dict) else {}

def jd(o) -> str:
    return json.dumps(o, ensure_ascii=False)


# ── Rows ──
def card_to_row(card: CardDB) -> dict:
    return {"id": card.id, "title": card.title, "theme": jo(card.theme), "template_id": card.template_id}

def block_to_row(block: CardBlockDB) -> dict:
    return {
        "id": block.id, "card_id": block.card_id, "type": block.type, "enabled": block.enabled,
        "order": block.order, "settings": jo(block.settings), "style": jo(block.style), "title": block.title,
    }


# ── Card ──
def db_create_card(db: Session, obj: CardDB) -> CardDB:
    db.add(obj); db.commit(); db.refresh(obj); return obj

def db_get_card(db: Session, card_id: str) -> Optional[CardDB]:
    return db.query(CardDB).filter_by(id=card_id).first()

def db_update_card_theme(db: Session, card: CardDB, theme: dict) -> CardDB:
    card.theme = jd(theme)
    db.commit(); db.refresh(card); return card

def db_create_card_from_template(db: Session, title: str, template: Optional[TemplateDB] = None,
                                 theme: Optional[dict] = None) -> CardDB:
    """Nouvelle carte : blocs du template (ou blocs de base), ids neufs."""
    rows: List[dict] = base_template_blocks()
    if template is not None:
        preview = jo(template.preview_json)
        rows = preview.get("blocks") or rows
        theme = theme or jo(template.theme_json)
    card = CardDB(title=title, theme=jd(theme or {}), template_id=template.id if template else None)
    db.add(card)
    db.flush()
    for b in blocks_from_template(rows):
        db.add(CardBlockDB(
            id=b.id, card_id=card.id, type=b.type, enabled=b.enabled, order=b.order,
            settings=jd(b.settings), style=jd(b.style), title=b.title,
        ))
    db.commit(); db.refresh(card)
    return card


# ── Blocks ──
def db_create_block(db: Session, obj: CardBlockDB) -> CardBlockDB:
    db.add(obj); db.commit(); db.refresh(obj); return obj

def db_get_block(db: Session, block_id: str) -> Optional[CardBlockDB]:
    return db.query(CardBlockDB).filter_by(id=block_id).first()

def db_list_blocks(db: Session, card_id: str) -> List[CardBlockDB]:
    return db.query(CardBlockDB).filter_by(card_id=card_id).order_by(CardBlockDB.order).all()

def db_update_block(db: Session, block: CardBlockDB, **kwargs) -> CardBlockDB:
    for k, v in kwargs.items():
        if k in ("settings", "style"):
            v = jd(v or {})
        setattr(block, k, v)
    db.commit(); db.refresh(block); return block

def db_delete_block(db: Session, block: CardBlockDB) -> None:
    db.delete(block); db.commit()


# ── Templates ──
def db_create_template(db: Session, obj: TemplateDB) -> TemplateDB:
    db.add(obj); db.commit(); db.refresh(obj); return obj

def db_get_template(db: Session, template_id: str) -> Optional[TemplateDB]:
    return db.query(TemplateDB).filter_by(id=template_id).first()

def db_write_template_snapshot(db: Session, tpl: TemplateDB, snapshot: TemplateSnapshot) -> TemplateDB:
    tpl.theme_json = jd(snapshot.theme_json())
    tpl.preview_json = jd(snapshot.preview_json())
    tpl.version = (tpl.version or 0) + 1
    db.commit(); db.refresh(tpl); return tpl


# ── Store ──
class SqlCardStore:
    """
    CardStore sur SQLAlchemy. Chaque appel ouvre sa propre session et tourne
    dans un thread (asyncio.to_thread) pour ne pas bloquer la boucle.
    Ligne absente → LookupError (enveloppée en PersistenceError par le coordinateur).
    """

    def __init__(self, session_factory: Any = None):
        self.session_factory = session_factory or SessionLocal

    def _run(self, fn, *args):
        with self.session_factory() as db:
            return fn(db, *args)

    async def _call(self, fn, *args):
        return await asyncio.to_thread(self._run, fn, *args)

    # -- sync --

    @staticmethod
    def _load_card(db: Session, card_id: str) -> Optional[dict]:
        card = db_get_card(db, card_id)
        return card_to_row(card) if card else None

    @staticmethod
    def _load_blocks(db: Session, card_id: str) -> List[dict]:
        return [block_to_row(b) for b in db_list_blocks(db, card_id)]

    @staticmethod
    def _update_block(db: Session, block_id: str, fields: dict) -> None:
        block = db_get_block(db, block_id)
        if block is None:
            raise LookupError(f"block {block_id} not found")
        allowed = {k: v for k, v in fields.items() if k in ("settings", "style", "enabled", "order")}
        db_update_block(db, block, **allowed)

    @staticmethod
    def _insert_block(db: Session, card_id: str, row: dict) -> None:
        if db_get_card(db, card_id) is None:
            raise LookupError(f"card {card_id} not found")
        fields = {k: row.get(k) for k in ("type", "enabled", "order", "settings", "style", "title")}
        block = db_get_block(db, str(row["id"]))
        if block is not None:
            db_update_block(db, block, card_id=card_id, **fields)
            return
        fields["settings"] = jd(fields["settings"] or {})
        fields["style"] = jd(fields["style"] or {})
        db_create_block(db, CardBlockDB(id=str(row["id"]), card_id=card_id, **fields))

    @staticmethod
    def _delete_block(db: Session, block_id: str) -> None:
        block = db_get_block(db, block_id)
        if block is not None:
            db_delete_block(db, block)

    @staticmethod
    def _get_card_theme(db: Session, card_id: str) -> dict:
        card = db_get_card(db, card_id)
        if card is None:
            raise LookupError(f"card {card_id} not found")
        return jo(card.theme)

    @staticmethod
    def _update_card_theme(db: Session, card_id: str, theme: dict) -> None:
        card = db_get_card(db, card_id)
        if card is None:
            raise LookupError(f"card {card_id} not found")
        db_update_card_theme(db, card, theme)

    @staticmethod
    def _write_template_snapshot(db: Session, template_id: str, snapshot: TemplateSnapshot) -> int:
        tpl = db_get_template(db, template_id)
        if tpl is None:
            raise LookupError(f"template {template_id} not found")
        return db_write_template_snapshot(db, tpl, snapshot).version

    # -- CardStore --

    async def load_card(self, card_id: str) -> Optional[dict]:
        return await self._call(self._load_card, card_id)

    async def load_blocks(self, card_id: str) -> List[dict]:
        return await self._call(self._load_blocks, card_id)

    async def update_block(self, block_id: str, fields: dict) -> None:
        await self._call(self._update_block, block_id, fields)

    async def insert_block(self, card_id: str, row: dict) -> None:
        await self._call(self._insert_block, card_id, row)

    async def delete_block(self, block_id: str) -> None:
        await self._call(self._delete_block, block_id)

    async def get_card_theme(self, card_id: str) -> dict:
        return await self._call(self._get_card_theme, card_id)

    async def update_card_theme(self, card_id: str, theme: dict) -> None:
        await self._call(self._update_card_theme, card_id, theme)

    async def write_template_snapshot(self, template_id: str, snapshot: TemplateSnapshot) -> int:
        version = await self._call(self._write_template_snapshot, template_id, snapshot)
        log.info("Template %s → v%d", template_id, version)
        return version


def seed_blocks(db: Session, card_id: str, rows: Iterable[dict]) -> None:
    """Insère des lignes de blocs brutes (ids conservés) : imports / fixtures."""
    for r in rows:
        db.add(CardBlockDB(
            id=str(r["id"]), card_id=card_id, type=r["type"], enabled=r.get("enabled", True),
            order=r.get("order", 0), settings=jd(r.get("settings") or {}), style=jd(r.get("style") or {}),
            title=r.get("title"),
        ))
    db.commit()
