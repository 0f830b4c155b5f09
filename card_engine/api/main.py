"""
CARD_ENGINE : FastAPI app
Démarrer : uvicorn card_engine.api.main:app --reload --port 8001
"""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from .routes import background, editor

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s — %(message)s")
log = logging.getLogger(__name__)

app = FastAPI(title="CARD_ENGINE — Thème & composition de cartes", version=__version__, docs_url="/docs")

app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])

app.include_router(background.router)
app.include_router(editor.router)


@app.on_event("startup")
def startup():
    from ..database import DB_PATH, init_db
    init_db()
    log.info("DB initialisée (SQLite) : %s", DB_PATH)


@app.get("/health")
def health():
    return {"status": "ok", "version": __version__}
